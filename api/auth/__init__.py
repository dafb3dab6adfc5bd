"""Username/password registration, login and cookie sessions."""
