"""
Domain errors shared by the auth and catalog features.

Services raise these; `main.py` renders them as `{"detail": ...}` responses.
Internal faults keep their cause for the server log but only ever expose a
generic message to the caller.
"""

from __future__ import annotations


class ServiceError(Exception):
    status_code = 500
    public_detail = "Internal server error."
    internal = False

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.public_detail
        super().__init__(self.detail)


class InvalidInput(ServiceError):
    status_code = 400
    public_detail = "Invalid input."


class Unauthorized(ServiceError):
    status_code = 401
    public_detail = "Authentication required."


class InvalidCredentials(Unauthorized):
    public_detail = "Invalid username or password."

    def __init__(self) -> None:
        # Same message for unknown user and wrong password.
        super().__init__(None)


class NotFound(ServiceError):
    status_code = 404
    public_detail = "Not found."


class DuplicateUsername(ServiceError):
    status_code = 409
    public_detail = "Username is already registered."


class InternalFault(ServiceError):
    internal = True

    def __init__(self, detail: str | None = None):
        # `detail` is for the log only.
        super().__init__(detail)
        self.log_detail = self.detail
        self.detail = self.public_detail


class StoreUnavailable(InternalFault):
    public_detail = "Storage is temporarily unavailable."


class HashingFailure(InternalFault):
    public_detail = "Internal server error."
