"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every feature uses (settings, DB
wiring, domain errors, logging). Feature-specific SQL and business logic live
in the feature packages (`auth/`, `catalog/`).
"""
