"""crudkit: starter scaffold for session-authenticated CRUD HTTP APIs."""

__version__ = "0.1.0"
