"""
Exception hierarchy shared by the data, core and gui layers.

Startup errors (configuration, connection) are fatal. Persistence and
validation errors are shown to the user and leave the form open for retry.
"""

from __future__ import annotations

from typing import Optional


class CollectionError(Exception):
    """Base class for every error raised by the application."""


class ConfigurationError(CollectionError):
    """Missing or unreadable environment file, or incomplete settings."""


class DatabaseConnectionError(CollectionError):
    """The database could not be reached at startup."""


class PersistenceError(CollectionError):
    """A query failed. The originating SQLAlchemy error is chained as __cause__."""


class EntityNotFoundError(PersistenceError):

    def __init__(self, kind: str, entity_id: int) -> None:
        super().__init__(f"{kind} with id {entity_id} not found.")
        self.kind = kind
        self.entity_id = entity_id


class ValidationError(CollectionError):
    """Form input rejected before any database write."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field
