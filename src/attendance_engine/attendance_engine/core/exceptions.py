from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidRangeError(ValidationError):
    """Raised when a date range starts after it ends."""


class NotFoundError(DomainError):
    """Raised when a required entity does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} {entity_id!r} not found")
        self.entity = entity
        self.entity_id = entity_id
