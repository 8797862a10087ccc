"""Error taxonomy raised by core operations.

The API layer maps these to HTTP responses: ``NotFoundError`` to 404,
``RuleViolation`` to 400 and ``ConflictError`` to 409. Anything else is an
internal error.
"""

from __future__ import annotations


class MatchdayError(Exception):
    """Base class for all matchday errors."""

    status_code = 500
    default_code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class NotFoundError(MatchdayError, LookupError):
    """A referenced tournament, category, team, venue or match does not exist."""

    status_code = 404
    default_code = "NOT_FOUND"

    @classmethod
    def for_entity(cls, entity: str, entity_id: str) -> NotFoundError:
        return cls(f"{entity} not found: {entity_id}", code=f"{entity.upper()}_NOT_FOUND")


class RuleViolation(MatchdayError, ValueError):
    """A business rule forbids the requested operation."""

    status_code = 400
    default_code = "RULE_VIOLATION"


class ConflictError(RuleViolation):
    """The operation clashes with state that already exists."""

    status_code = 409
    default_code = "CONFLICT"
