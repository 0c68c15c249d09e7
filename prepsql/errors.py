"""Custom exception hierarchy for prepSQL.

All public errors inherit from PrepSQLError so callers can catch the base
class for any prepSQL-specific failure.
"""
from __future__ import annotations

from typing import Any


class PrepSQLError(Exception):
    """Base exception for all prepSQL errors.

    Args:
        message: Human-readable description.
        code: Machine-readable error code (e.g. ``UNKNOWN_FILTER``).
        details: Extra context for the caller (offending key, SQL text, …).
    """

    default_code = "PREPSQL_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code or self.default_code
        self.details: dict[str, Any] = details or {}

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response suitable for an API payload."""
        return {
            "error": self.code,
            "message": str(self),
            "details": self.details,
        }


class ConfigurationError(PrepSQLError):
    """Raised when a schema, field list or filter rule table is unusable.

    This is a programmer error: a missing field schema, an empty field
    request, or a filter key with no rule.
    """

    default_code = "CONFIGURATION_ERROR"


class UnknownFilterError(ConfigurationError):
    """Raised when a filter key has no entry in the filter rule table."""

    def __init__(self, key: str, known_filters: list[str]) -> None:
        super().__init__(
            f"Filter '{key}' has no filter rule.",
            code="UNKNOWN_FILTER",
            details={"filter": key, "known_filters": known_filters},
        )


class BindingConflictError(ConfigurationError):
    """Raised in strict mode when two fields bind one placeholder to different values."""

    def __init__(self, name: str, existing: Any, incoming: Any) -> None:
        super().__init__(
            f"Placeholder ':{name}' is bound to conflicting values.",
            code="BINDING_CONFLICT",
            details={"placeholder": name, "existing": existing, "incoming": incoming},
        )


class ValidationError(PrepSQLError):
    """Raised when caller-supplied paging or ordering values are invalid."""

    default_code = "VALIDATION_ERROR"


class ExecutionError(PrepSQLError):
    """Raised when the database response cannot be interpreted.

    Args:
        message: Human-readable description.
        sql: The statement whose result could not be parsed.
    """

    default_code = "EXECUTION_ERROR"

    def __init__(self, message: str, sql: str | None = None) -> None:
        super().__init__(message, details={"sql": sql} if sql else None)
        self.sql = sql
