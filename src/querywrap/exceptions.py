"""Custom exceptions for querywrap.

Every error carries a human-readable message plus a context dict, so the
CLI (or any caller) can render it as JSON:
- what went wrong and, where it helps, how to fix it
- the query text or DSNs involved
"""

from __future__ import annotations

from typing import Any


class QuerywrapError(Exception):
    """Base exception for all querywrap errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Return error as JSON-serializable dict."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class ConnectionError(QuerywrapError):
    """No candidate connection string produced a live connection."""

    def __init__(self, message: str, dsns: list[str] | None = None) -> None:
        super().__init__(message, {"dsns": dsns or []})
        self.dsns = dsns or []


class UnsupportedOperationError(QuerywrapError, NotImplementedError):
    """A clause has no equivalent on the active backend."""

    def __init__(self, operation: str, backend: str) -> None:
        message = (
            f"'{operation}' is not supported by the {backend} backend. "
            f"Use a SQL query builder for this clause."
        )
        super().__init__(message, {"operation": operation, "backend": backend})
        self.operation = operation
        self.backend = backend


class QueryError(QuerywrapError):
    """The backend rejected the composed request."""

    def __init__(self, message: str, query: str | None = None) -> None:
        super().__init__(message, {"query": query} if query is not None else {})
        self.query = query


class RecordNotFoundError(QueryError, LookupError):
    """A singular find matched no rows."""

    def __init__(self, table: str, field: str, value: str, query: str | None = None) -> None:
        message = f"No record in '{table}' where {field} = '{value}'."
        super().__init__(message, query)
        self.context.update({"table": table, "field": field, "value": value})
        self.table = table
        self.field = field
        self.value = value


class ConversionError(QuerywrapError):
    """A raw column value could not be converted to its declared field type."""

    def __init__(self, field_name: str, column: str, raw: str, target: str) -> None:
        message = (
            f"Cannot convert column '{column}' value {raw!r} to {target} "
            f"for field '{field_name}'."
        )
        super().__init__(
            message,
            {"field": field_name, "column": column, "raw": raw, "target": target},
        )
        self.field_name = field_name
        self.column = column
        self.raw = raw
        self.target = target


class ValidationError(QuerywrapError):
    """A payload or destination type does not fit the query builder."""

    def __init__(self, message: str, field_errors: dict[str, str] | None = None) -> None:
        super().__init__(message, {"field_errors": field_errors or {}})
        self.field_errors = field_errors or {}
