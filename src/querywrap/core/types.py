"""Core types and settings for querywrap.

Settings are pydantic models so that fluent setters on the query builders
validate their input the same way whether they come from code or the CLI.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class DateFormat(StrEnum):
    """Storage formats for the created/modified timestamp columns."""

    INT = "int"  # epoch seconds
    DATETIME = "datetime"  # YYYY-MM-DD HH:MM:SS
    DATE = "date"  # YYYY-MM-DD

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid date format values."""
        return [f.value for f in cls]


class HookPhase(StrEnum):
    """Operations that run lifecycle hooks around them."""

    INSERT = "insert"
    UPDATE = "update"
    FIND = "find"
    DELETE = "delete"


class QuerySettings(BaseModel):
    """Per-builder configuration shared by every backend variant."""

    key: str = Field(default="id", description="Primary-key column used by find/update/delete")
    created_field: str = Field(default="created_on", description="Column auto-filled on insert")
    modified_field: str = Field(
        default="modified_on", description="Column auto-filled on insert and update"
    )
    deleted_field: str = Field(default="deleted", description="Soft-delete flag column")
    set_created: bool = Field(default=False, description="Auto-fill created_field on insert")
    set_modified: bool = Field(default=False, description="Auto-fill modified_field on writes")
    soft_deletes: bool = Field(
        default=False, description="Flag rows as deleted instead of removing them"
    )
    date_format: DateFormat = Field(
        default=DateFormat.DATETIME, description="Format of the auto-filled timestamps"
    )
    legacy_order_by: bool = Field(
        default=False,
        description="Compose ORDER BY from the GROUP BY fragments and ignore order_by",
    )
    strict_mapping: bool = Field(
        default=False, description="Raise ConversionError instead of zero-filling bad values"
    )

    model_config = {"use_enum_values": True}

    def updated(self, **changes: Any) -> QuerySettings:
        """Return a validated copy with ``changes`` applied."""
        return QuerySettings.model_validate({**self.model_dump(), **changes})


class SolrSettings(BaseModel):
    """Connection settings for a Solr core or collection."""

    url: str = Field(..., description="Core URL, e.g. http://127.0.0.1:8983/solr/techproducts")
    timeout: float = Field(default=10, description="HTTP timeout in seconds")
