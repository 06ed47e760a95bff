"""Core components for querywrap."""

from querywrap.core.connection import (
    ConnectionOpener,
    SQLAlchemyConnectionOpener,
    normalize_url,
)
from querywrap.core.types import DateFormat, HookPhase, QuerySettings, SolrSettings

__all__ = [
    "ConnectionOpener",
    "SQLAlchemyConnectionOpener",
    "normalize_url",
    "DateFormat",
    "HookPhase",
    "QuerySettings",
    "SolrSettings",
]
