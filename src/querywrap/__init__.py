"""querywrap - fluent query building over SQL engines and Solr.

Chain clause calls on a builder, finish with a terminal operation, and get
rows back as your own dataclasses or pydantic models.

Example:
    from dataclasses import dataclass

    from querywrap import SQLQuery, column

    @dataclass
    class Bug:
        id: int = column("INTERNAL_ID", default=0)
        ext_id: str = column("EXTERNAL_ID", default="")

    bugs = SQLQuery("bugs", ["sqlite:///bugs.db"]).key("INTERNAL_ID").return_type(Bug)

    bug = bugs.find("5")
    recent = bugs.where("INTERNAL_ID >", "100").order_by("INTERNAL_ID", "DESC").find_all()
    print(bugs.last_query())

    bug.ext_id = "BUG-5"
    bugs.update(bug)
"""

from querywrap.core.connection import ConnectionOpener, SQLAlchemyConnectionOpener
from querywrap.core.types import DateFormat, HookPhase, QuerySettings, SolrSettings
from querywrap.data.mapper import StructMapper, column, describe, model_column
from querywrap.exceptions import (
    ConnectionError,
    ConversionError,
    QueryError,
    QuerywrapError,
    RecordNotFoundError,
    UnsupportedOperationError,
    ValidationError,
)
from querywrap.query import Querier, SolrQuery, SQLQuery, compose_select

__version__ = "1.0.0"

__all__ = [
    # Builders
    "Querier",
    "SQLQuery",
    "SolrQuery",
    "compose_select",
    # Connections
    "ConnectionOpener",
    "SQLAlchemyConnectionOpener",
    # Settings
    "QuerySettings",
    "SolrSettings",
    "DateFormat",
    "HookPhase",
    # Mapping
    "StructMapper",
    "column",
    "model_column",
    "describe",
    # Exceptions
    "QuerywrapError",
    "ConnectionError",
    "ConversionError",
    "QueryError",
    "RecordNotFoundError",
    "UnsupportedOperationError",
    "ValidationError",
]
