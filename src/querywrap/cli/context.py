"""CLI context management for connections and shared state."""

import os
from dataclasses import dataclass, field

from sqlalchemy import Engine

from querywrap.core.connection import SQLAlchemyConnectionOpener
from querywrap.core.types import QuerySettings
from querywrap.query.sql import SQLQuery

DEFAULT_DSN = "sqlite:///./querywrap.db"


def get_dsns(dsns: list[str] | None) -> list[str]:
    """Resolve the DSN list from CLI args, environment variable, or default.

    Priority:
    1. Explicit --dsn options, in the order given
    2. QUERYWRAP_DSN environment variable (comma separated)
    3. Default: sqlite:///./querywrap.db
    """
    if dsns:
        return list(dsns)
    if env_dsns := os.getenv("QUERYWRAP_DSN"):
        return [dsn.strip() for dsn in env_dsns.split(",") if dsn.strip()]
    return [DEFAULT_DSN]


@dataclass
class CLIContext:
    """Shared context for CLI commands.

    Manages the engine lifecycle and output preferences.
    """

    dsns: list[str]
    echo: bool
    json_output: bool
    _engine: Engine | None = field(default=None, init=False, repr=False)

    def get_engine(self) -> Engine:
        """Open the first live DSN (lazy initialization)."""
        if self._engine is None:
            self._engine = SQLAlchemyConnectionOpener(echo=self.echo).open(self.dsns)
        return self._engine

    def query(self, table: str, key: str = "id") -> SQLQuery:
        """Create a builder for ``table`` on the shared engine."""
        return SQLQuery(table, engine=self.get_engine(), settings=QuerySettings(key=key))

    def close(self) -> None:
        """Dispose of the engine if one was opened."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
