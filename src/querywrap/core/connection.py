"""Connection opening for querywrap.

A query builder receives its engine from a ``ConnectionOpener`` exactly once,
at construction. The default opener walks an ordered list of DSNs and keeps
the first one that answers a ping.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.exc import SQLAlchemyError

from querywrap.exceptions import ConnectionError

logger = logging.getLogger(__name__)


def normalize_url(url: str) -> str:
    """Pick the pure-Python driver for bare dialect URLs.

    SQLAlchemy defaults to mysqlclient for 'mysql://' and psycopg2 for
    'postgresql://'. The optional extras install PyMySQL and psycopg3, so
    bare URLs are rewritten to use those.

    Args:
        url: Database URL

    Returns:
        URL with an explicit driver
    """
    # Already has a driver specified
    if url.startswith(("mysql+", "postgresql+", "sqlite+")):
        return url

    if url.startswith("mysql://"):
        return url.replace("mysql://", "mysql+pymysql://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)

    return url


class ConnectionOpener(Protocol):
    """Capability that turns a list of DSNs into one live engine."""

    def open(self, dsns: Sequence[str]) -> Engine:
        """Return the first live engine, or raise ConnectionError."""
        ...


class SQLAlchemyConnectionOpener:
    """Opens SQLAlchemy engines, falling back through the DSN list in order."""

    def __init__(self, echo: bool = False) -> None:
        """Initialize the opener.

        Args:
            echo: Whether engines echo SQL statements (for debugging)
        """
        self._echo = echo

    def _create_engine(self, url: str) -> Engine:
        connect_args = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False

        return create_engine(
            url,
            echo=self._echo,
            pool_pre_ping=True,  # Verify connections before use
            connect_args=connect_args,
        )

    def open(self, dsns: Sequence[str]) -> Engine:
        """Try each DSN in turn and return the first engine that answers.

        Args:
            dsns: Candidate connection URLs, most preferred first

        Returns:
            A live SQLAlchemy engine

        Raises:
            ConnectionError: If every DSN fails to open or to answer a ping
        """
        failures: list[str] = []

        for dsn in dsns:
            url = normalize_url(dsn)
            try:
                engine = self._create_engine(url)
            except (SQLAlchemyError, ImportError, ValueError) as e:
                logger.warning(f"{dsn} failed to open: {e}")
                failures.append(f"{dsn}: {e}")
                continue

            try:
                with engine.connect() as conn:
                    conn.execute(text("SELECT 1"))
            except SQLAlchemyError as e:
                logger.warning(f"{dsn} failed to answer ping: {e}")
                failures.append(f"{dsn}: {e}")
                engine.dispose()
                continue

            logger.info(f"Connected to {engine.url.render_as_string(hide_password=True)}")
            return engine

        if not dsns:
            raise ConnectionError("No connection strings given.", [])

        raise ConnectionError(
            "All connection strings failed: " + "; ".join(failures),
            list(dsns),
        )
