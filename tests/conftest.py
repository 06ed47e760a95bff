"""Shared test fixtures for querywrap."""

from collections.abc import Generator

import pytest
from sqlalchemy import Engine, create_engine, text

from querywrap import SQLQuery

BUGS_DDL = """
CREATE TABLE bugs (
    INTERNAL_ID INTEGER PRIMARY KEY AUTOINCREMENT,
    EXTERNAL_ID TEXT,
    SEVERITY TEXT,
    SCORE REAL,
    deleted INTEGER NOT NULL DEFAULT 0,
    created_on TEXT,
    modified_on TEXT
)
"""

BUGS_ROWS = [
    {"ext": "BUG-1", "severity": "low", "score": 1.5},
    {"ext": "BUG-2", "severity": "high", "score": 7.25},
    {"ext": "BUG-3", "severity": "high", "score": 9.0},
    {"ext": "BUG-4", "severity": "medium", "score": 4.0},
    {"ext": "BUG-5", "severity": "low", "score": 0.5},
]


@pytest.fixture
def sqlite_url(tmp_path) -> str:
    """URL of an empty SQLite database file."""
    return f"sqlite:///{tmp_path}/test.db"


@pytest.fixture
def engine(sqlite_url: str) -> Generator[Engine, None, None]:
    """Engine over a SQLite file seeded with five rows in ``bugs``."""
    eng = create_engine(sqlite_url)
    with eng.begin() as conn:
        conn.execute(text(BUGS_DDL))
        conn.execute(
            text("INSERT INTO bugs (EXTERNAL_ID, SEVERITY, SCORE) VALUES (:ext, :severity, :score)"),
            BUGS_ROWS,
        )
    yield eng
    eng.dispose()


@pytest.fixture
def bugs(engine: Engine) -> SQLQuery:
    """Builder over the seeded ``bugs`` table keyed by INTERNAL_ID."""
    return SQLQuery("bugs", engine=engine).key("INTERNAL_ID")


@pytest.fixture
def offline() -> SQLQuery:
    """Builder used only to compose statements; it never executes."""
    return SQLQuery("mock", engine=create_engine("sqlite://"))
