"""End-to-end workflow tests against a SQLite file."""

from dataclasses import dataclass

import pytest
from pydantic import BaseModel
from sqlalchemy import create_engine, text

from querywrap import DateFormat, RecordNotFoundError, SQLQuery, column, model_column


@dataclass
class Account:
    id: str = column("account_id", default="")
    owner: str = column("owner", default="")
    balance: float = column("balance", default=0.0)
    created: int = column("created_on", default=0)


class AccountView(BaseModel):
    owner: str = model_column("owner", default="")
    balance: float = model_column("balance", default=0.0)


@pytest.fixture
def accounts_url(sqlite_url: str) -> str:
    engine = create_engine(sqlite_url)
    with engine.begin() as conn:
        conn.execute(
            text(
                "CREATE TABLE accounts ("
                "account_id INTEGER PRIMARY KEY, owner TEXT, balance REAL, "
                "created_on INTEGER, modified_on INTEGER, deleted INTEGER NOT NULL DEFAULT 0)"
            )
        )
    engine.dispose()
    return sqlite_url


def test_full_lifecycle(accounts_url: str) -> None:
    """Insert, read, update, soft delete and count through one builder."""
    accounts = (
        SQLQuery("accounts", ["bogus://primary", accounts_url])
        .key("account_id")
        .return_type(Account)
        .modified(True)
        .date_format(DateFormat.INT)
        .soft_deletes(True)
    )

    created = []
    accounts.after_insert([lambda buffer: created.append(buffer[0].id)])

    for owner, balance in [("ann", 10.0), ("ben", 250.5), ("cy", 99.0)]:
        account = Account(owner=owner, balance=balance)
        assert accounts.insert(account) is True
        # key field is a str, so the generated id is written back as text
        assert isinstance(account.id, str)

    assert created == ["1", "2", "3"]
    assert accounts.count_all() == 3

    ben = accounts.find("2")
    assert ben.owner == "ben"
    assert ben.balance == 250.5

    ben.balance = 300.0
    assert accounts.update(ben) is True
    assert accounts.find_by("owner", "ben").balance == 300.0

    rich = accounts.where("balance >", "50").order_by("balance", "DESC").find_all()
    assert [a.owner for a in rich] == ["ben", "cy"]

    assert accounts.delete(ben) is True
    assert accounts.count_all() == 2
    with pytest.raises(RecordNotFoundError):
        accounts.find("2")

    with accounts.engine.connect() as conn:
        row = conn.execute(text("SELECT deleted, modified_on FROM accounts WHERE account_id = 2")).one()
    assert row.deleted == 1
    assert row.modified_on > 0


def test_pydantic_projection(accounts_url: str) -> None:
    """Rows can be read into a pydantic model through a narrower select."""
    engine = create_engine(accounts_url)
    with engine.begin() as conn:
        conn.execute(text("INSERT INTO accounts (owner, balance) VALUES ('dee', 12.5), ('eve', 7)"))

    views = SQLQuery("accounts", engine=engine).return_type(AccountView)
    rows = views.select("owner, balance").order_by("owner").find_all()
    assert rows == [AccountView(owner="dee", balance=12.5), AccountView(owner="eve", balance=7.0)]
    assert views.last_query() == "SELECT owner, balance FROM accounts ORDER BY owner ASC"
    engine.dispose()
