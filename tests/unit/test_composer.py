"""Tests for SELECT composition."""

from querywrap import QuerySettings, SQLQuery, compose_select
from querywrap.query.sql import SelectClauses


class TestComposeSelect:
    """Tests for the pure composer."""

    def test_select_star(self):
        """Without selects the statement reads every column."""
        assert compose_select(SelectClauses(table="mock")) == "SELECT  *  FROM mock"

    def test_limit_and_offset_omitted_when_not_positive(self):
        sql = compose_select(SelectClauses(table="t", selects=("a",), limit=0, offset=-1))
        assert sql == "SELECT a FROM t"

    def test_clause_order(self):
        """Clauses always appear in the same order."""
        clauses = SelectClauses(
            table="users",
            selects=("users.name", "COUNT(orders.id)"),
            joins=("LEFT JOIN orders ON orders.user_id = users.id",),
            wheres=("users.age >= 21",),
            group_by=("users.name",),
            having=("COUNT(orders.id) > 2",),
            order_by=("users.name DESC",),
            unions=("UNION SELECT name, 0 FROM guests",),
            limit=5,
            offset=10,
        )
        assert compose_select(clauses) == (
            "SELECT users.name, COUNT(orders.id) FROM users"
            " LEFT JOIN orders ON orders.user_id = users.id"
            " WHERE users.age >= 21"
            " GROUP BY users.name"
            " HAVING COUNT(orders.id) > 2"
            " ORDER BY users.name DESC"
            " UNION SELECT name, 0 FROM guests"
            " LIMIT 5"
            " OFFSET  10"
        )

    def test_legacy_order_by_uses_group_by(self):
        """Legacy mode repeats GROUP BY in ORDER BY and drops order_by."""
        clauses = SelectClauses(
            table="t",
            group_by=("a",),
            order_by=("b DESC",),
            legacy_order_by=True,
        )
        assert compose_select(clauses) == "SELECT  *  FROM t GROUP BY a ORDER BY a"

    def test_legacy_order_by_without_group_by(self):
        clauses = SelectClauses(table="t", order_by=("b DESC",), legacy_order_by=True)
        assert compose_select(clauses) == "SELECT  *  FROM t"


class TestBuilderComposition:
    """Tests for clause accumulation on the SQL builder."""

    def test_documented_statement(self, offline: SQLQuery):
        sql = (
            offline.select("a, b")
            .select("c")
            .where("a >=", "2")
            .where("b <=", "3")
            .limit(28)
            .offset(42)
            .compose_select()
        )
        assert sql == "SELECT a, b, c FROM mock WHERE a >= 2  AND b <= 3 LIMIT 28 OFFSET  42"
        assert offline.last_query() == sql

    def test_compose_does_not_reset(self, offline: SQLQuery):
        """Composing is not a terminal operation."""
        offline.select("a").where("a", "1")
        first = offline.compose_select()
        assert offline.compose_select() == first

    def test_or_where_and_quoting(self, offline: SQLQuery):
        sql = offline.where("name", "bob").or_where("name", "alice").where("active", "true").compose_select()
        assert sql == "SELECT  *  FROM mock WHERE name = 'bob'  OR name = 'alice'  AND active = true"

    def test_where_in_family(self, offline: SQLQuery):
        sql = (
            offline.where_in("id", ["1", "2"])
            .or_where_in("code", ["a", "b"])
            .where_not_in("state", ["x"])
            .or_where_not_in("kind", ["7"])
            .compose_select()
        )
        assert sql == (
            "SELECT  *  FROM mock WHERE id IN (1, 2)  OR code IN ('a', 'b')"
            "  AND state NOT IN ('x')  OR kind NOT IN (7)"
        )

    def test_like_family(self, offline: SQLQuery):
        sql = (
            offline.like("name", "%bo%")
            .not_like("name", "%x")
            .or_like("mail", "a%")
            .or_not_like("mail", "%z")
            .compose_select()
        )
        assert sql == (
            "SELECT  *  FROM mock WHERE name LIKE '%bo%'  AND name NOT LIKE '%x'"
            "  OR mail LIKE 'a%'  OR mail NOT LIKE '%z'"
        )

    def test_aggregate_selects(self, offline: SQLQuery):
        sql = offline.select_max("a").select_min("b").select_avg("c").select_sum("d").compose_select()
        assert sql == "SELECT MAX(a), MIN(b), AVG(c), SUM(d) FROM mock"

    def test_join_types(self, offline: SQLQuery):
        offline.join("orders", "orders.uid = mock.id").join("items", "items.oid = orders.id", "LEFT")
        assert offline.compose_select() == (
            "SELECT  *  FROM mock JOIN orders ON orders.uid = mock.id"
            " LEFT JOIN items ON items.oid = orders.id"
        )

    def test_having_and_or_having(self, offline: SQLQuery):
        sql = (
            offline.select("kind, COUNT(id)")
            .group_by("kind")
            .having("COUNT(id)", "> 1")
            .or_having("MAX(score)", ">= 9")
            .compose_select()
        )
        assert sql == (
            "SELECT kind, COUNT(id) FROM mock GROUP BY kind"
            " HAVING COUNT(id) > 1  OR MAX(score) >= 9"
        )

    def test_order_by_default_direction(self, offline: SQLQuery):
        sql = offline.order_by("a").order_by("b", "DESC").compose_select()
        assert sql == "SELECT  *  FROM mock ORDER BY a ASC, b DESC"

    def test_limit_and_offset_overwrite(self, offline: SQLQuery):
        sql = offline.limit(5).limit(7).offset(3).offset(9).compose_select()
        assert sql == "SELECT  *  FROM mock LIMIT 7 OFFSET  9"

    def test_legacy_order_by_setting(self, engine):
        query = SQLQuery("t", engine=engine, settings=QuerySettings(legacy_order_by=True))
        sql = query.group_by("a").order_by("b").compose_select()
        assert sql == "SELECT  *  FROM t GROUP BY a ORDER BY a"

    def test_pending_snapshot(self, offline: SQLQuery):
        offline.select("a").where("a", "1").group_by("a").limit(2)
        state = offline.pending()
        assert state["selects"] == ["a"]
        assert state["wheres"] == ["a = 1"]
        assert state["group_by"] == ["a"]
        assert state["limit"] == 2
        assert state["offset"] == -1
        assert offline.debug() == state
