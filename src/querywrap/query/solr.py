"""Search-engine query builder for querywrap.

Shares the clause vocabulary of the SQL builder where Solr has a meaning for
it and composes a JSON Request API document instead of SQL text:

    select       -> "fields"
    where family -> one filter string, AND-joined unless a term opts into OR
    order_by     -> "sort"
    limit/offset -> "limit"/"offset"
    select_max.. -> stats component, exposed afterwards as ``last_stats``

Joins, unions, GROUP BY and HAVING have no equivalent and raise
UnsupportedOperationError as soon as they are called.

Example:
    query = SolrQuery("http://127.0.0.1:8983/solr/techproducts")
    product = query.return_type(Product).select("id, price").find("6H500F0")
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Sequence
from typing import Any, NoReturn, Self

from querywrap.core.types import HookPhase, QuerySettings, SolrSettings
from querywrap.exceptions import UnsupportedOperationError
from querywrap.query.base import BaseQuery
from querywrap.query.predicates import OR_PREFIX, concat
from querywrap.search.client import SolrClient

logger = logging.getLogger(__name__)

NEGATION = "-"
FUZZY_DISTANCE = 2

_SPECIAL_CHARS = re.compile(r'([+\-&|!(){}\[\]^"~*?:\\/\s])')

# select_* helper -> Solr stats local parameter
_STATS_FUNCTIONS = {"max": "max", "min": "min", "avg": "mean", "sum": "sum"}


def quote_phrase(value: object) -> str:
    """Quote a value as a Solr phrase, escaping backslashes and quotes."""
    return '"' + str(value).replace("\\", "\\\\").replace('"', '\\"') + '"'


def escape_term(value: object) -> str:
    """Escape Solr query syntax characters in a bare term."""
    return _SPECIAL_CHARS.sub(r"\\\1", str(value))


class SolrQuery(BaseQuery):
    """Fluent, read-only query builder over a Solr core."""

    backend = "solr"

    def __init__(
        self,
        url: str,
        timeout: float = 10,
        *,
        client: SolrClient | None = None,
        settings: QuerySettings | None = None,
        verify: bool = False,
    ) -> None:
        """Initialize the builder.

        Args:
            url: Core URL, e.g. http://127.0.0.1:8983/solr/techproducts
            timeout: HTTP timeout in seconds
            client: Transport to reuse instead of creating one
            settings: Builder configuration
            verify: Ping the core before returning

        Raises:
            ConnectionError: If ``verify`` is set and the core does not answer
        """
        solr_settings = SolrSettings(url=url, timeout=timeout)
        super().__init__(solr_settings.url.rstrip("/").rsplit("/", 1)[-1], settings)
        self._client = client or SolrClient(solr_settings)
        if verify:
            self._client.ping()

        self._pending_stats: dict[str, list[str]] = {}
        self._last_stats: dict[str, Any] = {}
        self._last_request: dict[str, Any] = {}

    @property
    def client(self) -> SolrClient:
        return self._client

    @property
    def last_stats(self) -> dict[str, Any]:
        """Stats block returned for select_max/min/avg/sum fields."""
        return self._last_stats

    @property
    def last_request(self) -> dict[str, Any]:
        return self._last_request

    # === Unsupported clauses ===

    def _unsupported(self, operation: str) -> NoReturn:
        raise UnsupportedOperationError(operation, self.backend)

    def join(self, table: str, condition: str, join_type: str = "") -> NoReturn:
        self._unsupported("join")

    def union(self, select_string: str) -> NoReturn:
        self._unsupported("union")

    def group_by(self, fields: str) -> NoReturn:
        self._unsupported("group_by")

    def having(self, field: str, condition: str) -> NoReturn:
        self._unsupported("having")

    def or_having(self, field: str, condition: str) -> NoReturn:
        self._unsupported("or_having")

    # === Select ===

    def select(self, select_string: str) -> Self:
        """Add returned fields; a comma-separated list is split."""
        for name in select_string.split(","):
            if name.strip():
                self._pending_selects.append(name.strip())
        return self

    def _select_stat(self, function: str, field: str) -> Self:
        stats = self._pending_stats.setdefault(field, [])
        if _STATS_FUNCTIONS[function] not in stats:
            stats.append(_STATS_FUNCTIONS[function])
        return self

    def select_max(self, select_string: str) -> Self:
        return self._select_stat("max", select_string)

    def select_min(self, select_string: str) -> Self:
        return self._select_stat("min", select_string)

    def select_avg(self, select_string: str) -> Self:
        return self._select_stat("avg", select_string)

    def select_sum(self, select_string: str) -> Self:
        return self._select_stat("sum", select_string)

    def order_by(self, fields: str, order: str = "ASC") -> Self:
        self._pending_order_by.append(f"{fields} {order.lower()}")
        return self

    # === Where family ===

    def _append_term(self, field: str, expression: str) -> Self:
        self._pending_wheres.append(f"{concat(self._pending_wheres, field)}:{expression}")
        return self

    @staticmethod
    def _any_of(values: Sequence[str]) -> str:
        return "(" + " OR ".join(quote_phrase(v) for v in values) + ")"

    def where(self, field: str, value: str) -> Self:
        return self._append_term(field, quote_phrase(value))

    def or_where(self, field: str, value: str) -> Self:
        return self._append_term(OR_PREFIX + field, quote_phrase(value))

    def where_in(self, field: str, values: Sequence[str]) -> Self:
        return self._append_term(field, self._any_of(values))

    def or_where_in(self, field: str, values: Sequence[str]) -> Self:
        return self._append_term(OR_PREFIX + field, self._any_of(values))

    def where_not_in(self, field: str, values: Sequence[str]) -> Self:
        return self._append_term(NEGATION + field, self._any_of(values))

    def or_where_not_in(self, field: str, values: Sequence[str]) -> Self:
        return self._append_term(OR_PREFIX + NEGATION + field, self._any_of(values))

    def _fuzzy(self, value: str) -> str:
        return f"{escape_term(value)}~{FUZZY_DISTANCE}"

    def like(self, field: str, value: str) -> Self:
        return self._append_term(field, self._fuzzy(value))

    def not_like(self, field: str, value: str) -> Self:
        return self._append_term(NEGATION + field, self._fuzzy(value))

    def or_like(self, field: str, value: str) -> Self:
        return self._append_term(OR_PREFIX + field, self._fuzzy(value))

    def or_not_like(self, field: str, value: str) -> Self:
        return self._append_term(OR_PREFIX + NEGATION + field, self._fuzzy(value))

    # === Composition ===

    def compose(self) -> dict[str, Any]:
        """Build the request document and record it as last_query()."""
        document: dict[str, Any] = {"query": "*:*"}

        if self._pending_wheres:
            document["filter"] = ["".join(self._pending_wheres).strip()]
        if self._pending_selects:
            document["fields"] = list(self._pending_selects)
        if self._pending_order_by:
            document["sort"] = ", ".join(self._pending_order_by)
        if self._limit > 0:
            document["limit"] = self._limit
        if self._offset > 0:
            document["offset"] = self._offset
        if self._pending_stats:
            document["params"] = {
                "stats": "true",
                "stats.field": [
                    "{!" + " ".join(f"{fn}=true" for fn in functions) + "}" + field
                    for field, functions in self._pending_stats.items()
                ],
            }

        self._last_request = document
        self._last_query = json.dumps(document)
        return document

    def pending(self) -> dict[str, Any]:
        state = super().pending()
        state["stats"] = {field: list(fns) for field, fns in self._pending_stats.items()}
        return state

    def _reset(self) -> None:
        super()._reset()
        self._pending_stats = {}

    # === Execution ===

    def find_all(self) -> list[Any]:
        """Run the pending request and materialize every returned document.

        Raises:
            QueryError: If the transport fails or Solr rejects the request
        """
        self._result = []
        with self._cycle():
            document = self.compose()
            self._hooks.run_before(HookPhase.FIND, self._result)
            body = self._client.query(document)
            self._last_stats = body.get("stats", {}).get("stats_fields", {})
            for doc in body.get("response", {}).get("docs", []):
                self._result.append(self._materialize(doc))
            self._hooks.run_after(HookPhase.FIND, self._result)
        return self._result

    def count_all(self) -> int:
        """Return numFound for the pending filters."""
        with self._cycle():
            document = self.compose()
            document["limit"] = 0
            document.pop("offset", None)
            self._last_query = json.dumps(document)
            body = self._client.query(document)
            return int(body.get("response", {}).get("numFound", 0))
