"""Shared query-builder surface and clause accumulator.

A builder accumulates clause fragments through chained calls and consumes
them in a terminal operation (find, find_all, count_all, insert, ...).
Whatever the outcome, a terminal operation resets every pending clause and
limit/offset before it returns or raises, so the same builder can start the
next query straight away. ``last_query()`` and ``last_error`` stay readable
afterwards for diagnostics.

Builders are not thread-safe: use one builder per logical query and share
the underlying engine or client instead.
"""

from __future__ import annotations

import contextlib
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Self

from querywrap.core.types import HookPhase, QuerySettings
from querywrap.data.mapper import StructMapper
from querywrap.exceptions import RecordNotFoundError
from querywrap.query.hooks import Hook, HookRegistry

logger = logging.getLogger(__name__)

UNSET = -1


class Querier(ABC):
    """Clause vocabulary every backend variant understands."""

    @abstractmethod
    def select(self, select_string: str) -> Self: ...

    @abstractmethod
    def select_max(self, select_string: str) -> Self: ...

    @abstractmethod
    def select_min(self, select_string: str) -> Self: ...

    @abstractmethod
    def select_avg(self, select_string: str) -> Self: ...

    @abstractmethod
    def select_sum(self, select_string: str) -> Self: ...

    @abstractmethod
    def where(self, field: str, value: str) -> Self: ...

    @abstractmethod
    def or_where(self, field: str, value: str) -> Self: ...

    @abstractmethod
    def where_in(self, field: str, values: Sequence[str]) -> Self: ...

    @abstractmethod
    def or_where_in(self, field: str, values: Sequence[str]) -> Self: ...

    @abstractmethod
    def where_not_in(self, field: str, values: Sequence[str]) -> Self: ...

    @abstractmethod
    def or_where_not_in(self, field: str, values: Sequence[str]) -> Self: ...

    @abstractmethod
    def like(self, field: str, value: str) -> Self: ...

    @abstractmethod
    def not_like(self, field: str, value: str) -> Self: ...

    @abstractmethod
    def or_like(self, field: str, value: str) -> Self: ...

    @abstractmethod
    def or_not_like(self, field: str, value: str) -> Self: ...

    @abstractmethod
    def order_by(self, fields: str, order: str = "ASC") -> Self: ...

    @abstractmethod
    def limit(self, limit: int) -> Self: ...

    @abstractmethod
    def offset(self, offset: int) -> Self: ...

    @abstractmethod
    def last_query(self) -> str: ...

    @abstractmethod
    def find(self, id: str) -> Any: ...

    @abstractmethod
    def find_all(self) -> list[Any]: ...

    @abstractmethod
    def find_by(self, field: str, value: str) -> Any: ...

    @abstractmethod
    def find_all_by(self, fields: Mapping[str, str]) -> list[Any]: ...

    @abstractmethod
    def count_all(self) -> int: ...

    @abstractmethod
    def count_by(self, field: str, value: str) -> int: ...

    @abstractmethod
    def is_unique(self, field: str, value: str) -> bool: ...

    # Configuration

    @abstractmethod
    def key(self, key: str) -> Self: ...

    @abstractmethod
    def created_field(self, created_field: str) -> Self: ...

    @abstractmethod
    def modified_field(self, modified_field: str) -> Self: ...

    @abstractmethod
    def deleted_field(self, deleted_field: str) -> Self: ...

    @abstractmethod
    def created(self, created: bool) -> Self: ...

    @abstractmethod
    def modified(self, modified: bool) -> Self: ...

    @abstractmethod
    def soft_deletes(self, soft_deletes: bool) -> Self: ...

    @abstractmethod
    def date_format(self, date_format: str) -> Self: ...

    @abstractmethod
    def strict_mapping(self, strict: bool) -> Self: ...

    @abstractmethod
    def return_type(self, destination: type) -> Self: ...

    # Hooks

    @abstractmethod
    def before_insert(self, triggers: Sequence[Hook]) -> Self: ...

    @abstractmethod
    def after_insert(self, triggers: Sequence[Hook]) -> Self: ...

    @abstractmethod
    def before_update(self, triggers: Sequence[Hook]) -> Self: ...

    @abstractmethod
    def after_update(self, triggers: Sequence[Hook]) -> Self: ...

    @abstractmethod
    def before_find(self, triggers: Sequence[Hook]) -> Self: ...

    @abstractmethod
    def after_find(self, triggers: Sequence[Hook]) -> Self: ...

    @abstractmethod
    def before_delete(self, triggers: Sequence[Hook]) -> Self: ...

    @abstractmethod
    def after_delete(self, triggers: Sequence[Hook]) -> Self: ...


class BaseQuery(Querier):
    """State and behavior common to the SQL and search builders."""

    backend = "abstract"

    def __init__(self, table: str, settings: QuerySettings | None = None) -> None:
        """Initialize builder state.

        Args:
            table: Table or collection the builder targets
            settings: Builder configuration (defaults to QuerySettings())
        """
        self._table = table
        self._settings = settings or QuerySettings()
        self._hooks = HookRegistry()
        self._mapper: StructMapper | None = None
        self._destination: type | None = None
        self._result: list[Any] = []
        self._last_query = ""
        self._last_error: Exception | None = None

        self._pending_selects: list[str] = []
        self._pending_wheres: list[str] = []
        self._pending_order_by: list[str] = []
        self._limit = UNSET
        self._offset = UNSET

    # === Properties ===

    @property
    def table(self) -> str:
        return self._table

    @property
    def settings(self) -> QuerySettings:
        return self._settings

    @property
    def last_error(self) -> Exception | None:
        """Error raised by the most recent terminal operation, if any."""
        return self._last_error

    @property
    def result(self) -> list[Any]:
        """Buffer filled by the most recent terminal operation."""
        return self._result

    def last_query(self) -> str:
        """Return the most recently composed statement."""
        return self._last_query

    # === Configuration ===

    def _configure(self, **changes: Any) -> Self:
        self._settings = self._settings.updated(**changes)
        if "strict_mapping" in changes and self._destination is not None:
            self._mapper = StructMapper(self._destination, strict=self._settings.strict_mapping)
        return self

    def key(self, key: str) -> Self:
        """Use ``key`` instead of 'id' as the primary-key column."""
        return self._configure(key=key)

    def created_field(self, created_field: str) -> Self:
        return self._configure(created_field=created_field)

    def modified_field(self, modified_field: str) -> Self:
        return self._configure(modified_field=modified_field)

    def deleted_field(self, deleted_field: str) -> Self:
        return self._configure(deleted_field=deleted_field)

    def created(self, created: bool) -> Self:
        return self._configure(set_created=created)

    def modified(self, modified: bool) -> Self:
        return self._configure(set_modified=modified)

    def soft_deletes(self, soft_deletes: bool) -> Self:
        return self._configure(soft_deletes=soft_deletes)

    def date_format(self, date_format: str) -> Self:
        return self._configure(date_format=date_format)

    def strict_mapping(self, strict: bool) -> Self:
        return self._configure(strict_mapping=strict)

    def return_type(self, destination: type) -> Self:
        """Materialize results as instances of ``destination``.

        Without a return type, rows come back as plain dicts.
        """
        self._destination = destination
        self._mapper = StructMapper(destination, strict=self._settings.strict_mapping)
        return self

    # === Hooks ===

    def before_insert(self, triggers: Sequence[Hook]) -> Self:
        self._hooks.set_before(HookPhase.INSERT, triggers)
        return self

    def after_insert(self, triggers: Sequence[Hook]) -> Self:
        self._hooks.set_after(HookPhase.INSERT, triggers)
        return self

    def before_update(self, triggers: Sequence[Hook]) -> Self:
        self._hooks.set_before(HookPhase.UPDATE, triggers)
        return self

    def after_update(self, triggers: Sequence[Hook]) -> Self:
        self._hooks.set_after(HookPhase.UPDATE, triggers)
        return self

    def before_find(self, triggers: Sequence[Hook]) -> Self:
        self._hooks.set_before(HookPhase.FIND, triggers)
        return self

    def after_find(self, triggers: Sequence[Hook]) -> Self:
        self._hooks.set_after(HookPhase.FIND, triggers)
        return self

    def before_delete(self, triggers: Sequence[Hook]) -> Self:
        self._hooks.set_before(HookPhase.DELETE, triggers)
        return self

    def after_delete(self, triggers: Sequence[Hook]) -> Self:
        self._hooks.set_after(HookPhase.DELETE, triggers)
        return self

    # === Shared clauses ===

    def select_max(self, select_string: str) -> Self:
        return self.select("MAX(" + select_string + ")")

    def select_min(self, select_string: str) -> Self:
        return self.select("MIN(" + select_string + ")")

    def select_avg(self, select_string: str) -> Self:
        return self.select("AVG(" + select_string + ")")

    def select_sum(self, select_string: str) -> Self:
        return self.select("SUM(" + select_string + ")")

    def limit(self, limit: int) -> Self:
        """Set (not append) the row limit. Values <= 0 are omitted."""
        self._limit = limit
        return self

    def offset(self, offset: int) -> Self:
        """Set (not append) the row offset. Values <= 0 are omitted."""
        self._offset = offset
        return self

    def pending(self) -> dict[str, Any]:
        """Snapshot of the accumulated clause state."""
        return {
            "selects": list(self._pending_selects),
            "wheres": list(self._pending_wheres),
            "order_by": list(self._pending_order_by),
            "limit": self._limit,
            "offset": self._offset,
        }

    def debug(self) -> dict[str, Any]:
        """Log the pending clause state and return it."""
        state = self.pending()
        for name, value in state.items():
            logger.debug(f"{name}: {value}")
        return state

    # === Terminal operations ===

    def find(self, id: str) -> Any:
        """Return the row whose primary key equals ``id``.

        Raises:
            RecordNotFoundError: If no row matches
        """
        key = self._settings.key
        with self._staging():
            self.limit(1).where(key, id)
        rows = self.find_all()
        return self._first(rows, key, id)

    def find_by(self, field: str, value: str) -> Any:
        """Return the first row where ``field`` equals ``value``.

        Raises:
            RecordNotFoundError: If no row matches
        """
        with self._staging():
            self.where(field, value)
        rows = self.find_all()
        return self._first(rows, field, value)

    def find_all_by(self, fields: Mapping[str, str]) -> list[Any]:
        """Return every row matching all ``field = value`` pairs."""
        with self._staging():
            for field, value in fields.items():
                self.where(field, value)
        return self.find_all()

    def count_by(self, field: str, value: str) -> int:
        with self._staging():
            self.where(field, value)
        return self.count_all()

    def is_unique(self, field: str, value: str) -> bool:
        """Return True when no row has ``field = value``."""
        return self.count_by(field, value) == 0

    # === Cycle management ===

    def _reset(self) -> None:
        self._pending_selects = []
        self._pending_wheres = []
        self._pending_order_by = []
        self._limit = UNSET
        self._offset = UNSET

    def _cleanup(self, error: Exception | None) -> None:
        """Reset the accumulator and record the terminal error (None on success)."""
        self._reset()
        self._last_error = error

    @contextlib.contextmanager
    def _staging(self) -> Iterator[None]:
        """Queue clauses for a terminal operation; reset if queuing fails."""
        try:
            yield
        except Exception as e:
            self._cleanup(e)
            raise

    @contextlib.contextmanager
    def _cycle(self) -> Iterator[None]:
        """Run one terminal operation; the accumulator resets on every exit path."""
        error: Exception | None = None
        try:
            yield
        except Exception as e:
            error = e
            raise
        finally:
            self._cleanup(error)

    def _materialize(self, row: Mapping[str, Any]) -> Any:
        if self._mapper is None:
            return dict(row)
        return self._mapper.map(row)

    def _first(self, rows: list[Any], field: str, value: str) -> Any:
        if not rows:
            error = RecordNotFoundError(self._table, field, value, self._last_query)
            self._last_error = error
            raise error
        return rows[0]
