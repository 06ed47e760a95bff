"""Predicate fragment rules shared by the WHERE and HAVING builders.

Fragments are opaque strings. The only structure is the join rule: every
fragment after the first is prefixed with " AND " unless the caller already
opened it with " OR ". There is no grouping; precedence is whatever SQL makes
of the final flat string.

Values are quoted with single quotes unless they read as an integer, a
decimal float or a boolean. Embedded quotes are NOT escaped, so untrusted
text must never reach the where family of a SQL query builder.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

OR_PREFIX = " OR "
AND_PREFIX = " AND "

# Field suffixes that already carry their operator. ">=" and ">" match
# without a leading space; the rest need one so that e.g. "status_in" is
# not mistaken for an IN predicate.
OPERATOR_SUFFIXES: tuple[str, ...] = (
    ">=",
    ">",
    " <=",
    " <",
    " !=",
    " <>",
    " NOT LIKE",
    " LIKE",
    " NOT IN",
    " IN",
)

_INTEGER = re.compile(r"[+-]?\d+")
_FLOAT = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def is_bare_literal(value: object) -> bool:
    """Return True when ``value`` can be emitted without quotes."""
    text = str(value)
    return (
        _INTEGER.fullmatch(text) is not None
        or _FLOAT.fullmatch(text) is not None
        or text.lower() in ("true", "false")
    )


def stringify(value: object) -> str:
    """Quote ``value`` for a predicate unless it is numeric or boolean.

    >>> stringify("5"), stringify("1.5"), stringify("TRUE"), stringify("five")
    ('5', '1.5', 'TRUE', "'five'")
    """
    text = str(value)
    if is_bare_literal(text):
        return text
    return "'" + text + "'"


def stringify_list(values: Iterable[object]) -> str:
    """Render a parenthesized, comma-joined value list for IN predicates."""
    return "(" + ", ".join(stringify(v) for v in values) + ")"


def has_operator_suffix(field: str) -> bool:
    return field.endswith(OPERATOR_SUFFIXES)


def concat(pending: Sequence[str], field: str) -> str:
    """Apply the AND-by-default join rule to a new fragment's field text."""
    if pending and not field.startswith(OR_PREFIX):
        return AND_PREFIX + field
    return field


def where_fragment(pending: Sequence[str], field: str, rendered_value: str) -> str:
    """Build one WHERE fragment from a field and an already rendered value.

    ``field = value`` is used unless the field ends with an operator suffix,
    in which case the value is appended directly.
    """
    head = concat(pending, field)
    if has_operator_suffix(field):
        return f"{head} {rendered_value}"
    return f"{head} = {rendered_value}"


def having_fragment(pending: Sequence[str], field: str, condition: str) -> str:
    """Build one HAVING fragment: ``<field> <condition>``."""
    return f"{concat(pending, field)} {condition}"
