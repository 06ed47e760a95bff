"""Input parsing utilities for CLI commands."""

import re

_CONDITION = re.compile(
    r"^\s*(?P<field>[^<>=!\s]+)\s*(?P<op>>=|<=|!=|<>|>|<|=|NOT\s+LIKE\b|LIKE\b)\s*(?P<value>.*)$",
    re.IGNORECASE,
)


def parse_condition(condition: str) -> tuple[str, str]:
    """Parse a condition into the (field, value) pair the where family takes.

    Examples:
        "name=bob" → ("name", "bob")
        "age >= 21" → ("age >=", "21")
        "name like %bo%" → ("name LIKE", "%bo%")

    Args:
        condition: Condition string

    Returns:
        Field text (carrying its operator unless it is '=') and value

    Raises:
        ValueError: If the condition has no recognizable operator
    """
    match = _CONDITION.match(condition)
    if not match:
        raise ValueError(
            f"Invalid condition: '{condition}'. "
            f"Expected FIELD OP VALUE with OP one of =, !=, <>, <, <=, >, >=, LIKE, NOT LIKE"
        )

    field = match.group("field")
    op = " ".join(match.group("op").upper().split())
    value = match.group("value").strip()
    if op == "=":
        return field, value
    return f"{field} {op}", value


def parse_order(spec: str) -> tuple[str, str]:
    """Parse "column [ASC|DESC]" into (column, direction)."""
    parts = spec.strip().rsplit(None, 1)
    if len(parts) == 2 and parts[1].upper() in ("ASC", "DESC"):
        return parts[0], parts[1].upper()
    return spec.strip(), "ASC"
