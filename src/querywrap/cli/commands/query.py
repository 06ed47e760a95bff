"""Query building and execution commands."""

from typing import Annotated

import typer
from sqlalchemy import create_engine

from querywrap.cli.context import CLIContext
from querywrap.cli.output import OutputFormatter
from querywrap.cli.parsing import parse_condition, parse_order
from querywrap.query.sql import SQLQuery

Table = Annotated[str, typer.Argument(help="Table to query")]
Select = Annotated[
    list[str] | None,
    typer.Option("--select", "-s", help="Select expression (repeatable)"),
]
Where = Annotated[
    list[str] | None,
    typer.Option("--where", "-w", help="Condition like 'age >= 21' (repeatable, AND-joined)"),
]
OrWhere = Annotated[
    list[str] | None,
    typer.Option("--or-where", help="Condition OR-joined to the previous ones (repeatable)"),
]
OrderBy = Annotated[
    list[str] | None,
    typer.Option("--order-by", "-o", help="'column [ASC|DESC]' (repeatable)"),
]
GroupBy = Annotated[
    list[str] | None,
    typer.Option("--group-by", "-g", help="Group-by column list (repeatable)"),
]
Limit = Annotated[int, typer.Option("--limit", "-l", help="Maximum rows (0 for no limit)")]
Offset = Annotated[int, typer.Option("--offset", help="Rows to skip")]
Key = Annotated[str, typer.Option("--key", "-k", help="Primary-key column")]


def apply_clauses(
    query: SQLQuery,
    select: list[str] | None = None,
    where: list[str] | None = None,
    or_where: list[str] | None = None,
    order_by: list[str] | None = None,
    group_by: list[str] | None = None,
    limit: int = 0,
    offset: int = 0,
) -> SQLQuery:
    """Replay CLI options onto a builder, in a fixed order."""
    for expression in select or []:
        query.select(expression)
    for condition in where or []:
        query.where(*parse_condition(condition))
    for condition in or_where or []:
        query.or_where(*parse_condition(condition))
    for fields in group_by or []:
        query.group_by(fields)
    for spec in order_by or []:
        query.order_by(*parse_order(spec))
    if limit:
        query.limit(limit)
    if offset:
        query.offset(offset)
    return query


def compose_command(
    ctx: typer.Context,
    table: Table,
    select: Select = None,
    where: Where = None,
    or_where: OrWhere = None,
    order_by: OrderBy = None,
    group_by: GroupBy = None,
    limit: Limit = 0,
    offset: Offset = 0,
) -> None:
    """Print the SQL a set of clauses composes to, without running it.

    Examples:

        querywrap compose users -s "id, name" -w "age >= 21" -o "name DESC" -l 10
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        # Engines connect lazily; this one is never used
        query = SQLQuery(table, engine=create_engine("sqlite://"))
        apply_clauses(query, select, where, or_where, order_by, group_by, limit, offset)
        formatter.print_value("sql", query.compose_select())
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)


def find_command(
    ctx: typer.Context,
    table: Table,
    select: Select = None,
    where: Where = None,
    or_where: OrWhere = None,
    order_by: OrderBy = None,
    group_by: GroupBy = None,
    limit: Limit = 0,
    offset: Offset = 0,
    key: Key = "id",
    record_id: Annotated[
        str | None,
        typer.Option("--id", help="Fetch the single row with this primary key"),
    ] = None,
) -> None:
    """Run a query and print the matching rows.

    Examples:

        querywrap find users -w "age >= 21" -o "name" -l 10
        querywrap find users --id 42
        querywrap --json find users -s "name" -w "name LIKE %bo%"
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        query = cli_ctx.query(table, key=key)
        apply_clauses(query, select, where, or_where, order_by, group_by, limit, offset)
        if record_id is not None:
            rows = [query.find(record_id)]
        else:
            rows = query.find_all()
        formatter.print_rows(table, rows)
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()


def count_command(
    ctx: typer.Context,
    table: Table,
    where: Where = None,
    or_where: OrWhere = None,
) -> None:
    """Count the rows matching a set of conditions.

    Examples:

        querywrap count users -w "age >= 21"
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        query = apply_clauses(cli_ctx.query(table), where=where, or_where=or_where)
        formatter.print_value("count", query.count_all())
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()
