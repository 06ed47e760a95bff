"""querywrap CLI - Main entry point."""

from typing import Annotated

import typer

import querywrap
from querywrap.cli.context import CLIContext, get_dsns

# Create main Typer app
app = typer.Typer(
    name="querywrap",
    help="querywrap CLI - compose and run fluent queries from the shell",
    no_args_is_help=True,
)

# Store CLI context globally (will be set in callback)
state: dict[str, CLIContext] = {}


@app.callback()
def main_callback(
    ctx: typer.Context,
    dsn: Annotated[
        list[str] | None,
        typer.Option(
            "--dsn",
            "-d",
            help="Database URL; repeat to give fallbacks tried in order",
        ),
    ] = None,
    echo: Annotated[
        bool,
        typer.Option(
            "--echo",
            "-e",
            help="Echo SQL statements to console",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON (machine-readable)",
        ),
    ] = False,
) -> None:
    """Initialize CLI context with global options."""
    cli_ctx = CLIContext(
        dsns=get_dsns(dsn),
        echo=echo,
        json_output=json_output,
    )

    # Store in Typer context for command access
    ctx.obj = cli_ctx
    state["cli_ctx"] = cli_ctx


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"querywrap v{querywrap.__version__}")


# Register commands
from querywrap.cli.commands import query

app.command(name="compose")(query.compose_command)
app.command(name="find")(query.find_command)
app.command(name="count")(query.count_command)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
