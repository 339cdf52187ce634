"""Quarry CLI - Main entry point."""

import logging
import sys
from typing import Annotated

import typer

import quarry
from quarry.cli.context import CATALOG_ENV_VAR, CLIContext, get_catalog_path

# Create main Typer app
app = typer.Typer(
    name="quarry",
    help="Quarry CLI - build SQL SELECT statements from table and column picks",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    catalog: Annotated[
        str | None,
        typer.Option(
            "--catalog",
            "-c",
            envvar=CATALOG_ENV_VAR,
            help="Schema catalog JSON file (defaults to the built-in catalog)",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON (machine-readable)",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log debug messages to stderr",
        ),
    ] = False,
) -> None:
    """Initialize CLI context with global options."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )

    ctx.obj = CLIContext(
        catalog_path=get_catalog_path(catalog),
        json_output=json_output,
    )


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"Quarry v{quarry.__version__}")


# Register command groups
from quarry.cli.commands import catalog, query

app.add_typer(catalog.app, name="catalog")

# Query building commands are standalone (not a group)
app.command(name="build")(query.build_command)
app.command(name="options")(query.options_command)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
