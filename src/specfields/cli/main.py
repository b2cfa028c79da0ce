"""Typer CLI for specification field catalogs."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from specfields.cli.commands import (
    classify_command,
    migrate_command,
    schema_command,
    validate_command,
)

app = typer.Typer(
    name="specfields",
    help="Inspect specification field catalogs: forms, validation and legacy data.",
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
    settings_file: Annotated[
        Path | None,
        typer.Option("--settings", "-s", help="Path to a JSON settings file"),
    ] = None,
) -> None:
    """Configure logging and shared options."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"settings_path": settings_file}


app.command(name="validate")(validate_command)
app.command(name="schema")(schema_command)
app.command(name="migrate")(migrate_command)
app.command(name="classify")(classify_command)


if __name__ == "__main__":
    app()
