"""Schema command: print the generated form schema for a category."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from specfields.application import ConfigError
from specfields.application.forms import FormGenerationOptions
from specfields.domain import SpecificationError

from .common import display_error, echo_json, load_factory, settings_from_context


def schema_command(
    ctx: typer.Context,
    catalog_file: Annotated[Path, typer.Argument(help="Catalog JSON with fields and mappings")],
    category: Annotated[str, typer.Argument(help="Category id to build the form for")],
    optional: Annotated[
        bool, typer.Option("--optional", help="Include optional fields")
    ] = False,
    exclude: Annotated[
        list[str] | None,
        typer.Option("--exclude", "-x", help="Field key to leave out (repeatable)"),
    ] = None,
) -> None:
    """Print the form schema for a category as JSON.

    Example:
        specfields schema catalog.json switches --optional --exclude color
    """
    try:
        factory = load_factory(catalog_file, settings_from_context(ctx))
        options = FormGenerationOptions(
            category_id=category,
            include_optional_fields=optional,
            exclude_fields=exclude or None,
        )
        schema = asyncio.run(factory.get_form_engine().generate_form_schema(options))
    except (ConfigError, SpecificationError) as e:
        display_error(e)
        raise typer.Exit(code=1)

    echo_json(schema.to_document())
