"""Legacy commands: migrate old form data and classify categories."""

from pathlib import Path
from typing import Annotated

import typer

from specfields.application import ConfigError
from specfields.domain import SpecificationError

from .common import (
    display_error,
    echo_json,
    load_factory,
    read_values,
    settings_from_context,
)


def migrate_command(
    ctx: typer.Context,
    catalog_file: Annotated[Path, typer.Argument(help="Catalog JSON with fields and mappings")],
    category: Annotated[str, typer.Argument(help="Category id the values belong to")],
    values_file: Annotated[Path, typer.Argument(help="JSON object of legacy form values")],
) -> None:
    """Coerce legacy form values to the category's field types.

    Example:
        specfields migrate catalog.json lights old-values.json
    """
    try:
        factory = load_factory(catalog_file, settings_from_context(ctx))
        values = read_values(values_file)
    except (ConfigError, SpecificationError) as e:
        display_error(e)
        raise typer.Exit(code=1)

    echo_json(factory.get_legacy_adapter().migrate_form_data(values, category))


def classify_command(
    ctx: typer.Context,
    catalog_file: Annotated[Path, typer.Argument(help="Catalog JSON with fields and mappings")],
    category: Annotated[str, typer.Argument(help="Category id to classify")],
) -> None:
    """Show the inferred category type and its required/optional fields.

    Example:
        specfields classify catalog.json switches
    """
    try:
        factory = load_factory(catalog_file, settings_from_context(ctx))
    except (ConfigError, SpecificationError) as e:
        display_error(e)
        raise typer.Exit(code=1)

    mapping = factory.get_legacy_adapter().get_legacy_category_field_mapping(category)
    typer.echo(f"Category: {category}")
    typer.echo(f"Type: {mapping.category_type.value}")
    typer.echo(
        "Required: " + (", ".join(f.field_key for f in mapping.required_fields) or "-")
    )
    typer.echo(
        "Optional: " + (", ".join(f.field_key for f in mapping.optional_fields) or "-")
    )
