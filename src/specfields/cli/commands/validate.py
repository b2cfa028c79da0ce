"""Validate command: check a values file against a category's fields."""

from pathlib import Path
from typing import Annotated

import typer

from specfields.application import ConfigError
from specfields.application.validation import FormValidationResult
from specfields.domain import SpecificationError

from .common import display_error, load_factory, read_values, settings_from_context


def validate_command(
    ctx: typer.Context,
    catalog_file: Annotated[Path, typer.Argument(help="Catalog JSON with fields and mappings")],
    category: Annotated[str, typer.Argument(help="Category id to validate against")],
    values_file: Annotated[Path, typer.Argument(help="JSON object of field values")],
) -> None:
    """Validate field values for a category.

    Exit codes:
        0 - Values are valid with no warnings
        1 - Values have errors, or the inputs could not be loaded
        2 - Values are valid but have warnings

    Example:
        specfields validate catalog.json switches values.json
    """
    try:
        factory = load_factory(catalog_file, settings_from_context(ctx))
        values = read_values(values_file)
    except (ConfigError, SpecificationError) as e:
        display_error(e)
        raise typer.Exit(code=1)

    registry = factory.get_registry()
    fields = registry.get_form_fields(category)
    if not fields:
        typer.echo(f"Category '{category}' has no fields", err=True)
        raise typer.Exit(code=1)

    result = factory.get_validation_engine().validate_form(fields, values, category)
    _display_result(result)

    if not result.is_valid:
        raise typer.Exit(code=1)
    if result.warnings or result.global_warnings:
        raise typer.Exit(code=2)


def _display_result(result: FormValidationResult) -> None:
    errors = result.errors
    if errors or result.global_errors:
        typer.echo("Errors:", err=True)
        for message in result.global_errors:
            typer.echo(f"  {message}", err=True)
        for key, messages in errors.items():
            for message in messages:
                typer.echo(f"  {key}: {message}", err=True)
        typer.echo()

    warnings = result.warnings
    if warnings or result.global_warnings:
        typer.echo("Warnings:")
        for message in result.global_warnings:
            typer.echo(f"  {message}")
        for key, messages in warnings.items():
            for message in messages:
                typer.echo(f"  {key}: {message}")
        typer.echo()

    if not result.is_valid:
        error_count = sum(len(m) for m in errors.values()) + len(result.global_errors)
        typer.echo(f"Validation failed: {error_count} error(s)", err=True)
    else:
        typer.echo("Validation passed.")
