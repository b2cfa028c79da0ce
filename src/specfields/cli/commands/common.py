"""Shared helpers for CLI commands: loading catalogs and printing errors."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import typer

from specfields.application import (
    ConfigError,
    RegistrySettings,
    ServiceFactory,
    load_catalog,
    load_settings,
)
from specfields.application.loader import read_json
from specfields.domain import SpecificationError
from specfields.infrastructure import InMemoryFieldStore


def settings_from_context(ctx: typer.Context) -> RegistrySettings:
    settings_path = (ctx.obj or {}).get("settings_path")
    return load_settings(settings_path)


def load_factory(catalog_file: Path, settings: RegistrySettings) -> ServiceFactory:
    """Build services over a catalog file and load the registry.

    Raises:
        ConfigError: If the catalog cannot be read or validated.
        SpecificationError: If the registry cannot be loaded.
    """
    catalog = load_catalog(catalog_file)
    factory = ServiceFactory(store=InMemoryFieldStore.from_catalog(catalog), settings=settings)
    asyncio.run(factory.get_loaded_registry())
    for rejected in factory.get_registry().rejected:
        typer.echo(f"Warning: skipped field '{rejected.field_key}': {rejected}", err=True)
    return factory


def read_values(values_file: Path) -> dict[str, Any]:
    """Read a JSON object of field values.

    Raises:
        ConfigError: If the file is missing, is not JSON or is not an object.
    """
    data = read_json(values_file)
    if not isinstance(data, dict):
        raise ConfigError(
            message=f"Expected a JSON object of field values in {values_file}",
            error_type="validation",
            path=values_file,
        )
    return data


def echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, default=str))


def display_error(error: Exception) -> None:
    """Print a loading or registry error to stderr."""
    typer.echo("Errors:", err=True)
    if isinstance(error, ConfigError):
        if error.error_type == "file_not_found":
            typer.echo(f"  File not found: {error.path}", err=True)
        elif error.error_type == "json_parse":
            typer.echo("  Invalid JSON syntax", err=True)
            for detail in error.details:
                line = detail.get("line", "?")
                column = detail.get("column", "?")
                typer.echo(f"    Line {line}, Column {column}: {detail.get('message')}", err=True)
        elif error.error_type == "validation" and error.details:
            for detail in error.details:
                typer.echo(f"  {detail.get('path', 'unknown')}: {detail.get('message')}", err=True)
        else:
            typer.echo(f"  {error.message}", err=True)
    elif isinstance(error, SpecificationError):
        typer.echo(f"  {error.message}", err=True)
    else:
        typer.echo(f"  {error}", err=True)
