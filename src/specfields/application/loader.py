"""JSON file loading with comprehensive error handling.

Settings files and field catalogs are both plain JSON documents validated by
pydantic models. This module turns file system errors, JSON syntax errors
and pydantic validation errors into a single ``ConfigError`` with clear,
actionable details.
"""

import json
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


class ConfigError(Exception):
    """Exception raised for configuration and catalog loading errors.

    Attributes:
        message: The primary error message
        error_type: Category of error (file_not_found, json_parse, validation)
        path: Path to the file (if applicable)
        details: Additional error details (line/column for JSON, validation errors, etc.)
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def format_json_path(loc: tuple[str | int, ...]) -> str:
    """Format a pydantic location tuple as a JSON path string.

    Examples:
        >>> format_json_path(("fields", 0, "key"))
        'fields[0].key'
    """
    parts: list[str] = []
    for segment in loc:
        if isinstance(segment, int):
            if parts:
                parts[-1] = f"{parts[-1]}[{segment}]"
            else:
                parts.append(f"[{segment}]")
        else:
            parts.append(str(segment))
    return ".".join(parts)


def extract_validation_errors(error: PydanticValidationError) -> list[dict[str, Any]]:
    """Flatten a pydantic ValidationError into path/message dictionaries."""
    return [
        {
            "path": format_json_path(err["loc"]),
            "message": err["msg"],
            "value": err.get("input"),
            "error_type": err["type"],
        }
        for err in error.errors()
    ]


def _format_validation_error_message(details: list[dict[str, Any]]) -> str:
    lines = ["Validation failed:"]
    for detail in details:
        lines.append(f"  - {detail['path']}: {detail['message']}")
    return "\n".join(lines)


def read_json(path: Path) -> Any:
    """Read and parse a JSON file.

    Raises:
        ConfigError: With error_type "file_not_found", "file_read_error" or
            "json_parse".
    """
    if not path.exists():
        raise ConfigError(
            message=f"File not found: {path}",
            error_type="file_not_found",
            path=path,
        )

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(
            message=f"Error reading file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        ) from e

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            message=f"Invalid JSON in {path} (line {e.lineno}, column {e.colno}): {e.msg}",
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        ) from e


def validate_data(model: type[ModelT], data: Any, path: Path | None = None) -> ModelT:
    """Validate parsed JSON data against ``model``.

    Raises:
        ConfigError: With error_type "validation" and one detail per problem.
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        details = extract_validation_errors(e)
        raise ConfigError(
            message=_format_validation_error_message(details),
            error_type="validation",
            path=path,
            details=details,
        ) from e


def load_model(model: type[ModelT], path: Path) -> ModelT:
    """Load a JSON file and validate it against ``model``."""
    return validate_data(model, read_json(path), path=path)
