"""CLI command implementations for the specfields application.

This package contains the commands of the specfields CLI:
- validate: Validate field values for a category
- schema: Print a generated form schema
- migrate: Coerce legacy form values
- classify: Show a category's inferred type
"""

from specfields.cli.commands.legacy import classify_command, migrate_command
from specfields.cli.commands.schema import schema_command
from specfields.cli.commands.validate import validate_command

__all__ = ["classify_command", "migrate_command", "schema_command", "validate_command"]
