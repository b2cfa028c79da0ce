"""Runtime settings for the field registry and its store.

Settings are a pydantic model so they can be loaded from a JSON file with
the same error reporting as field catalogs.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from specfields.application.loader import load_model, validate_data

# Baseline cache lifetime for fetched field data (5 minutes)
DEFAULT_CACHE_TTL_SECONDS = 300.0

# Longest conditional chain (A depends on B depends on C ...) accepted at
# registration
DEFAULT_MAX_CONDITIONAL_DEPTH = 5

DEFAULT_MAX_FIELDS_PER_CATEGORY = 100


def _token_from_env() -> str | None:
    return os.environ.get("SANITY_API_TOKEN")


class SanitySettings(BaseModel):
    """Connection settings for a Sanity content lake.

    Attributes:
        project_id: Sanity project id.
        dataset: Dataset name (default "production").
        api_version: Dated API version string.
        token: API token; falls back to the SANITY_API_TOKEN environment
            variable.
        use_cdn: Query the CDN host instead of the live API.
        timeout: HTTP timeout in seconds.
    """

    model_config = ConfigDict(extra="forbid")

    project_id: str = ""
    dataset: str = "production"
    api_version: str = "2024-01-01"
    token: str | None = Field(default_factory=_token_from_env)
    use_cdn: bool = False
    timeout: float = Field(default=10.0, gt=0)

    @property
    def base_url(self) -> str:
        host = "apicdn.sanity.io" if self.use_cdn else "api.sanity.io"
        return f"https://{self.project_id}.{host}/v{self.api_version}"


class RegistrySettings(BaseModel):
    """Settings shared by the cache, registry and form engine.

    Attributes:
        cache_ttl_seconds: Lifetime of cached store reads and form schemas.
        enable_real_time_updates: Patch the registry from data access events.
        validate_on_load: Run structural checks when registering fields.
        max_fields_per_category: Registration limit per category.
        max_conditional_depth: Longest accepted conditional chain.
        sanity: Store connection settings.
    """

    model_config = ConfigDict(extra="forbid")

    cache_ttl_seconds: float = Field(default=DEFAULT_CACHE_TTL_SECONDS, gt=0)
    enable_real_time_updates: bool = True
    validate_on_load: bool = True
    max_fields_per_category: int = Field(default=DEFAULT_MAX_FIELDS_PER_CATEGORY, ge=1)
    max_conditional_depth: int = Field(default=DEFAULT_MAX_CONDITIONAL_DEPTH, ge=1)
    sanity: SanitySettings = Field(default_factory=SanitySettings)


def load_settings(path: Path | None = None) -> RegistrySettings:
    """Load settings from a JSON file, or return defaults when no path is given.

    Raises:
        ConfigError: If the file is missing, is not JSON or fails validation.
    """
    if path is None:
        return RegistrySettings()
    return load_model(RegistrySettings, path)


def load_settings_from_dict(data: dict[str, Any]) -> RegistrySettings:
    """Validate settings supplied as a dictionary (e.g. from an API request)."""
    return validate_data(RegistrySettings, data)
