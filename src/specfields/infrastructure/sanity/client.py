"""FieldStore backed by the Sanity HTTP API.

Reads use the GROQ query endpoint (``GET /data/query/{dataset}``); writes
use the mutate endpoint (``POST /data/mutate/{dataset}``) with
``returnDocuments=true`` so the stored document comes back in one round
trip.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError as PydanticValidationError

from specfields.application.settings import SanitySettings
from specfields.domain.exceptions import StoreError
from specfields.domain.models import CategoryFieldMapping, FieldConfig, FieldGroup

from .documents import (
    ALL_FIELDS_QUERY,
    CATEGORY_FIELDS_QUERY,
    CATEGORY_MAPPINGS_QUERY,
    FIELD_GROUPS_QUERY,
    field_from_document,
    field_to_document,
    group_from_document,
    mapping_from_document,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


class SanityFieldStore:
    """FieldStore talking to a Sanity project over HTTPS.

    Attributes:
        settings: Project, dataset, API version and token.

    Example:
        >>> settings = SanitySettings(project_id="abc123", dataset="production")
        >>> async with SanityFieldStore(settings) as store:
        ...     fields = await store.fetch_fields_for_category("switches")
    """

    def __init__(
        self,
        settings: SanitySettings,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            settings: Connection settings.
            client: Shared HTTP client. When omitted the store creates one
                and closes it in ``aclose``.
        """
        if not settings.project_id:
            raise ValueError("Sanity project_id must be configured")
        self.settings = settings
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(
            timeout=settings.timeout
        )

    async def __aenter__(self) -> "SanityFieldStore":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @property
    def query_url(self) -> str:
        return f"{self.settings.base_url}/data/query/{self.settings.dataset}"

    @property
    def mutate_url(self) -> str:
        # Mutations always go to the live API, never the CDN
        live = self.settings.model_copy(update={"use_cdn": False})
        return f"{live.base_url}/data/mutate/{self.settings.dataset}"

    def _headers(self) -> dict[str, str]:
        if self.settings.token:
            return {"Authorization": f"Bearer {self.settings.token}"}
        return {}

    # Reads

    async def fetch_all_fields(self) -> list[FieldConfig]:
        return self._convert(await self._query(ALL_FIELDS_QUERY), field_from_document)

    async def fetch_fields_for_category(self, category_id: str) -> list[FieldConfig]:
        documents = await self._query(CATEGORY_FIELDS_QUERY, {"categoryId": category_id})
        return self._convert(documents, field_from_document)

    async def fetch_category_mappings(self) -> list[CategoryFieldMapping]:
        return self._convert(await self._query(CATEGORY_MAPPINGS_QUERY), mapping_from_document)

    async def fetch_field_groups(self) -> list[FieldGroup]:
        return self._convert(await self._query(FIELD_GROUPS_QUERY), group_from_document)

    # Writes

    async def create_field(self, config: Mapping[str, Any]) -> FieldConfig:
        document = field_to_document(config)
        created = await self._mutate({"create": document})
        return self._convert_one(created, field_from_document)

    async def update_field(
        self, field_id: str, updates: Mapping[str, Any]
    ) -> FieldConfig:
        patch = {
            "id": field_id,
            "set": field_to_document(updates, partial=True),
            "inc": {"version": 1},
        }
        updated = await self._mutate({"patch": patch})
        return self._convert_one(updated, field_from_document)

    async def delete_field(self, field_id: str) -> None:
        await self._mutate({"delete": {"id": field_id}})

    # HTTP plumbing

    async def _query(
        self, groq: str, params: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        query_params = {"query": groq}
        for name, value in (params or {}).items():
            query_params[f"${name}"] = json.dumps(value)

        payload = await self._send("GET", self.query_url, params=query_params)
        result = payload.get("result")
        if result is None:
            return []
        if not isinstance(result, list):
            raise StoreError("Unexpected query result shape", context={"result": result})
        return result

    async def _mutate(self, mutation: dict[str, Any]) -> dict[str, Any] | None:
        payload = await self._send(
            "POST",
            self.mutate_url,
            params={"returnDocuments": "true"},
            json={"mutations": [mutation]},
        )
        results = payload.get("results") or []
        if not results:
            return None
        return results[0].get("document")

    async def _send(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._client.request(
                method, url, headers=self._headers(), **kwargs
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"Sanity request failed with status {status}: {e.response.text}")
            raise StoreError(
                f"Sanity API returned status {status}",
                status_code=status,
                context={"url": str(e.request.url)},
            ) from e
        except httpx.TimeoutException as e:
            logger.error(f"Timeout contacting Sanity at {url}")
            raise StoreError(f"Timeout contacting Sanity: {e}") from e
        except httpx.RequestError as e:
            logger.error(f"Request error contacting Sanity: {e}")
            raise StoreError(f"Could not reach Sanity: {e}") from e
        except ValueError as e:
            raise StoreError(f"Sanity returned invalid JSON: {e}") from e

    def _convert(
        self,
        documents: list[dict[str, Any]],
        converter: Callable[[Mapping[str, Any]], RecordT],
    ) -> list[RecordT]:
        return [self._convert_one(document, converter) for document in documents]

    def _convert_one(
        self,
        document: Mapping[str, Any] | None,
        converter: Callable[[Mapping[str, Any]], RecordT],
    ) -> RecordT:
        if document is None:
            raise StoreError("Sanity mutation returned no document")
        try:
            return converter(document)
        except (PydanticValidationError, KeyError) as e:
            raise StoreError(
                f"Malformed Sanity document {document.get('_id')}: {e}"
            ) from e
