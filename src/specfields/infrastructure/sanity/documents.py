"""GROQ queries and document conversion for the Sanity content lake.

Sanity stores references as ``{"_ref": id, "_type": "reference"}``
objects. The queries below project references to plain ids where possible,
and the converters accept either form.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import TypeAdapter

from specfields.domain.models import (
    CategoryFieldMapping,
    FieldConfig,
    FieldGroup,
    normalize_update_keys,
)

FIELD_DOCUMENT_TYPE = "dynamicSpecificationField"
GROUP_DOCUMENT_TYPE = "fieldGroup"
MAPPING_DOCUMENT_TYPE = "enhancedCategoryFieldMapping"

_json_adapter: TypeAdapter[dict[str, Any]] = TypeAdapter(dict[str, Any])

_FIELD_PROJECTION = """{
  ...,
  "categories": categories[]._ref,
  "groupId": groupId._ref
}"""

ALL_FIELDS_QUERY = (
    f'*[_type == "{FIELD_DOCUMENT_TYPE}" && isActive == true] '
    f"| order(displayOrder asc, key asc) {_FIELD_PROJECTION}"
)

CATEGORY_FIELDS_QUERY = (
    f'*[_type == "{FIELD_DOCUMENT_TYPE}" && isActive == true '
    f"&& references($categoryId)] "
    f"| order(displayOrder asc, key asc) {_FIELD_PROJECTION}"
)

FIELD_GROUPS_QUERY = (
    f'*[_type == "{GROUP_DOCUMENT_TYPE}" && isActive == true] '
    "| order(displayOrder asc, name asc)"
)

CATEGORY_MAPPINGS_QUERY = f"""*[_type == "{MAPPING_DOCUMENT_TYPE}" && isActive == true] | order(category->name asc) {{
  _id,
  categoryType,
  nameSourceField,
  isActive,
  "category": category->{{_id, name}},
  "dynamicFields": dynamicFields[]->key,
  "requiredDynamicFields": requiredDynamicFields[]->key,
  "fieldGroups": fieldGroups[].group._ref
}}"""


def _ref_id(value: Any) -> str | None:
    if isinstance(value, Mapping):
        return value.get("_ref") or value.get("_id")
    return value


def _reference(document_id: str) -> dict[str, str]:
    return {"_ref": document_id, "_type": "reference"}


def field_from_document(document: Mapping[str, Any]) -> FieldConfig:
    """Convert a dynamicSpecificationField document to a FieldConfig.

    Raises:
        pydantic.ValidationError: If the document does not form a valid field.
    """
    data = dict(document)
    data["id"] = data.pop("_id")
    data.setdefault("createdAt", data.pop("_createdAt", None))
    data.setdefault("updatedAt", data.pop("_updatedAt", None))
    data["categories"] = [
        ref for ref in (_ref_id(c) for c in data.get("categories") or []) if ref
    ]
    data["groupId"] = _ref_id(data.get("groupId"))
    if not data.get("version"):
        data["version"] = 1
    return FieldConfig.model_validate(data)


def field_to_document(values: Mapping[str, Any], partial: bool = False) -> dict[str, Any]:
    """Convert field attributes to a Sanity document body.

    Args:
        values: Attributes in snake_case or camelCase.
        partial: Produce a patch body (no ``_type``, no defaults).
    """
    data = {k: v for k, v in normalize_update_keys(FieldConfig, values).items() if v is not None}
    for system_key in ("id", "createdAt", "updatedAt", "version"):
        data.pop(system_key, None)

    if "categories" in data:
        data["categories"] = [_reference(c) for c in data["categories"]]
    if "groupId" in data:
        data["groupId"] = _reference(data["groupId"])
    data = _json_adapter.dump_python(data, mode="json")

    if not partial:
        data["_type"] = FIELD_DOCUMENT_TYPE
        data.setdefault("isActive", True)
        data["version"] = 1
    return data


def group_from_document(document: Mapping[str, Any]) -> FieldGroup:
    data = dict(document)
    data["id"] = data.pop("_id")
    return FieldGroup.model_validate(data)


def mapping_from_document(document: Mapping[str, Any]) -> CategoryFieldMapping:
    """Convert an enhancedCategoryFieldMapping document.

    Keys listed in ``requiredDynamicFields`` become required keys; the
    remaining ``dynamicFields`` keys become optional keys.
    """
    category = document.get("category") or {}
    required = [k for k in document.get("requiredDynamicFields") or [] if k]
    optional = [
        k for k in document.get("dynamicFields") or [] if k and k not in required
    ]
    data: dict[str, Any] = {
        "categoryId": category.get("_id") or _ref_id(category) or document.get("_id"),
        "categoryName": category.get("name") or "",
        "requiredFieldKeys": required,
        "optionalFieldKeys": optional,
        "fieldGroups": [g for g in (_ref_id(g) for g in document.get("fieldGroups") or []) if g],
        "nameSourceField": document.get("nameSourceField"),
        "isActive": document.get("isActive", True),
    }
    if document.get("categoryType"):
        data["categoryType"] = document["categoryType"]
    return CategoryFieldMapping.model_validate(data)
