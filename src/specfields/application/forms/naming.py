"""Product display names derived from specification values."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from specfields.domain.models import CategoryFieldMapping

UNKNOWN_CATEGORY = "Unknown Category"


def derive_display_name(
    category_name: str | None,
    values: Mapping[str, Any],
    mapping: CategoryFieldMapping | None = None,
    fallback: str | None = None,
) -> str:
    """Build "<category> - <detail>" for a product.

    The detail is the value of the mapping's ``name_source_field`` when that
    field is filled, else ``fallback`` (typically the brand name).

    Examples:
        >>> mapping = CategoryFieldMapping(category_id="fans", name_source_field="suitableFor")
        >>> derive_display_name("Fan Regulator", {"suitableFor": "Ceiling Fan"}, mapping)
        'Fan Regulator - Ceiling Fan'
        >>> derive_display_name("Fan Regulator", {}, mapping, fallback="Anchor")
        'Fan Regulator - Anchor'
    """
    title = category_name or UNKNOWN_CATEGORY

    detail = None
    if mapping is not None and mapping.name_source_field:
        raw = values.get(mapping.name_source_field)
        if raw is not None and str(raw).strip():
            detail = str(raw).strip()

    if detail is None:
        detail = fallback
    if not detail:
        return title
    return f"{title} - {detail}"
