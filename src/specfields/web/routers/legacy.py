"""Endpoints serving the legacy field-definition shape."""

from fastapi import APIRouter, HTTPException

from specfields.application.legacy import LegacyCategoryFieldMapping
from specfields.web.dependencies import LegacyAdapterDep, RegistryDep
from specfields.web.schemas.requests import LegacyFormDataRequest
from specfields.web.schemas.responses import LegacyValidationSchema, MigratedValuesSchema

router = APIRouter(prefix="/legacy", tags=["legacy"])


@router.get(
    "/categories/{category_id}",
    response_model=LegacyCategoryFieldMapping,
    response_model_exclude_none=True,
)
async def get_category_mapping(
    category_id: str,
    registry: RegistryDep,
    adapter: LegacyAdapterDep,
) -> LegacyCategoryFieldMapping:
    """Required and optional legacy field definitions of a category.

    Raises:
        HTTPException: 404 if the category has no fields.
    """
    if not registry.get_fields_for_category(category_id):
        raise HTTPException(
            status_code=404,
            detail={
                "error": f"Category not found: {category_id}",
                "error_type": "not_found",
            },
        )
    return adapter.get_legacy_category_field_mapping(category_id)


@router.post("/validate", response_model=LegacyValidationSchema)
async def validate_legacy_data(
    request: LegacyFormDataRequest,
    adapter: LegacyAdapterDep,
) -> LegacyValidationSchema:
    """Validate legacy form data, reporting the first error per field."""
    is_valid, errors = adapter.validate_form_data(request.values, request.category_id)
    return LegacyValidationSchema(is_valid=is_valid, errors=errors)


@router.post("/migrate", response_model=MigratedValuesSchema)
async def migrate_legacy_data(
    request: LegacyFormDataRequest,
    adapter: LegacyAdapterDep,
) -> MigratedValuesSchema:
    """Coerce legacy form values to the category's field types."""
    return MigratedValuesSchema(
        values=adapter.migrate_form_data(request.values, request.category_id)
    )
