"""Form schema, form state and validation endpoints."""

from fastapi import APIRouter

from specfields.application.forms import (
    FormGenerationEngine,
    FormGenerationOptions,
    FormSchema,
)
from specfields.web.dependencies import FormEngineDep
from specfields.web.schemas.requests import (
    CategoryFormRequest,
    FieldChangeRequest,
    FormValidateRequest,
    InitialStateRequest,
)
from specfields.web.schemas.responses import FormStateSchema, FormValidationSchema

router = APIRouter(prefix="/forms", tags=["forms"])


async def _schema_for(engine: FormGenerationEngine, request: CategoryFormRequest) -> FormSchema:
    return await engine.generate_form_schema(
        FormGenerationOptions(
            category_id=request.category_id,
            include_optional_fields=request.include_optional_fields,
            exclude_fields=request.exclude_fields,
        )
    )


@router.post("/schema", response_model=FormSchema, response_model_exclude_none=True)
async def generate_schema(
    options: FormGenerationOptions,
    engine: FormEngineDep,
) -> FormSchema:
    """Generate the form schema for a category.

    The response uses the store's camelCase field names.
    """
    return await engine.generate_form_schema(options)


@router.post("/initial-state", response_model=FormStateSchema)
async def initial_state(
    request: InitialStateRequest,
    engine: FormEngineDep,
) -> FormStateSchema:
    """Create the initial state of a category form."""
    schema = await _schema_for(engine, request)
    state = engine.create_initial_form_state(schema.fields, request.initial_values)
    return FormStateSchema.from_state(state)


@router.post("/change", response_model=FormStateSchema)
async def field_change(
    request: FieldChangeRequest,
    engine: FormEngineDep,
) -> FormStateSchema:
    """Apply one field change to a form state and re-validate that field."""
    schema = await _schema_for(engine, request)
    state = engine.handle_field_change(
        request.state.to_state(),
        request.key,
        request.value,
        schema.fields,
        request.category_id,
    )
    return FormStateSchema.from_state(state)


@router.post("/validate", response_model=FormValidationSchema)
async def validate_form(
    request: FormValidateRequest,
    engine: FormEngineDep,
) -> FormValidationSchema:
    """Validate submitted values against a category form."""
    schema = await _schema_for(engine, request)
    result = engine.validation_engine.validate_form(
        schema.fields, request.values, request.category_id
    )
    return FormValidationSchema.from_result(result)
