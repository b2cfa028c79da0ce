"""FastAPI dependency injection for specification field services."""

from typing import Annotated

from fastapi import Depends, Request

from specfields.application.factory import ServiceFactory
from specfields.application.forms import FormGenerationEngine
from specfields.application.legacy import LegacyFieldAdapter
from specfields.application.registry import FieldRegistry
from specfields.application.validation import ValidationEngine


def get_service_factory(request: Request) -> ServiceFactory:
    """Get the ServiceFactory the app was created with."""
    return request.app.state.factory


async def get_registry(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> FieldRegistry:
    """Registry, loaded on first use."""
    return await factory.get_loaded_registry()


def get_form_engine(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> FormGenerationEngine:
    return factory.get_form_engine()


def get_validation_engine(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> ValidationEngine:
    return factory.get_validation_engine()


def get_legacy_adapter(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
    registry: Annotated[FieldRegistry, Depends(get_registry)],
) -> LegacyFieldAdapter:
    """Legacy adapter over a loaded registry."""
    return factory.get_legacy_adapter()


# Type aliases for cleaner endpoint signatures
ServiceFactoryDep = Annotated[ServiceFactory, Depends(get_service_factory)]
RegistryDep = Annotated[FieldRegistry, Depends(get_registry)]
FormEngineDep = Annotated[FormGenerationEngine, Depends(get_form_engine)]
ValidationEngineDep = Annotated[ValidationEngine, Depends(get_validation_engine)]
LegacyAdapterDep = Annotated[LegacyFieldAdapter, Depends(get_legacy_adapter)]
