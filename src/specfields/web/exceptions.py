"""Error handlers for the REST API."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from specfields.application.loader import ConfigError
from specfields.domain.exceptions import (
    FieldConfigurationError,
    FormGenerationError,
    RegistryError,
    StoreError,
)

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers with the FastAPI app."""

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": exc.message,
                "error_type": "configuration",
                "details": exc.details or None,
            },
        )

    @app.exception_handler(FieldConfigurationError)
    async def field_configuration_error_handler(
        request: Request, exc: FieldConfigurationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": exc.message,
                "error_type": "field_configuration",
                "details": exc.to_dict()["context"],
            },
        )

    @app.exception_handler(RegistryError)
    async def registry_error_handler(request: Request, exc: RegistryError) -> JSONResponse:
        logger.error(f"Registry error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=502,
            content={
                "error": exc.message,
                "error_type": "registry",
                "details": exc.to_dict()["context"],
            },
        )

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.error(f"Store error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=502,
            content={
                "error": exc.message,
                "error_type": "store",
                "details": exc.to_dict()["context"],
            },
        )

    @app.exception_handler(FormGenerationError)
    async def form_generation_error_handler(
        request: Request, exc: FormGenerationError
    ) -> JSONResponse:
        logger.error(f"Form generation error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": exc.message,
                "error_type": "form_generation",
                "details": exc.to_dict()["context"],
            },
        )
