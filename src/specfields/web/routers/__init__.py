"""API routers for the REST API."""

from specfields.web.routers.forms import router as forms_router
from specfields.web.routers.legacy import router as legacy_router

__all__ = ["forms_router", "legacy_router"]
