"""REST API for specification field forms."""

from specfields.web.app import create_app

__all__ = ["create_app"]
