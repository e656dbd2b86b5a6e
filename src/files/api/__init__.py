"""Files domain API package."""

from files.api.routes import router as files_router

__all__ = ["files_router"]
