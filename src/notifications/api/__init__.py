"""Mail API package."""

from notifications.api.routes import router as mail_router

__all__ = ["mail_router"]
