"""API routes module."""
from app.api.routes.enrollments import router as enrollments_router
from app.api.routes.library import router as library_router
from app.api.routes.templates import router as templates_router
from app.api.routes.tracking import router as tracking_router

__all__ = [
    "enrollments_router",
    "library_router",
    "templates_router",
    "tracking_router",
]
