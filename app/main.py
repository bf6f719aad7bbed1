"""Main FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.config.settings import get_settings
from app.core.error_handlers import domain_error_handler, request_validation_handler
from app.core.exceptions import DomainError
from app.core.logging import configure_logging, get_logger
from app.db.database import close_engine, init_db
from app.middleware import RequestIDMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    configure_logging()
    await init_db()
    logger.info("app_started", app=get_settings().app_name)
    yield
    await close_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Coach-authored training programs resolved into each player's daily plan",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "app": settings.app_name}

    from app.api.routes import (
        enrollments_router,
        library_router,
        templates_router,
        tracking_router,
    )

    app.include_router(templates_router, prefix="/templates", tags=["Templates"])
    app.include_router(library_router, prefix="/library", tags=["Library"])
    app.include_router(enrollments_router, prefix="/enrollments", tags=["Enrollments"])
    app.include_router(tracking_router, prefix="/tracking", tags=["Tracking"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
