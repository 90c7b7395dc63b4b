"""Main FastAPI application."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.api.endpoints import router
from app.config import Settings
from app.db.database import Database
from app.services.auth import AuthService
from app.services.slugs import RandomSlugGenerator, SlugGenerator
from app.utils.logging import LogConfig, get_logger, setup_logging

logger = get_logger(__name__)


def create_app(settings: Settings | None = None, slug_generator: SlugGenerator | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Application settings (defaults to the environment)
        slug_generator: Slug source for new records (defaults to random E-XXXXX)
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(LogConfig(level=settings.log_level))
        database = Database(settings)
        await database.create_all()
        async with database.session() as session:
            await AuthService(session, settings).ensure_default_admin()

        app.state.database = database
        logger.info("Vaccination record service started")
        try:
            yield
        finally:
            await database.dispose()
            logger.info("Vaccination record service stopped")

    app = FastAPI(
        title="Vaccination Records",
        description=(
            "Administration of patient vaccination records, each published "
            "as a public certificate under a short shareable slug."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Auth", "description": "Admin login and bearer tokens."},
            {
                "name": "Patients",
                "description": "Create, list, update and delete records. Requires an admin bearer token.",
            },
            {"name": "Public", "description": "Unauthenticated certificate views keyed by slug."},
            {"name": "Health", "description": "Service health monitoring and status checks."},
        ],
    )
    app.state.settings = settings
    app.state.slug_generator = slug_generator or RandomSlugGenerator()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": "Server error"})

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = app.state.settings
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, log_level="info")
