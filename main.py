import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import Base, engine
from app.exception_handlers import register_exception_handlers
from app.middleware.language import LanguageMiddleware
from app.routes import auth, documents, translations, user
from app.scheduler import shutdown_scheduler, start_scheduler

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Tasks to run at application startup and shutdown."""
    logger.info("Starting up the application...")
    if settings.debug:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created (if not existing).")

    start_scheduler()
    yield
    logger.info("Shutting down the application...")
    shutdown_scheduler()


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Collection CMS with role-based access and automatic locale translation",
        debug=settings.debug,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LanguageMiddleware)

    register_exception_handlers(app)

    # Translation routes share the collection prefix and must come first
    app.include_router(auth.router, prefix="/auth", tags=["Auth"])
    app.include_router(user.router, prefix="/api/v1")
    app.include_router(translations.i18n_router, prefix="/api/v1/i18n")
    app.include_router(translations.translations_router, prefix="/api/v1/collections")
    app.include_router(documents.router, prefix="/api/v1/collections")

    if settings.debug:
        logger.info(f"Running in {settings.environment} mode")
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    @app.get("/", tags=["Root"])
    async def root():
        return {"message": f"Welcome to the {settings.app_name} API"}

    @app.get("/health", tags=["Root"])
    async def health():
        return {"status": "ok", "version": settings.app_version}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.debug)
