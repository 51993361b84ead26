"""Storyboard Maker API

Application factory. Everything a request handler needs (settings, database
session factory, AI services, rate limiter) is built here and hung on
app.state; handlers reach it through the dependencies in storyboard.api.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storyboard.api.errors import LoggingMiddleware, setup_exception_handlers
from storyboard.api.routes import auth, health, projects, scenes
from storyboard.core.config import Settings, settings as default_settings
from storyboard.core.logging import get_logger, setup_logging
from storyboard.core.rate_limit import RateLimits, create_limiter
from storyboard.db import Base, make_engine, make_session_factory
from storyboard.services.image_generation import ImageGenerator, create_image_generator
from storyboard.services.script_generation import ScriptGenerator, create_script_generator

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    script_generator: Optional[ScriptGenerator] = None,
    image_generator: Optional[ImageGenerator] = None,
    create_tables: bool = True,
) -> FastAPI:
    settings = settings or default_settings

    engine = make_engine(settings.SQLALCHEMY_DATABASE_URI)
    if create_tables:
        # for dev; production databases are created with create_db.py
        Base.metadata.create_all(bind=engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION}")
        logger.info(f"Script generator: {type(app.state.script_generator).__name__}")
        logger.info(f"Image generator: {type(app.state.image_generator).__name__}")
        yield
        engine.dispose()
        logger.info("Shutdown complete")

    app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, lifespan=lifespan)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    app.state.script_generator = script_generator or create_script_generator(settings)
    app.state.image_generator = image_generator or create_image_generator(settings)
    app.state.limiter = create_limiter(settings)
    limits = RateLimits(app.state.limiter, settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_middleware(LoggingMiddleware)
    setup_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(auth.router, prefix=settings.API_PREFIX)
    app.include_router(projects.create_router(limits), prefix=settings.API_PREFIX)
    app.include_router(scenes.create_router(limits), prefix=settings.API_PREFIX)

    @app.get("/", tags=["root"])
    def root():
        return {
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "status": "Script-to-Storyboard API Running",
        }

    return app


def run():
    import uvicorn

    setup_logging()
    uvicorn.run(
        "storyboard.main:create_app",
        factory=True,
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_level=default_settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
