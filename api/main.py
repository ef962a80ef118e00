"""
FastAPI main application for the Bookstore API.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.config import APIConfig, config as default_config
from api.errors import register_exception_handlers
from api.models import HealthResponse
from api.routes import router as books_router
from storage.database import MongoDBManager
from storage.repository import BookRepository
from utilities.logger import setup_logging

# Setup logging
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    config: APIConfig = app.state.config
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.log_file,
        debug=config.debug
    )
    logger.info("Starting Bookstore API", environment=config.environment)

    db_manager = MongoDBManager(
        connection_url=config.mongodb_url,
        database_name=config.mongodb_database,
        collection_name=config.mongodb_collection
    )
    try:
        await db_manager.connect()
    except Exception as e:
        # Serve anyway; /health reports the database as unhealthy until it answers
        logger.error("Failed to connect to database", error=str(e))

    app.state.db_manager = db_manager
    app.state.repository = BookRepository(db_manager.collection)

    yield

    logger.info("Shutting down Bookstore API")
    await db_manager.disconnect()


def create_app(config: Optional[APIConfig] = None) -> FastAPI:
    """Build the application with its routes, middleware and error handlers."""
    config = config or default_config

    app = FastAPI(
        title=config.api_title,
        description=config.api_description,
        version=config.api_version,
        lifespan=lifespan
    )
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=config.cors_allow_credentials,
        allow_methods=config.cors_allow_methods,
        allow_headers=config.cors_allow_headers,
    )

    register_exception_handlers(app)
    app.include_router(books_router)

    @app.get("/", tags=["Root"])
    async def root():
        """Welcome message."""
        return {"message": "Welcome to the Bookstore API"}

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint."""
        db_manager: Optional[MongoDBManager] = getattr(request.app.state, "db_manager", None)
        db_status = "disconnected"
        if db_manager is not None:
            db_status = "healthy" if await db_manager.ping() else "unhealthy"

        return HealthResponse(
            status="healthy" if db_status == "healthy" else "degraded",
            timestamp=datetime.now(timezone.utc),
            version=config.api_version,
            database_status=db_status
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=default_config.host,
        port=default_config.port,
        reload=default_config.debug,
        log_level=default_config.log_level.lower()
    )
