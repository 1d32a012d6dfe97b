"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.identity.prefix import PrefixAddressValidator
from src.adapters.repository.postgres import PostgresKeyValueStore, run_migrations
from src.adapters.storage.memory import MemoryStore
from src.adapters.validators.static import StaticValidatorDirectory
from src.api.error_handlers import register_error_handlers
from src.api.v1 import router as v1_router
from src.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Name Registry API v1 - Register, transfer and look up names",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the key-value store (in memory, or PostgreSQL with migrations)
    - Builds the address validator and validator directory
    - Closes the connection pool on shutdown
    """
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    logger.info("Starting application...")

    pool: ConnectionPool | None = None
    if settings.storage_backend == "postgres":
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )

        logger.info("Running database migrations...")
        run_migrations(pool)
        app.state.store = PostgresKeyValueStore(pool)
    else:
        logger.info("Using in-memory store")
        app.state.store = MemoryStore()

    app.state.pool = pool
    app.state.identity_validator = PrefixAddressValidator(settings.address_prefix)
    if settings.validators_file:
        app.state.validator_directory = StaticValidatorDirectory.from_file(settings.validators_file)
    else:
        app.state.validator_directory = StaticValidatorDirectory()

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="name-registry",
    description="Name Registry API - Fee-gated registration and transfer of unique names",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

register_error_handlers(app)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with storage validation.

    Returns 200 OK if application and database (when used) are healthy.
    Raises exception if database connection fails.
    """
    pool = request.app.state.pool
    if pool is not None:
        with pool.connection() as conn:
            conn.execute("SELECT 1")

    return {"status": "healthy"}
