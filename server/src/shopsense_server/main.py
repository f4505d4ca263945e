"""Shopsense tracking service - FastAPI application."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from psycopg_pool import ConnectionPool

from shopsense.tracking.client import MeasurementClient
from shopsense_server.config import settings
from shopsense_server.routes import router
from shopsense_server.services.meta import PostgresMetaStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage server lifecycle."""
    # Initialize database pool
    app.state.pool = ConnectionPool(
        settings.database_url,
        open=False,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )
    app.state.pool.open(wait=True, timeout=10)
    if settings.create_schema:
        PostgresMetaStore(app.state.pool).ensure_schema()
    logger.info("Database pool initialized")

    tracking_settings = settings.tracking
    app.state.tracking_settings = tracking_settings
    app.state.measurement_client = MeasurementClient(
        tracking_id=tracking_settings.tracking_id,
        endpoint=tracking_settings.collect_url,
        timeout=tracking_settings.timeout,
        track_user_id=tracking_settings.track_user_id,
    )
    if not tracking_settings.is_configured:
        logger.info("Tracking is not configured; tracking calls will be no-ops")

    yield

    # Cleanup
    app.state.measurement_client.close()
    app.state.pool.close()
    logger.info("Server shutdown complete")


app = FastAPI(
    title="Shopsense Tracking Server",
    description="Storefront behavioral analytics over HTTP",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}
