"""Database pool and request dependencies."""

from typing import Annotated, Any

from fastapi import Depends, Request
from psycopg_pool import ConnectionPool

from shopsense.tracking.client import MeasurementClient
from shopsense.tracking.config import TrackingSettings
from shopsense.tracking.storage import MetaStore
from shopsense_server.services.meta import PostgresMetaStore


def get_pool(request: Request) -> ConnectionPool[Any]:
    """Get the connection pool from app state."""
    return request.app.state.pool


Pool = Annotated[ConnectionPool[Any], Depends(get_pool)]


def get_meta_store(pool: Pool) -> MetaStore:
    return PostgresMetaStore(pool)


def get_measurement_client(request: Request) -> MeasurementClient:
    """Get the app-wide measurement client."""
    return request.app.state.measurement_client


def get_tracking_settings(request: Request) -> TrackingSettings:
    return request.app.state.tracking_settings


Store = Annotated[MetaStore, Depends(get_meta_store)]
Measurement = Annotated[MeasurementClient, Depends(get_measurement_client)]
Tracking = Annotated[TrackingSettings, Depends(get_tracking_settings)]
