"""Pytest fixtures for Shopsense tracking server tests."""

import os
from collections.abc import AsyncIterator, Iterator
from typing import Any

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from psycopg_pool import ConnectionPool

from shopsense.tracking.client import MeasurementClient
from shopsense.tracking.config import TrackingSettings
from shopsense.tracking.storage import InMemoryMetaStore
from shopsense_server.database import (
    get_measurement_client,
    get_meta_store,
    get_tracking_settings,
)
from shopsense_server.main import app
from shopsense_server.services.meta import PostgresMetaStore

_test_db_url = os.environ.get("TEST_DATABASE_URL")


@pytest.fixture
def hits() -> list[httpx.QueryParams]:
    """Collection hits received by the mock collector."""
    return []


@pytest.fixture
def measurement_client(hits: list[httpx.QueryParams]) -> Iterator[MeasurementClient]:
    """A measurement client whose collector is an in-process mock."""

    def handler(request: httpx.Request) -> httpx.Response:
        hits.append(httpx.QueryParams(request.content.decode()))
        return httpx.Response(200)

    client = MeasurementClient(
        tracking_id="UA-12345-1",
        transport=httpx.MockTransport(handler),
    )
    yield client
    client.close()


@pytest.fixture
def meta_store() -> InMemoryMetaStore:
    return InMemoryMetaStore()


@pytest.fixture
def tracking_settings() -> TrackingSettings:
    return TrackingSettings(tracking_id="UA-12345-1")


@pytest_asyncio.fixture
async def client(
    meta_store: InMemoryMetaStore,
    measurement_client: MeasurementClient,
    tracking_settings: TrackingSettings,
) -> AsyncIterator[AsyncClient]:
    """Create an async HTTP client with the store and collector overridden."""
    app.dependency_overrides[get_meta_store] = lambda: meta_store
    app.dependency_overrides[get_measurement_client] = lambda: measurement_client
    app.dependency_overrides[get_tracking_settings] = lambda: tracking_settings

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def pool() -> Iterator[ConnectionPool[Any]]:
    """Create a connection pool for integration tests."""
    if not _test_db_url:
        pytest.skip("TEST_DATABASE_URL is not set")

    pool = ConnectionPool(_test_db_url, open=False, min_size=1, max_size=5)
    pool.open(wait=True, timeout=10)

    yield pool

    pool.close()


@pytest.fixture
def pg_store(pool: ConnectionPool[Any]) -> PostgresMetaStore:
    """A Postgres meta store with an empty table."""
    store = PostgresMetaStore(pool)
    store.ensure_schema()
    with pool.connection() as conn:
        conn.execute("DELETE FROM entity_meta")
    return store


@pytest.fixture
def visitor() -> dict:
    """A signed-out visitor with an analytics cookie."""
    return {
        "ga_cookie": "GA1.2.111.222",
        "ip": "203.0.113.9",
        "user_agent": "Mozilla/5.0",
        "path": "/shop/hoodie",
    }


@pytest.fixture
def hoodie() -> dict:
    return {
        "id": "42",
        "name": "Hoodie",
        "sku": "HD-1",
        "price": "45.00",
        "brand": "Acme",
        "category_path": ["Clothing", "Hoodies"],
    }


@pytest.fixture
def order(hoodie: dict) -> dict:
    return {
        "id": "1001",
        "number": "1001",
        "total": "49.99",
        "tax_total": "4.00",
        "shipping_total": "0.99",
        "shipping_method": "Flat rate",
        "customer_ip": "203.0.113.9",
        "customer_user_agent": "Mozilla/5.0",
        "items": [{"product_id": hoodie["id"], "quantity": 1, "total": "45.00"}],
    }
