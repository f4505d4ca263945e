"""Shared fixtures for tracking engine tests."""

from collections.abc import Iterator

import httpx
import pytest

from shopsense.tracking import (
    Account,
    InMemoryMetaStore,
    InMemoryStorefront,
    MeasurementClient,
    Order,
    OrderItem,
    Product,
    Refund,
    RequestContext,
    StorefrontTracker,
    TrackingSettings,
)

TRACKING_ID = "UA-12345-1"


@pytest.fixture
def settings() -> TrackingSettings:
    return TrackingSettings(tracking_id=TRACKING_ID, excluded_roles=["wholesale"])


@pytest.fixture
def hoodie() -> Product:
    return Product(
        id=42,
        name="Hoodie",
        sku="HD-1",
        price="45.00",
        brand="Acme",
        category_path=["Clothing", "Hoodies"],
    )


@pytest.fixture
def tee() -> Product:
    """A variable product."""
    return Product(
        id=50,
        name="Tee",
        price="20",
        type="variable",
        category_path=["Clothing"],
        default_attributes={"size": "M"},
    )


@pytest.fixture
def tee_large() -> Product:
    """A variation of the tee, without its own SKU."""
    return Product(
        id=51,
        name="Tee - L",
        price="22.50",
        type="variation",
        parent_id=50,
        variation_attributes={"size": "L", "colour": "Blue"},
    )


@pytest.fixture
def order() -> Order:
    return Order(
        id=1001,
        number="1001",
        total="49.99",
        tax_total="4.00",
        shipping_total="0.99",
        coupons=["SPRING"],
        shipping_method="Flat rate",
        payment_method="card",
        customer_id=7,
        customer_ip="203.0.113.9",
        customer_user_agent="Mozilla/5.0 (order)",
        items=[OrderItem(product_id=42, quantity=1, total="45.00")],
    )


@pytest.fixture
def storefront(hoodie: Product, tee: Product, tee_large: Product, order: Order) -> InMemoryStorefront:
    return InMemoryStorefront(
        products=[hoodie, tee, tee_large],
        orders=[order],
        refunds=[Refund(id=2001, order_id=1001, amount="10.005")],
        accounts=[
            Account(id=7, login="jane", roles=["customer"]),
            Account(id=1, login="admin", roles=["administrator"], capabilities={"manage_store"}),
            Account(id=9, login="bulk", roles=["wholesale"]),
        ],
    )


@pytest.fixture
def meta_store() -> InMemoryMetaStore:
    return InMemoryMetaStore()


@pytest.fixture
def hits() -> list[httpx.QueryParams]:
    """Collection hits received by the mock collector."""
    return []


@pytest.fixture
def measurement_client(settings: TrackingSettings, hits: list) -> Iterator[MeasurementClient]:
    def handler(request: httpx.Request) -> httpx.Response:
        hits.append(httpx.QueryParams(request.content.decode()))
        return httpx.Response(200)

    client = MeasurementClient(
        tracking_id=settings.tracking_id,
        track_user_id=settings.track_user_id,
        transport=httpx.MockTransport(handler),
    )
    yield client
    client.close()


@pytest.fixture
def tracker(
    settings: TrackingSettings,
    storefront: InMemoryStorefront,
    meta_store: InMemoryMetaStore,
    measurement_client: MeasurementClient,
) -> StorefrontTracker:
    return StorefrontTracker(settings, storefront, meta_store, client=measurement_client)


@pytest.fixture
def context() -> RequestContext:
    """A guest on the storefront with an analytics cookie."""
    return RequestContext(
        cookies={"_ga": "GA1.2.111.222"},
        ip="198.51.100.4",
        user_agent="Mozilla/5.0 (visitor)",
        path="/shop/hoodie",
    )
