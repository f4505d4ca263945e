"""Request and response models for the tracking service."""

from typing import Any

from pydantic import BaseModel, Field

from shopsense.tracking.context import GA_COOKIE_NAME, PageKind, RequestContext
from shopsense.tracking.storefront import (
    Account,
    CartItem,
    InMemoryStorefront,
    Order,
    Product,
    Refund,
)

__all__ = [
    "VisitorContext",
    "TrackRequest",
    "PageViewRequest",
    "ProductViewedRequest",
    "AddedToCartRequest",
    "CheckoutStartedRequest",
    "OrderRequest",
    "RefundIssuedRequest",
    "CustomEventRequest",
    "TrackingResponse",
    "OrderIdentity",
    "TrackedStatus",
]


# =============================================================================
# API Input Models
# =============================================================================


class VisitorContext(BaseModel):
    """The storefront request a tracking call is made on behalf of."""

    ga_cookie: str | None = None
    account_id: str | None = None
    ip: str | None = None
    user_agent: str | None = None
    is_admin: bool = False
    is_ajax: bool = False
    referer: str | None = None
    path: str | None = None
    page: PageKind | None = None

    def to_request_context(self) -> RequestContext:
        cookies = {GA_COOKIE_NAME: self.ga_cookie} if self.ga_cookie else {}
        return RequestContext(
            cookies=cookies,
            user_id=self.account_id,
            ip=self.ip,
            user_agent=self.user_agent,
            is_admin=self.is_admin,
            is_ajax=self.is_ajax,
            referer=self.referer,
            path=self.path,
            page=self.page,
        )


class TrackRequest(BaseModel):
    """
    Base body of every tracking call.

    The service keeps no catalogue: the caller sends snapshots of the
    products, orders, refunds and accounts the call refers to.
    """

    visitor: VisitorContext = Field(default_factory=VisitorContext)
    products: list[Product] = Field(default_factory=list)
    orders: list[Order] = Field(default_factory=list)
    refunds: list[Refund] = Field(default_factory=list)
    accounts: list[Account] = Field(default_factory=list)

    def storefront(self) -> InMemoryStorefront:
        return InMemoryStorefront(
            products=self.products,
            orders=self.orders,
            refunds=self.refunds,
            accounts=self.accounts,
        )


class PageViewRequest(TrackRequest):
    """Input for POST /track/page-view."""


class ProductViewedRequest(TrackRequest):
    """Input for POST /track/product-viewed."""

    product_id: str


class AddedToCartRequest(TrackRequest):
    """Input for POST /track/added-to-cart."""

    product_id: str
    quantity: int = Field(1, ge=1)
    variation_id: str | None = None
    variation_attributes: dict[str, str] = Field(default_factory=dict)


class CheckoutStartedRequest(TrackRequest):
    """Input for POST /track/checkout-started."""

    cart: list[CartItem] = Field(default_factory=list)


class OrderRequest(TrackRequest):
    """Input for POST /track/order-placed and /track/purchase-completed."""

    order_id: str


class RefundIssuedRequest(TrackRequest):
    """Input for POST /track/refund-issued."""

    order_id: str
    refund_id: str
    full_refund: bool = False


class CustomEventRequest(TrackRequest):
    """Input for POST /track/custom-event."""

    event_name: str
    properties: dict[str, Any] | None = None


# =============================================================================
# API Output Models
# =============================================================================


class TrackingResponse(BaseModel):
    """Result of a tracking call, with the client-side fragments to print."""

    status: str = "ok"
    script: str = ""


class OrderIdentity(BaseModel):
    order_id: str
    cid: str


class TrackedStatus(BaseModel):
    entity_id: str
    tracked: bool
