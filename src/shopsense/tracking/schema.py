"""
Shopsense tracking data model.

This module defines the payloads that flow through the tracking engine:
visitor identities, event properties, Enhanced Ecommerce objects and the
client-side script fragments queued for a page render.

Events are never persisted. They are built inside the request that
triggers them and are either queued for the page (client-side) or sent to
the collection endpoint (server-side) before that request ends.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shopsense.tracking._payload import compact

# =============================================================================
# TYPE DEFINITIONS
# =============================================================================

ScriptCategory = Literal["impression", "pageview", "event"]
"""
Client-side fragment categories.

Analytics expects impressions before the pageview and the pageview before
any event, so fragments are flushed in exactly this order.
"""

SCRIPT_CATEGORY_ORDER: tuple[ScriptCategory, ...] = ("impression", "pageview", "event")

ProductActionType = Literal[
    "detail",           # Product details viewed
    "click",            # Product clicked in a list
    "add",              # Added to cart
    "remove",           # Removed from cart
    "checkout",         # Checkout step reached
    "checkout_option",  # Option chosen for a checkout step
    "purchase",         # Transaction completed
    "refund",           # Transaction refunded
]
"""Enhanced Ecommerce product actions."""

HitType = Literal["event", "pageview"]
"""Measurement hit types sent by this engine."""

Scalar = str | int | float | bool | None


# =============================================================================
# IDENTITY
# =============================================================================

class Identity(BaseModel):
    """
    Who an event is attributed to.

    Attributes:
        cid: Pseudonymous client ID, from the analytics cookie, a stored
            identity record, or a generated UUID.
        uid: The storefront's own account ID, when the visitor is signed in.
        ip: Visitor IP address, forwarded as an override on server-side hits.
        user_agent: Visitor user agent, forwarded the same way.
    """

    cid: str | None = None
    uid: str | None = None
    ip: str | None = None
    user_agent: str | None = None

    @field_validator("cid", "uid", "ip", "user_agent", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if value is None:
            return None
        if isinstance(value, int):
            value = str(value)
        if isinstance(value, str) and not value.strip():
            return None
        return value


# =============================================================================
# EVENTS
# =============================================================================

class EventProperties(BaseModel):
    """
    Event fields shared by client-side and server-side hits.

    Field names follow the analytics.js field object; snake_case names are
    accepted as well.

    Attributes:
        event_category: Required category, defaults to ``page``.
        event_action: Action; the event name is used when unset.
        event_label: Optional label.
        event_value: Optional integer value (quantities, minor currency units).
        non_interaction: Exclude the hit from bounce-rate calculation.
        hit_type: ``event`` for everything but pageviews.
        extra: Open-ended properties for custom events, sent through as-is.
    """

    model_config = ConfigDict(populate_by_name=True)

    event_category: str = Field("page", alias="eventCategory")
    event_action: str | None = Field(None, alias="eventAction")
    event_label: str | None = Field(None, alias="eventLabel")
    event_value: int | None = Field(None, alias="eventValue")
    non_interaction: bool = Field(False, alias="nonInteraction")
    hit_type: HitType = Field("event", alias="hitType")
    extra: dict[str, str] = Field(default_factory=dict)

    def to_fields(self, event_name: str) -> dict:
        """Return the analytics.js ``send`` field object for this event."""
        fields = {
            "hitType": self.hit_type,
            "eventCategory": self.event_category,
            "eventAction": self.event_action or event_name,
            "eventLabel": self.event_label,
            "eventValue": self.event_value,
            "nonInteraction": self.non_interaction,
        }
        fields.update(self.extra)
        return fields


# =============================================================================
# ENHANCED ECOMMERCE
# =============================================================================

class ProductFieldObject(BaseModel):
    """
    A product as described to analytics.

    Attributes:
        id: SKU, or the internal product ID when there is no SKU.
        name: Product title.
        brand: Brand name.
        category: Category path, root to leaf, joined with ``/``.
        variant: Variation attribute values, joined with ``, ``.
        price: Unit price as a decimal string.
        quantity: Quantity involved in the action.
        position: Position in a product list.
        coupon: Coupon code applied to the product.
    """

    id: str
    name: str | None = None
    brand: str | None = None
    category: str | None = None
    variant: str | None = None
    price: str | None = None
    quantity: int | None = None
    position: int | None = None
    coupon: str | None = None

    def to_payload(self) -> dict:
        """Serialise with empty fields omitted."""
        return compact(self.model_dump())


class ProductImpression(BaseModel):
    """
    A product seen in a list (search results, category page, cross-sells).

    Attributes:
        list: Name of the list the product appeared in.
        attributes: Default variation attributes of variable products,
            merged into the payload as custom fields.
    """

    kind: Literal["impression"] = "impression"
    id: str
    name: str | None = None
    list: str | None = None
    brand: str | None = None
    category: str | None = None
    variant: str | None = None
    price: str | None = None
    position: int | None = None
    attributes: dict[str, str] = Field(default_factory=dict)

    def to_payload(self) -> dict:
        """Serialise with empty fields omitted and attributes merged in."""
        data = self.model_dump(exclude={"kind", "attributes"})
        data.update(self.attributes)
        return compact(data)


class ProductAction(BaseModel):
    """
    An Enhanced Ecommerce action and the products it applies to.

    Attributes:
        action: The product action.
        products: Products involved, in order.
        fields: The action field object (transaction id, revenue, tax,
            shipping, coupon, list, checkout step and option).
    """

    kind: Literal["action"] = "action"
    action: ProductActionType
    products: list[ProductFieldObject] = Field(default_factory=list)
    fields: dict[str, Scalar] = Field(default_factory=dict)

    def to_payload(self) -> dict:
        """Serialise the action field object with empty fields omitted."""
        return compact(self.fields)


EcommercePayload = Annotated[ProductImpression | ProductAction, Field(discriminator="kind")]
"""Either a product impression or a product action."""


class Event(BaseModel):
    """
    A single tracking event, built and consumed within one request.

    Attributes:
        name: Configured event name.
        category: Fragment category, used when the event is queued client-side.
        properties: Event fields.
        ecommerce: Enhanced Ecommerce data sent alongside the event.
        identity: Identity the event is attributed to (server-side only).
    """

    name: str
    category: ScriptCategory = "event"
    properties: EventProperties = Field(default_factory=EventProperties)
    ecommerce: EcommercePayload | None = None
    identity: Identity | None = None

    @property
    def non_interaction(self) -> bool:
        return self.properties.non_interaction


class QueuedScript(BaseModel):
    """A client-side script fragment waiting for the page footer."""

    category: ScriptCategory
    script: str
