"""
Shopsense Tracking - behavioral analytics for storefronts.

Turns storefront actions (product views, cart changes, checkouts, purchases,
refunds) into analytics events, sent from the browser or from the server,
and attributes each one to a consistent visitor identity.

Example:
    >>> from shopsense.tracking import RequestContext, StorefrontTracker, TrackingSettings
    >>> tracker = StorefrontTracker(TrackingSettings(tracking_id="UA-12345-1"), storefront, meta_store)
    >>> context = RequestContext(cookies={"_ga": "GA1.2.111.222"}, user_id="7")
    >>> tracker.on_product_viewed(context, product_id="42")
    >>> footer_js = tracker.print_js(context)
"""

from shopsense.tracking.client import MeasurementClient
from shopsense.tracking.config import EventNames, TrackingSettings
from shopsense.tracking.context import RequestContext
from shopsense.tracking.ecommerce import PayloadBuilder, compact, measurement_params, to_cents
from shopsense.tracking.email import EmailOpenTracker
from shopsense.tracking.hooks import TrackingHooks
from shopsense.tracking.idempotency import DeliveryTracker
from shopsense.tracking.identifiers import generate_uuid
from shopsense.tracking.identity import IdentityResolver, parse_ga_cookie
from shopsense.tracking.policy import CURRENT_USER, TrackingPolicy
from shopsense.tracking.queue import EventQueue
from shopsense.tracking.schema import (
    EcommercePayload,
    Event,
    EventProperties,
    HitType,
    Identity,
    ProductAction,
    ProductActionType,
    ProductFieldObject,
    ProductImpression,
    QueuedScript,
    ScriptCategory,
)
from shopsense.tracking.storage import InMemoryMetaStore, MetaStore
from shopsense.tracking.storefront import (
    Account,
    CartItem,
    InMemoryStorefront,
    Order,
    OrderItem,
    Product,
    Refund,
    Storefront,
    Subscription,
)
from shopsense.tracking.subscriptions import SubscriptionTracker
from shopsense.tracking.tracker import StorefrontTracker

__all__ = [
    # Entry points
    "StorefrontTracker",
    "SubscriptionTracker",
    "EmailOpenTracker",
    "TrackingSettings",
    "EventNames",
    "TrackingHooks",
    "RequestContext",
    # Components
    "IdentityResolver",
    "TrackingPolicy",
    "CURRENT_USER",
    "EventQueue",
    "PayloadBuilder",
    "MeasurementClient",
    "DeliveryTracker",
    "generate_uuid",
    "parse_ga_cookie",
    "compact",
    "measurement_params",
    "to_cents",
    # Type aliases
    "ScriptCategory",
    "ProductActionType",
    "HitType",
    "EcommercePayload",
    # Models
    "Identity",
    "EventProperties",
    "Event",
    "ProductFieldObject",
    "ProductImpression",
    "ProductAction",
    "QueuedScript",
    # Storefront
    "Storefront",
    "InMemoryStorefront",
    "MetaStore",
    "InMemoryMetaStore",
    "Product",
    "CartItem",
    "OrderItem",
    "Order",
    "Refund",
    "Account",
    "Subscription",
]

__version__ = "0.1.0"
