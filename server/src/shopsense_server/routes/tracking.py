"""Tracking routes - one per storefront action."""

from collections.abc import Callable

from fastapi import APIRouter

from shopsense.tracking.context import RequestContext
from shopsense.tracking.tracker import StorefrontTracker
from shopsense_server.database import Measurement, Store, Tracking
from shopsense_server.models import (
    AddedToCartRequest,
    CheckoutStartedRequest,
    CustomEventRequest,
    OrderRequest,
    PageViewRequest,
    ProductViewedRequest,
    RefundIssuedRequest,
    TrackingResponse,
    TrackRequest,
)

router = APIRouter(tags=["tracking"])


def _track(
    data: TrackRequest,
    store: Store,
    client: Measurement,
    settings: Tracking,
    action: Callable[[StorefrontTracker, RequestContext], None],
) -> TrackingResponse:
    """Run ``action`` for the visitor and return the fragments it queued."""
    context = data.visitor.to_request_context()
    tracker = StorefrontTracker(settings, data.storefront(), store, client=client)
    action(tracker, context)
    return TrackingResponse(script=tracker.print_js(context))


@router.post("/page-view")
def page_view(
    data: PageViewRequest, store: Store, client: Measurement, settings: Tracking
) -> TrackingResponse:
    """Pageview, plus the homepage event on the front page."""

    def action(tracker: StorefrontTracker, context: RequestContext) -> None:
        tracker.on_page_view(context)
        tracker.on_viewed_homepage(context)

    return _track(data, store, client, settings, action)


@router.post("/product-viewed")
def product_viewed(
    data: ProductViewedRequest, store: Store, client: Measurement, settings: Tracking
) -> TrackingResponse:
    return _track(
        data,
        store,
        client,
        settings,
        lambda tracker, context: tracker.on_product_viewed(context, data.product_id),
    )


@router.post("/added-to-cart")
def added_to_cart(
    data: AddedToCartRequest, store: Store, client: Measurement, settings: Tracking
) -> TrackingResponse:
    return _track(
        data,
        store,
        client,
        settings,
        lambda tracker, context: tracker.on_added_to_cart(
            context,
            data.product_id,
            quantity=data.quantity,
            variation_attrs=data.variation_attributes,
            variation_id=data.variation_id,
        ),
    )


@router.post("/checkout-started")
def checkout_started(
    data: CheckoutStartedRequest, store: Store, client: Measurement, settings: Tracking
) -> TrackingResponse:
    return _track(
        data,
        store,
        client,
        settings,
        lambda tracker, context: tracker.on_checkout_started(context, data.cart),
    )


@router.post("/order-placed")
def order_placed(
    data: OrderRequest, store: Store, client: Measurement, settings: Tracking
) -> TrackingResponse:
    """Store the visitor's identity on the order and send checkout step 4."""
    return _track(
        data,
        store,
        client,
        settings,
        lambda tracker, context: tracker.on_order_placed(context, data.order_id),
    )


@router.post("/purchase-completed")
def purchase_completed(
    data: OrderRequest, store: Store, client: Measurement, settings: Tracking
) -> TrackingResponse:
    """Send the purchase; repeated calls for the same order are ignored."""
    return _track(
        data,
        store,
        client,
        settings,
        lambda tracker, context: tracker.on_purchase_completed(context, data.order_id),
    )


@router.post("/refund-issued")
def refund_issued(
    data: RefundIssuedRequest, store: Store, client: Measurement, settings: Tracking
) -> TrackingResponse:
    return _track(
        data,
        store,
        client,
        settings,
        lambda tracker, context: tracker.on_refund_issued(
            context, data.order_id, data.refund_id, full_refund=data.full_refund
        ),
    )


@router.post("/custom-event")
def custom_event(
    data: CustomEventRequest, store: Store, client: Measurement, settings: Tracking
) -> TrackingResponse:
    return _track(
        data,
        store,
        client,
        settings,
        lambda tracker, context: tracker.on_custom_event(
            context, data.event_name, data.properties
        ),
    )
