"""Internal routes for diagnostics."""

from fastapi import APIRouter, HTTPException

from shopsense.tracking.idempotency import DeliveryTracker
from shopsense.tracking.storage import IDENTITY_META_KEY
from shopsense_server.database import Store
from shopsense_server.models import OrderIdentity, TrackedStatus

router = APIRouter(tags=["internal"])


@router.get("/orders/{order_id}/identity")
def get_order_identity(order_id: str, store: Store) -> OrderIdentity:
    """Get the client ID stored when the order was placed."""
    cid = store.get_meta("order", order_id, IDENTITY_META_KEY)
    if not cid:
        raise HTTPException(404, "No identity stored for order")
    return OrderIdentity(order_id=order_id, cid=cid)


@router.get("/entities/{entity_id}/tracked")
def get_tracked_status(entity_id: str, store: Store) -> TrackedStatus:
    """Whether the purchase or refund with this ID has been reported."""
    return TrackedStatus(entity_id=entity_id, tracked=DeliveryTracker(store).is_tracked(entity_id))
