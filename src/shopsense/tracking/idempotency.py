"""At-most-once delivery for monetary events.

A purchase or refund is marked as tracked once its delivery has been
attempted, and never sent again for the same order or refund.

The check and the mark are two separate store operations. Two requests
handling the same entity at the same moment can both pass the check; the
store is not assumed to support an atomic compare-and-set, so that window
is accepted rather than papered over.
"""

from shopsense.tracking.storage import TRACKED_META_KEY, MetaStore

TRACKED = "yes"


class DeliveryTracker:
    """Reads and writes the tracked marker of orders and refunds."""

    def __init__(self, meta_store: MetaStore) -> None:
        self.meta_store = meta_store

    def is_tracked(self, entity_id: str) -> bool:
        return self.meta_store.get_meta("order", str(entity_id), TRACKED_META_KEY) == TRACKED

    def mark_tracked(self, entity_id: str) -> None:
        self.meta_store.update_meta("order", str(entity_id), TRACKED_META_KEY, TRACKED)
