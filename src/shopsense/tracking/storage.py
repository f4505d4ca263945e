"""Entity metadata storage.

Identity records and tracked markers are small string values attached to
orders, refunds and accounts. The engine only needs get and set; the
backing store belongs to the host application.
"""

from typing import Literal, Protocol

MetaScope = Literal["order", "account"]
"""Orders and refunds share the ``order`` scope; accounts have their own."""

IDENTITY_META_KEY = "_shopsense_identity"
TRACKED_META_KEY = "_shopsense_tracked"


class MetaStore(Protocol):
    """Key-value metadata keyed by scope, entity ID and meta key."""

    def get_meta(self, scope: MetaScope, entity_id: str, key: str) -> str | None: ...

    def update_meta(self, scope: MetaScope, entity_id: str, key: str, value: str) -> None: ...


class InMemoryMetaStore:
    """``MetaStore`` kept in a dict. Useful for tests and single-process demos."""

    def __init__(self) -> None:
        self.data: dict[tuple[str, str, str], str] = {}

    def get_meta(self, scope: MetaScope, entity_id: str, key: str) -> str | None:
        return self.data.get((scope, str(entity_id), key))

    def update_meta(self, scope: MetaScope, entity_id: str, key: str, value: str) -> None:
        self.data[(scope, str(entity_id), key)] = value
