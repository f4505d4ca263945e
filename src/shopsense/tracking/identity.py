"""Visitor identity resolution.

The client ID (cid) is looked up in this order:

1. an identity record stored against the order or the signed-in account
   (or supplied by the ``identity_override`` hook),
2. the first-party analytics cookie (``version.depth.cid1.cid2``),
3. a freshly generated UUID, only when generation is forced (order
   creation) or the visitor is signed in and user-id tracking is on.

Once found, the cid is cached on the request context so every event of a
request is attributed to the same client.
"""

import logging
from collections.abc import Callable

from shopsense.tracking.config import TrackingSettings
from shopsense.tracking.context import RequestContext
from shopsense.tracking.hooks import TrackingHooks
from shopsense.tracking.identifiers import generate_uuid
from shopsense.tracking.schema import Identity
from shopsense.tracking.storage import IDENTITY_META_KEY, MetaStore
from shopsense.tracking.storefront import Order


def parse_ga_cookie(value: str | None) -> str | None:
    """Extract the client ID from an analytics cookie value.

    ``"GA1.2.111.222"`` yields ``"111.222"``. Anything that does not have the
    four-part shape yields None.
    """
    if not isinstance(value, str):
        return None
    parts = value.strip().split(".", 3)
    if len(parts) != 4:
        return None
    _version, _domain_depth, cid1, cid2 = parts
    if not cid1 or not cid2:
        return None
    return f"{cid1}.{cid2}"


class IdentityResolver:
    """Works out who an event should be attributed to."""

    def __init__(
        self,
        settings: TrackingSettings,
        meta_store: MetaStore,
        hooks: TrackingHooks | None = None,
        logger: logging.Logger | None = None,
        uuid_factory: Callable[[], str] = generate_uuid,
    ) -> None:
        self.settings = settings
        self.meta_store = meta_store
        self.hooks = hooks or TrackingHooks()
        self.logger = logger or logging.getLogger("shopsense.tracking")
        self.uuid_factory = uuid_factory

    def get_cid(self, context: RequestContext, force_generate: bool = False) -> str | None:
        """Return the visitor's client ID, generating one if policy allows.

        Args:
            context: The current request.
            force_generate: Generate a UUID if nothing else is found. Used
                when an order is created so every order has an identity.
        """
        if context.client_id:
            return context.client_id

        cid = None
        if self.hooks.identity_override is not None:
            cid = self.hooks.identity_override(context)

        if not cid and context.user_id is not None:
            cid = self.meta_store.get_meta("account", context.user_id, IDENTITY_META_KEY)

        if not cid:
            cid = parse_ga_cookie(context.ga_cookie)

        if not cid:
            if self.settings.debug_mode:
                self.logger.debug(
                    "No identity found. Cookies are probably disabled for visitor "
                    "or analytics tracking might be blocked."
                )
            generate = force_generate or (context.is_logged_in and self.settings.track_user_id)
            if self.hooks.generate_client_id is not None:
                generate = bool(self.hooks.generate_client_id(generate))
            if generate:
                cid = self.uuid_factory()

        if cid:
            context.client_id = cid
        return cid or None

    def resolve_identity(
        self,
        context: RequestContext,
        order_id: str | None = None,
        force_generate: bool = False,
    ) -> Identity:
        """Resolve the identity of the current visitor.

        Args:
            context: The current request.
            order_id: Order whose stored identity takes precedence.
            force_generate: See ``get_cid``.
        """
        cid = self.get_order_identity(order_id) if order_id is not None else None
        if not cid:
            cid = self.get_cid(context, force_generate=force_generate)
        return Identity(
            cid=cid,
            uid=context.user_id,
            ip=context.ip,
            user_agent=context.user_agent,
        )

    def resolve_order_identity(self, context: RequestContext, order: Order) -> Identity:
        """Resolve the identity an order's events are attributed to.

        The identity stored when the order was placed wins, so later cookie
        changes never re-attribute a historical order. The account, IP and
        user agent come from the order itself.
        """
        cid = self.get_order_identity(order.id) or self.get_cid(context)
        return Identity(
            cid=cid,
            uid=order.customer_id,
            ip=order.customer_ip,
            user_agent=order.customer_user_agent,
        )

    def get_order_identity(self, order_id: str) -> str | None:
        return self.meta_store.get_meta("order", str(order_id), IDENTITY_META_KEY) or None

    def store_order_identity(self, context: RequestContext, order_id: str) -> str | None:
        """Attach the visitor's client ID to a new order.

        Generation is forced, so the order ends up with some identity even
        when the visitor blocks the analytics cookie. An identity already
        stored on the order is kept.
        """
        existing = self.get_order_identity(order_id)
        if existing:
            return existing
        cid = self.get_cid(context, force_generate=True)
        if cid:
            self.meta_store.update_meta("order", str(order_id), IDENTITY_META_KEY, cid)
        return cid

    def store_account_identity(self, context: RequestContext, account_id: str) -> str | None:
        """Remember the visitor's client ID against their account."""
        cid = self.get_cid(context)
        if cid:
            self.meta_store.update_meta("account", str(account_id), IDENTITY_META_KEY, cid)
        return cid
