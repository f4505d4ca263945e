"""Open tracking for customer emails.

An email cannot run analytics.js, so opens are tracked with a one-pixel
image whose URL is itself a collection hit. The pixel is attributed with
the identity stored against the order or account the email is about.
"""

import html
from collections.abc import Callable

import httpx

from shopsense.tracking._payload import slugify
from shopsense.tracking.client import PROTOCOL_VERSION
from shopsense.tracking.config import TrackingSettings
from shopsense.tracking.context import RequestContext
from shopsense.tracking.hooks import TrackingHooks
from shopsense.tracking.identifiers import generate_uuid
from shopsense.tracking.policy import TrackingPolicy
from shopsense.tracking.storage import IDENTITY_META_KEY, MetaStore
from shopsense.tracking.storefront import Account, Order

CUSTOMER_EMAIL_PREFIX = "customer_"


def is_customer_email(email_id: str) -> bool:
    """Only emails sent to customers are tracked; admin notifications are not."""
    return email_id.startswith(CUSTOMER_EMAIL_PREFIX)


class EmailOpenTracker:
    """Builds the tracking pixel embedded in HTML customer emails."""

    def __init__(
        self,
        settings: TrackingSettings,
        meta_store: MetaStore,
        policy: TrackingPolicy,
        hooks: TrackingHooks | None = None,
        uuid_factory: Callable[[], str] = generate_uuid,
    ) -> None:
        self.settings = settings
        self.meta_store = meta_store
        self.policy = policy
        self.hooks = hooks or TrackingHooks()
        self.uuid_factory = uuid_factory

    def pixel(
        self,
        email_title: str,
        order: Order | None = None,
        account: Account | None = None,
    ) -> str | None:
        """Return the ``<img>`` tag for an email, or None if it cannot be tracked.

        Args:
            email_title: Title of the email; used as label, page path and title.
            order: Order the email is about. Its stored identity wins.
            account: Recipient account, for account emails.
        """
        if not self.settings.is_configured:
            return None

        cid: str | None = None
        uid: str | None = None
        if order is not None:
            cid = self.meta_store.get_meta("order", order.id, IDENTITY_META_KEY)
            uid = order.customer_id
        elif account is not None:
            cid = self.meta_store.get_meta("account", account.id, IDENTITY_META_KEY)
            uid = account.id

        if uid is not None and not self.policy.is_tracking_enabled_for_user(
            RequestContext(), uid
        ):
            return None

        track_user_id = self.settings.track_user_id
        generate = not cid and uid is not None and track_user_id
        if self.hooks.generate_client_id is not None:
            generate = bool(self.hooks.generate_client_id(generate))
        if generate:
            cid = self.uuid_factory()

        if not cid:
            return None

        params = {
            "v": PROTOCOL_VERSION,
            "tid": self.settings.tracking_id,
            "cid": cid,
            "t": "event",
            "ec": "Emails",
            "ea": "open",
            "el": email_title,
            "dp": f"/emails/{slugify(email_title)}",
            "dt": email_title,
        }
        if track_user_id and uid is not None:
            params["uid"] = uid

        url = httpx.URL(self.settings.collect_url, params=params)
        return f'<img src="{html.escape(str(url))}" alt="" />'
