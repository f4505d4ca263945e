"""Subscription lifecycle events.

Most of these fire from scheduled jobs, outside any visitor request, so
they skip the tracking policy gate. They still need a client ID: the one
stored on the subscriber's account, or on the order for activations.
"""

import math
from collections.abc import Iterable
from decimal import Decimal

from shopsense.tracking.context import RequestContext
from shopsense.tracking.schema import EventProperties, Identity
from shopsense.tracking.storage import IDENTITY_META_KEY
from shopsense.tracking.storefront import Order, Subscription
from shopsense.tracking.tracker import StorefrontTracker


class SubscriptionTracker:
    """
    Sends subscription events through a ``StorefrontTracker``.

    Events land in the ``Subscriptions`` category, labelled with the
    subscription ID. Only activations count as interactions.
    """

    def __init__(self, tracker: StorefrontTracker) -> None:
        self.tracker = tracker

    def _identity(self, subscription: Subscription) -> Identity:
        cid = None
        if subscription.user_id is not None:
            cid = self.tracker.identity.meta_store.get_meta(
                "account", subscription.user_id, IDENTITY_META_KEY
            )
        return Identity(cid=cid, uid=subscription.user_id)

    def track(
        self,
        event_key: str,
        subscription: Subscription,
        context: RequestContext | None = None,
        non_interaction: bool = True,
        identity: Identity | None = None,
        value: Decimal | None = None,
    ) -> bool:
        """Send one subscription event.

        Returns:
            True if a delivery was attempted.
        """
        properties = EventProperties(
            eventCategory="Subscriptions",
            eventLabel=subscription.id,
            eventValue=math.floor(value) if value is not None else None,
            nonInteraction=non_interaction,
        )
        return self.tracker.record_event(
            context or RequestContext(),
            self.tracker.event_name(event_key),
            properties,
            identity=identity or self._identity(subscription),
            enforce_policy=False,
        )

    def activated(
        self,
        order: Order,
        subscriptions: Iterable[Subscription],
        context: RequestContext | None = None,
    ) -> None:
        """Subscriptions activated by the order that paid for them."""
        context = context or RequestContext()
        identity = self.tracker.identity.resolve_order_identity(context, order)
        for subscription in subscriptions:
            self.track(
                "activated_subscription",
                subscription,
                context,
                non_interaction=False,
                identity=identity,
                value=subscription.total_initial_payment,
            )

    def reactivated(self, subscription: Subscription, context: RequestContext | None = None) -> None:
        self.track("reactivated_subscription", subscription, context)

    def suspended(self, subscription: Subscription, context: RequestContext | None = None) -> None:
        self.track("suspended_subscription", subscription, context)

    def cancelled(self, subscription: Subscription, context: RequestContext | None = None) -> None:
        self.track("cancelled_subscription", subscription, context)

    def trial_ended(self, subscription: Subscription, context: RequestContext | None = None) -> None:
        """End of a free trial, followed by whether the trial converted.

        More than one completed payment means the subscriber was billed
        after the trial, which counts as a conversion.
        """
        self.track("subscription_trial_ended", subscription, context)
        if subscription.completed_payment_count > 1:
            self.track("subscription_trial_converted", subscription, context)
        else:
            self.track("subscription_trial_cancelled", subscription, context)

    def end_of_prepaid_term(
        self, subscription: Subscription, context: RequestContext | None = None
    ) -> None:
        self.track("subscription_end_of_prepaid_term", subscription, context)

    def expired(self, subscription: Subscription, context: RequestContext | None = None) -> None:
        self.track("subscription_expired", subscription, context)

    def renewed(
        self,
        renewal_order: Order,
        subscriptions: Iterable[Subscription],
        context: RequestContext | None = None,
    ) -> None:
        """Automatic renewal billing; the value is the renewal order total."""
        for subscription in subscriptions:
            self.track(
                "renewed_subscription",
                subscription,
                context,
                value=renewal_order.total,
            )
