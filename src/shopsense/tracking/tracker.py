"""Storefront lifecycle entry points.

``StorefrontTracker`` is what the storefront calls into. Each ``on_*``
method maps one storefront action to analytics: client-side actions queue
script fragments on the request context, server-side ones are sent straight
to the collector.
"""

import logging
import re
from collections.abc import Iterable, Mapping

from shopsense.tracking._payload import to_cents
from shopsense.tracking.client import MeasurementClient
from shopsense.tracking.config import TrackingSettings
from shopsense.tracking.context import PageKind, RequestContext
from shopsense.tracking.ecommerce import PayloadBuilder
from shopsense.tracking.hooks import TrackingHooks
from shopsense.tracking.idempotency import DeliveryTracker
from shopsense.tracking.identity import IdentityResolver
from shopsense.tracking.policy import CURRENT_USER, TrackingPolicy
from shopsense.tracking.schema import (
    EcommercePayload,
    Event,
    EventProperties,
    Identity,
    ProductAction,
    ScriptCategory,
)
from shopsense.tracking.scripts import ScriptRenderer
from shopsense.tracking.storage import MetaStore
from shopsense.tracking.storefront import CartItem, Storefront

LIST_TYPES: dict[str, str] = {
    "search": "Search",
    "product_category": "Product category",
    "product_tag": "Product tag",
    "shop": "Archive",
    "archive": "Archive",
    "product": "Related/Up sell",
    "cart": "Cross sell (cart)",
}

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_ARCHIVE_PAGES = frozenset({"shop", "product_category", "product_tag"})

_PROPERTY_ALIASES = {
    "eventCategory": "event_category",
    "eventAction": "event_action",
    "eventLabel": "event_label",
    "eventValue": "event_value",
    "nonInteraction": "non_interaction",
}


def list_type(page: PageKind | None) -> str:
    """Name of the product list shown on ``page``."""
    return LIST_TYPES.get(page or "", "")


def _sanitize_event_string(value: object) -> str | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip() or None
    return None


def _custom_event_properties(properties: object) -> EventProperties:
    """Parse loosely typed custom event properties.

    Anything that is not a mapping is ignored. Keys and values are trimmed,
    blank ones dropped. Known event fields are picked out; the rest goes
    into ``extra``. An ``eventValue`` that is not an integer is dropped.
    """
    if not isinstance(properties, Mapping):
        return EventProperties()

    fields: dict = {}
    extra: dict[str, str] = {}
    for raw_key, raw_value in properties.items():
        key = _sanitize_event_string(raw_key)
        value = _sanitize_event_string(raw_value)
        if not key or not value:
            continue
        field = _PROPERTY_ALIASES.get(key, key if key in _PROPERTY_ALIASES.values() else None)
        if field is None:
            extra[key] = value
        elif field == "event_value":
            try:
                fields[field] = int(float(value))
            except (ValueError, OverflowError):
                continue
        elif field == "non_interaction":
            fields[field] = value.lower() in ("1", "true", "yes")
        else:
            fields[field] = value
    return EventProperties(**fields, extra=extra)


class StorefrontTracker:
    """
    Event tracking for a storefront.

    One tracker can serve many requests; everything request-specific lives
    on the ``RequestContext`` passed to each call.

    Usage:
        tracker = StorefrontTracker(settings, storefront, meta_store)

        context = RequestContext(cookies=request.cookies, user_id=current_user_id)
        tracker.on_page_view(context)
        tracker.on_product_viewed(context, product_id="42")
        footer_js = tracker.print_js(context)

        tracker.on_purchase_completed(context, order_id="1001")
    """

    def __init__(
        self,
        settings: TrackingSettings,
        storefront: Storefront,
        meta_store: MetaStore,
        client: MeasurementClient | None = None,
        hooks: TrackingHooks | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the tracker.

        Args:
            settings: Tracking configuration.
            storefront: Read access to products, orders, refunds and accounts.
            meta_store: Storage for identity records and tracked markers.
            client: Measurement client; one is built from ``settings`` if omitted.
            hooks: Optional overrides for computed values.
            logger: Logger instance; defaults to ``logging.getLogger("shopsense.tracking")``.
        """
        self.settings = settings
        self.storefront = storefront
        self.hooks = hooks or TrackingHooks()
        self.logger = logger or logging.getLogger("shopsense.tracking")
        self.identity = IdentityResolver(settings, meta_store, self.hooks, self.logger)
        self.policy = TrackingPolicy(settings, storefront, self.hooks, self.logger)
        self.payloads = PayloadBuilder(storefront, self.hooks)
        self.scripts = ScriptRenderer(settings.function_name)
        self.deliveries = DeliveryTracker(meta_store)
        self.client = client or MeasurementClient(
            tracking_id=settings.tracking_id,
            endpoint=settings.collect_url,
            timeout=settings.timeout,
            track_user_id=settings.track_user_id,
            logger=self.logger,
        )

    # ------------------------------------------------------------------ #
    # Recording
    # ------------------------------------------------------------------ #

    def event_name(self, key: str) -> str:
        """Configured name of an event; "" when the event is disabled."""
        return self.settings.event_names.get(key)

    def record_event(
        self,
        context: RequestContext,
        event_name: str,
        properties: EventProperties | None = None,
        ecommerce: EcommercePayload | None = None,
        identity: Identity | None = None,
        admin_event: bool = False,
        enforce_policy: bool = True,
    ) -> bool:
        """Send an event to the collector from the server.

        Args:
            context: The current request.
            event_name: Event name; a blank name means the event is disabled.
            properties: Event fields.
            ecommerce: Enhanced Ecommerce data to send with the event.
            identity: Identity to attribute the event to. A missing client
                ID is resolved from the request; IP and user agent fall
                back to the request's. Its uid is the account the tracking
                gate judges; none means a guest.
            admin_event: Track even though the request is in the admin area.
            enforce_policy: Apply the tracking gate. Scheduled jobs with no
                visitor behind them turn this off.

        Returns:
            True if a delivery was attempted.
        """
        if not event_name or not self.settings.is_configured:
            return False

        # An explicit identity names the subject; a missing uid is a guest.
        user_id = identity.uid if identity is not None else CURRENT_USER
        if enforce_policy and self.policy.do_not_track(
            context, admin_event=admin_event, user_id=user_id
        ):
            self.logger.debug("record_event skipped: %r blocked by tracking policy", event_name)
            return False

        if identity is None:
            identity = self.identity.resolve_identity(context)
        elif not identity.cid:
            identity = identity.model_copy(update={"cid": self.identity.get_cid(context)})

        if not identity.cid:
            self.logger.debug("record_event skipped: no client ID for %r", event_name)
            return False

        event = Event(
            name=event_name,
            properties=properties or EventProperties(),
            ecommerce=ecommerce,
            identity=identity.model_copy(
                update={
                    "ip": identity.ip or context.ip,
                    "user_agent": identity.user_agent or context.user_agent,
                }
            ),
        )
        self.client.track_event(event.name, event.identity, event.properties, event.ecommerce)
        return True

    def js_record_event(
        self,
        context: RequestContext,
        event_name: str,
        properties: EventProperties | None = None,
        js_args_variable: str | None = None,
    ) -> bool:
        """Queue an event to be sent from the browser.

        Args:
            context: The current request.
            event_name: Event name; a blank name means the event is disabled.
            properties: Event fields.
            js_args_variable: JavaScript variable holding values for
                ``{$name}`` placeholders in the properties.

        Returns:
            True if the event was queued.
        """
        if not event_name or self.policy.do_not_track(context):
            return False
        script = self.scripts.event(event_name, properties or EventProperties(), js_args_variable)
        context.queue.enqueue("event", script)
        return True

    def _enqueue(self, context: RequestContext, category: ScriptCategory, script: str) -> None:
        if script:
            context.queue.enqueue(category, script)

    # ------------------------------------------------------------------ #
    # Page output
    # ------------------------------------------------------------------ #

    def tracking_code(self, context: RequestContext) -> str:
        """Tracker setup snippet for the page head; "" when not tracking."""
        if self.policy.do_not_track(context):
            return ""
        options = {"cookieDomain": "auto"}
        if self.hooks.tracker_options is not None:
            options = self.hooks.tracker_options(options)
        return self.scripts.tracking_code(self.settings, context.user_id, options)

    def print_js(self, context: RequestContext) -> str:
        """Drain the request's queued fragments for the page footer."""
        if self.policy.do_not_track(context):
            return ""
        return context.queue.flush()

    # ------------------------------------------------------------------ #
    # Browsing
    # ------------------------------------------------------------------ #

    def on_page_view(self, context: RequestContext) -> None:
        if self.policy.do_not_track(context):
            return
        self._enqueue(context, "pageview", self.scripts.pageview())

    def on_viewed_homepage(self, context: RequestContext) -> None:
        if context.page != "front":
            return
        self.js_record_event(
            context,
            self.event_name("viewed_homepage"),
            EventProperties(eventCategory="Homepage", nonInteraction=True),
        )

    def on_product_impression(
        self,
        context: RequestContext,
        product_id: str,
        position: int | None = 1,
        list_name: str | None = None,
    ) -> None:
        """Queue an impression for a product rendered in a list."""
        if self.policy.do_not_track(context):
            return

        track_on = self.settings.track_product_impressions_on
        if "single_product_pages" not in track_on and context.page == "product":
            return
        if "archive_pages" not in track_on and context.page in _ARCHIVE_PAGES:
            return

        product = self.storefront.get_product(product_id)
        if product is None:
            return

        impression = self.payloads.build_impression(
            product,
            position=position,
            list_name=list_name if list_name is not None else list_type(context.page),
        )
        self._enqueue(context, "impression", self.scripts.add_impression(impression))

    def on_product_viewed(self, context: RequestContext, product_id: str) -> None:
        """Product detail view: ``ec:setAction('detail')`` plus an event."""
        if self.policy.do_not_track(context) or not context.not_page_reload():
            return

        product = self.storefront.get_product(product_id)
        if product is None:
            self.logger.debug("on_product_viewed: unknown product %s", product_id)
            return

        action = self.payloads.build_product_action("detail", product, quantity=1)
        self._enqueue(context, "event", self.scripts.set_action(action))
        self.js_record_event(
            context,
            self.event_name("viewed_product"),
            EventProperties(eventCategory="Products", eventLabel=product.name, nonInteraction=True),
        )

    def on_product_clicked(self, context: RequestContext, product_id: str) -> None:
        """Report clicks on a product shown in a list.

        Binds a click listener to the product's links; the ``click`` action
        and the event are sent from the browser when the visitor follows one.
        Variations are reported as their parent product.
        """
        if self.policy.do_not_track(context):
            return
        if not self.settings.event_names.has_event("clicked_product"):
            return

        product = self.storefront.get_product(product_id)
        if product is not None and product.parent_id:
            product = self.storefront.get_product(product.parent_id)
        if product is None:
            return

        action = self.payloads.build_product_action(
            "click", product, {"list": list_type(context.page)}
        )
        body = self.scripts.set_action(action) + self.scripts.event(
            self.event_name("clicked_product"),
            EventProperties(eventCategory="Products", eventLabel=product.name),
        )
        self._enqueue(context, "event", self.scripts.on_product_click(product.id, body))

    # ------------------------------------------------------------------ #
    # Cart
    # ------------------------------------------------------------------ #

    def on_added_to_cart(
        self,
        context: RequestContext,
        product_id: str,
        quantity: int = 1,
        variation_attrs: Mapping[str, str] | None = None,
        variation_id: str | None = None,
    ) -> None:
        """Server-side add-to-cart event with the variation as extra properties."""
        product = self.storefront.get_product(variation_id or product_id)
        if product is None:
            self.logger.debug("on_added_to_cart: unknown product %s", variation_id or product_id)
            return

        extra = {
            key.removeprefix("attribute_"): str(value)
            for key, value in (variation_attrs or {}).items()
            if value not in (None, "")
        }
        properties = EventProperties(
            eventCategory="Products",
            eventLabel=product.name,
            eventValue=int(quantity),
            extra=extra,
        )
        ecommerce = self.payloads.build_product_action("add", product, quantity=quantity)
        self.record_event(context, self.event_name("added_to_cart"), properties, ecommerce)

    def on_removed_from_cart(self, context: RequestContext, item: CartItem) -> None:
        product = self.storefront.get_product(item.tracked_product_id)
        if product is None:
            return
        properties = EventProperties(eventCategory="Cart", eventLabel=product.name)
        ecommerce = self.payloads.build_product_action("remove", product, quantity=item.quantity)
        self.record_event(context, self.event_name("removed_from_cart"), properties, ecommerce)

    def on_changed_cart_quantity(self, context: RequestContext, item: CartItem) -> None:
        product = self.storefront.get_product(item.product_id)
        if product is None:
            return
        properties = EventProperties(eventCategory="Cart", eventLabel=product.name)
        self.record_event(context, self.event_name("changed_cart_quantity"), properties)

    def on_viewed_cart(self, context: RequestContext, cart_items: Iterable[CartItem]) -> None:
        if self.policy.do_not_track(context) or not context.not_page_reload():
            return
        for product in self.payloads.build_line_items(cart_items):
            self._enqueue(context, "event", self.scripts.add_product(product))
        self.js_record_event(
            context,
            self.event_name("viewed_cart"),
            EventProperties(eventCategory="Cart", nonInteraction=True),
        )

    def on_applied_coupon(self, context: RequestContext, coupon_code: str) -> None:
        properties = EventProperties(eventCategory="Coupons", eventLabel=coupon_code)
        self.record_event(context, self.event_name("applied_coupon"), properties)

    def on_removed_coupon(self, context: RequestContext, coupon_code: str) -> None:
        if not context.not_page_reload():
            return
        properties = EventProperties(eventCategory="Coupons", eventLabel=coupon_code)
        self.record_event(context, self.event_name("removed_coupon"), properties)

    def on_estimated_shipping(self, context: RequestContext) -> None:
        self.record_event(
            context, self.event_name("estimated_shipping"), EventProperties(eventCategory="Cart")
        )

    # ------------------------------------------------------------------ #
    # Checkout and orders
    # ------------------------------------------------------------------ #

    def on_checkout_started(self, context: RequestContext, cart_items: Iterable[CartItem]) -> None:
        """Checkout step 1, with the cart contents and guest/registered option."""
        if self.policy.do_not_track(context) or not context.not_page_reload():
            return

        option = "Registered User" if context.is_logged_in else "Guest"
        action = self.payloads.build_checkout(cart_items, step=1, option=option)
        self._enqueue(context, "event", self.scripts.set_action(action))
        self.js_record_event(
            context,
            self.event_name("started_checkout"),
            EventProperties(eventCategory="Checkout", nonInteraction=True),
        )

    def on_provided_billing_email(
        self,
        context: RequestContext,
        cart_items: Iterable[CartItem],
        billing_email: str | None = None,
    ) -> None:
        """Checkout step 2.

        Signed-in customers with a valid billing email on file are reported
        right away, unless a payment method was already reported. For guests
        a listener reports the step once they enter a valid email.

        Args:
            context: The current request.
            cart_items: Cart contents.
            billing_email: Billing email on file for the signed-in customer.
        """
        if self.policy.do_not_track(context):
            return
        event_name = self.event_name("provided_billing_email")
        if not event_name:
            return

        action = self.payloads.build_checkout(cart_items, step=2)
        handler = self.scripts.set_action(action) + self.scripts.event(
            event_name, EventProperties(eventCategory="Checkout")
        )

        if not context.is_logged_in:
            self._enqueue(context, "event", self.scripts.on_billing_email_provided(handler))
        elif billing_email and _EMAIL_RE.match(billing_email) and context.not_page_reload():
            self._enqueue(context, "event", self.scripts.unless_payment_method_tracked(handler))

    def on_selected_payment_method(
        self, context: RequestContext, cart_items: Iterable[CartItem]
    ) -> None:
        """Checkout step 3, with the chosen payment method as option and label.

        The method is only known in the browser, so the payload carries a
        ``{$payment_method}`` placeholder filled in when the visitor picks one.
        """
        if self.policy.do_not_track(context):
            return
        event_name = self.event_name("selected_payment_method")
        if not event_name:
            return

        action = self.payloads.build_checkout(cart_items, step=3, option="{$payment_method}")
        properties = EventProperties(eventCategory="Checkout", eventLabel="{$payment_method}")
        handler = self.scripts.set_action(action, "args") + self.scripts.event(
            event_name, properties, "args"
        )
        self._enqueue(
            context,
            "event",
            self.scripts.on_payment_method_selected(
                handler, ignore_initial=self.settings.ignore_initial_payment_method
            ),
        )

    def on_order_placed(self, context: RequestContext, order_id: str) -> None:
        """Store the order's identity and send checkout step 4.

        The identity is stored with forced generation so that the purchase,
        which may be reported later from another request, has a client ID.
        """
        if not self.settings.is_configured:
            return

        order = self.storefront.get_order(order_id)
        if order is None:
            self.logger.debug("on_order_placed: unknown order %s", order_id)
            return

        self.identity.store_order_identity(context, order.id)

        properties = EventProperties(
            eventCategory="Checkout", eventLabel=order.number, nonInteraction=True
        )
        ecommerce = self.payloads.build_checkout(order.items, step=4, option=order.shipping_method)
        identity = self.identity.resolve_identity(context, order_id=order.id)
        self.record_event(
            context, self.event_name("placed_order"), properties, ecommerce, identity=identity
        )

    def on_started_payment(self, context: RequestContext) -> None:
        if not context.not_page_reload():
            return
        self.js_record_event(
            context,
            self.event_name("started_payment"),
            EventProperties(eventCategory="Checkout", nonInteraction=True),
        )

    def on_purchase_completed(self, context: RequestContext, order_id: str) -> None:
        """Report a purchase, at most once per order.

        Sent as an admin event so status changes made from the admin area
        are reported too. The order is marked as tracked once delivery has
        been attempted, whatever the outcome.
        """
        if not self.settings.is_configured:
            return
        if self.hooks.skip_completed_purchase is not None and self.hooks.skip_completed_purchase(
            str(order_id)
        ):
            return

        order = self.storefront.get_order(order_id)
        if order is None:
            self.logger.debug("on_purchase_completed: unknown order %s", order_id)
            return

        if not self.policy.is_tracking_enabled_for_user(context, order.customer_id):
            self.logger.debug("on_purchase_completed: customer of order %s not tracked", order.id)
            return

        if self.deliveries.is_tracked(order.id):
            self.logger.debug("Order %s already tracked", order.id)
            return

        properties = EventProperties(
            eventCategory="Checkout",
            eventLabel=order.number,
            eventValue=to_cents(order.total),
            nonInteraction=order.is_renewal,
        )
        ecommerce = self.payloads.build_purchase(order)
        identity = self.identity.resolve_order_identity(context, order)

        if self.record_event(
            context,
            self.event_name("completed_purchase"),
            properties,
            ecommerce,
            identity=identity,
            admin_event=True,
        ):
            self.deliveries.mark_tracked(order.id)

    def on_purchase_on_hold(self, context: RequestContext, order_id: str) -> None:
        """PayPal orders wait on hold for payment; count them as purchases."""
        order = self.storefront.get_order(order_id)
        if order is not None and order.payment_method == "paypal":
            self.on_purchase_completed(context, order.id)

    def on_refund_issued(
        self,
        context: RequestContext,
        order_id: str,
        refund_id: str,
        full_refund: bool = False,
    ) -> None:
        """Report a refund, at most once per refund.

        Enhanced Ecommerce refund data is only attached for full refunds;
        partial refunds are sent as plain events carrying the amount.
        """
        if not self.settings.is_configured:
            return

        if self.deliveries.is_tracked(refund_id):
            self.logger.debug("Refund %s already tracked", refund_id)
            return

        order = self.storefront.get_order(order_id)
        refund = self.storefront.get_refund(refund_id)
        if order is None or refund is None:
            self.logger.debug("on_refund_issued: unknown order %s or refund %s", order_id, refund_id)
            return

        properties = EventProperties(
            eventCategory="Orders",
            eventLabel=order.number,
            eventValue=to_cents(refund.amount),
        )
        ecommerce = self.payloads.build_refund(order) if full_refund else None
        identity = self.identity.resolve_order_identity(context, order)

        if self.record_event(
            context,
            self.event_name("order_refunded"),
            properties,
            ecommerce,
            identity=identity,
            admin_event=True,
        ):
            self.deliveries.mark_tracked(refund.id)

    def on_cancelled_order(self, context: RequestContext, order_id: str) -> None:
        order = self.storefront.get_order(order_id)
        if order is None:
            return
        properties = EventProperties(eventCategory="Orders", eventLabel=order.number)
        self.record_event(context, self.event_name("cancelled_order"), properties)

    def _record_order_event(
        self, context: RequestContext, key: str, order_id: str, non_interaction: bool = False
    ) -> None:
        """An ``Orders`` event labelled with the order number, skipped on page reloads."""
        if not context.not_page_reload():
            return
        order = self.storefront.get_order(order_id)
        if order is None:
            self.logger.debug("%s: unknown order %s", key, order_id)
            return
        properties = EventProperties(
            eventCategory="Orders", eventLabel=order.number, nonInteraction=non_interaction
        )
        self.record_event(context, self.event_name(key), properties)

    def on_viewed_order(self, context: RequestContext, order_id: str) -> None:
        self._record_order_event(context, "viewed_order", order_id, non_interaction=True)

    def on_tracked_order(self, context: RequestContext, order_id: str) -> None:
        """The visitor looked the order up with the order tracking form."""
        self._record_order_event(context, "tracked_order", order_id)

    def on_reordered(self, context: RequestContext, order_id: str) -> None:
        self._record_order_event(context, "reordered", order_id)

    # ------------------------------------------------------------------ #
    # Accounts
    # ------------------------------------------------------------------ #

    def on_signed_in(self, context: RequestContext, account_id: str) -> None:
        """Sign-in event for customer roles; remembers the client ID on the account."""
        account = self.storefront.get_account(account_id)
        if account is None or not account.roles:
            return
        if account.roles[0] not in self.settings.signed_in_roles:
            return

        ecommerce = None
        if context.page == "checkout":
            ecommerce = ProductAction(
                action="checkout_option", fields={"step": 1, "option": "Registered User"}
            )
        properties = EventProperties(eventCategory="My Account", eventLabel=account.login)
        self.record_event(context, self.event_name("signed_in"), properties, ecommerce)

        if self.settings.is_configured:
            self.identity.store_account_identity(context, account.id)

    def on_signed_out(self, context: RequestContext) -> None:
        self.record_event(context, self.event_name("signed_out"))

    def on_signed_up(self, context: RequestContext) -> None:
        self.record_event(
            context, self.event_name("signed_up"), EventProperties(eventCategory="My Account")
        )

    def on_viewed_signup(self, context: RequestContext) -> None:
        if not context.not_page_reload():
            return
        self.js_record_event(
            context,
            self.event_name("viewed_signup"),
            EventProperties(eventCategory="My Account", nonInteraction=True),
        )

    def on_viewed_account(self, context: RequestContext) -> None:
        if not context.not_page_reload():
            return
        self.js_record_event(
            context,
            self.event_name("viewed_account"),
            EventProperties(eventCategory="My Account", nonInteraction=True),
        )

    def on_updated_address(self, context: RequestContext) -> None:
        if not context.not_page_reload():
            return
        self.record_event(
            context, self.event_name("updated_address"), EventProperties(eventCategory="My Account")
        )

    def on_changed_password(self, context: RequestContext, password_submitted: bool) -> None:
        """Report a password change from the account details form.

        ``password_submitted`` is False when the form was saved with the new
        password fields left empty.
        """
        if not password_submitted or not context.not_page_reload():
            return
        self.record_event(
            context, self.event_name("changed_password"), EventProperties(eventCategory="My Account")
        )

    # ------------------------------------------------------------------ #
    # Content
    # ------------------------------------------------------------------ #

    def on_wrote_review_or_commented(
        self, context: RequestContext, post_type: str, title: str
    ) -> None:
        """Product reviews and blog comments are separate events.

        Comments on anything other than products and posts are ignored.
        """
        if post_type == "product":
            key, category = "wrote_review", "Products"
        elif post_type == "post":
            key, category = "commented", "Post"
        else:
            return
        if not self.settings.event_names.has_event(key):
            return
        properties = EventProperties(eventCategory=category, eventLabel=title)
        self.record_event(context, self.event_name(key), properties)

    # ------------------------------------------------------------------ #
    # Custom events
    # ------------------------------------------------------------------ #

    def on_custom_event(
        self, context: RequestContext, event_name: object, properties: object = None
    ) -> None:
        """Send an event defined by the store owner.

        Malformed names or properties are tolerated: a blank name is
        ignored and properties that are not a mapping are dropped.
        """
        name = _sanitize_event_string(event_name)
        if not name:
            return
        self.record_event(context, name, _custom_event_properties(properties))

    def close(self) -> None:
        """Release the measurement client."""
        self.client.close()
