"""Tracking configuration."""

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_COLLECT_URL = "https://www.google-analytics.com/collect"


class EventNames(BaseModel):
    """Display names of tracked events. A blank name disables the event."""

    viewed_homepage: str = "viewed homepage"
    signed_in: str = "signed in"
    signed_out: str = "signed out"
    signed_up: str = "signed up"
    viewed_signup: str = "viewed signup"
    viewed_product: str = "viewed product"
    clicked_product: str = "clicked product"
    added_to_cart: str = "added to cart"
    removed_from_cart: str = "removed from cart"
    changed_cart_quantity: str = "changed cart quantity"
    viewed_cart: str = "viewed cart"
    estimated_shipping: str = "estimated shipping"
    started_checkout: str = "started checkout"
    provided_billing_email: str = "provided billing email"
    selected_payment_method: str = "selected payment method"
    placed_order: str = "placed order"
    started_payment: str = "started payment"
    completed_purchase: str = "completed purchase"
    applied_coupon: str = "applied coupon"
    removed_coupon: str = "removed coupon"
    cancelled_order: str = "cancelled order"
    order_refunded: str = "order refunded"
    reordered: str = "reordered"
    wrote_review: str = "wrote review"
    commented: str = "commented"
    viewed_account: str = "viewed account"
    viewed_order: str = "viewed order"
    updated_address: str = "updated address"
    changed_password: str = "changed password"
    tracked_order: str = "tracked order"

    # Subscriptions
    activated_subscription: str = "activated subscription"
    reactivated_subscription: str = "reactivated subscription"
    suspended_subscription: str = "suspended subscription"
    cancelled_subscription: str = "cancelled subscription"
    subscription_trial_ended: str = "subscription trial ended"
    subscription_trial_converted: str = "subscription trial converted"
    subscription_trial_cancelled: str = "subscription trial cancelled"
    subscription_end_of_prepaid_term: str = "subscription prepaid term ended"
    subscription_expired: str = "subscription expired"
    renewed_subscription: str = "subscription billed"

    def get(self, key: str) -> str:
        """Return the configured name for ``key``, or "" if unknown or disabled."""
        return (getattr(self, key, "") or "").strip()

    def has_event(self, key: str) -> bool:
        return bool(self.get(key))


class TrackingSettings(BaseSettings):
    """Tracking settings loaded from ``SHOPSENSE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SHOPSENSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Master switch and property
    enabled: bool = True
    tracking_id: str = ""

    # Who gets tracked
    admin_tracking_enabled: bool = False
    track_user_id: bool = False
    excluded_roles: list[str] = []
    signed_in_roles: list[str] = ["subscriber", "customer"]

    # Delivery
    collect_url: str = DEFAULT_COLLECT_URL
    timeout: float = 30.0
    debug_mode: bool = False

    # Client-side tracking code
    function_name: str = "ga"
    anonymize_ip: bool = False
    enable_displayfeatures: bool = False
    enable_linkid: bool = False
    optimize_code: str = ""
    track_product_impressions_on: list[str] = ["single_product_pages", "archive_pages"]
    # Checkout loads with a payment method already selected; skip that one
    ignore_initial_payment_method: bool = True

    event_names: EventNames = EventNames()

    @property
    def is_configured(self) -> bool:
        """Tracking runs only when enabled and a tracking ID is set."""
        return self.enabled and bool(self.tracking_id.strip())
