"""Tests for email open tracking."""

import html
import re

import httpx
import pytest

from shopsense.tracking import EmailOpenTracker, TrackingSettings
from shopsense.tracking.email import is_customer_email
from shopsense.tracking.policy import TrackingPolicy
from shopsense.tracking.storage import IDENTITY_META_KEY

GENERATED = "00000000-0000-4000-8000-000000000000"


def make_tracker(settings, storefront, meta_store) -> EmailOpenTracker:
    return EmailOpenTracker(
        settings,
        meta_store,
        TrackingPolicy(settings, storefront),
        uuid_factory=lambda: GENERATED,
    )


def pixel_params(tag: str) -> httpx.QueryParams:
    src = re.search(r'src="([^"]+)"', tag).group(1)
    return httpx.URL(html.unescape(src)).params


@pytest.fixture
def email_tracker(settings, storefront, meta_store) -> EmailOpenTracker:
    return make_tracker(settings, storefront, meta_store)


class TestPixel:
    def test_order_email(self, email_tracker, meta_store, order):
        """GIVEN an order with a stored identity SHOULD render a pixel for it."""
        meta_store.update_meta("order", "1001", IDENTITY_META_KEY, "111.222")

        tag = email_tracker.pixel("Your order is complete", order=order)

        assert tag.startswith('<img src="https://www.google-analytics.com/collect?')
        assert tag.endswith('alt="" />')
        params = pixel_params(tag)
        assert params["tid"] == "UA-12345-1"
        assert params["cid"] == "111.222"
        assert params["t"] == "event"
        assert params["ec"] == "Emails"
        assert params["ea"] == "open"
        assert params["el"] == "Your order is complete"
        assert params["dp"] == "/emails/your-order-is-complete"
        assert params["dt"] == "Your order is complete"
        assert "uid" not in params

    def test_no_identity_without_user_id_tracking(self, email_tracker, order):
        assert email_tracker.pixel("Your order is complete", order=order) is None

    def test_account_generates_with_user_id_tracking(self, storefront, meta_store):
        settings = TrackingSettings(tracking_id="UA-12345-1", track_user_id=True)
        tracker = make_tracker(settings, storefront, meta_store)

        params = pixel_params(tracker.pixel("Reset password", account=storefront.accounts["7"]))

        assert params["cid"] == GENERATED
        assert params["uid"] == "7"

    def test_excluded_role(self, email_tracker, storefront, meta_store):
        meta_store.update_meta("account", "9", IDENTITY_META_KEY, "111.222")
        assert email_tracker.pixel("New account", account=storefront.accounts["9"]) is None

    def test_not_configured(self, storefront, meta_store, order):
        meta_store.update_meta("order", "1001", IDENTITY_META_KEY, "111.222")
        tracker = make_tracker(TrackingSettings(tracking_id=""), storefront, meta_store)
        assert tracker.pixel("Your order is complete", order=order) is None

    def test_no_subject(self, email_tracker):
        assert email_tracker.pixel("Newsletter") is None


@pytest.mark.parametrize(
    ("email_id", "expected"),
    [("customer_completed_order", True), ("new_order", False), ("cancelled_order", False)],
)
def test_is_customer_email(email_id, expected):
    assert is_customer_email(email_id) is expected
