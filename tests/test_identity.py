"""Tests for visitor identity resolution."""

import logging

import pytest

from shopsense.tracking import (
    InMemoryMetaStore,
    RequestContext,
    TrackingHooks,
    TrackingSettings,
)
from shopsense.tracking.identity import IdentityResolver, parse_ga_cookie
from shopsense.tracking.storage import IDENTITY_META_KEY

GENERATED = "00000000-0000-4000-8000-000000000000"


def make_resolver(
    meta_store: InMemoryMetaStore,
    track_user_id: bool = False,
    hooks: TrackingHooks | None = None,
    **settings,
) -> IdentityResolver:
    return IdentityResolver(
        TrackingSettings(tracking_id="UA-1-1", track_user_id=track_user_id, **settings),
        meta_store,
        hooks=hooks,
        uuid_factory=lambda: GENERATED,
    )


class TestParseGaCookie:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("GA1.2.111.222", "111.222"),
            ("GA1.3.1234567890.1600000000", "1234567890.1600000000"),
            # Everything after the third dot belongs to the second part
            ("GA1.2.111.222.333", "111.222.333"),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_ga_cookie(value) == expected

    @pytest.mark.parametrize("value", [None, "", "GA1.2.111", "garbage", "GA1.2..222", 12345])
    def test_malformed(self, value):
        assert parse_ga_cookie(value) is None


class TestGetCid:
    def test_from_cookie(self, meta_store):
        resolver = make_resolver(meta_store)
        context = RequestContext(cookies={"_ga": "GA1.2.111.222"})
        assert resolver.get_cid(context) == "111.222"

    def test_account_identity_wins_over_cookie(self, meta_store):
        """GIVEN a signed-in visitor with a stored identity SHOULD use the stored cid."""
        meta_store.update_meta("account", "7", IDENTITY_META_KEY, "stored.cid")
        resolver = make_resolver(meta_store)
        context = RequestContext(cookies={"_ga": "GA1.2.111.222"}, user_id=7)

        assert resolver.get_cid(context) == "stored.cid"

    def test_override_hook_wins(self, meta_store):
        hooks = TrackingHooks(identity_override=lambda context: "from.hook")
        resolver = make_resolver(meta_store, hooks=hooks)
        context = RequestContext(cookies={"_ga": "GA1.2.111.222"})

        assert resolver.get_cid(context) == "from.hook"

    def test_guest_without_cookie_is_not_generated(self, meta_store):
        """GIVEN a guest with no cookie WHEN not forced SHOULD return None."""
        resolver = make_resolver(meta_store, track_user_id=True)
        assert resolver.get_cid(RequestContext()) is None

    def test_signed_in_without_user_id_tracking_is_not_generated(self, meta_store):
        resolver = make_resolver(meta_store, track_user_id=False)
        assert resolver.get_cid(RequestContext(user_id=7)) is None

    def test_signed_in_with_user_id_tracking_generates(self, meta_store):
        resolver = make_resolver(meta_store, track_user_id=True)
        assert resolver.get_cid(RequestContext(user_id=7)) == GENERATED

    def test_forced_generation(self, meta_store):
        resolver = make_resolver(meta_store)
        assert resolver.get_cid(RequestContext(), force_generate=True) == GENERATED

    def test_generation_hook_can_veto(self, meta_store):
        hooks = TrackingHooks(generate_client_id=lambda computed: False)
        resolver = make_resolver(meta_store, hooks=hooks)
        assert resolver.get_cid(RequestContext(), force_generate=True) is None

    def test_idempotent_within_request(self, meta_store):
        """GIVEN a generated cid WHEN resolved again in the same request SHOULD not change."""
        counter = iter(range(100))
        resolver = IdentityResolver(
            TrackingSettings(tracking_id="UA-1-1"),
            meta_store,
            uuid_factory=lambda: f"uuid-{next(counter)}",
        )
        context = RequestContext()

        first = resolver.get_cid(context, force_generate=True)
        second = resolver.get_cid(context, force_generate=True)

        assert first == second == "uuid-0"

    def test_debug_message_only_in_debug_mode(self, meta_store, caplog):
        caplog.set_level(logging.DEBUG, logger="shopsense.tracking")

        make_resolver(meta_store).get_cid(RequestContext())
        assert "No identity found" not in caplog.text

        make_resolver(meta_store, debug_mode=True).get_cid(RequestContext())
        assert "No identity found" in caplog.text


class TestResolveIdentity:
    def test_includes_request_details(self, meta_store, context):
        resolver = make_resolver(meta_store)
        identity = resolver.resolve_identity(context)

        assert identity.cid == "111.222"
        assert identity.uid is None
        assert identity.ip == "198.51.100.4"
        assert identity.user_agent == "Mozilla/5.0 (visitor)"

    def test_order_identity_wins(self, meta_store, context):
        meta_store.update_meta("order", "1001", IDENTITY_META_KEY, "order.cid")
        resolver = make_resolver(meta_store)

        assert resolver.resolve_identity(context, order_id="1001").cid == "order.cid"

    def test_order_identity_uses_order_details(self, meta_store, order):
        """GIVEN a stored order identity SHOULD attribute to it, not the current cookie."""
        meta_store.update_meta("order", "1001", IDENTITY_META_KEY, "order.cid")
        resolver = make_resolver(meta_store)
        admin_context = RequestContext(cookies={"_ga": "GA1.2.999.999"}, user_id=1, is_admin=True)

        identity = resolver.resolve_order_identity(admin_context, order)

        assert identity.cid == "order.cid"
        assert identity.uid == "7"
        assert identity.ip == "203.0.113.9"
        assert identity.user_agent == "Mozilla/5.0 (order)"


class TestStoreIdentity:
    def test_store_order_identity_from_cookie(self, meta_store, context):
        resolver = make_resolver(meta_store)
        assert resolver.store_order_identity(context, "1001") == "111.222"
        assert resolver.get_order_identity("1001") == "111.222"

    def test_store_order_identity_generates_without_cookie(self, meta_store):
        resolver = make_resolver(meta_store)
        resolver.store_order_identity(RequestContext(), "1001")
        assert resolver.get_order_identity("1001") == GENERATED

    def test_store_order_identity_keeps_existing(self, meta_store, context):
        meta_store.update_meta("order", "1001", IDENTITY_META_KEY, "first.cid")
        resolver = make_resolver(meta_store)

        assert resolver.store_order_identity(context, "1001") == "first.cid"
        assert resolver.get_order_identity("1001") == "first.cid"

    def test_store_account_identity(self, meta_store, context):
        resolver = make_resolver(meta_store)
        resolver.store_account_identity(context, 7)
        assert meta_store.get_meta("account", "7", IDENTITY_META_KEY) == "111.222"
