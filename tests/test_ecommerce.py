"""Tests for Enhanced Ecommerce payloads."""

import pytest

from shopsense.tracking import (
    CartItem,
    PayloadBuilder,
    ProductAction,
    TrackingHooks,
    compact,
    measurement_params,
    to_cents,
)


@pytest.fixture
def builder(storefront) -> PayloadBuilder:
    return PayloadBuilder(storefront)


class TestHelpers:
    def test_compact_drops_empty_values(self):
        data = {"id": "1", "name": "", "brand": None, "list": [], "attrs": {}, "": "x"}
        assert compact(data) == {"id": "1"}

    def test_compact_keeps_zero_and_false(self):
        assert compact({"position": 0, "nonInteraction": False}) == {
            "position": 0,
            "nonInteraction": False,
        }

    @pytest.mark.parametrize(
        ("amount", "cents"),
        [
            ("19.999", 2000),
            ("19.994", 1999),
            ("10.005", 1001),
            (49.99, 4999),
            ("0", 0),
            ("", 0),
            ("abc", 0),
        ],
    )
    def test_to_cents(self, amount, cents):
        assert to_cents(amount) == cents


class TestProductDetails:
    def test_simple_product(self, builder, hoodie):
        details = builder.product_details(hoodie, quantity=2)

        assert details.to_payload() == {
            "id": "HD-1",
            "name": "Hoodie",
            "brand": "Acme",
            "category": "Clothing/Hoodies",
            "price": "45.00",
            "quantity": 2,
        }

    def test_falls_back_to_product_id(self, builder, tee_large):
        details = builder.product_details(tee_large)
        assert details.id == "51"
        assert details.variant == "L, Blue"

    def test_hooks(self, storefront, hoodie):
        hooks = TrackingHooks(
            product_identifier=lambda computed, product: f"sku-{computed}",
            product_details=lambda data, product: {**data, "coupon": "SPRING"},
        )
        details = PayloadBuilder(storefront, hooks).product_details(hoodie)

        assert details.id == "sku-HD-1"
        assert details.coupon == "SPRING"


class TestImpressions:
    def test_impression(self, builder, hoodie):
        impression = builder.build_impression(hoodie, position=3, list_name="Search")

        assert impression.to_payload() == {
            "id": "HD-1",
            "name": "Hoodie",
            "list": "Search",
            "brand": "Acme",
            "category": "Clothing/Hoodies",
            "price": "45.00",
            "position": 3,
        }

    def test_variable_product_defaults_become_fields(self, builder, tee):
        impression = builder.build_impression(tee)

        assert impression.attributes == {"size": "M"}
        assert impression.to_payload()["size"] == "M"

    def test_blank_list_omitted(self, builder, hoodie):
        assert "list" not in builder.build_impression(hoodie, list_name="").to_payload()

    def test_impression_hook(self, storefront, hoodie):
        hooks = TrackingHooks(impression_data=lambda data, product: {**data, "dimension2": "sale"})
        impression = PayloadBuilder(storefront, hooks).build_impression(hoodie)

        assert impression.attributes == {"dimension2": "sale"}
        assert impression.to_payload()["dimension2"] == "sale"


class TestActions:
    def test_checkout(self, builder):
        action = builder.build_checkout(
            [CartItem(product_id=42, quantity=2), CartItem(product_id=999)],
            step=1,
            option="Guest",
        )

        assert action.action == "checkout"
        assert [p.id for p in action.products] == ["HD-1"]
        assert action.to_payload() == {"step": 1, "option": "Guest"}

    def test_purchase(self, builder, order):
        action = builder.build_purchase(order)

        assert action.to_payload() == {
            "id": "1001",
            "revenue": "49.99",
            "tax": "4.00",
            "shipping": "0.99",
            "coupon": "SPRING",
        }
        assert action.products[0].quantity == 1

    def test_full_refund_has_no_products(self, builder, order):
        action = builder.build_refund(order)
        assert action.products == []
        assert action.to_payload() == {"id": "1001"}


class TestMeasurementParams:
    def test_none(self):
        assert measurement_params(None) == {}

    def test_purchase(self, builder, order):
        params = measurement_params(builder.build_purchase(order))

        assert params["pa"] == "purchase"
        assert params["ti"] == "1001"
        assert params["tr"] == "49.99"
        assert params["tt"] == "4.00"
        assert params["ts"] == "0.99"
        assert params["tcc"] == "SPRING"
        assert params["pr1id"] == "HD-1"
        assert params["pr1qt"] == "1"
        assert params["pr1ca"] == "Clothing/Hoodies"
        assert "ta" not in params

    def test_checkout_option(self):
        params = measurement_params(
            ProductAction(action="checkout_option", fields={"step": 1, "option": "Registered User"})
        )
        assert params == {"pa": "checkout_option", "cos": "1", "col": "Registered User"}

    def test_impression(self, builder, hoodie):
        params = measurement_params(builder.build_impression(hoodie, position=2, list_name="Search"))

        assert params["il1nm"] == "Search"
        assert params["il1pi1id"] == "HD-1"
        assert params["il1pi1ps"] == "2"
