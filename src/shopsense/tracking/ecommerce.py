"""Enhanced Ecommerce payloads.

Builds the product, impression and action objects sent with events, both
as JavaScript field objects and as flattened measurement parameters.
Empty fields are always left out of the serialised payload.
"""

import logging
from collections.abc import Iterable

from shopsense.tracking._payload import compact, format_price, to_cents
from shopsense.tracking.hooks import TrackingHooks
from shopsense.tracking.schema import (
    ProductAction,
    ProductActionType,
    ProductFieldObject,
    ProductImpression,
    Scalar,
)
from shopsense.tracking.storefront import CartItem, Order, Product, Storefront

__all__ = [
    "PayloadBuilder",
    "compact",
    "measurement_params",
    "to_cents",
]

logger = logging.getLogger(__name__)

_PRODUCT_PARAMS = (
    ("id", "id"),
    ("name", "nm"),
    ("brand", "br"),
    ("category", "ca"),
    ("variant", "va"),
    ("price", "pr"),
    ("quantity", "qt"),
    ("position", "ps"),
    ("coupon", "cc"),
)

_ACTION_PARAMS = (
    ("id", "ti"),
    ("affiliation", "ta"),
    ("revenue", "tr"),
    ("tax", "tt"),
    ("shipping", "ts"),
    ("coupon", "tcc"),
    ("list", "pal"),
    ("step", "cos"),
    ("option", "col"),
)

_IMPRESSION_FIELDS = frozenset(ProductImpression.model_fields) - {"kind", "attributes"}


class PayloadBuilder:
    """Shapes storefront products and orders into Enhanced Ecommerce objects."""

    def __init__(self, storefront: Storefront, hooks: TrackingHooks | None = None) -> None:
        self.storefront = storefront
        self.hooks = hooks or TrackingHooks()

    # ------------------------------------------------------------------ #
    # Product fields
    # ------------------------------------------------------------------ #

    def product_identifier(self, product: Product) -> str:
        """SKU when set, otherwise the internal product ID."""
        identifier = product.sku or product.id
        if self.hooks.product_identifier is not None:
            identifier = self.hooks.product_identifier(identifier, product)
        return str(identifier)

    @staticmethod
    def category_hierarchy(product: Product) -> str:
        """Category path flattened to ``Root/Child/Leaf``."""
        return "/".join(name.strip() for name in product.category_path if name and name.strip())

    @staticmethod
    def variant(product: Product) -> str:
        """Variation attribute values, comma separated, in attribute order."""
        return ", ".join(value for value in product.variation_attributes.values() if value)

    def product_details(
        self,
        product: Product,
        quantity: int | None = 1,
        position: int | None = None,
    ) -> ProductFieldObject:
        """Build the product field object for ``ec:addProduct`` and ``pr`` params."""
        data = {
            "id": self.product_identifier(product),
            "name": product.name,
            "brand": product.brand,
            "category": self.category_hierarchy(product),
            "variant": self.variant(product),
            "price": format_price(product.price),
            "quantity": quantity,
            "position": position,
        }
        if self.hooks.product_details is not None:
            data = self.hooks.product_details(data, product)
        return ProductFieldObject.model_validate(compact(data))

    # ------------------------------------------------------------------ #
    # Impressions and actions
    # ------------------------------------------------------------------ #

    def build_impression(
        self,
        product: Product,
        position: int | None = 1,
        list_name: str | None = None,
    ) -> ProductImpression:
        """Build an impression for a product shown in a list.

        Default attributes of variable products are merged in as custom
        fields, so they can be mapped to custom dimensions.
        """
        data = {
            "id": self.product_identifier(product),
            "name": product.name,
            "list": list_name,
            "brand": product.brand,
            "category": self.category_hierarchy(product),
            "variant": self.variant(product),
            "price": format_price(product.price),
            "position": position,
        }
        if product.type == "variable":
            data.update(product.default_attributes)
        if self.hooks.impression_data is not None:
            data = self.hooks.impression_data(data, product)

        data = compact(data)
        attributes = {k: str(v) for k, v in data.items() if k not in _IMPRESSION_FIELDS}
        known = {k: v for k, v in data.items() if k in _IMPRESSION_FIELDS}
        return ProductImpression.model_validate({**known, "attributes": attributes})

    def build_product_action(
        self,
        action: ProductActionType,
        product: Product | None = None,
        extra_fields: dict[str, Scalar] | None = None,
        quantity: int | None = None,
    ) -> ProductAction:
        """Build a product action, optionally about a single product."""
        products = [self.product_details(product, quantity=quantity)] if product is not None else []
        return ProductAction(action=action, products=products, fields=compact(extra_fields or {}))

    def build_line_items(self, items: Iterable[CartItem]) -> list[ProductFieldObject]:
        """Product field objects for cart or order lines; unknown products are skipped."""
        products = []
        for item in items:
            product = self.storefront.get_product(item.tracked_product_id)
            if product is None:
                logger.debug("Skipping unknown product %s", item.tracked_product_id)
                continue
            products.append(self.product_details(product, quantity=item.quantity))
        return products

    def build_checkout(
        self,
        items: Iterable[CartItem],
        step: int,
        option: str | None = None,
    ) -> ProductAction:
        """Checkout step action with the cart contents."""
        return ProductAction(
            action="checkout",
            products=self.build_line_items(items),
            fields=compact({"step": step, "option": option}),
        )

    def build_purchase(self, order: Order) -> ProductAction:
        """Purchase action: the transaction and its line items."""
        return ProductAction(
            action="purchase",
            products=self.build_line_items(order.items),
            fields=compact(
                {
                    "id": order.number,
                    "affiliation": order.affiliation,
                    "revenue": format_price(order.total),
                    "tax": format_price(order.tax_total),
                    "shipping": format_price(order.shipping_total),
                    "coupon": ", ".join(order.coupons),
                }
            ),
        )

    def build_refund(self, order: Order, refunded_items: Iterable[CartItem] = ()) -> ProductAction:
        """Refund action. With no items the whole transaction is refunded."""
        return ProductAction(
            action="refund",
            products=self.build_line_items(refunded_items),
            fields={"id": order.number},
        )


def measurement_params(payload: ProductAction | ProductImpression | None) -> dict[str, str]:
    """Flatten an Enhanced Ecommerce payload into measurement parameters.

    Products become ``pr1id``, ``pr1nm``... and impressions go into the
    first impression list (``il1nm``, ``il1pi1id``...).
    """
    if payload is None:
        return {}

    params: dict[str, str] = {}

    if isinstance(payload, ProductImpression):
        data = payload.to_payload()
        if "list" in data:
            params["il1nm"] = str(data["list"])
        for field, code in _PRODUCT_PARAMS:
            if field in data:
                params[f"il1pi1{code}"] = str(data[field])
        return params

    params["pa"] = payload.action
    fields = payload.to_payload()
    for field, code in _ACTION_PARAMS:
        if field in fields:
            params[code] = str(fields[field])

    for index, product in enumerate(payload.products, start=1):
        data = product.to_payload()
        for field, code in _PRODUCT_PARAMS:
            if field in data:
                params[f"pr{index}{code}"] = str(data[field])

    return params
