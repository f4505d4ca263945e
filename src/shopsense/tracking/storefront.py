"""Read-only views of storefront entities.

The tracking engine never owns products, orders or accounts. It looks them
up by ID through a ``Storefront`` and reads only the fields it needs.
Numeric IDs are accepted and stored as strings.
"""

from decimal import Decimal
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field


class _Entity(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)


class Product(_Entity):
    """
    A product or product variation.

    Attributes:
        category_path: Category names from the root category to the leaf.
        variation_attributes: Attribute values selected for a variation,
            in display order.
        default_attributes: Default attribute values of a variable product.
    """

    id: str
    name: str
    sku: str | None = None
    price: Decimal | None = None
    brand: str | None = None
    type: str = "simple"
    parent_id: str | None = None
    category_path: list[str] = Field(default_factory=list)
    variation_attributes: dict[str, str] = Field(default_factory=dict)
    default_attributes: dict[str, str] = Field(default_factory=dict)


class CartItem(_Entity):
    """A line in the visitor's cart."""

    product_id: str
    variation_id: str | None = None
    quantity: int = 1

    @property
    def tracked_product_id(self) -> str:
        """The variation when there is one, otherwise the product."""
        return self.variation_id or self.product_id


class OrderItem(CartItem):
    """A line of a placed order."""

    total: Decimal = Decimal("0")


class Order(_Entity):
    """
    A placed order.

    Attributes:
        number: Customer-facing order number, used as the transaction ID.
        customer_id: Account that placed the order; None for guests.
        is_renewal: True for subscription renewal and resubscribe orders.
    """

    id: str
    number: str
    total: Decimal = Decimal("0")
    tax_total: Decimal = Decimal("0")
    shipping_total: Decimal = Decimal("0")
    currency: str = "USD"
    coupons: list[str] = Field(default_factory=list)
    shipping_method: str | None = None
    payment_method: str | None = None
    customer_id: str | None = None
    customer_ip: str | None = None
    customer_user_agent: str | None = None
    affiliation: str | None = None
    is_renewal: bool = False
    items: list[OrderItem] = Field(default_factory=list)


class Refund(_Entity):
    """A refund issued against an order."""

    id: str
    order_id: str
    amount: Decimal = Decimal("0")
    items: list[OrderItem] = Field(default_factory=list)


class Account(_Entity):
    """A storefront account with its roles and capabilities."""

    id: str
    login: str = ""
    email: str | None = None
    roles: list[str] = Field(default_factory=list)
    capabilities: set[str] = Field(default_factory=set)

    def can(self, capability: str) -> bool:
        return capability in self.capabilities


class Subscription(_Entity):
    """A recurring subscription attached to an account."""

    id: str
    user_id: str | None = None
    total_initial_payment: Decimal = Decimal("0")
    completed_payment_count: int = 0


class Storefront(Protocol):
    """Lookup interface the engine uses to read storefront entities."""

    def get_product(self, product_id: str) -> Product | None: ...

    def get_order(self, order_id: str) -> Order | None: ...

    def get_refund(self, refund_id: str) -> Refund | None: ...

    def get_account(self, account_id: str) -> Account | None: ...


class InMemoryStorefront:
    """Dict-backed ``Storefront`` built from entity snapshots."""

    def __init__(
        self,
        products: list[Product] | None = None,
        orders: list[Order] | None = None,
        refunds: list[Refund] | None = None,
        accounts: list[Account] | None = None,
    ) -> None:
        self.products = {p.id: p for p in products or []}
        self.orders = {o.id: o for o in orders or []}
        self.refunds = {r.id: r for r in refunds or []}
        self.accounts = {a.id: a for a in accounts or []}

    def get_product(self, product_id: str) -> Product | None:
        return self.products.get(str(product_id))

    def get_order(self, order_id: str) -> Order | None:
        return self.orders.get(str(order_id))

    def get_refund(self, refund_id: str) -> Refund | None:
        return self.refunds.get(str(refund_id))

    def get_account(self, account_id: str) -> Account | None:
        return self.accounts.get(str(account_id))
