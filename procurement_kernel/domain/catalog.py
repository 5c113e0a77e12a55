"""
Catalog -- Immutable DTOs for products, suppliers, offers and order lines.

Responsibility:
    The nouns the pricing engine operates on.  Every DTO is a frozen
    dataclass that normalizes its numeric fields on construction, so the
    engines only ever see Decimal values with the right scale.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  Produced by selectors (from ORM rows)
    or by ``from_mapping`` (from JSON payloads handed in by the HTTP layer).

Invariants enforced:
    - Offer.price is a non-negative Decimal with 2 places.
    - Offer.stock is a Decimal with 3 places; a missing stock is zero.
    - Offer.priority is an int (higher = preferred).
    - OrderPosition quantities are non-negative Decimals with 3 places.
      ``purchase_quantity > total_quantity`` is tolerated (over-coverage).

Failure modes:
    - MalformedOfferError for a missing/negative price or a non-int priority.
    - NegativeQuantityError for negative order-line quantities.
    - InvalidAmountError for unparsable numbers.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from procurement_kernel.domain.values import (
    ZERO,
    ZERO_MONEY,
    ZERO_QUANTITY,
    require_non_negative,
    to_money,
    to_quantity,
    to_stock,
)
from procurement_kernel.exceptions import InvalidAmountError, MalformedOfferError

EntityId = UUID | str | int


class RankingCriterion(str, Enum):
    """Criterion used to order the offers of one product."""

    PRIORITY = "priority"  # Descending, default for procurement
    PRICE = "price"  # Ascending, "cheapest first"

    @classmethod
    def parse(cls, value: Any) -> RankingCriterion:
        """Accept exactly "price" or "priority"; anything else is PRIORITY."""
        if isinstance(value, RankingCriterion):
            return value
        if value == cls.PRICE.value:
            return cls.PRICE
        return cls.PRIORITY


class OrderPositionType(str, Enum):
    """Kind of order a position belongs to."""

    CUSTOMER_ORDER = "customer_order"
    PURCHASE_ORDER = "purchase_order"


@dataclass(frozen=True)
class Product:
    """A product, optionally a variant of a parent product."""

    id: EntityId
    name: str
    code: str | None = None
    article: str | None = None
    parent_id: EntityId | None = None
    account_id: EntityId | None = None

    @property
    def is_variant(self) -> bool:
        return self.parent_id is not None


@dataclass(frozen=True)
class Supplier:
    """A supplier (counterparty that offers products)."""

    id: EntityId
    name: str
    account_id: EntityId | None = None


@dataclass(frozen=True)
class Offer:
    """
    A (supplier, product) price/stock/priority record within an account.

    Contract:
        Frozen dataclass; numeric fields are normalized in __post_init__.
    Guarantees:
        - ``price`` >= 0 with 2 decimal places.
        - ``stock`` has 3 decimal places; None becomes 0.000.  Negative
          stock is kept as-is (the planner skips it).
        - ``priority`` is an int.
    Non-goals:
        - Does not enforce the (account, supplier, product) uniqueness;
          that is the persistence adapter's upsert contract.
    """

    id: EntityId
    product_id: EntityId
    supplier_id: EntityId
    price: Decimal
    stock: Decimal | None = ZERO_QUANTITY
    priority: int = 0
    supplier_name: str = ""
    account_id: EntityId | None = None

    def __post_init__(self) -> None:
        if self.price is None:
            raise MalformedOfferError(self.id, "price", "is missing")
        try:
            price = to_money(self.price, "price")
        except InvalidAmountError as e:
            raise MalformedOfferError(self.id, "price", "is not a number") from e
        if price < ZERO:
            raise MalformedOfferError(self.id, "price", "is negative")
        object.__setattr__(self, "price", price)

        try:
            stock = to_stock(self.stock, "stock")
        except InvalidAmountError as e:
            raise MalformedOfferError(self.id, "stock", "is not a number") from e
        object.__setattr__(self, "stock", stock)

        if isinstance(self.priority, bool) or not isinstance(self.priority, int):
            raise MalformedOfferError(self.id, "priority", "is not an integer")

    @property
    def is_available(self) -> bool:
        """True if the offer has stock to allocate from."""
        return self.stock > ZERO

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Offer:
        """
        Build an Offer from a JSON-like mapping.

        Accepts ``supplier`` as a nested ``{"id", "name"}`` object or flat
        ``supplier_id`` / ``supplier_name`` keys.
        """
        supplier = data.get("supplier") or {}
        priority = data.get("priority", 0)
        if priority is None:
            priority = 0
        return cls(
            id=data["id"],
            product_id=data["product_id"],
            supplier_id=data.get("supplier_id", supplier.get("id")),
            supplier_name=data.get("supplier_name", supplier.get("name", "")) or "",
            price=data.get("price"),
            stock=data.get("stock"),
            priority=priority,
            account_id=data.get("account_id"),
        )


@dataclass(frozen=True)
class OrderPosition:
    """
    A customer-order or purchase-order line.

    Contract:
        ``total_quantity`` is the required quantity; ``purchase_quantity``
        is the part already covered by linked purchase-order positions.
    Guarantees:
        - Both quantities are non-negative with 3 decimal places.
        - ``price`` is the customer-facing unit price with 2 places.
        - ``covered_by`` lists the purchase-order positions that cover
          this line (coverage relation).
    """

    id: EntityId
    product_id: EntityId
    total_quantity: Decimal
    price: Decimal = ZERO_MONEY
    purchase_quantity: Decimal = ZERO_QUANTITY
    type: OrderPositionType = OrderPositionType.CUSTOMER_ORDER
    product_name: str = ""
    product_code: str | None = None
    account_id: EntityId | None = None
    covered_by: tuple[EntityId, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        total = require_non_negative(
            to_quantity(self.total_quantity, "total_quantity"), "total_quantity"
        )
        purchased = require_non_negative(
            to_quantity(
                ZERO if self.purchase_quantity is None else self.purchase_quantity,
                "purchase_quantity",
            ),
            "purchase_quantity",
        )
        price = to_money(ZERO if self.price is None else self.price, "price")
        object.__setattr__(self, "total_quantity", total)
        object.__setattr__(self, "purchase_quantity", purchased)
        object.__setattr__(self, "price", price)
        object.__setattr__(self, "type", OrderPositionType(self.type))
        object.__setattr__(self, "covered_by", tuple(self.covered_by))

    @property
    def remaining_quantity(self) -> Decimal:
        """Uncovered quantity; negative when over-covered."""
        return self.total_quantity - self.purchase_quantity

    @property
    def is_customer_order(self) -> bool:
        return self.type == OrderPositionType.CUSTOMER_ORDER

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> OrderPosition:
        """Build an OrderPosition from a JSON-like mapping."""
        product = data.get("product") or {}
        return cls(
            id=data["id"],
            product_id=data.get("product_id", product.get("id")),
            total_quantity=data.get("total_quantity", data.get("quantity")),
            purchase_quantity=data.get("purchase_quantity", ZERO),
            price=data.get("price", ZERO),
            type=data.get("type", OrderPositionType.CUSTOMER_ORDER),
            product_name=data.get("product_name", product.get("name", "")) or "",
            product_code=data.get("product_code", product.get("code")),
            account_id=data.get("account_id"),
            covered_by=tuple(data.get("covered_by", ())),
        )
