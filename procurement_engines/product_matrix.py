"""
Module: procurement_engines.product_matrix
Responsibility:
    Per-product pricing overview: every offer of a product ranked by
    priority, the current best offer, min/max price and total stock.  Also
    selects the single best offer per product by a requested criterion.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Uses ranking only.

Invariants enforced:
    - Rows follow the input product order.
    - best_offer is the first offer by priority (after the optional
      supplier filter), or None when the product has no offers.
    - min_price / max_price are None when there are no offers.
    - ``select_best_offers`` omits products without offers.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal

from procurement_engines.ranking import rank_offers
from procurement_kernel.domain.catalog import (
    EntityId,
    Offer,
    Product,
    RankingCriterion,
)
from procurement_kernel.domain.values import ZERO_QUANTITY
from procurement_kernel.logging_config import get_logger

logger = get_logger("engines.product_matrix")


@dataclass(frozen=True)
class ProductPricingRow:
    """Pricing overview of one product."""

    product: Product
    offers: tuple[Offer, ...]
    best_offer: Offer | None
    min_price: Decimal | None
    max_price: Decimal | None
    total_stock: Decimal

    @property
    def offers_count(self) -> int:
        return len(self.offers)

    @property
    def current_price(self) -> Decimal | None:
        return self.best_offer.price if self.best_offer else None

    @property
    def current_stock(self) -> Decimal | None:
        return self.best_offer.stock if self.best_offer else None


@dataclass(frozen=True)
class ProductPricingMatrix:
    rows: tuple[ProductPricingRow, ...]
    supplier_id: EntityId | None = None

    @property
    def products_count(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class BestOffer:
    """The best offer of a product under one ranking criterion."""

    product: Product
    offer: Offer
    criterion: RankingCriterion


def product_row(product: Product, offers: Sequence[Offer]) -> ProductPricingRow:
    ranked = rank_offers(offers, RankingCriterion.PRIORITY)
    prices = [o.price for o in ranked]
    return ProductPricingRow(
        product=product,
        offers=ranked,
        best_offer=ranked[0] if ranked else None,
        min_price=min(prices) if prices else None,
        max_price=max(prices) if prices else None,
        total_stock=sum((o.stock for o in ranked), ZERO_QUANTITY),
    )


def build_product_matrix(
    products: Iterable[Product],
    offers_by_product: Mapping[EntityId, Sequence[Offer]],
    supplier_id: EntityId | None = None,
) -> ProductPricingMatrix:
    """
    Build the product pricing matrix.

    Args:
        products: Products, in output order.
        offers_by_product: Offers per product id.
        supplier_id: When given, only that supplier's offers are considered.
    """
    rows = []
    for product in products:
        offers = offers_by_product.get(product.id, ())
        if supplier_id is not None:
            offers = [o for o in offers if str(o.supplier_id) == str(supplier_id)]
        rows.append(product_row(product, offers))

    logger.info(
        "product_pricing_matrix_built",
        extra={
            "products_processed": len(rows),
            "supplier_id": None if supplier_id is None else str(supplier_id),
        },
    )
    return ProductPricingMatrix(rows=tuple(rows), supplier_id=supplier_id)


def select_best_offers(
    products: Iterable[Product],
    offers_by_product: Mapping[EntityId, Sequence[Offer]],
    criterion: RankingCriterion | str = RankingCriterion.PRIORITY,
) -> tuple[BestOffer, ...]:
    """
    Best offer per product by ``criterion`` ("price" or "priority").

    Products without offers are omitted.
    """
    criterion = RankingCriterion.parse(criterion)
    selected = []
    for product in products:
        ranked = rank_offers(offers_by_product.get(product.id, ()), criterion)
        if ranked:
            selected.append(BestOffer(product=product, offer=ranked[0], criterion=criterion))
    return tuple(selected)
