"""
Module: procurement_engines.recommendation
Responsibility:
    Recommend a single supplier for buying one quantity of one product.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Uses ranking only.

Invariants enforced:
    - Two passes over the priority-ranked offers:
        1. the first offer whose stock >= quantity (can fulfill alone);
        2. otherwise the highest-priority offer, flagged can_fulfill=False.
      A lower-priority offer that can fulfill beats a higher-priority one
      that cannot.  This is deliberately not a cost-minimizing search.
    - total_cost == round_half_up(price * quantity, 2).
    - None only when there are no offers.

Failure modes:
    - NegativeQuantityError when quantity < 0.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from procurement_engines.ranking import rank_offers
from procurement_kernel.domain.catalog import EntityId, Offer, RankingCriterion
from procurement_kernel.domain.values import (
    require_non_negative,
    round_money,
    round_quantity,
    to_decimal,
)
from procurement_kernel.logging_config import get_logger

logger = get_logger("engines.recommendation")


@dataclass(frozen=True)
class SupplierRecommendation:
    """The supplier offer recommended for one product and quantity."""

    supplier_id: EntityId
    supplier_name: str
    offer_id: EntityId
    price: Decimal
    available_stock: Decimal
    quantity: Decimal
    can_fulfill: bool
    total_cost: Decimal


def recommend_supplier(
    offers: Iterable[Offer],
    quantity: Decimal | str | int,
) -> SupplierRecommendation | None:
    """
    Pick the supplier to buy ``quantity`` from.

    Args:
        offers: All offers for the product (any order).
        quantity: Quantity to buy (>= 0).

    Returns:
        SupplierRecommendation, or None when ``offers`` is empty.

    Raises:
        NegativeQuantityError: If quantity < 0.
    """
    quantity = round_quantity(
        require_non_negative(to_decimal(quantity, "quantity"), "quantity")
    )
    ranked = rank_offers(offers, RankingCriterion.PRIORITY)
    if not ranked:
        return None

    chosen = next((o for o in ranked if o.stock >= quantity), None)
    if chosen is None:
        chosen = ranked[0]

    can_fulfill = chosen.stock >= quantity
    if not can_fulfill:
        logger.info(
            "recommendation_no_single_supplier",
            extra={
                "product_id": str(chosen.product_id),
                "quantity": str(quantity),
                "fallback_offer_id": str(chosen.id),
            },
        )

    return SupplierRecommendation(
        supplier_id=chosen.supplier_id,
        supplier_name=chosen.supplier_name,
        offer_id=chosen.id,
        price=chosen.price,
        available_stock=chosen.stock,
        quantity=quantity,
        can_fulfill=can_fulfill,
        total_cost=round_money(chosen.price * quantity),
    )
