"""
Module: procurement_engines.comparison
Responsibility:
    Cross-supplier aggregate statistics: how many offers a supplier has,
    their average price, total stock and how many distinct products they
    cover.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - One SupplierStats per input supplier, in input order; no ranking.
    - avg_price is the mean price rounded half-up to 2 places, and 0.00
      for a supplier without offers.
    - total_stock sums stock with a missing stock counted as 0.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal

from procurement_kernel.domain.catalog import EntityId, Offer, Supplier
from procurement_kernel.domain.values import ZERO_MONEY, ZERO_QUANTITY, round_money
from procurement_kernel.logging_config import get_logger

logger = get_logger("engines.comparison")


@dataclass(frozen=True)
class SupplierStats:
    """Aggregate offer statistics for one supplier."""

    supplier_id: EntityId
    supplier_name: str
    total_offers: int
    avg_price: Decimal
    total_stock: Decimal
    products_covered: int
    offers: tuple[Offer, ...] = ()


def supplier_stats(supplier: Supplier, offers: Sequence[Offer]) -> SupplierStats:
    """Compute the statistics of one supplier's offers."""
    total_offers = len(offers)
    if total_offers:
        avg_price = round_money(sum((o.price for o in offers), ZERO_MONEY) / total_offers)
    else:
        avg_price = ZERO_MONEY

    return SupplierStats(
        supplier_id=supplier.id,
        supplier_name=supplier.name,
        total_offers=total_offers,
        avg_price=avg_price,
        total_stock=sum((o.stock for o in offers), ZERO_QUANTITY),
        products_covered=len({o.product_id for o in offers}),
        offers=tuple(offers),
    )


def compare_suppliers(
    suppliers: Iterable[Supplier],
    offers_by_supplier: Mapping[EntityId, Sequence[Offer]],
) -> tuple[SupplierStats, ...]:
    """
    Statistics for every supplier, in input order.

    Args:
        suppliers: Suppliers to compare.
        offers_by_supplier: Offers per supplier id; a missing key means the
            supplier has no offers.
    """
    stats = tuple(
        supplier_stats(supplier, offers_by_supplier.get(supplier.id, ()))
        for supplier in suppliers
    )
    logger.info("suppliers_compared", extra={"suppliers_count": len(stats)})
    return stats
