"""
Module: procurement_engines.batching
Responsibility:
    Regroup a computed order pricing matrix by supplier, so that one
    consolidated purchase order per supplier can be created.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Consumes
    procurement_engines.order_matrix.OrderPricingMatrix.

Invariants enforced:
    - Groups appear in first-seen supplier order (matrix line order, then
      plan entry order), never sorted by id or cost.
    - group.total_cost == sum(item.cost); entry costs are already rounded
      and are not re-rounded here.
    - Only real plan entries become items: ``no_offers`` lines and the
      shortfall part of a partially covered line contribute nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from procurement_engines.order_matrix import OrderPricingMatrix
from procurement_kernel.domain.catalog import EntityId
from procurement_kernel.domain.values import ZERO_MONEY, ZERO_QUANTITY
from procurement_kernel.logging_config import get_logger

logger = get_logger("engines.batching")


@dataclass(frozen=True)
class SupplierGroupItem:
    """One order line's allocation to a supplier."""

    order_id: EntityId
    product_id: EntityId
    product_name: str
    offer_id: EntityId
    quantity: Decimal
    price: Decimal
    cost: Decimal


@dataclass
class SupplierGroup:
    """
    All allocations to one supplier across a batch of order lines.

    Mutable while grouping; handed out inside a tuple once complete.
    """

    supplier_id: EntityId
    supplier_name: str
    items: list[SupplierGroupItem] = field(default_factory=list)
    total_cost: Decimal = ZERO_MONEY

    def add(self, item: SupplierGroupItem) -> None:
        self.items.append(item)
        self.total_cost += item.cost

    @property
    def total_quantity(self) -> Decimal:
        return sum((i.quantity for i in self.items), ZERO_QUANTITY)


def group_by_supplier(matrix: OrderPricingMatrix) -> tuple[SupplierGroup, ...]:
    """
    Bucket every plan entry of ``matrix`` by supplier.

    Returns:
        Tuple of SupplierGroup in first-seen supplier order.
    """
    groups: dict[EntityId, SupplierGroup] = {}

    for line in matrix.lines:
        if line.no_offers:
            continue
        for entry in line.plan.entries:
            group = groups.get(entry.supplier_id)
            if group is None:
                group = SupplierGroup(
                    supplier_id=entry.supplier_id,
                    supplier_name=entry.supplier_name,
                )
                groups[entry.supplier_id] = group
            group.add(
                SupplierGroupItem(
                    order_id=line.order_id,
                    product_id=line.product_id,
                    product_name=line.product_name,
                    offer_id=entry.offer_id,
                    quantity=entry.quantity,
                    price=entry.unit_price,
                    cost=entry.cost,
                )
            )

    logger.info(
        "orders_grouped_by_supplier",
        extra={
            "orders_count": matrix.orders_count,
            "suppliers_count": len(groups),
        },
    )
    return tuple(groups.values())
