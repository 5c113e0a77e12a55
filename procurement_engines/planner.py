"""
Module: procurement_engines.planner
Responsibility:
    Allocate a required quantity across a product's ranked supplier offers,
    greedily and in the given order, producing an explainable
    multi-supplier procurement plan with per-supplier cost and a structured
    shortfall.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Depends on procurement_engines.ranking only through its callers: the
    planner never re-orders offers, it walks them exactly as handed in.

Invariants enforced:
    - Conservation: sum(entry.quantity) + shortfall == required_quantity.
    - Never allocates from an offer with stock <= 0 (missing stock is 0).
    - Allocation order == input order; single pass, no backtracking.
      This is NOT a cost-minimizing solver.
    - cost == round_half_up(quantity * unit_price, 2) per entry.
    - Purity: no clock, no I/O, no state kept between calls, so identical
      inputs always produce identical plans.

Failure modes:
    - NegativeQuantityError when required_quantity < 0 (never clamped).
    - InvalidAmountError when required_quantity is not a number.
    - MalformedOfferError is raised by Offer construction, before planning.

Usage:
    from procurement_engines.planner import ProcurementPlanner
    from procurement_engines.ranking import rank_offers

    plan = ProcurementPlanner().plan(
        required_quantity=Decimal("8"),
        ranked_offers=rank_offers(offers),
    )
    plan.entries      # allocations in walk order
    plan.shortfall    # uncovered quantity, Decimal("0.000") when covered
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from procurement_engines.tracer import traced_engine
from procurement_kernel.domain.catalog import EntityId, Offer
from procurement_kernel.domain.values import (
    ZERO,
    ZERO_MONEY,
    ZERO_QUANTITY,
    require_non_negative,
    round_money,
    round_quantity,
    to_decimal,
)
from procurement_kernel.logging_config import get_logger

logger = get_logger("engines.planner")


@dataclass(frozen=True)
class ProcurementPlanEntry:
    """
    One allocation of the plan: buy ``quantity`` from one supplier offer.

    Guarantees:
        - ``quantity`` > 0 with 3 decimal places.
        - ``cost`` == round_half_up(quantity * unit_price, 2).
    """

    supplier_id: EntityId
    supplier_name: str
    offer_id: EntityId
    quantity: Decimal
    unit_price: Decimal
    cost: Decimal
    priority: int


@dataclass(frozen=True)
class ProcurementPlan:
    """
    Result of planning one required quantity.

    Contract:
        A tagged result: real allocations live in ``entries``; uncovered
        quantity lives in ``shortfall``.  Diagnostics are never mixed into
        ``entries``.
    Guarantees:
        - ``allocated_quantity + shortfall == required_quantity``.
        - ``shortfall`` >= 0.
    """

    required_quantity: Decimal
    entries: tuple[ProcurementPlanEntry, ...] = ()
    shortfall: Decimal = ZERO_QUANTITY

    @classmethod
    def empty(cls, required_quantity: Decimal = ZERO_QUANTITY) -> ProcurementPlan:
        """A plan with no allocations; everything required is short."""
        required = round_quantity(required_quantity)
        return cls(required_quantity=required, entries=(), shortfall=required)

    @property
    def allocated_quantity(self) -> Decimal:
        """Total quantity allocated across all entries."""
        return sum((e.quantity for e in self.entries), ZERO_QUANTITY)

    @property
    def total_cost(self) -> Decimal:
        """Sum of the (already rounded) entry costs."""
        return sum((e.cost for e in self.entries), ZERO_MONEY)

    @property
    def has_shortfall(self) -> bool:
        return self.shortfall > ZERO

    @property
    def is_fully_covered(self) -> bool:
        """True if the offers cover the whole required quantity."""
        return not self.has_shortfall

    @property
    def supplier_count(self) -> int:
        """Number of distinct suppliers the plan buys from."""
        return len({e.supplier_id for e in self.entries})


class ProcurementPlanner:
    """
    Greedy, priority-first allocation of a quantity over ranked offers.

    Contract:
        Pure function of its inputs.  Walks ``ranked_offers`` in the given
        order, takes ``min(remaining, stock)`` from each offer that has
        stock, stops when the requirement is met or offers run out.
    Non-goals:
        - Does not rank; callers pass offers already ranked
          (``procurement_engines.ranking.rank_offers``).
        - Does not minimize cost.
    """

    @traced_engine(
        "procurement_planner",
        "1.0",
        fingerprint_fields=("required_quantity", "ranked_offers"),
    )
    def plan(
        self,
        required_quantity: Decimal | str | int,
        ranked_offers: Iterable[Offer],
    ) -> ProcurementPlan:
        """
        Compute the procurement plan for ``required_quantity``.

        Args:
            required_quantity: Quantity to procure (>= 0, 3 decimal places).
            ranked_offers: Offers in allocation order.

        Returns:
            ProcurementPlan with entries in allocation order and the
            uncovered quantity as ``shortfall``.

        Raises:
            NegativeQuantityError: If required_quantity < 0.
            InvalidAmountError: If required_quantity is not a number.
        """
        required = round_quantity(
            require_non_negative(
                to_decimal(required_quantity, "required_quantity"),
                "required_quantity",
            )
        )

        if required == ZERO:
            return ProcurementPlan(required_quantity=required)

        entries: list[ProcurementPlanEntry] = []
        remaining = required

        for offer in ranked_offers:
            if remaining <= ZERO:
                break

            if not offer.is_available:
                logger.debug(
                    "planner_offer_skipped",
                    extra={
                        "offer_id": str(offer.id),
                        "supplier_id": str(offer.supplier_id),
                        "stock": str(offer.stock),
                    },
                )
                continue

            quantity = min(remaining, offer.stock)
            entries.append(
                ProcurementPlanEntry(
                    supplier_id=offer.supplier_id,
                    supplier_name=offer.supplier_name,
                    offer_id=offer.id,
                    quantity=quantity,
                    unit_price=offer.price,
                    cost=round_money(quantity * offer.price),
                    priority=offer.priority,
                )
            )
            remaining -= quantity

        plan = ProcurementPlan(
            required_quantity=required,
            entries=tuple(entries),
            shortfall=remaining,
        )

        if plan.has_shortfall:
            logger.warning(
                "planner_insufficient_stock",
                extra={
                    "required_quantity": str(required),
                    "allocated_quantity": str(plan.allocated_quantity),
                    "shortfall": str(plan.shortfall),
                },
            )
        logger.debug(
            "planner_completed",
            extra={
                "required_quantity": str(required),
                "entry_count": len(entries),
                "total_cost": str(plan.total_cost),
            },
        )
        return plan
