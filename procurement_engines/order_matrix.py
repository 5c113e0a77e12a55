"""
Module: procurement_engines.order_matrix
Responsibility:
    Build the order pricing matrix: for every open customer-order line,
    compute the uncovered quantity, plan its procurement across the
    product's offers, and derive procurement cost and margin.  Totals are
    aggregated over all included lines.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Uses procurement_engines.ranking (priority order) and
    procurement_engines.planner.

Invariants enforced:
    - Fully covered lines (remaining <= 0) are omitted, not nulled.
    - Output preserves the input order of order lines.
    - A line whose product has no offers is a terminal ``no_offers`` state:
      empty plan, no margin; it is not an error.
    - margin and margin_percentage are rounded half-up to 2 places;
      margin_percentage is 0 when the customer price or the remaining
      quantity is 0 (never NaN or infinite).
    - total_procurement_cost == round(sum(line totals), 2).

Failure modes:
    - Propagates NegativeQuantityError / MalformedOfferError from DTO
      construction; never raises for empty data.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal

from procurement_engines.planner import ProcurementPlan, ProcurementPlanner
from procurement_engines.ranking import rank_offers
from procurement_engines.tracer import traced_engine
from procurement_kernel.domain.catalog import (
    EntityId,
    Offer,
    OrderPosition,
    RankingCriterion,
)
from procurement_kernel.domain.values import (
    HUNDRED,
    ZERO,
    ZERO_MONEY,
    round_money,
    round_percent,
)
from procurement_kernel.logging_config import get_logger

logger = get_logger("engines.order_matrix")


@dataclass(frozen=True)
class OrderLineResult:
    """
    Pricing result for one open customer-order line.

    Guarantees:
        - ``no_offers`` lines have an empty plan whose shortfall equals the
          required quantity, and ``margin``/``margin_percentage`` of None.
        - Otherwise ``total_procurement_cost == plan.total_cost``.
    """

    order_id: EntityId
    product_id: EntityId
    product_name: str
    product_code: str | None
    required_quantity: Decimal
    customer_price: Decimal
    plan: ProcurementPlan
    no_offers: bool = False
    total_procurement_cost: Decimal = ZERO_MONEY
    margin: Decimal | None = None
    margin_percentage: Decimal | None = None

    @property
    def shortfall(self) -> Decimal:
        return self.plan.shortfall

    @property
    def has_shortfall(self) -> bool:
        return self.plan.has_shortfall


@dataclass(frozen=True)
class OrderPricingMatrix:
    """
    The order pricing matrix over a batch of order lines.

    Guarantees:
        - ``lines`` follows the input order; fully covered lines and
          non-customer-order lines are omitted.
        - ``total_procurement_cost`` is rounded to 2 places.
    """

    lines: tuple[OrderLineResult, ...]
    total_procurement_cost: Decimal

    @property
    def orders_count(self) -> int:
        return len(self.lines)

    @property
    def lines_with_shortfall(self) -> tuple[OrderLineResult, ...]:
        return tuple(line for line in self.lines if line.has_shortfall)


def calculate_margin(
    customer_price: Decimal,
    quantity: Decimal,
    procurement_cost: Decimal,
) -> tuple[Decimal, Decimal]:
    """
    Margin and margin percentage of selling ``quantity`` at ``customer_price``.

    Returns:
        (margin, margin_percentage), both rounded half-up to 2 places.
        The percentage is 0 when revenue would be zero.
    """
    revenue = customer_price * quantity
    margin = round_money(revenue - procurement_cost)
    if customer_price == ZERO or quantity == ZERO:
        return margin, round_percent(ZERO)
    percentage = (1 - procurement_cost / revenue) * HUNDRED
    return margin, round_percent(percentage)


class OrderPricingMatrixBuilder:
    """
    Plans every open order line of a batch and aggregates the totals.

    Contract:
        Pure; collaborators (offers per product, planner) are explicit.
        Offers are re-ranked by priority here so callers may pass them in
        any order.
    """

    def __init__(self, planner: ProcurementPlanner | None = None):
        self._planner = planner or ProcurementPlanner()

    def build_line(
        self,
        order_line: OrderPosition,
        offers: Sequence[Offer],
    ) -> OrderLineResult | None:
        """
        Price a single order line.

        Returns:
            None when the line is not a customer-order line or is fully
            covered, otherwise its result.
        """
        if not order_line.is_customer_order:
            logger.debug(
                "order_line_not_customer_order",
                extra={"order_id": str(order_line.id), "type": order_line.type.value},
            )
            return None

        remaining = order_line.remaining_quantity
        if remaining <= ZERO:
            logger.debug(
                "order_line_fully_covered",
                extra={"order_id": str(order_line.id)},
            )
            return None

        if not offers:
            logger.info(
                "order_line_no_offers",
                extra={
                    "order_id": str(order_line.id),
                    "product_id": str(order_line.product_id),
                    "required_quantity": str(remaining),
                },
            )
            return OrderLineResult(
                order_id=order_line.id,
                product_id=order_line.product_id,
                product_name=order_line.product_name,
                product_code=order_line.product_code,
                required_quantity=remaining,
                customer_price=order_line.price,
                plan=ProcurementPlan.empty(remaining),
                no_offers=True,
            )

        plan = self._planner.plan(
            required_quantity=remaining,
            ranked_offers=rank_offers(offers, RankingCriterion.PRIORITY),
        )
        total_cost = plan.total_cost
        margin, margin_percentage = calculate_margin(
            order_line.price, remaining, total_cost
        )

        return OrderLineResult(
            order_id=order_line.id,
            product_id=order_line.product_id,
            product_name=order_line.product_name,
            product_code=order_line.product_code,
            required_quantity=remaining,
            customer_price=order_line.price,
            plan=plan,
            total_procurement_cost=total_cost,
            margin=margin,
            margin_percentage=margin_percentage,
        )

    @traced_engine(
        "order_pricing_matrix",
        "1.0",
        fingerprint_fields=("order_lines", "offers_by_product"),
    )
    def build(
        self,
        order_lines: Iterable[OrderPosition],
        offers_by_product: Mapping[EntityId, Sequence[Offer]],
    ) -> OrderPricingMatrix:
        """
        Build the pricing matrix for ``order_lines``.

        Args:
            order_lines: Order positions, in output order.  Only customer-order
                lines are priced.
            offers_by_product: Offers per product id; a missing key means
                the product has no offers.

        Returns:
            OrderPricingMatrix with one result per open line.
        """
        results: list[OrderLineResult] = []
        total = ZERO_MONEY
        skipped = 0
        excluded = 0

        for order_line in order_lines:
            result = self.build_line(
                order_line, offers_by_product.get(order_line.product_id, ())
            )
            if result is None:
                if order_line.is_customer_order:
                    skipped += 1
                else:
                    excluded += 1
                continue
            results.append(result)
            total += result.total_procurement_cost

        matrix = OrderPricingMatrix(
            lines=tuple(results),
            total_procurement_cost=round_money(total),
        )
        logger.info(
            "order_pricing_matrix_built",
            extra={
                "orders_count": matrix.orders_count,
                "fully_covered_skipped": skipped,
                "non_customer_excluded": excluded,
                "total_procurement_cost": str(matrix.total_procurement_cost),
            },
        )
        return matrix
