"""
PricingService -- orchestrates catalog reads and the pricing engines.

Responsibility:
    Answers the pricing questions of one account: the order pricing
    matrix, a supplier recommendation, supplier batching, supplier
    comparison, the product pricing matrix and best offers.  Reads come
    from an ``OfferSource``; all arithmetic is delegated to
    ``procurement_engines``; results are returned as JSON payloads.

Architecture position:
    Services -- stateful orchestration over engines + kernel.  Holds no
    session itself; the OfferSource owns persistence.

Invariants enforced:
    - Every query is scoped to one account.  Entities the source returns
      for another account are rejected with AccountScopeError before any
      engine sees them.
    - Log records emitted while serving a request carry the account id.

Failure modes:
    - ProductNotFoundError when a recommendation targets an unknown product.
    - AccountScopeError when the source leaks a foreign entity.
    - NegativeQuantityError for a negative recommendation quantity.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import Any

from procurement_config.schema import PricingConfig
from procurement_engines.batching import group_by_supplier
from procurement_engines.comparison import compare_suppliers
from procurement_engines.order_matrix import (
    OrderPricingMatrix,
    OrderPricingMatrixBuilder,
)
from procurement_engines.planner import ProcurementPlanner
from procurement_engines.product_matrix import (
    build_product_matrix,
    select_best_offers,
)
from procurement_engines.recommendation import recommend_supplier
from procurement_kernel.domain.catalog import EntityId, RankingCriterion
from procurement_kernel.exceptions import AccountScopeError, ProductNotFoundError
from procurement_kernel.logging_config import LogContext, get_logger
from procurement_services import serialization
from procurement_services.offer_source import OfferSource

logger = get_logger("services.pricing")


def _ensure_account(
    account_id: EntityId,
    entity_type: str,
    entities: Iterable[Any],
) -> None:
    for entity in entities:
        owner = getattr(entity, "account_id", None)
        if owner is not None and str(owner) != str(account_id):
            logger.error(
                "account_scope_violation",
                extra={
                    "entity_type": entity_type,
                    "entity_id": str(entity.id),
                    "owner_account_id": str(owner),
                },
            )
            raise AccountScopeError(account_id, entity_type, entity.id)


class PricingService:
    """
    Account-scoped pricing queries.

    Args:
        source: Catalog reads (normally a CatalogSelector).
        config: Active pricing configuration; supplies the default best-offer
            criterion.  Defaults to a config with PRIORITY.
        planner: Procurement planner override.
    """

    def __init__(
        self,
        source: OfferSource,
        config: PricingConfig | None = None,
        planner: ProcurementPlanner | None = None,
    ):
        self._source = source
        self._config = config or PricingConfig(name="default")
        self._matrix_builder = OrderPricingMatrixBuilder(planner)

    # -----------------------------------------------------------------
    # Order lines
    # -----------------------------------------------------------------

    def build_order_matrix(
        self,
        account_id: EntityId,
        order_position_ids: Sequence[EntityId],
    ) -> OrderPricingMatrix:
        """Typed order pricing matrix for the given customer-order positions."""
        order_lines = self._source.customer_order_lines(account_id, order_position_ids)
        _ensure_account(account_id, "order_position", order_lines)

        product_ids = list(dict.fromkeys(line.product_id for line in order_lines))
        offers_by_product = self._source.offers_for_products(account_id, product_ids)
        for offers in offers_by_product.values():
            _ensure_account(account_id, "offer", offers)

        return self._matrix_builder.build(order_lines, offers_by_product)

    def order_pricing_matrix(
        self,
        account_id: EntityId,
        order_position_ids: Sequence[EntityId],
    ) -> dict[str, Any]:
        with LogContext.bind(account_id=account_id):
            logger.info(
                "order_pricing_matrix_requested",
                extra={"positions_requested": len(order_position_ids)},
            )
            matrix = self.build_order_matrix(account_id, order_position_ids)
            return serialization.order_matrix_payload(account_id, matrix)

    def group_orders_by_supplier(
        self,
        account_id: EntityId,
        order_position_ids: Sequence[EntityId],
    ) -> dict[str, Any]:
        with LogContext.bind(account_id=account_id):
            matrix = self.build_order_matrix(account_id, order_position_ids)
            groups = group_by_supplier(matrix)
            return serialization.supplier_groups_payload(account_id, groups)

    # -----------------------------------------------------------------
    # Products
    # -----------------------------------------------------------------

    def recommend_supplier(
        self,
        account_id: EntityId,
        product_id: EntityId,
        quantity: Decimal | str | int,
    ) -> dict[str, Any]:
        """
        Recommend one supplier for ``quantity`` of a product.

        The ``recommendation`` key is None when the product has no offers.

        Raises:
            ProductNotFoundError: The product does not exist in the account.
        """
        with LogContext.bind(account_id=account_id):
            products = self._source.products(account_id, [product_id])
            if not products:
                raise ProductNotFoundError(product_id, account_id)
            product = products[0]
            _ensure_account(account_id, "product", [product])

            offers = self._source.offers_for_products(account_id, [product.id])
            product_offers = offers.get(product.id, [])
            _ensure_account(account_id, "offer", product_offers)

            recommendation = recommend_supplier(product_offers, quantity)
            return {
                "account_id": str(account_id),
                "product_id": str(product.id),
                "product_name": product.name,
                "recommendation": (
                    serialization.recommendation_payload(recommendation)
                    if recommendation
                    else None
                ),
            }

    def product_pricing_matrix(
        self,
        account_id: EntityId,
        product_ids: Sequence[EntityId],
        supplier_id: EntityId | None = None,
    ) -> dict[str, Any]:
        with LogContext.bind(account_id=account_id):
            products = self._source.products(account_id, product_ids)
            _ensure_account(account_id, "product", products)
            offers_by_product = self._source.offers_for_products(
                account_id, [p.id for p in products], supplier_id=supplier_id
            )
            for offers in offers_by_product.values():
                _ensure_account(account_id, "offer", offers)

            matrix = build_product_matrix(products, offers_by_product, supplier_id)
            payload = serialization.product_matrix_payload(account_id, matrix)
            payload["supplier_id"] = None if supplier_id is None else str(supplier_id)
            return payload

    def best_offers(
        self,
        account_id: EntityId,
        product_ids: Sequence[EntityId],
        criteria: RankingCriterion | str | None = None,
    ) -> dict[str, Any]:
        """
        Best offer per product; products without offers are omitted.

        ``criteria`` falls back to the configured default when None.
        """
        criterion = RankingCriterion.parse(
            self._config.default_criterion if criteria is None else criteria
        )
        with LogContext.bind(account_id=account_id):
            products = self._source.products(account_id, product_ids)
            _ensure_account(account_id, "product", products)
            offers_by_product = self._source.offers_for_products(
                account_id, [p.id for p in products]
            )
            for offers in offers_by_product.values():
                _ensure_account(account_id, "offer", offers)

            best = select_best_offers(products, offers_by_product, criterion)
            return serialization.best_offers_payload(account_id, criterion.value, best)

    # -----------------------------------------------------------------
    # Suppliers
    # -----------------------------------------------------------------

    def compare_suppliers(
        self,
        account_id: EntityId,
        supplier_ids: Sequence[EntityId],
    ) -> dict[str, Any]:
        with LogContext.bind(account_id=account_id):
            suppliers = self._source.suppliers(account_id, supplier_ids)
            _ensure_account(account_id, "supplier", suppliers)
            offers_by_supplier = self._source.offers_for_suppliers(
                account_id, [s.id for s in suppliers]
            )
            for offers in offers_by_supplier.values():
                _ensure_account(account_id, "offer", offers)

            stats = compare_suppliers(suppliers, offers_by_supplier)
            return serialization.comparison_payload(account_id, stats)
