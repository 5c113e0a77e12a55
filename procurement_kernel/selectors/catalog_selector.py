"""
Module: procurement_kernel.selectors.catalog_selector
Responsibility: Account-scoped read queries over the synchronized catalog.
    This is the persistence-backed implementation of the ``OfferSource``
    capability consumed by ``procurement_services``: it loads products,
    suppliers, offers (ordered by priority) and open customer-order lines,
    and hands them out as immutable domain DTOs.
Architecture position: Kernel > Selectors.  Imports models/ and domain/.

Invariants enforced:
    - Every query filters on account_id.  No method can return a row that
      belongs to a different account than the one requested.
    - Offers are returned ordered by priority DESC, then by creation time and
      id, so repeated reads yield the same order for equal priorities.
    - Read-only: no add/delete/flush/commit.
"""

from __future__ import annotations

from collections.abc import Sequence

from procurement_kernel.domain.catalog import (
    EntityId,
    Offer,
    OrderPosition,
    OrderPositionType,
    Product,
    Supplier,
)
from procurement_kernel.logging_config import get_logger
from procurement_kernel.models.catalog import (
    OfferModel,
    OrderPositionModel,
    ProductModel,
    SupplierModel,
)
from procurement_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.catalog")


class CatalogSelector(BaseSelector):
    """
    Read-only access to products, suppliers, offers and order lines.

    Contract:
        All methods take the account id first and return DTOs in a
        deterministic order.  Unknown or foreign ids are silently absent
        from the result; callers decide whether absence is an error.
        Request ids are coerced to UUID; result keys are always UUIDs.
    """

    def products(
        self,
        account_id: EntityId,
        product_ids: Sequence[EntityId],
    ) -> list[Product]:
        """Products of the account, in the order of ``product_ids``."""
        product_ids = self.coerce_ids(product_ids)
        if not product_ids:
            return []
        rows = self.session.scalars(
            self.scoped(ProductModel, account_id).where(
                ProductModel.id.in_(list(product_ids)),
            )
        ).all()
        by_id = {row.id: row.to_dto() for row in rows}
        return [by_id[pid] for pid in product_ids if pid in by_id]

    def product(self, account_id: EntityId, product_id: EntityId) -> Product | None:
        found = self.products(account_id, [product_id])
        return found[0] if found else None

    def suppliers(
        self,
        account_id: EntityId,
        supplier_ids: Sequence[EntityId],
    ) -> list[Supplier]:
        """Suppliers of the account, in the order of ``supplier_ids``."""
        supplier_ids = self.coerce_ids(supplier_ids)
        if not supplier_ids:
            return []
        rows = self.session.scalars(
            self.scoped(SupplierModel, account_id).where(
                SupplierModel.id.in_(list(supplier_ids)),
            )
        ).all()
        by_id = {row.id: row.to_dto() for row in rows}
        return [by_id[sid] for sid in supplier_ids if sid in by_id]

    def offers_for_products(
        self,
        account_id: EntityId,
        product_ids: Sequence[EntityId],
        supplier_id: EntityId | None = None,
    ) -> dict[EntityId, list[Offer]]:
        """
        Offers grouped by product, each list ordered by priority DESC.

        Every requested product id is a key of the result, mapped to an
        empty list when it has no offers.
        """
        product_ids = self.coerce_ids(product_ids)
        result: dict[EntityId, list[Offer]] = {pid: [] for pid in product_ids}
        if not product_ids:
            return result

        stmt = self.scoped(OfferModel, account_id).where(
            OfferModel.product_id.in_(list(product_ids)),
        )
        if supplier_id is not None:
            stmt = stmt.where(OfferModel.supplier_id == supplier_id)
        stmt = stmt.order_by(
            OfferModel.priority.desc(),
            OfferModel.created_at,
            OfferModel.id,
        )

        count = 0
        for row in self.session.scalars(stmt).unique():
            result[row.product_id].append(row.to_dto())
            count += 1

        logger.debug(
            "offers_loaded",
            extra={
                "account_id": str(account_id),
                "product_count": len(result),
                "offer_count": count,
            },
        )
        return result

    def offers_for_suppliers(
        self,
        account_id: EntityId,
        supplier_ids: Sequence[EntityId],
    ) -> dict[EntityId, list[Offer]]:
        """Offers grouped by supplier, each list ordered by priority DESC."""
        supplier_ids = self.coerce_ids(supplier_ids)
        result: dict[EntityId, list[Offer]] = {sid: [] for sid in supplier_ids}
        if not supplier_ids:
            return result

        stmt = (
            self.scoped(OfferModel, account_id)
            .where(
                OfferModel.supplier_id.in_(list(supplier_ids)),
            )
            .order_by(
                OfferModel.priority.desc(),
                OfferModel.created_at,
                OfferModel.id,
            )
        )
        for row in self.session.scalars(stmt).unique():
            result[row.supplier_id].append(row.to_dto())
        return result

    def customer_order_lines(
        self,
        account_id: EntityId,
        order_position_ids: Sequence[EntityId],
    ) -> list[OrderPosition]:
        """
        Customer-order positions of the account, in the order of the ids.

        Purchase-order positions are never returned, even if their ids are
        requested.
        """
        order_position_ids = self.coerce_ids(order_position_ids)
        if not order_position_ids:
            return []
        rows = self.session.scalars(
            self.scoped(OrderPositionModel, account_id).where(
                OrderPositionModel.type == OrderPositionType.CUSTOMER_ORDER.value,
                OrderPositionModel.id.in_(list(order_position_ids)),
            )
        ).unique().all()
        by_id = {row.id: row.to_dto() for row in rows}
        return [by_id[oid] for oid in order_position_ids if oid in by_id]
