"""
OfferSource -- the data capability the pricing services depend on.

The services never query storage themselves; they receive an object that
satisfies this protocol.  ``procurement_kernel.selectors.CatalogSelector``
is the SQLAlchemy-backed implementation; tests and the ERP sync path may
pass any other object with the same methods.

Every method is account-scoped and must return only entities of that
account.  Offers are returned ordered by priority DESC.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from procurement_kernel.domain.catalog import (
    EntityId,
    Offer,
    OrderPosition,
    Product,
    Supplier,
)


class OfferSource(Protocol):
    def products(
        self, account_id: EntityId, product_ids: Sequence[EntityId]
    ) -> list[Product]: ...

    def suppliers(
        self, account_id: EntityId, supplier_ids: Sequence[EntityId]
    ) -> list[Supplier]: ...

    def offers_for_products(
        self,
        account_id: EntityId,
        product_ids: Sequence[EntityId],
        supplier_id: EntityId | None = None,
    ) -> dict[EntityId, list[Offer]]: ...

    def offers_for_suppliers(
        self, account_id: EntityId, supplier_ids: Sequence[EntityId]
    ) -> dict[EntityId, list[Offer]]: ...

    def customer_order_lines(
        self, account_id: EntityId, order_position_ids: Sequence[EntityId]
    ) -> list[OrderPosition]: ...
