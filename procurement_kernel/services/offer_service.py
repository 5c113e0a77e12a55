"""
Service layer for Offer maintenance.

Offers arrive from the ERP sync, from file imports and from manual edits.
All of them go through ``upsert_offer`` so that the (account, supplier,
product) uniqueness holds no matter which path wrote last.

Returns Offer DTOs instead of ORM entities.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy import select

from procurement_kernel.domain.catalog import EntityId, Offer
from procurement_kernel.domain.values import (
    ZERO,
    require_non_negative,
    to_money,
    to_stock,
)
from procurement_kernel.exceptions import (
    MalformedOfferError,
    OfferNotFoundError,
    ProductNotFoundError,
    SupplierNotFoundError,
)
from procurement_kernel.logging_config import get_logger
from procurement_kernel.models.catalog import OfferModel, ProductModel, SupplierModel
from procurement_kernel.services.base import BaseService

logger = get_logger("services.offer")


def _validate_price(price: Any, offer_ref: Any) -> Decimal:
    price = to_money(price, "price")
    if price < ZERO:
        raise MalformedOfferError(offer_ref, "price", "is negative")
    return price


def _validate_priority(priority: Any, offer_ref: Any) -> int:
    if isinstance(priority, bool) or not isinstance(priority, int):
        raise MalformedOfferError(offer_ref, "priority", "is not an integer")
    if priority < 0:
        raise MalformedOfferError(offer_ref, "priority", "is negative")
    return priority


class OfferService(BaseService):
    """
    Create, update and delete offers.

    Enforces:
        - price >= 0, stock >= 0, priority >= 0 (integer).
        - product and supplier belong to the offer's account.
        - at most one offer per (account, supplier, product).
    """

    def _get_model(self, offer_id: EntityId) -> OfferModel:
        return self._load(OfferModel, offer_id, lambda: OfferNotFoundError(offer_id))

    def _check_scope(
        self,
        account_id: EntityId,
        supplier_id: EntityId,
        product_id: EntityId,
    ) -> None:
        self._load_in_account(
            SupplierModel,
            supplier_id,
            account_id,
            "supplier",
            lambda: SupplierNotFoundError(supplier_id, account_id),
        )
        self._load_in_account(
            ProductModel,
            product_id,
            account_id,
            "product",
            lambda: ProductNotFoundError(product_id, account_id),
        )

    def get_offer(self, offer_id: EntityId) -> Offer:
        """
        Get an offer by id.

        Raises:
            OfferNotFoundError: If the offer does not exist.
        """
        return self._get_model(offer_id).to_dto()

    def upsert_offer(
        self,
        account_id: EntityId,
        supplier_id: EntityId,
        product_id: EntityId,
        price: Decimal | str | int,
        stock: Decimal | str | int | None = ZERO,
        priority: int = 0,
    ) -> Offer:
        """
        Create the offer for (account, supplier, product) or update it.

        Args:
            account_id: Owning account.
            supplier_id: Supplier within the account.
            product_id: Product within the account.
            price: Unit price, rounded half-up to 2 places.
            stock: Available stock, rounded half-up to 3 places.  None
                (stock omitted by the ERP) counts as zero.
            priority: Preference rank; higher is preferred.

        Returns:
            The stored Offer DTO.

        Raises:
            InvalidAmountError: If price or stock is not a number.
            NegativeQuantityError: If stock is negative.
            MalformedOfferError: If price is negative or priority is not a
                non-negative integer.
            SupplierNotFoundError / ProductNotFoundError: Unknown entity.
            AccountScopeError: Entity belongs to another account.
        """
        offer_ref = f"{supplier_id}/{product_id}"
        price = _validate_price(price, offer_ref)
        stock = require_non_negative(to_stock(stock), "stock")
        priority = _validate_priority(priority, offer_ref)
        self._check_scope(account_id, supplier_id, product_id)

        offer = self.session.scalars(
            select(OfferModel).where(
                OfferModel.account_id == account_id,
                OfferModel.supplier_id == supplier_id,
                OfferModel.product_id == product_id,
            )
        ).first()

        created = offer is None
        if created:
            offer = OfferModel(
                account_id=account_id,
                supplier_id=supplier_id,
                product_id=product_id,
                price=price,
                stock=stock,
                priority=priority,
            )
            self.session.add(offer)
        else:
            offer.price = price
            offer.stock = stock
            offer.priority = priority

        self.session.flush()

        logger.info(
            "offer_created" if created else "offer_updated",
            extra={
                "offer_id": str(offer.id),
                "account_id": str(account_id),
                "supplier_id": str(supplier_id),
                "product_id": str(product_id),
                "price": str(price),
                "stock": str(stock),
                "priority": priority,
            },
        )
        return offer.to_dto()

    def update_offer(
        self,
        offer_id: EntityId,
        price: Decimal | str | int | None = None,
        stock: Decimal | str | int | None = None,
        priority: int | None = None,
    ) -> Offer:
        """
        Update price, stock and/or priority independently.

        Only provided (non-None) fields change.

        Raises:
            OfferNotFoundError: If the offer does not exist.
            NegativeQuantityError / MalformedOfferError: Invalid new values.
        """
        offer = self._get_model(offer_id)
        changes: dict[str, str] = {}

        if price is not None:
            offer.price = _validate_price(price, offer_id)
            changes["price"] = str(offer.price)
        if stock is not None:
            offer.stock = require_non_negative(to_stock(stock), "stock")
            changes["stock"] = str(offer.stock)
        if priority is not None:
            offer.priority = _validate_priority(priority, offer_id)
            changes["priority"] = str(offer.priority)

        self.session.flush()
        logger.info(
            "offer_updated",
            extra={"offer_id": str(offer_id), "changes": changes},
        )
        return offer.to_dto()

    def delete_offer(self, offer_id: EntityId) -> None:
        """
        Delete an offer.

        Raises:
            OfferNotFoundError: If the offer does not exist.
        """
        offer = self._get_model(offer_id)
        self.session.delete(offer)
        self.session.flush()
        logger.info("offer_deleted", extra={"offer_id": str(offer_id)})
