"""
Tests for OfferService.

Covers:
- Upsert creates once and updates afterwards
- Validation of price, stock and priority
- Account scoping of supplier and product
- Partial update and delete
"""

from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from procurement_kernel.exceptions import (
    AccountScopeError,
    InvalidAmountError,
    MalformedOfferError,
    NegativeQuantityError,
    OfferNotFoundError,
    ProductNotFoundError,
    SupplierNotFoundError,
)
from procurement_kernel.models.catalog import OfferModel
from procurement_kernel.services.offer_service import OfferService


@pytest.fixture
def catalog(account, create_product, create_supplier):
    return create_supplier(account, name="Acme"), create_product(account, name="Widget")


@pytest.fixture
def service(session):
    return OfferService(session)


def _offer_count(session) -> int:
    return session.scalar(select(func.count()).select_from(OfferModel))


class TestUpsertOffer:

    def test_creates_offer(self, session, service, account, catalog, captured_logs):
        supplier, product = catalog

        offer = service.upsert_offer(
            account.id, supplier.id, product.id, price="9.999", stock="4.5", priority=2
        )

        assert offer.price == Decimal("10.00")
        assert offer.stock == Decimal("4.500")
        assert offer.priority == 2
        assert offer.supplier_name == "Acme"
        assert _offer_count(session) == 1
        assert any(r["message"] == "offer_created" for r in captured_logs())

    def test_second_upsert_updates(self, session, service, account, catalog, captured_logs):
        supplier, product = catalog
        first = service.upsert_offer(account.id, supplier.id, product.id, price="5")

        second = service.upsert_offer(
            account.id, supplier.id, product.id, price="6", stock="1", priority=4
        )

        assert second.id == first.id
        assert second.price == Decimal("6.00")
        assert second.priority == 4
        assert _offer_count(session) == 1
        assert any(r["message"] == "offer_updated" for r in captured_logs())

    def test_missing_stock_counts_as_zero(self, session, service, account, catalog):
        supplier, product = catalog

        offer = service.upsert_offer(
            account.id, supplier.id, product.id, price="5.00", stock=None, priority=1
        )

        assert offer.stock == Decimal("0.000")
        assert _offer_count(session) == 1

    def test_negative_price_is_malformed_offer(self, service, account, catalog):
        supplier, product = catalog

        with pytest.raises(MalformedOfferError) as exc_info:
            service.upsert_offer(account.id, supplier.id, product.id, price="-0.01")

        assert exc_info.value.code == "MALFORMED_OFFER"
        assert exc_info.value.field == "price"

    def test_string_account_id(self, service, account, catalog):
        supplier, product = catalog

        offer = service.upsert_offer(str(account.id), supplier.id, product.id, price="1")

        assert offer.price == Decimal("1.00")

    @pytest.mark.parametrize(
        "kwargs,error",
        [
            ({"price": "-1"}, MalformedOfferError),
            ({"price": "1", "stock": "-1"}, NegativeQuantityError),
            ({"price": "abc"}, InvalidAmountError),
            ({"price": "1", "priority": -1}, MalformedOfferError),
            ({"price": "1", "priority": "2"}, MalformedOfferError),
        ],
    )
    def test_validation(self, session, service, account, catalog, kwargs, error):
        supplier, product = catalog

        with pytest.raises(error):
            service.upsert_offer(account.id, supplier.id, product.id, **kwargs)

        assert _offer_count(session) == 0

    def test_unknown_supplier(self, service, account, catalog):
        _, product = catalog

        with pytest.raises(SupplierNotFoundError):
            service.upsert_offer(account.id, uuid4(), product.id, price="1")

    def test_unknown_product(self, service, account, catalog):
        supplier, _ = catalog

        with pytest.raises(ProductNotFoundError):
            service.upsert_offer(account.id, supplier.id, uuid4(), price="1")

    def test_foreign_product_rejected(
        self, service, account, other_account, catalog, create_product
    ):
        supplier, _ = catalog
        foreign = create_product(other_account, name="Foreign")

        with pytest.raises(AccountScopeError) as exc_info:
            service.upsert_offer(account.id, supplier.id, foreign.id, price="1")

        assert exc_info.value.code == "ACCOUNT_SCOPE_VIOLATION"


class TestUpdateOffer:

    def test_updates_only_given_fields(self, service, account, catalog):
        supplier, product = catalog
        offer = service.upsert_offer(
            account.id, supplier.id, product.id, price="5", stock="3", priority=1
        )

        updated = service.update_offer(offer.id, stock="7")

        assert updated.stock == Decimal("7.000")
        assert updated.price == Decimal("5.00")
        assert updated.priority == 1

    def test_invalid_priority(self, service, account, catalog):
        supplier, product = catalog
        offer = service.upsert_offer(account.id, supplier.id, product.id, price="5")

        with pytest.raises(MalformedOfferError):
            service.update_offer(offer.id, priority=1.5)

    def test_negative_price_rejected(self, service, account, catalog):
        supplier, product = catalog
        offer = service.upsert_offer(account.id, supplier.id, product.id, price="5")

        with pytest.raises(MalformedOfferError):
            service.update_offer(offer.id, price="-5")

    def test_unknown_offer(self, service):
        with pytest.raises(OfferNotFoundError):
            service.update_offer(uuid4(), price="1")


class TestDeleteOffer:

    def test_deletes(self, session, service, account, catalog):
        supplier, product = catalog
        offer = service.upsert_offer(account.id, supplier.id, product.id, price="5")

        service.delete_offer(offer.id)

        assert _offer_count(session) == 0
        with pytest.raises(OfferNotFoundError):
            service.get_offer(offer.id)
