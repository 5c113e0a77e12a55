"""
Pytest fixtures for the procurement pricing test suite.

Provides:
- Structured logging setup and captured JSON logs
- In-memory SQLite database sessions
- Offer / order-line factories for engine tests

Environment Variables:
- DATABASE_URL: Optional database URL for the persistence tests.  Defaults
  to an in-memory SQLite database.
"""

import json
import logging
import os
from decimal import Decimal
from io import StringIO
from typing import Generator
from uuid import uuid4

import pytest
from sqlalchemy.orm import Session

from procurement_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from procurement_kernel.domain.catalog import Offer, OrderPosition, Product, Supplier
from procurement_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from procurement_kernel.models.catalog import (
    AccountModel,
    OfferModel,
    OrderPositionModel,
    ProductModel,
    SupplierModel,
)

DEFAULT_DATABASE_URL = "sqlite://"


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture procurement_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            planner.plan(...)
            logs = captured_logs()
            assert any(r["message"] == "planner_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("procurement_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Engine-level factories (no database)
# =============================================================================


@pytest.fixture
def make_offer():
    """Factory for Offer DTOs with sensible defaults."""

    def _make(
        supplier_id="S1",
        price="10.00",
        stock="0",
        priority=0,
        product_id="P1",
        offer_id=None,
        supplier_name=None,
    ) -> Offer:
        return Offer(
            id=offer_id or f"{supplier_id}-{product_id}",
            product_id=product_id,
            supplier_id=supplier_id,
            supplier_name=supplier_name if supplier_name is not None else supplier_id,
            price=Decimal(str(price)),
            stock=None if stock is None else Decimal(str(stock)),
            priority=priority,
        )

    return _make


@pytest.fixture
def make_order_line():
    """Factory for customer-order OrderPosition DTOs."""

    def _make(
        order_id="O1",
        product_id="P1",
        total_quantity="5",
        purchase_quantity="0",
        price="0",
        product_name="Widget",
        product_code="W-1",
    ) -> OrderPosition:
        return OrderPosition(
            id=order_id,
            product_id=product_id,
            total_quantity=Decimal(str(total_quantity)),
            purchase_quantity=Decimal(str(purchase_quantity)),
            price=Decimal(str(price)),
            product_name=product_name,
            product_code=product_code,
        )

    return _make


@pytest.fixture
def scenario_offers(make_offer):
    """Two offers: S1 (stock 5, price 10, priority 2), S2 (stock 10, price 8, priority 1)."""
    return [
        make_offer(supplier_id="S1", price="10", stock="5", priority=2),
        make_offer(supplier_id="S2", price="8", stock="10", priority=1),
    ]


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def engine():
    """A fresh engine with all tables created, dropped afterwards."""
    db_engine = init_engine_from_url(os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL))
    create_tables()
    yield db_engine
    drop_tables()
    reset_engine()


@pytest.fixture
def session(engine) -> Generator[Session, None, None]:
    """A database session rolled back after each test."""
    db_session = get_session()
    try:
        yield db_session
    finally:
        db_session.rollback()
        db_session.close()


@pytest.fixture
def account(session) -> AccountModel:
    model = AccountModel(name="Main account")
    session.add(model)
    session.flush()
    return model


@pytest.fixture
def other_account(session) -> AccountModel:
    model = AccountModel(name="Other account")
    session.add(model)
    session.flush()
    return model


@pytest.fixture
def create_product(session):
    """Factory that persists a ProductModel."""

    def _create(account, name="Widget", code=None, article=None) -> ProductModel:
        model = ProductModel(
            account_id=account.id,
            external_id=str(uuid4()),
            name=name,
            code=code,
            article=article,
        )
        session.add(model)
        session.flush()
        return model

    return _create


@pytest.fixture
def create_supplier(session):
    """Factory that persists a SupplierModel."""

    def _create(account, name="Supplier") -> SupplierModel:
        model = SupplierModel(account_id=account.id, external_id=str(uuid4()), name=name)
        session.add(model)
        session.flush()
        return model

    return _create


@pytest.fixture
def create_offer(session):
    """Factory that persists an OfferModel for (supplier, product)."""

    def _create(account, supplier, product, price="10.00", stock="0", priority=0) -> OfferModel:
        model = OfferModel(
            account_id=account.id,
            supplier_id=supplier.id,
            product_id=product.id,
            price=Decimal(price),
            stock=Decimal(stock),
            priority=priority,
        )
        session.add(model)
        session.flush()
        return model

    return _create


@pytest.fixture
def create_order_position(session):
    """Factory that persists an OrderPositionModel."""

    def _create(
        account,
        product,
        quantity="5",
        purchase_quantity="0",
        price="0.00",
        type="customer_order",
    ) -> OrderPositionModel:
        model = OrderPositionModel(
            account_id=account.id,
            external_id=str(uuid4()),
            product_id=product.id,
            type=type,
            quantity=Decimal(quantity),
            purchase_quantity=Decimal(purchase_quantity),
            price=Decimal(price),
            total=Decimal(price) * Decimal(quantity),
        )
        session.add(model)
        session.flush()
        return model

    return _create


@pytest.fixture
def product_dto():
    return Product(id="P1", name="Widget", code="W-1", article="A-1")


@pytest.fixture
def supplier_dto():
    return Supplier(id="S1", name="Acme")
