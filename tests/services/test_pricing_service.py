"""
Tests for PricingService.

Unit tests run against an in-memory OfferSource; the integration class
runs the same questions through CatalogSelector and SQLite.
"""

import json

import pytest

from procurement_config.schema import PricingConfig
from procurement_kernel.domain.catalog import (
    Offer,
    OrderPosition,
    Product,
    RankingCriterion,
    Supplier,
)
from procurement_kernel.exceptions import AccountScopeError, ProductNotFoundError
from procurement_kernel.selectors.catalog_selector import CatalogSelector
from procurement_services.pricing_service import PricingService

ACCOUNT = "acc-1"


class InMemoryOfferSource:
    """OfferSource over plain lists; offers are handed out priority DESC."""

    def __init__(self, products=(), suppliers=(), offers=(), order_lines=()):
        self._products = list(products)
        self._suppliers = list(suppliers)
        self._offers = list(offers)
        self._order_lines = list(order_lines)

    def _ranked(self, offers):
        return sorted(offers, key=lambda o: -o.priority)

    def products(self, account_id, product_ids):
        by_id = {p.id: p for p in self._products}
        return [by_id[pid] for pid in product_ids if pid in by_id]

    def suppliers(self, account_id, supplier_ids):
        by_id = {s.id: s for s in self._suppliers}
        return [by_id[sid] for sid in supplier_ids if sid in by_id]

    def offers_for_products(self, account_id, product_ids, supplier_id=None):
        return {
            pid: self._ranked(
                o
                for o in self._offers
                if o.product_id == pid and (supplier_id is None or o.supplier_id == supplier_id)
            )
            for pid in product_ids
        }

    def offers_for_suppliers(self, account_id, supplier_ids):
        return {
            sid: self._ranked(o for o in self._offers if o.supplier_id == sid)
            for sid in supplier_ids
        }

    def customer_order_lines(self, account_id, order_position_ids):
        by_id = {line.id: line for line in self._order_lines}
        return [by_id[oid] for oid in order_position_ids if oid in by_id]


def _offer(supplier_id, product_id, price, stock, priority, account_id=ACCOUNT):
    return Offer(
        id=f"{supplier_id}-{product_id}",
        product_id=product_id,
        supplier_id=supplier_id,
        supplier_name=f"Supplier {supplier_id}",
        price=price,
        stock=stock,
        priority=priority,
        account_id=account_id,
    )


@pytest.fixture
def source():
    return InMemoryOfferSource(
        products=[
            Product(id="P1", name="Widget", code="W-1", account_id=ACCOUNT),
            Product(id="P2", name="Gadget", code="G-1", account_id=ACCOUNT),
        ],
        suppliers=[
            Supplier(id="S1", name="Supplier S1", account_id=ACCOUNT),
            Supplier(id="S2", name="Supplier S2", account_id=ACCOUNT),
        ],
        offers=[
            _offer("S1", "P1", "10.00", "5", 2),
            _offer("S2", "P1", "8.00", "10", 1),
        ],
        order_lines=[
            OrderPosition(
                id="O1",
                product_id="P1",
                total_quantity="8",
                price="12.00",
                product_name="Widget",
                product_code="W-1",
                account_id=ACCOUNT,
            ),
            OrderPosition(
                id="O2",
                product_id="P2",
                total_quantity="5",
                price="3.00",
                product_name="Gadget",
                account_id=ACCOUNT,
            ),
        ],
    )


@pytest.fixture
def service(source):
    return PricingService(source)


class TestOrderPricingMatrix:

    def test_payload(self, service):
        payload = service.order_pricing_matrix(ACCOUNT, ["O1", "O2"])

        assert payload["account_id"] == ACCOUNT
        assert payload["orders_count"] == 2
        assert payload["total_procurement_cost"] == "74.00"

        widget, gadget = payload["orders"]
        assert [e["supplier_id"] for e in widget["procurement_plan"]] == ["S1", "S2"]
        assert widget["procurement_plan"][1]["quantity"] == "3.000"
        assert widget["procurement_plan"][1]["cost"] == "24.00"
        assert widget["shortfall"] == "0.000"
        assert widget["margin"] == "22.00"
        assert widget["margin_percentage"] == "22.92"

        assert gadget["no_offers"] is True
        assert gadget["procurement_plan"] == []
        assert gadget["shortfall"] == "5.000"
        assert gadget["margin"] is None

    def test_payload_is_json_serializable(self, service):
        json.dumps(service.order_pricing_matrix(ACCOUNT, ["O1", "O2"]))

    def test_logs_carry_account(self, service, captured_logs):
        service.order_pricing_matrix(ACCOUNT, ["O1"])

        built = [r for r in captured_logs() if r["message"] == "order_pricing_matrix_built"]
        assert built[0]["account_id"] == ACCOUNT

    def test_foreign_order_line_rejected(self, source):
        source._order_lines.append(
            OrderPosition(id="OX", product_id="P1", total_quantity="1", account_id="acc-2")
        )

        with pytest.raises(AccountScopeError):
            PricingService(source).order_pricing_matrix(ACCOUNT, ["OX"])


class TestGroupOrdersBySupplier:

    def test_groups(self, service):
        payload = service.group_orders_by_supplier(ACCOUNT, ["O1", "O2"])

        assert payload["suppliers_count"] == 2
        assert [s["supplier_id"] for s in payload["suppliers"]] == ["S1", "S2"]
        assert payload["suppliers"][0]["total_cost"] == "50.00"
        assert payload["suppliers"][1]["items"][0]["order_id"] == "O1"


class TestRecommendSupplier:

    def test_recommendation(self, service):
        payload = service.recommend_supplier(ACCOUNT, "P1", 6)

        rec = payload["recommendation"]
        assert payload["product_name"] == "Widget"
        assert rec["supplier_id"] == "S2"
        assert rec["can_fulfill"] is True
        assert rec["total_cost"] == "48.00"

    def test_product_without_offers(self, service):
        assert service.recommend_supplier(ACCOUNT, "P2", 1)["recommendation"] is None

    def test_unknown_product(self, service):
        with pytest.raises(ProductNotFoundError):
            service.recommend_supplier(ACCOUNT, "P404", 1)


class TestProductPricingMatrix:

    def test_matrix(self, service):
        payload = service.product_pricing_matrix(ACCOUNT, ["P1", "P2"])

        widget, gadget = payload["products"]
        assert widget["best_supplier"] == {"id": "S1", "name": "Supplier S1"}
        assert widget["current_price"] == "10.00"
        assert widget["min_price"] == "8.00"
        assert widget["max_price"] == "10.00"
        assert widget["total_stock"] == "15.000"
        assert gadget["offers"] == []
        assert gadget["best_supplier"] is None
        assert payload["supplier_id"] is None

    def test_supplier_filter(self, service):
        payload = service.product_pricing_matrix(ACCOUNT, ["P1"], supplier_id="S2")

        assert payload["supplier_id"] == "S2"
        assert [o["supplier_id"] for o in payload["products"][0]["offers"]] == ["S2"]


class TestBestOffers:

    def test_default_criterion_is_priority(self, service):
        payload = service.best_offers(ACCOUNT, ["P1", "P2"])

        assert payload["criteria"] == "priority"
        assert [o["product_id"] for o in payload["offers"]] == ["P1"]
        assert payload["offers"][0]["best_offer"]["supplier_id"] == "S1"

    def test_price_criterion(self, service):
        payload = service.best_offers(ACCOUNT, ["P1"], criteria="price")

        assert payload["offers"][0]["best_offer"]["supplier_id"] == "S2"

    def test_configured_default(self, source):
        config = PricingConfig(name="cheapest", default_criterion=RankingCriterion.PRICE)

        payload = PricingService(source, config=config).best_offers(ACCOUNT, ["P1"])

        assert payload["criteria"] == "price"
        assert payload["offers"][0]["best_offer"]["supplier_id"] == "S2"

    def test_unknown_criteria_means_priority_not_default(self, source):
        config = PricingConfig(name="cheapest", default_criterion=RankingCriterion.PRICE)

        payload = PricingService(source, config=config).best_offers(
            ACCOUNT, ["P1"], criteria="fastest"
        )

        assert payload["criteria"] == "priority"
        assert payload["offers"][0]["best_offer"]["supplier_id"] == "S1"


class TestCompareSuppliers:

    def test_comparison(self, service):
        payload = service.compare_suppliers(ACCOUNT, ["S2", "S1"])

        assert [s["supplier_id"] for s in payload["suppliers"]] == ["S2", "S1"]
        s2 = payload["suppliers"][0]
        assert s2["total_offers"] == 1
        assert s2["avg_price"] == "8.00"
        assert s2["total_stock"] == "10.000"
        assert s2["products_covered"] == 1


class TestWithCatalogSelector:
    """End-to-end through the SQLAlchemy-backed source."""

    def test_order_matrix(
        self,
        session,
        account,
        create_product,
        create_supplier,
        create_offer,
        create_order_position,
    ):
        product = create_product(account, name="Widget", code="W-1")
        s1 = create_supplier(account, name="First")
        s2 = create_supplier(account, name="Second")
        create_offer(account, s1, product, price="10.00", stock="5", priority=2)
        create_offer(account, s2, product, price="8.00", stock="10", priority=1)
        line = create_order_position(account, product, quantity="20", price="12.00")

        service = PricingService(CatalogSelector(session))
        payload = service.order_pricing_matrix(account.id, [str(line.id)])

        (order,) = payload["orders"]
        assert order["order_id"] == str(line.id)
        assert [e["supplier_name"] for e in order["procurement_plan"]] == ["First", "Second"]
        assert order["shortfall"] == "5.000"
        assert payload["total_procurement_cost"] == "130.00"

    def test_best_offers_and_comparison(
        self, session, account, create_product, create_supplier, create_offer
    ):
        product = create_product(account, name="Widget")
        s1 = create_supplier(account, name="First")
        s2 = create_supplier(account, name="Second")
        create_offer(account, s1, product, price="10.00", stock="5", priority=2)
        create_offer(account, s2, product, price="8.00", stock="10", priority=1)
        service = PricingService(CatalogSelector(session))

        best = service.best_offers(account.id, [product.id], criteria="price")
        comparison = service.compare_suppliers(account.id, [s1.id, s2.id])

        assert best["offers"][0]["best_offer"]["supplier_name"] == "Second"
        assert [s["avg_price"] for s in comparison["suppliers"]] == ["10.00", "8.00"]
