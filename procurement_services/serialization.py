"""
JSON payloads for engine results.

Responsibility:
    Turn engine result dataclasses into JSON-serializable dicts for the
    HTTP layer.  Money is rendered as a string with exactly 2 decimals,
    quantities with exactly 3, ids as strings; ``json.dumps`` needs no
    custom encoder.

Architecture position:
    Services -- presentation helpers, no I/O.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from procurement_engines.batching import SupplierGroup
from procurement_engines.comparison import SupplierStats
from procurement_engines.order_matrix import OrderLineResult, OrderPricingMatrix
from procurement_engines.planner import ProcurementPlanEntry
from procurement_engines.product_matrix import (
    BestOffer,
    ProductPricingMatrix,
    ProductPricingRow,
)
from procurement_engines.recommendation import SupplierRecommendation
from procurement_kernel.domain.catalog import EntityId, Offer
from procurement_kernel.domain.values import round_money, round_percent, round_quantity


def _id(value: EntityId | None) -> str | None:
    return None if value is None else str(value)


def money(value: Decimal | None) -> str | None:
    return None if value is None else str(round_money(value))


def quantity(value: Decimal | None) -> str | None:
    return None if value is None else str(round_quantity(value))


def percent(value: Decimal | None) -> str | None:
    return None if value is None else str(round_percent(value))


def offer_payload(offer: Offer) -> dict[str, Any]:
    return {
        "id": _id(offer.id),
        "product_id": _id(offer.product_id),
        "supplier_id": _id(offer.supplier_id),
        "supplier_name": offer.supplier_name,
        "price": money(offer.price),
        "stock": quantity(offer.stock),
        "priority": offer.priority,
    }


def plan_entry_payload(entry: ProcurementPlanEntry) -> dict[str, Any]:
    return {
        "supplier_id": _id(entry.supplier_id),
        "supplier_name": entry.supplier_name,
        "offer_id": _id(entry.offer_id),
        "quantity": quantity(entry.quantity),
        "price_per_unit": money(entry.unit_price),
        "cost": money(entry.cost),
        "priority": entry.priority,
    }


def order_line_payload(line: OrderLineResult) -> dict[str, Any]:
    return {
        "order_id": _id(line.order_id),
        "product_id": _id(line.product_id),
        "product_name": line.product_name,
        "product_code": line.product_code,
        "required_quantity": quantity(line.required_quantity),
        "customer_price": money(line.customer_price),
        "no_offers": line.no_offers,
        "procurement_plan": [plan_entry_payload(e) for e in line.plan.entries],
        "shortfall": quantity(line.shortfall),
        "total_procurement_cost": money(line.total_procurement_cost),
        "margin": money(line.margin),
        "margin_percentage": percent(line.margin_percentage),
    }


def order_matrix_payload(
    account_id: EntityId, matrix: OrderPricingMatrix
) -> dict[str, Any]:
    return {
        "account_id": _id(account_id),
        "orders_count": matrix.orders_count,
        "total_procurement_cost": money(matrix.total_procurement_cost),
        "orders": [order_line_payload(line) for line in matrix.lines],
    }


def recommendation_payload(rec: SupplierRecommendation) -> dict[str, Any]:
    return {
        "supplier_id": _id(rec.supplier_id),
        "supplier_name": rec.supplier_name,
        "offer_id": _id(rec.offer_id),
        "price": money(rec.price),
        "available_stock": quantity(rec.available_stock),
        "quantity": quantity(rec.quantity),
        "can_fulfill": rec.can_fulfill,
        "total_cost": money(rec.total_cost),
    }


def supplier_groups_payload(
    account_id: EntityId, groups: tuple[SupplierGroup, ...]
) -> dict[str, Any]:
    return {
        "account_id": _id(account_id),
        "suppliers_count": len(groups),
        "suppliers": [
            {
                "supplier_id": _id(group.supplier_id),
                "supplier_name": group.supplier_name,
                "items": [
                    {
                        "order_id": _id(item.order_id),
                        "product_id": _id(item.product_id),
                        "product_name": item.product_name,
                        "offer_id": _id(item.offer_id),
                        "quantity": quantity(item.quantity),
                        "price": money(item.price),
                        "cost": money(item.cost),
                    }
                    for item in group.items
                ],
                "total_cost": money(group.total_cost),
            }
            for group in groups
        ],
    }


def supplier_stats_payload(stats: SupplierStats) -> dict[str, Any]:
    return {
        "supplier_id": _id(stats.supplier_id),
        "supplier_name": stats.supplier_name,
        "total_offers": stats.total_offers,
        "avg_price": money(stats.avg_price),
        "total_stock": quantity(stats.total_stock),
        "products_covered": stats.products_covered,
        "offers": [offer_payload(o) for o in stats.offers],
    }


def comparison_payload(
    account_id: EntityId, stats: tuple[SupplierStats, ...]
) -> dict[str, Any]:
    return {
        "account_id": _id(account_id),
        "suppliers_count": len(stats),
        "suppliers": [supplier_stats_payload(s) for s in stats],
    }


def product_row_payload(row: ProductPricingRow) -> dict[str, Any]:
    best = row.best_offer
    return {
        "product_id": _id(row.product.id),
        "product_name": row.product.name,
        "product_code": row.product.code,
        "product_article": row.product.article,
        "current_price": money(row.current_price),
        "current_stock": quantity(row.current_stock),
        "best_supplier": (
            {"id": _id(best.supplier_id), "name": best.supplier_name} if best else None
        ),
        "offers": [offer_payload(o) for o in row.offers],
        "offers_count": row.offers_count,
        "min_price": money(row.min_price),
        "max_price": money(row.max_price),
        "total_stock": quantity(row.total_stock),
    }


def product_matrix_payload(
    account_id: EntityId, matrix: ProductPricingMatrix
) -> dict[str, Any]:
    return {
        "account_id": _id(account_id),
        "products_count": matrix.products_count,
        "products": [product_row_payload(row) for row in matrix.rows],
    }


def best_offers_payload(
    account_id: EntityId, criterion: str, best: tuple[BestOffer, ...]
) -> dict[str, Any]:
    return {
        "account_id": _id(account_id),
        "criteria": criterion,
        "offers": [
            {
                "product_id": _id(b.product.id),
                "product_name": b.product.name,
                "best_offer": {
                    "offer_id": _id(b.offer.id),
                    "supplier_id": _id(b.offer.supplier_id),
                    "supplier_name": b.offer.supplier_name,
                    "price": money(b.offer.price),
                    "stock": quantity(b.offer.stock),
                    "priority": b.offer.priority,
                },
            }
            for b in best
        ],
    }
