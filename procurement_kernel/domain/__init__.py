"""
Pure domain layer.

This module contains pure data transfer objects and value helpers
with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- Time/clock
- I/O

All domain objects are immutable and deterministic.
"""

from procurement_kernel.domain.catalog import (
    EntityId,
    Offer,
    OrderPosition,
    OrderPositionType,
    Product,
    RankingCriterion,
    Supplier,
)
from procurement_kernel.domain.values import (
    MONEY_PLACES,
    QUANTITY_PLACES,
    round_money,
    round_percent,
    round_quantity,
    to_decimal,
    to_money,
    to_quantity,
    to_stock,
)

__all__ = [
    "EntityId",
    "Offer",
    "OrderPosition",
    "OrderPositionType",
    "Product",
    "RankingCriterion",
    "Supplier",
    "MONEY_PLACES",
    "QUANTITY_PLACES",
    "round_money",
    "round_percent",
    "round_quantity",
    "to_decimal",
    "to_money",
    "to_quantity",
    "to_stock",
]
