"""
Module: procurement_engines
Responsibility:
    Package entrypoint that re-exports all public symbols from the pure
    calculation engine sub-modules.  This is the canonical import surface
    for procurement_services.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import procurement_kernel.domain, procurement_kernel.exceptions
    and procurement_kernel.logging_config (and sibling engine modules).
    MUST NOT import procurement_services, procurement_config, selectors or
    models.

Invariants enforced:
    - Decimal-only arithmetic: prices have 2 places, quantities 3, and all
      cost/margin outputs round half-up.
    - Determinism: identical inputs always produce identical outputs; no
      engine keeps state between calls.

Usage:
    from procurement_engines.ranking import rank_offers
    from procurement_engines.planner import ProcurementPlanner
    from procurement_engines.order_matrix import OrderPricingMatrixBuilder
    from procurement_engines.recommendation import recommend_supplier
    from procurement_engines.batching import group_by_supplier
    from procurement_engines.comparison import compare_suppliers
    from procurement_engines.product_matrix import build_product_matrix
"""

from procurement_engines.batching import (
    SupplierGroup,
    SupplierGroupItem,
    group_by_supplier,
)
from procurement_engines.comparison import (
    SupplierStats,
    compare_suppliers,
    supplier_stats,
)
from procurement_engines.order_matrix import (
    OrderLineResult,
    OrderPricingMatrix,
    OrderPricingMatrixBuilder,
    calculate_margin,
)
from procurement_engines.planner import (
    ProcurementPlan,
    ProcurementPlanEntry,
    ProcurementPlanner,
)
from procurement_engines.product_matrix import (
    BestOffer,
    ProductPricingMatrix,
    ProductPricingRow,
    build_product_matrix,
    select_best_offers,
)
from procurement_engines.ranking import best_offer, rank_offers
from procurement_engines.recommendation import (
    SupplierRecommendation,
    recommend_supplier,
)
from procurement_engines.tracer import traced_engine

__all__ = [
    # Ranking
    "rank_offers",
    "best_offer",
    # Planner
    "ProcurementPlan",
    "ProcurementPlanEntry",
    "ProcurementPlanner",
    # Order pricing matrix
    "OrderLineResult",
    "OrderPricingMatrix",
    "OrderPricingMatrixBuilder",
    "calculate_margin",
    # Recommendation
    "SupplierRecommendation",
    "recommend_supplier",
    # Batching
    "SupplierGroup",
    "SupplierGroupItem",
    "group_by_supplier",
    # Comparison
    "SupplierStats",
    "compare_suppliers",
    "supplier_stats",
    # Product matrix
    "BestOffer",
    "ProductPricingMatrix",
    "ProductPricingRow",
    "build_product_matrix",
    "select_best_offers",
    # Tracing
    "traced_engine",
]
