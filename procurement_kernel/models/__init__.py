"""ORM models for the procurement kernel."""

from procurement_kernel.models.catalog import (
    AccountModel,
    OfferModel,
    OrderPositionModel,
    ProductModel,
    SupplierModel,
    order_position_coverage,
)

__all__ = [
    "AccountModel",
    "OfferModel",
    "OrderPositionModel",
    "ProductModel",
    "SupplierModel",
    "order_position_coverage",
]
