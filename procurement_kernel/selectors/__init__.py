"""Selectors for the procurement kernel (read side)."""

from procurement_kernel.selectors.catalog_selector import CatalogSelector

__all__ = [
    "CatalogSelector",
]
