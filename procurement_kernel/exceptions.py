"""
Typed Exception Hierarchy for the Procurement Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the pricing engine (HTTP handlers, sync workers) must tell a
caller mistake apart from "nothing to do".  Empty conditions (no offers, a
fully covered order line) and shortfalls are RESULT STATES and never raise.
Only precondition violations and catalog lookups raise, and they do so with:

  1. A TYPED exception class (catch by type, not message)
  2. A CODE class attribute (machine-readable, API-safe)
  3. Structured DATA attributes (not just a message string)

Example:

    try:
        plan = planner.plan(required_quantity=qty, ranked_offers=offers)
    except NegativeQuantityError as e:
        return {"error": e.code, "field": e.field, "value": e.value}

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    ProcurementKernelError (base)
    |
    +-- ValidationError
    |   +-- NegativeQuantityError
    |   +-- InvalidAmountError
    |   +-- MalformedOfferError
    |
    +-- CatalogError
        +-- ProductNotFoundError
        +-- SupplierNotFoundError
        +-- OfferNotFoundError
        +-- AccountScopeError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Validation      | NEGATIVE_QUANTITY           | Required/offered quantity below zero
                | INVALID_AMOUNT              | Value not convertible to Decimal
                | MALFORMED_OFFER             | Offer price/priority missing or invalid
----------------|-----------------------------|-----------------------------------------
Catalog         | PRODUCT_NOT_FOUND           | Product ID not in the account
                | SUPPLIER_NOT_FOUND          | Supplier ID not in the account
                | OFFER_NOT_FOUND             | Offer ID doesn't exist
                | ACCOUNT_SCOPE_VIOLATION     | Entities belong to different accounts
"""

from __future__ import annotations

from typing import Any


class ProcurementKernelError(Exception):
    """
    Base exception for all procurement kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "PROCUREMENT_KERNEL_ERROR"


# Validation (precondition) exceptions


class ValidationError(ProcurementKernelError):
    """Base exception for precondition violations at the engine boundary."""

    code: str = "VALIDATION_ERROR"


class NegativeQuantityError(ValidationError):
    """A quantity that must be non-negative was negative."""

    code: str = "NEGATIVE_QUANTITY"

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = str(value)
        super().__init__(f"{field} must not be negative, got {value}")


class InvalidAmountError(ValidationError):
    """A monetary or quantity value could not be parsed as a decimal."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = repr(value)
        super().__init__(f"Invalid decimal value for {field}: {value!r}")


class MalformedOfferError(ValidationError):
    """
    Offer data cannot be used for planning.

    Raised for a missing or negative price, or a non-integer priority.
    A missing stock is NOT malformed: it is treated as zero.
    """

    code: str = "MALFORMED_OFFER"

    def __init__(self, offer_id: Any, field: str, reason: str):
        self.offer_id = str(offer_id)
        self.field = field
        self.reason = reason
        super().__init__(f"Malformed offer {offer_id}: {field} {reason}")


# Catalog exceptions


class CatalogError(ProcurementKernelError):
    """Base exception for catalog lookups and account scoping."""

    code: str = "CATALOG_ERROR"


class ProductNotFoundError(CatalogError):
    """Product with given ID does not exist in the account."""

    code: str = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: Any, account_id: Any):
        self.product_id = str(product_id)
        self.account_id = str(account_id)
        super().__init__(f"Product {product_id} not found in account {account_id}")


class SupplierNotFoundError(CatalogError):
    """Supplier with given ID does not exist in the account."""

    code: str = "SUPPLIER_NOT_FOUND"

    def __init__(self, supplier_id: Any, account_id: Any):
        self.supplier_id = str(supplier_id)
        self.account_id = str(account_id)
        super().__init__(f"Supplier {supplier_id} not found in account {account_id}")


class OfferNotFoundError(CatalogError):
    """Offer with given ID does not exist."""

    code: str = "OFFER_NOT_FOUND"

    def __init__(self, offer_id: Any):
        self.offer_id = str(offer_id)
        super().__init__(f"Offer not found: {offer_id}")


class AccountScopeError(CatalogError):
    """
    Entities referenced together belong to different accounts.

    Cross-account reads and writes are never permitted.
    """

    code: str = "ACCOUNT_SCOPE_VIOLATION"

    def __init__(self, account_id: Any, entity_type: str, entity_id: Any):
        self.account_id = str(account_id)
        self.entity_type = entity_type
        self.entity_id = str(entity_id)
        super().__init__(
            f"{entity_type} {entity_id} does not belong to account {account_id}"
        )
