"""
Values -- Fixed-point decimal helpers for money and quantity.

Responsibility:
    Converts raw inputs (str, int, Decimal, ERP-provided floats) into
    Decimal values with an explicit scale, and rounds them with an explicit
    rounding mode.  Every price, cost and margin in the engine has 2 decimal
    places; every stock and quantity has 3.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by the catalog DTOs, every engine and the serialization layer.

Invariants enforced:
    - Money is quantized to MONEY_PLACES (2) with ROUND_HALF_UP.
    - Quantity is quantized to QUANTITY_PLACES (3) with ROUND_HALF_UP.
    - Floats are converted through ``str()`` so that 0.1 becomes
      Decimal("0.1") and not its binary expansion.

Failure modes:
    - InvalidAmountError when a value cannot be parsed as a decimal
      (None, "abc", NaN, infinity).
    - NegativeQuantityError from ``require_non_negative``.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from procurement_kernel.exceptions import InvalidAmountError, NegativeQuantityError

MONEY_PLACES = 2
QUANTITY_PLACES = 3

MONEY_EXPONENT = Decimal("0.01")
QUANTITY_EXPONENT = Decimal("0.001")
PERCENT_EXPONENT = Decimal("0.01")

ZERO = Decimal("0")
ZERO_MONEY = Decimal("0.00")
ZERO_QUANTITY = Decimal("0.000")
HUNDRED = Decimal("100")


def to_decimal(value: Any, field: str = "value") -> Decimal:
    """
    Parse ``value`` into a finite Decimal without rounding.

    Raises:
        InvalidAmountError: If the value is None, unparsable or not finite.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidAmountError(field, value)
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as e:
            raise InvalidAmountError(field, value) from e
    if not result.is_finite():
        raise InvalidAmountError(field, value)
    return result


def round_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places, half-up."""
    return value.quantize(MONEY_EXPONENT, rounding=ROUND_HALF_UP)


def round_quantity(value: Decimal) -> Decimal:
    """Round to 3 decimal places, half-up."""
    return value.quantize(QUANTITY_EXPONENT, rounding=ROUND_HALF_UP)


def round_percent(value: Decimal) -> Decimal:
    """Round a percentage to 2 decimal places, half-up."""
    return value.quantize(PERCENT_EXPONENT, rounding=ROUND_HALF_UP)


def to_money(value: Any, field: str = "price") -> Decimal:
    """Parse and quantize a monetary value (2 places)."""
    return round_money(to_decimal(value, field))


def to_quantity(value: Any, field: str = "quantity") -> Decimal:
    """Parse and quantize a quantity value (3 places)."""
    return round_quantity(to_decimal(value, field))


def to_stock(value: Any, field: str = "stock") -> Decimal:
    """
    Parse a stock level; a missing stock counts as zero.

    ERP payloads omit stock for offers with nothing on hand, so ``None``
    is a valid input here, unlike for prices and required quantities.
    """
    if value is None:
        return ZERO_QUANTITY
    return to_quantity(value, field)


def require_non_negative(value: Decimal, field: str) -> Decimal:
    """
    Return ``value`` unchanged when it is zero or positive.

    Raises:
        NegativeQuantityError: If value < 0.  Never clamps.
    """
    if value < ZERO:
        raise NegativeQuantityError(field, value)
    return value
