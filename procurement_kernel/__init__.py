"""
Procurement Kernel

Shared foundation for the procurement pricing engine:
- Fixed-point money (2 places) and quantity (3 places) values
- Immutable catalog DTOs (products, suppliers, offers, order lines)
- Typed exceptions with machine-readable codes
- Structured JSON logging
- SQLAlchemy persistence adapter and read-only selectors
"""

__version__ = "0.1.0"
