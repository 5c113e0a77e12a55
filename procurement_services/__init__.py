"""
procurement_services -- Package init and public API.

Responsibility:
    Orchestration over the pure pricing engines: loads an account-scoped
    snapshot through an ``OfferSource``, runs the engines and returns
    JSON-serializable payloads.

Architecture position:
    Services -- the outermost layer of this package set.

    Dependency direction:
        procurement_services -> procurement_engines  (allowed)
        procurement_services -> procurement_kernel   (allowed)
        procurement_services -> procurement_config   (allowed)
        procurement_engines  -> procurement_services (FORBIDDEN)
        procurement_kernel   -> procurement_services (FORBIDDEN)
"""

from procurement_kernel.logging_config import get_logger

logger = get_logger("services")

from procurement_services.offer_source import OfferSource
from procurement_services.pricing_service import PricingService
from procurement_services.runtime import bootstrap, pricing_service

__all__ = [
    "OfferSource",
    "PricingService",
    "bootstrap",
    "pricing_service",
]
