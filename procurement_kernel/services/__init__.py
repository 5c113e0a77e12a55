"""Write-side services for the procurement kernel."""

from procurement_kernel.services.offer_service import OfferService

__all__ = [
    "OfferService",
]
