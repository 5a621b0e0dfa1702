"""
Shared service instance for the API.
"""
from typing import Optional

from ..services.pricing_service import PricingService, create_pricing_service

_service: Optional[PricingService] = None


def get_service() -> PricingService:
    """Get the API's pricing service, creating it on first use."""
    global _service
    if _service is None:
        _service = create_pricing_service()
    return _service
