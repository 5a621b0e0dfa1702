"""Engine subpackage - core pricing logic and resolution."""
from .calculator import QuoteCalculator, QuoteRequestError
from .installation import installation_fee
from .models import (
    PACKAGE_OPTIONS,
    BillboardAsset,
    CampaignStats,
    CustomerInfo,
    CustomerType,
    DurationKey,
    PackageOption,
    PriceCalculation,
    PriceRow,
    PricingMode,
    Quote,
    get_package,
)
from .price_table import PriceTable
from .quote_builder import QuoteBuilder
from .resolver import PriceResolver

__all__ = [
    'PACKAGE_OPTIONS', 'BillboardAsset', 'CampaignStats', 'CustomerInfo',
    'CustomerType', 'DurationKey', 'PackageOption', 'PriceCalculation',
    'PriceRow', 'PricingMode', 'Quote', 'get_package', 'PriceTable',
    'PriceResolver', 'QuoteCalculator', 'QuoteRequestError', 'QuoteBuilder',
    'installation_fee',
]
