"""
Price Resolver - Resolves a price point for a billboard and customer.

Resolution is an exact match on (size, level, customer_type) followed by
the requested duration column. Misses never raise: ``lookup`` returns None
and ``resolve`` returns 0.
"""
from typing import Callable, Optional

import structlog

from .models import CustomerType, DurationKey
from .price_table import PriceTable, customer_value

logger = structlog.get_logger()


class PriceResolver:
    """
    Looks up prices in the current price table.

    The table is obtained from ``table_provider`` on every call so that a
    refreshed or re-imported table is picked up without rebuilding the
    resolver.
    """

    def __init__(self, table_provider: Callable[[], PriceTable]):
        self._table_provider = table_provider

    def lookup(
        self,
        size: str,
        level: str,
        customer_type: CustomerType,
        duration_key: DurationKey
    ) -> Optional[int]:
        """Get the configured price, or None when nothing is configured."""
        table = self._table_provider()
        price = table.lookup(size, level, customer_type, duration_key)
        if price is None:
            logger.warning(
                "No price configured",
                size=size,
                level=level,
                customer_type=customer_value(customer_type),
                duration=str(getattr(duration_key, 'value', duration_key)),
            )
        return price

    def resolve(
        self,
        size: str,
        level: str,
        customer_type: CustomerType,
        duration_key: DurationKey
    ) -> int:
        """Get the configured price, or 0 when nothing is configured."""
        price = self.lookup(size, level, customer_type, duration_key)
        return price if price is not None else 0
