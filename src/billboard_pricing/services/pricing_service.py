"""
Pricing Service - Wires the price store, cache and engine together.

Each service instance owns its own store and cache, so tests and
independent deployments never share state.

Price rows are loaded in this order:
1. Cached snapshot (if younger than the TTL)
2. Backend price store (result is cached)
3. Built-in default rows when the store fails (not cached, no retry)
"""
import copy
from datetime import datetime
from typing import Callable, Optional, Sequence

import structlog

from ..config.settings import Settings, get_settings
from ..engine.calculator import DateLike, QuoteCalculator
from ..engine.models import (
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
)
from ..engine.price_table import PriceTable
from ..engine.quote_builder import QuoteBuilder
from ..engine.resolver import PriceResolver
from .cache import JsonFileKeyValueStore, MemoryKeyValueStore, PriceTableCache
from .data_exchange import ImportResult, export_price_csv, parse_price_csv
from .price_store import CsvPriceStore, PriceStore

logger = structlog.get_logger()


def _default_row(size: str, level: str, prices: tuple[int, ...]) -> PriceRow:
    keys = (
        DurationKey.ONE_DAY, DurationKey.ONE_MONTH, DurationKey.TWO_MONTHS,
        DurationKey.THREE_MONTHS, DurationKey.SIX_MONTHS, DurationKey.ONE_YEAR,
    )
    return PriceRow(
        size=size,
        level=level,
        customer_type=CustomerType.STANDARD,
        prices=dict(zip(keys, prices)),
    )


# Used only when the backend store is unavailable
DEFAULT_PRICE_ROWS: tuple[PriceRow, ...] = (
    _default_row('13x5', 'A', (900, 24000, 45000, 65000, 120000, 220000)),
    _default_row('12x4', 'A', (700, 18000, 34000, 49000, 92000, 170000)),
    _default_row('10x4', 'A', (550, 14000, 26000, 38000, 72000, 135000)),
    _default_row('13x5', 'B', (750, 20000, 38000, 54000, 100000, 185000)),
)


class PricingService:
    """Context object exposing pricing, quoting and bulk exchange."""

    def __init__(
        self,
        store: PriceStore,
        cache: PriceTableCache,
        currency: str = "د.ل",
        quote_validity_days: int = 30,
        clock: Callable[[], datetime] = datetime.now
    ):
        self.store = store
        self.cache = cache
        self.resolver = PriceResolver(self.price_table)
        self.calculator = QuoteCalculator(self.resolver)
        self.quote_builder = QuoteBuilder(
            currency=currency,
            validity_days=quote_validity_days,
            clock=clock,
        )

    def load_rows(self) -> list[PriceRow]:
        """Load price rows from cache, store, or built-in defaults."""
        cached = self.cache.get()
        if cached is not None:
            return cached

        try:
            rows = self.store.fetch_all()
        except Exception as e:
            logger.error("Price store unavailable, using default prices", error=str(e))
            return copy.deepcopy(list(DEFAULT_PRICE_ROWS))

        self.cache.put(rows)
        logger.info("Loaded price rows", count=len(rows))
        return rows

    def price_table(self) -> PriceTable:
        """Current price table snapshot."""
        table = PriceTable(self.load_rows())
        if table.duplicates:
            logger.warning(
                "Duplicate price rows ignored",
                duplicates=[f"{r.size}/{r.level}/{r.customer_type.value}" for r in table.duplicates],
            )
        return table

    def refresh(self) -> list[PriceRow]:
        """Drop the cached snapshot and reload from the store."""
        self.cache.invalidate()
        return self.load_rows()

    @staticmethod
    def package_options() -> list[PackageOption]:
        return list(PACKAGE_OPTIONS)

    def _snapshot_calculator(self) -> QuoteCalculator:
        # One table snapshot per request so every line sees the same prices
        table = self.price_table()
        return QuoteCalculator(PriceResolver(lambda: table))

    def calculate(
        self,
        billboards: Sequence[BillboardAsset],
        customer_type: CustomerType,
        mode: PricingMode,
        start_date: DateLike,
        end_date: Optional[DateLike] = None,
        package: Optional[PackageOption] = None,
        include_installation: bool = False
    ) -> list[PriceCalculation]:
        """Price a batch of billboards; see QuoteCalculator.calculate_many."""
        return self._snapshot_calculator().calculate_many(
            list(billboards),
            customer_type,
            mode,
            start_date,
            end_date=end_date,
            package=package,
            include_installation=include_installation,
        )

    def campaign_stats(self, calculations: Sequence[PriceCalculation]) -> CampaignStats:
        return QuoteCalculator.stats(calculations)

    def generate_quote(
        self,
        customer: CustomerInfo,
        billboards: Sequence[BillboardAsset],
        mode: PricingMode,
        start_date: DateLike,
        end_date: Optional[DateLike] = None,
        package: Optional[PackageOption] = None,
        include_installation: bool = False
    ) -> Quote:
        """Price the billboards for the customer and build a quote."""
        billboards = copy.deepcopy(list(billboards))
        calculations = self.calculate(
            billboards,
            customer.customer_type,
            mode,
            start_date,
            end_date=end_date,
            package=package,
            include_installation=include_installation,
        )
        quote = self.quote_builder.build(
            customer,
            calculations,
            mode,
            start_date,
            end_date=end_date,
            package=package,
        )
        logger.info(
            "Generated quote",
            quote_id=quote.id,
            billboards=len(quote.billboards),
            grand_total=quote.grand_total,
        )
        return quote

    def import_csv(self, text: str) -> ImportResult:
        """
        Replace the whole price table with a bulk upload.

        Never raises: store failures are reported in the result and
        leave the cache untouched. A successful import invalidates it.

        An upload with no valid rows (header only, or every line
        rejected) is reported as a failure and the current table is
        kept, so the table cannot be cleared through this path.
        """
        parsed = parse_price_csv(text or '')
        if not parsed.rows:
            return ImportResult(
                success=False,
                imported=0,
                errors=["No valid price rows found in upload"],
                rejected=parsed.rejected,
            )

        try:
            self.store.delete_all()
            stored = self.store.insert_many(parsed.rows)
        except Exception as e:
            logger.error("Price import failed", error=str(e))
            return ImportResult(success=False, imported=0, errors=[str(e)], rejected=parsed.rejected)

        self.cache.invalidate()
        logger.info("Imported price rows", imported=len(stored), rejected=len(parsed.rejected))
        return ImportResult(success=True, imported=len(stored), rejected=parsed.rejected)

    def export_csv(self) -> str:
        """Current price table in the bulk exchange format."""
        return export_price_csv(self.price_table())


def create_pricing_service(settings: Optional[Settings] = None) -> PricingService:
    """Build a PricingService from configuration."""
    settings = settings or get_settings()

    if settings.cache_path:
        substrate = JsonFileKeyValueStore(settings.cache_path)
    else:
        substrate = MemoryKeyValueStore()

    return PricingService(
        store=CsvPriceStore(settings.price_store_path),
        cache=PriceTableCache(substrate, ttl_seconds=settings.cache_ttl_seconds),
        currency=settings.currency,
        quote_validity_days=settings.quote_validity_days,
    )
