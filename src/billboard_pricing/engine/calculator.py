"""
Quote Calculator - Per-billboard price breakdowns and campaign statistics.

One engine serves both pricing modes:
- daily:   oneDay price x number of days (both endpoints inclusive)
- package: fixed package price, displayed daily price derived from it

Installation fees are added per billboard when requested.
"""
import math
from datetime import date, datetime
from typing import Optional, Sequence, Union

import pandas as pd
import structlog

from .installation import installation_fee, round_half_up
from .models import (
    BillboardAsset,
    CampaignStats,
    CustomerType,
    DurationKey,
    PackageOption,
    PriceCalculation,
    PricingMode,
)
from .resolver import PriceResolver

logger = structlog.get_logger()

DateLike = Union[date, datetime, str]

SECONDS_PER_DAY = 24 * 60 * 60


class QuoteRequestError(ValueError):
    """Raised when a calculation is requested without its required inputs."""


def to_datetime(value: DateLike) -> datetime:
    """Normalize a date, datetime or ISO string to a datetime."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError:
        raise QuoteRequestError(f"Invalid date '{value}', expected YYYY-MM-DD")


def count_days(start: DateLike, end: DateLike) -> int:
    """Number of rental days between two dates, counting both endpoints."""
    start_dt = to_datetime(start)
    end_dt = to_datetime(end)
    if end_dt < start_dt:
        raise QuoteRequestError("End date must not be before start date")
    elapsed = (end_dt - start_dt).total_seconds() / SECONDS_PER_DAY
    return math.ceil(elapsed) + 1


class QuoteCalculator:
    """Computes price breakdowns using a PriceResolver."""

    def __init__(self, resolver: PriceResolver):
        self.resolver = resolver

    def _installation(self, billboard: BillboardAsset, include_installation: bool) -> int:
        if not include_installation:
            return 0
        return installation_fee(billboard.size, billboard.municipality)

    def calculate_daily(
        self,
        billboard: BillboardAsset,
        customer_type: CustomerType,
        start_date: DateLike,
        end_date: Optional[DateLike],
        include_installation: bool = False
    ) -> PriceCalculation:
        """Price a billboard at its daily rate over an inclusive date range."""
        if end_date is None or end_date == "":
            raise QuoteRequestError("End date is required for daily pricing")

        daily_price = self.resolver.resolve(
            billboard.size, billboard.level, customer_type, DurationKey.ONE_DAY
        )
        total_days = count_days(start_date, end_date)
        subtotal = daily_price * total_days
        installation_price = self._installation(billboard, include_installation)

        return PriceCalculation(
            billboard=billboard,
            base_price=daily_price,
            daily_price=daily_price,
            total_days=total_days,
            subtotal=subtotal,
            installation_price=installation_price,
            total=subtotal + installation_price,
        )

    def calculate_package(
        self,
        billboard: BillboardAsset,
        customer_type: CustomerType,
        package: Optional[PackageOption],
        include_installation: bool = False
    ) -> PriceCalculation:
        """Price a billboard with a fixed-duration package."""
        if package is None:
            raise QuoteRequestError("A package must be selected for package pricing")

        package_price = self.resolver.resolve(
            billboard.size, billboard.level, customer_type, package.key
        )
        installation_price = self._installation(billboard, include_installation)

        return PriceCalculation(
            billboard=billboard,
            base_price=package_price,
            daily_price=round_half_up(package_price / package.duration),
            total_days=package.duration,
            subtotal=package_price,
            installation_price=installation_price,
            total=package_price + installation_price,
        )

    def calculate(
        self,
        billboard: BillboardAsset,
        customer_type: CustomerType,
        mode: PricingMode,
        start_date: DateLike,
        end_date: Optional[DateLike] = None,
        package: Optional[PackageOption] = None,
        include_installation: bool = False
    ) -> PriceCalculation:
        """Price a single billboard in the given mode."""
        mode = PricingMode(mode)
        if mode == PricingMode.DAILY:
            return self.calculate_daily(
                billboard, customer_type, start_date, end_date, include_installation
            )
        return self.calculate_package(billboard, customer_type, package, include_installation)

    def calculate_many(
        self,
        billboards: Sequence[BillboardAsset],
        customer_type: CustomerType,
        mode: PricingMode,
        start_date: DateLike,
        end_date: Optional[DateLike] = None,
        package: Optional[PackageOption] = None,
        include_installation: bool = False
    ) -> list[PriceCalculation]:
        """
        Price a batch of billboards in input order.

        Mode parameters are checked before any billboard is priced, so a
        missing end date or package fails the whole batch.
        """
        mode = PricingMode(mode)
        if mode == PricingMode.DAILY:
            if end_date is None or end_date == "":
                raise QuoteRequestError("End date is required for daily pricing")
            count_days(start_date, end_date)
        elif package is None:
            raise QuoteRequestError("A package must be selected for package pricing")

        calculations = [
            self.calculate(
                billboard,
                customer_type,
                mode,
                start_date,
                end_date=end_date,
                package=package,
                include_installation=include_installation,
            )
            for billboard in billboards
        ]

        logger.info(
            "Calculated billboard prices",
            mode=mode.value,
            billboards=len(calculations),
            subtotal=sum(calc.subtotal for calc in calculations),
        )
        return calculations

    @staticmethod
    def stats(calculations: Sequence[PriceCalculation]) -> CampaignStats:
        """
        Summarize a batch of calculations.

        ``total_days`` is taken from the first line since every line of a
        batch shares the same duration.
        """
        if not calculations:
            return CampaignStats(total_billboards=0, total_days=0, average_daily_price=0)

        average = sum(calc.daily_price for calc in calculations) / len(calculations)

        return CampaignStats(
            total_billboards=len(calculations),
            total_days=calculations[0].total_days,
            average_daily_price=round_half_up(average),
            by_size=_count_by([calc.billboard.size for calc in calculations]),
            by_municipality=_count_by([calc.billboard.municipality for calc in calculations]),
            by_level=_count_by([calc.billboard.level for calc in calculations]),
        )


def _count_by(values: list[str]) -> dict[str, int]:
    counts = pd.Series(values, dtype=object).value_counts(sort=False)
    return {str(key): int(count) for key, count in counts.items()}
