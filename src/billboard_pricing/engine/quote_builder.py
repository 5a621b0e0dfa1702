"""
Quote Builder - Wraps computed line items into an immutable Quote.
"""
import copy
from datetime import date, datetime, time, timedelta
from typing import Callable, Optional, Sequence

from .calculator import DateLike, QuoteRequestError, to_datetime
from .models import (
    CustomerInfo,
    PackageOption,
    PriceCalculation,
    PricingMode,
    Quote,
)

QUOTE_VALIDITY_DAYS = 30
TAX_AMOUNT = 0  # taxation is not modelled


def _pass_through(value: DateLike) -> date:
    """Caller's end date as given; ISO strings keep a time of day only when they carry one."""
    if isinstance(value, date):
        return value
    parsed = to_datetime(value)
    return parsed.date() if parsed.time() == time() else parsed


class QuoteBuilder:
    """
    Assembles customer info and calculations into a Quote.

    The returned quote holds deep copies of the calculations, so later
    changes to the caller's billboard list do not reach it.
    """

    def __init__(
        self,
        currency: str = "د.ل",
        validity_days: int = QUOTE_VALIDITY_DAYS,
        clock: Callable[[], datetime] = datetime.now
    ):
        self.currency = currency
        self.validity_days = validity_days
        self._clock = clock

    def build(
        self,
        customer: CustomerInfo,
        calculations: Sequence[PriceCalculation],
        mode: PricingMode,
        start_date: DateLike,
        end_date: Optional[DateLike] = None,
        package: Optional[PackageOption] = None
    ) -> Quote:
        """Build a quote; raises QuoteRequestError on incomplete input."""
        errors = customer.validate()
        if errors:
            raise QuoteRequestError("; ".join(errors))
        if not calculations:
            raise QuoteRequestError("No calculations to build a quote from")

        mode = PricingMode(mode)
        start = to_datetime(start_date).date()

        if mode == PricingMode.PACKAGE:
            if package is None:
                raise QuoteRequestError("A package must be selected for package pricing")
            end: Optional[date] = start + timedelta(days=package.duration)
        else:
            end = _pass_through(end_date) if end_date else None

        lines = tuple(copy.deepcopy(list(calculations)))
        subtotal = sum(line.subtotal for line in lines)
        total_installation = sum(line.installation_price for line in lines)

        now = self._clock()
        return Quote(
            id=f"Q-{now:%Y%m%d%H%M%S%f}",
            customer=copy.deepcopy(customer),
            pricing_mode=mode,
            start_date=start,
            end_date=end,
            package_label=package.label if mode == PricingMode.PACKAGE else None,
            billboards=lines,
            subtotal=subtotal,
            total_installation=total_installation,
            tax=TAX_AMOUNT,
            grand_total=subtotal + total_installation + TAX_AMOUNT,
            currency=self.currency,
            created_at=now,
            valid_until=now + timedelta(days=self.validity_days),
        )
