"""
Tests for per-billboard calculations, batch aggregation and campaign stats.
"""
from datetime import date, datetime

import pytest

from billboard_pricing.engine import (
    BillboardAsset,
    CustomerType,
    PriceCalculation,
    PriceResolver,
    PriceTable,
    PricingMode,
    QuoteCalculator,
    QuoteRequestError,
    get_package,
)
from billboard_pricing.engine.calculator import count_days


@pytest.fixture
def calculator(sample_rows) -> QuoteCalculator:
    table = PriceTable(sample_rows)
    return QuoteCalculator(PriceResolver(lambda: table))


def test_count_days_is_inclusive():
    assert count_days(date(2025, 1, 1), date(2025, 1, 1)) == 1
    assert count_days(date(2025, 1, 1), date(2025, 1, 7)) == 7
    assert count_days('2025-01-31', '2025-02-01') == 2


def test_count_days_rounds_partial_days_up():
    assert count_days(datetime(2025, 1, 1, 0, 0), datetime(2025, 1, 2, 6, 0)) == 3


def test_count_days_rejects_reversed_range():
    with pytest.raises(QuoteRequestError):
        count_days(date(2025, 1, 7), date(2025, 1, 1))


def test_daily_single_day(calculator, billboards):
    calc = calculator.calculate_daily(
        billboards[0], CustomerType.STANDARD, date(2025, 1, 1), date(2025, 1, 1)
    )
    assert calc.total_days == 1
    assert calc.daily_price == 900
    assert calc.subtotal == 900
    assert calc.installation_price == 0
    assert calc.total == 900


def test_daily_week_with_installation(calculator, billboards):
    calc = calculator.calculate_daily(
        billboards[0], CustomerType.STANDARD, date(2025, 1, 1), date(2025, 1, 7),
        include_installation=True,
    )
    assert calc.total_days == 7
    assert calc.base_price == 900
    assert calc.subtotal == 6300
    assert calc.installation_price == 1650
    assert calc.total == 7950


def test_daily_without_end_date_fails(calculator, billboards):
    with pytest.raises(QuoteRequestError):
        calculator.calculate_daily(billboards[0], CustomerType.STANDARD, date(2025, 1, 1), None)


def test_package_price_and_derived_daily(calculator, billboards):
    calc = calculator.calculate_package(
        billboards[0], CustomerType.STANDARD, get_package('oneMonth')
    )
    assert calc.base_price == 24000
    assert calc.daily_price == 800
    assert calc.total_days == 30
    assert calc.subtotal == 24000
    assert calc.total == 24000


def test_package_daily_price_is_rounded(calculator, billboards):
    calc = calculator.calculate_package(
        billboards[0], CustomerType.STANDARD, get_package('oneYear')
    )
    # 220000 / 365 = 602.74
    assert calc.daily_price == 603
    assert calc.total_days == 365


def test_package_without_package_fails(calculator, billboards):
    with pytest.raises(QuoteRequestError):
        calculator.calculate_package(billboards[0], CustomerType.STANDARD, None)


def test_unpriced_billboard_is_zero_not_error(calculator, billboards):
    calc = calculator.calculate_package(
        billboards[1], CustomerType.STANDARD, get_package('oneMonth'), include_installation=True
    )
    assert calc.subtotal == 0
    assert calc.daily_price == 0
    assert calc.installation_price == 1200
    assert calc.total == 1200


def test_calculate_many_preserves_input_order(calculator, billboards):
    reordered = [billboards[2], billboards[0], billboards[1]]
    calcs = calculator.calculate_many(
        reordered, CustomerType.STANDARD, PricingMode.PACKAGE, date(2025, 1, 1),
        package=get_package('oneMonth'),
    )
    assert [c.billboard.id for c in calcs] == ['3', '1', '2']


def test_calculate_many_daily(calculator, billboards):
    calcs = calculator.calculate_many(
        billboards, CustomerType.MARKETER, 'daily', '2025-01-01', '2025-01-10',
        include_installation=True,
    )
    assert [c.total_days for c in calcs] == [10, 10, 10]
    assert [c.subtotal for c in calcs] == [8000, 0, 8000]
    assert [c.installation_price for c in calcs] == [1650, 1200, 1800]


def test_calculate_many_fails_whole_batch(calculator, billboards):
    with pytest.raises(QuoteRequestError):
        calculator.calculate_many(billboards, CustomerType.STANDARD, PricingMode.DAILY, date(2025, 1, 1))
    with pytest.raises(QuoteRequestError):
        calculator.calculate_many(billboards, CustomerType.STANDARD, PricingMode.PACKAGE, date(2025, 1, 1))


def test_calculate_many_empty_batch(calculator):
    calcs = calculator.calculate_many(
        [], CustomerType.STANDARD, PricingMode.PACKAGE, date(2025, 1, 1),
        package=get_package('oneMonth'),
    )
    assert calcs == []


def test_stats_empty():
    stats = QuoteCalculator.stats([])
    assert stats.total_billboards == 0
    assert stats.total_days == 0
    assert stats.average_daily_price == 0
    assert stats.by_size == {}
    assert stats.by_municipality == {}
    assert stats.by_level == {}


def test_stats_breakdowns(calculator, billboards):
    calcs = calculator.calculate_many(
        billboards, CustomerType.STANDARD, PricingMode.PACKAGE, date(2025, 1, 1),
        package=get_package('oneMonth'),
    )
    stats = QuoteCalculator.stats(calcs)

    assert stats.total_billboards == 3
    assert stats.total_days == 30
    # (800 + 0 + 800) / 3 = 533.33
    assert stats.average_daily_price == 533
    assert stats.by_size == {'13x5': 2, '12x4': 1}
    assert stats.by_municipality == {'طرابلس': 1, 'مصراتة': 1, 'بنغازي': 1}
    assert stats.by_level == {'A': 2, 'B': 1}


def test_stats_total_days_is_first_item_not_sum(billboards):
    calcs = [
        PriceCalculation(billboards[0], 100, 100, 5, 500, 0, 500),
        PriceCalculation(billboards[1], 100, 100, 9, 900, 0, 900),
    ]
    assert QuoteCalculator.stats(calcs).total_days == 5


def test_stats_average_rounds_half_up(billboards):
    calcs = [
        PriceCalculation(billboards[0], 801, 801, 1, 801, 0, 801),
        PriceCalculation(billboards[1], 800, 800, 1, 800, 0, 800),
    ]
    assert QuoteCalculator.stats(calcs).average_daily_price == 801


def test_calculations_are_immutable(calculator, billboards):
    calc = calculator.calculate_package(billboards[0], CustomerType.STANDARD, get_package('oneMonth'))
    with pytest.raises(AttributeError):
        calc.total = 1
    assert isinstance(calc.billboard, BillboardAsset)
