"""
Tests for quote assembly: totals, dates, validity window and snapshots.
"""
from datetime import date, datetime, timedelta

import pytest

from billboard_pricing.engine import (
    CustomerInfo,
    CustomerType,
    PriceCalculation,
    PricingMode,
    QuoteBuilder,
    QuoteRequestError,
    get_package,
)


@pytest.fixture
def customer() -> CustomerInfo:
    return CustomerInfo(
        name='Sara Ali',
        email='sara@example.com',
        phone='+218 91 000 0000',
        company='Ali Trading',
        customer_type=CustomerType.CORPORATE,
    )


@pytest.fixture
def builder(quote_now) -> QuoteBuilder:
    return QuoteBuilder(clock=lambda: quote_now)


@pytest.fixture
def lines(billboards) -> list[PriceCalculation]:
    return [
        PriceCalculation(billboards[0], 24000, 800, 30, 24000, 1650, 25650),
        PriceCalculation(billboards[1], 18000, 600, 30, 18000, 1200, 19200),
    ]


def test_totals(builder, customer, lines):
    quote = builder.build(customer, lines, PricingMode.PACKAGE, date(2025, 3, 1),
                          package=get_package('oneMonth'))

    assert quote.subtotal == 42000
    assert quote.total_installation == 2850
    assert quote.tax == 0
    assert quote.grand_total == 44850
    assert quote.grand_total == (
        sum(line.subtotal for line in quote.billboards)
        + sum(line.installation_price for line in quote.billboards)
    )


def test_package_end_date_is_derived(builder, customer, lines):
    quote = builder.build(customer, lines, PricingMode.PACKAGE, date(2025, 3, 1),
                          end_date=date(2030, 1, 1), package=get_package('threeMonths'))
    assert quote.end_date == date(2025, 5, 30)
    assert quote.package_label == '3 أشهر'


def test_daily_end_date_is_passed_through(builder, customer, lines):
    quote = builder.build(customer, lines, PricingMode.DAILY, '2025-03-01', end_date='2025-03-10')
    assert quote.start_date == date(2025, 3, 1)
    assert quote.end_date == date(2025, 3, 10)
    assert quote.package_label is None


def test_daily_end_datetime_keeps_time_of_day(builder, customer, lines):
    end = datetime(2025, 3, 2, 12, 0)
    quote = builder.build(customer, lines, PricingMode.DAILY, date(2025, 3, 1), end_date=end)
    assert quote.end_date == end
    assert quote.to_dict()['endDate'] == '2025-03-02T12:00:00'

    from_string = builder.build(customer, lines, PricingMode.DAILY, '2025-03-01', end_date='2025-03-02T06:30')
    assert from_string.end_date == datetime(2025, 3, 2, 6, 30)


def test_validity_window_and_id(builder, customer, lines, quote_now):
    quote = builder.build(customer, lines, PricingMode.DAILY, date(2025, 3, 1), end_date=date(2025, 3, 2))

    assert quote.created_at == quote_now
    assert quote.valid_until == quote_now + timedelta(days=30)
    assert quote.id == 'Q-20250301103000000000'
    assert quote.currency == 'د.ل'


def test_quote_ids_follow_the_clock(customer, lines):
    instants = iter([datetime(2025, 3, 1, 10, 0, 0, 1), datetime(2025, 3, 1, 10, 0, 0, 2)])
    builder = QuoteBuilder(clock=lambda: next(instants))
    first = builder.build(customer, lines, PricingMode.DAILY, date(2025, 3, 1), end_date=date(2025, 3, 1))
    second = builder.build(customer, lines, PricingMode.DAILY, date(2025, 3, 1), end_date=date(2025, 3, 1))
    assert first.id != second.id


def test_quote_is_an_independent_snapshot(builder, customer, lines):
    quote = builder.build(customer, lines, PricingMode.DAILY, date(2025, 3, 1), end_date=date(2025, 3, 2))

    lines.append(lines[0])
    lines.clear()

    assert len(quote.billboards) == 2
    assert isinstance(quote.billboards, tuple)
    with pytest.raises(AttributeError):
        quote.grand_total = 0


def test_incomplete_customer_is_rejected(builder, lines):
    customer = CustomerInfo(name='Sara', email='', phone='  ')
    with pytest.raises(QuoteRequestError) as exc:
        builder.build(customer, lines, PricingMode.DAILY, date(2025, 3, 1), end_date=date(2025, 3, 2))
    assert 'email' in str(exc.value)
    assert 'phone' in str(exc.value)


def test_empty_calculations_are_rejected(builder, customer):
    with pytest.raises(QuoteRequestError):
        builder.build(customer, [], PricingMode.DAILY, date(2025, 3, 1), end_date=date(2025, 3, 2))


def test_to_dict_for_renderers(builder, customer, lines):
    quote = builder.build(customer, lines, PricingMode.PACKAGE, date(2025, 3, 1),
                          package=get_package('oneMonth'))
    data = quote.to_dict()

    assert data['customerInfo']['customerType'] == 'corporate'
    assert data['pricingMode'] == 'package'
    assert data['startDate'] == '2025-03-01'
    assert data['endDate'] == '2025-03-31'
    assert data['billboards'][0]['billboard']['id'] == '1'
    assert data['grandTotal'] == 44850
    assert data['validUntil'] == '2025-03-31T10:30:00'
