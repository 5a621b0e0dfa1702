"""Shared fixtures for the billboard pricing test suite."""
import os
import sys
from datetime import datetime

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from billboard_pricing.engine import BillboardAsset, CustomerType, DurationKey, PriceRow
from billboard_pricing.services import (
    InMemoryPriceStore,
    MemoryKeyValueStore,
    PriceTableCache,
    PricingService,
)


class FakeClock:
    """Controllable clock returning epoch seconds."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def sample_rows() -> list[PriceRow]:
    return [
        PriceRow(
            size='13x5', level='A', customer_type=CustomerType.STANDARD,
            prices={
                DurationKey.ONE_DAY: 900,
                DurationKey.ONE_MONTH: 24000,
                DurationKey.TWO_MONTHS: 45000,
                DurationKey.THREE_MONTHS: 65000,
                DurationKey.SIX_MONTHS: 120000,
                DurationKey.ONE_YEAR: 220000,
            },
        ),
        PriceRow(
            size='13x5', level='A', customer_type=CustomerType.MARKETER,
            prices={DurationKey.ONE_DAY: 800, DurationKey.ONE_MONTH: 21000},
        ),
        PriceRow(
            size='12x4', level='B', customer_type=CustomerType.CORPORATE,
            prices={DurationKey.ONE_DAY: 500, DurationKey.ONE_MONTH: 0},
        ),
    ]


@pytest.fixture
def billboards() -> list[BillboardAsset]:
    return [
        BillboardAsset(id='1', name='Coastal Road', size='13x5', municipality='طرابلس', level='A',
                       status='available', location='Coastal Road, km 3'),
        BillboardAsset(id='2', name='Port Gate', size='12x4', municipality='مصراتة', level='B',
                       status='available', location='Port entrance'),
        BillboardAsset(id='3', name='Airport Road', size='13x5', municipality='بنغازي', level='A',
                       status='booked', location='Airport Road'),
    ]


@pytest.fixture
def cache_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(sample_rows) -> InMemoryPriceStore:
    return InMemoryPriceStore(sample_rows)


@pytest.fixture
def cache(cache_clock) -> PriceTableCache:
    return PriceTableCache(MemoryKeyValueStore(), ttl_seconds=300, clock=cache_clock)


@pytest.fixture
def quote_now() -> datetime:
    return datetime(2025, 3, 1, 10, 30, 0)


@pytest.fixture
def service(store, cache, quote_now) -> PricingService:
    """An isolated service with in-memory store and cache."""
    return PricingService(store=store, cache=cache, clock=lambda: quote_now)
