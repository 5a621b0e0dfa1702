"""Services subpackage - storage, caching, bulk exchange and wiring."""
from .cache import JsonFileKeyValueStore, MemoryKeyValueStore, PriceTableCache
from .data_exchange import ImportResult, export_price_csv, parse_price_csv
from .price_store import CsvPriceStore, InMemoryPriceStore, PriceStore, PriceStoreError
from .pricing_service import DEFAULT_PRICE_ROWS, PricingService, create_pricing_service

__all__ = [
    'JsonFileKeyValueStore', 'MemoryKeyValueStore', 'PriceTableCache',
    'ImportResult', 'export_price_csv', 'parse_price_csv',
    'CsvPriceStore', 'InMemoryPriceStore', 'PriceStore', 'PriceStoreError',
    'DEFAULT_PRICE_ROWS', 'PricingService', 'create_pricing_service',
]
