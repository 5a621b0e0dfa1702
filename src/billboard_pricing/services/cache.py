"""
Price table cache with a fixed time-to-live.

The cache holds a single snapshot of the price rows in a key-value
substrate. Expired snapshots are purged on read. Every operation is
fail-soft: substrate errors are logged and treated as a miss or a no-op.
"""
import json
import time
from pathlib import Path
from typing import Callable, Optional

import structlog

from ..engine.models import PriceRow

logger = structlog.get_logger()

CACHE_KEY = 'billboard_pricing_cache'
DEFAULT_TTL_SECONDS = 5 * 60


class KeyValueStore:
    """String key-value substrate used by the cache."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class MemoryKeyValueStore(KeyValueStore):
    """Substrate kept in a process-local dict."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore(KeyValueStore):
    """Substrate persisted as a JSON object in a single file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        with open(self.path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False)

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class PriceTableCache:
    """Time-bounded memo of the loaded price rows."""

    def __init__(
        self,
        store: KeyValueStore,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
        key: str = CACHE_KEY
    ):
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.key = key
        self._clock = clock

    def get(self) -> Optional[list[PriceRow]]:
        """Cached rows, or None on a miss."""
        try:
            raw = self.store.get(self.key)
        except Exception as e:
            logger.warning("Cache read failed", error=str(e))
            return None

        if raw is None:
            return None

        try:
            record = json.loads(raw)
            captured_at = float(record['captured_at'])
            rows = [PriceRow.from_dict(data) for data in record['rows']]
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Discarding unreadable cache entry", error=str(e))
            self.invalidate()
            return None

        if self._clock() - captured_at > self.ttl_seconds:
            logger.debug("Cache entry expired", age=self._clock() - captured_at)
            self.invalidate()
            return None

        return rows

    def put(self, rows: list[PriceRow]) -> None:
        """Store a snapshot of rows stamped with the current time."""
        record = {
            'captured_at': self._clock(),
            'rows': [row.to_dict() for row in rows],
        }
        try:
            self.store.set(self.key, json.dumps(record, ensure_ascii=False))
        except Exception as e:
            logger.warning("Cache write failed", error=str(e))

    def invalidate(self) -> None:
        """Drop the cached snapshot."""
        try:
            self.store.delete(self.key)
        except Exception as e:
            logger.warning("Cache delete failed", error=str(e))
