"""
Price Store - Backend collaborator holding the persisted price rows.

The engine only needs three operations: read all rows ordered by id,
delete all rows, and insert a batch of rows. Two implementations are
provided: an in-memory store and a CSV file store.
"""
import csv
from pathlib import Path
from typing import Iterable

import structlog

from ..engine.models import CustomerType, DurationKey, PriceRow

logger = structlog.get_logger()


class PriceStoreError(RuntimeError):
    """Raised when the backend cannot be read or written."""


class PriceStore:
    """Interface for the backend price table."""

    def fetch_all(self) -> list[PriceRow]:
        """All rows ordered by id ascending."""
        raise NotImplementedError

    def delete_all(self) -> None:
        raise NotImplementedError

    def insert_many(self, rows: Iterable[PriceRow]) -> list[PriceRow]:
        """Insert rows as one batch; returns the stored rows with ids."""
        raise NotImplementedError


def _assign_ids(rows: Iterable[PriceRow], next_id: int) -> list[PriceRow]:
    stored = []
    for row in rows:
        stored.append(PriceRow(
            size=row.size,
            level=row.level,
            customer_type=row.customer_type,
            prices=dict(row.prices),
            id=next_id,
        ))
        next_id += 1
    return stored


class InMemoryPriceStore(PriceStore):
    """Price store kept in process memory."""

    def __init__(self, rows: Iterable[PriceRow] = ()):
        self._rows: list[PriceRow] = []
        self.insert_many(rows)

    def fetch_all(self) -> list[PriceRow]:
        return sorted(
            (PriceRow.from_dict(row.to_dict()) for row in self._rows),
            key=lambda r: r.id,
        )

    def delete_all(self) -> None:
        self._rows = []

    def insert_many(self, rows: Iterable[PriceRow]) -> list[PriceRow]:
        next_id = max((r.id for r in self._rows), default=0) + 1
        stored = _assign_ids(rows, next_id)
        self._rows.extend(stored)
        return stored


class CsvPriceStore(PriceStore):
    """
    Price store persisted to a CSV file.

    Untracked prices are written as empty cells so that they stay
    distinct from a configured price of 0.
    """

    CSV_COLUMNS = ['id', 'size', 'level', 'customerType'] + [key.value for key in DurationKey]

    def __init__(self, path: Path):
        self.path = Path(path)

    def fetch_all(self) -> list[PriceRow]:
        if not self.path.exists():
            return []

        rows = []
        try:
            with open(self.path, 'r', encoding='utf-8', newline='') as f:
                reader = csv.DictReader(f)
                for line_num, record in enumerate(reader, start=2):
                    try:
                        rows.append(self._from_csv_row(record))
                    except (KeyError, ValueError, AttributeError, TypeError) as e:
                        logger.warning("Skipping unreadable store row", path=str(self.path), line=line_num, error=str(e))
        except (OSError, csv.Error) as e:
            raise PriceStoreError(f"Failed to read {self.path}: {e}")

        return sorted(rows, key=lambda r: (r.id is None, r.id or 0))

    def delete_all(self) -> None:
        self._write([])

    def insert_many(self, rows: Iterable[PriceRow]) -> list[PriceRow]:
        existing = self.fetch_all()
        next_id = max((r.id for r in existing if r.id is not None), default=0) + 1
        stored = _assign_ids(rows, next_id)
        self._write(existing + stored)
        return stored

    def _write(self, rows: list[PriceRow]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8', newline='') as f:
                writer = csv.DictWriter(f, fieldnames=self.CSV_COLUMNS)
                writer.writeheader()
                for row in rows:
                    writer.writerow(self._to_csv_row(row))
        except (OSError, csv.Error) as e:
            raise PriceStoreError(f"Failed to write {self.path}: {e}")

    @staticmethod
    def _to_csv_row(row: PriceRow) -> dict:
        data = {
            'id': str(row.id) if row.id is not None else '',
            'size': row.size,
            'level': row.level,
            'customerType': row.customer_type.value,
        }
        for key in DurationKey:
            value = row.prices.get(key)
            data[key.value] = str(value) if value is not None else ''
        return data

    @staticmethod
    def _from_csv_row(record: dict) -> PriceRow:
        prices = {}
        for key in DurationKey:
            value = (record.get(key.value) or '').strip()
            if value:
                prices[key] = int(value)
        row_id = (record.get('id') or '').strip()
        size = (record.get('size') or '').strip()
        level = (record.get('level') or '').strip()
        customer_type = (record.get('customerType') or '').strip()
        if not (size and level and customer_type):
            raise ValueError("Row is missing size, level or customerType")
        return PriceRow(
            size=size,
            level=level,
            customer_type=CustomerType.parse(customer_type),
            prices=prices,
            id=int(row_id) if row_id else None,
        )
