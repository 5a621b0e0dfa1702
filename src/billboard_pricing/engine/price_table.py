"""
Price Table - In-memory snapshot of price rows with keyed lookup.

Rows are held in a DataFrame keyed by (size, level, customerType).
The key is unique within a snapshot: the first row for a key wins and
later duplicates are kept aside in ``duplicates`` for reporting.
"""
from typing import Iterable, Iterator, Optional

import pandas as pd

from .models import CustomerType, DurationKey, PriceRow

KEY_COLUMNS = ['size', 'level', 'customerType']
PRICE_COLUMNS = [key.value for key in DurationKey]


def customer_value(customer_type) -> str:
    """Column value for a customer type; unknown strings pass through."""
    if isinstance(customer_type, CustomerType):
        return customer_type.value
    return str(customer_type)


class PriceTable:
    """Lookup table of price rows."""

    def __init__(self, rows: Iterable[PriceRow] = ()):
        rows = list(rows)
        frame = pd.DataFrame(
            [row.to_dict() for row in rows],
            columns=['id'] + KEY_COLUMNS + PRICE_COLUMNS,
        )

        duplicated = frame.duplicated(subset=KEY_COLUMNS, keep='first')
        self.duplicates: list[PriceRow] = [
            row for row, is_dup in zip(rows, duplicated) if is_dup
        ]
        self.rows: list[PriceRow] = [
            row for row, is_dup in zip(rows, duplicated) if not is_dup
        ]
        self.frame = frame[~duplicated].reset_index(drop=True)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[PriceRow]:
        return iter(self.rows)

    def _match(self, size: str, level: str, customer_type: CustomerType) -> pd.DataFrame:
        return self.frame[
            (self.frame['size'] == size) &
            (self.frame['level'] == level) &
            (self.frame['customerType'] == customer_value(customer_type))
        ]

    def find_row(self, size: str, level: str, customer_type: CustomerType) -> Optional[PriceRow]:
        """Find the row for an exact (size, level, customer_type) key."""
        match = self._match(size, level, customer_type)
        if match.empty:
            return None
        return self.rows[match.index[0]]

    def lookup(
        self,
        size: str,
        level: str,
        customer_type: CustomerType,
        duration_key: DurationKey
    ) -> Optional[int]:
        """
        Get the configured price for a key and duration.

        Returns None when no row matches or the row does not track the
        duration. A configured price of 0 is returned as 0.
        """
        try:
            column = DurationKey(duration_key).value
        except ValueError:
            return None

        match = self._match(size, level, customer_type)
        if match.empty:
            return None

        value = match.iloc[0][column]
        if not pd.notna(value):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    def sizes(self) -> list[str]:
        """Distinct sizes in table order."""
        return list(self.frame['size'].drop_duplicates())

    def levels(self) -> list[str]:
        """Distinct levels in table order."""
        return list(self.frame['level'].drop_duplicates())
