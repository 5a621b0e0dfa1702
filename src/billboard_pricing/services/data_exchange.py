"""
Data Exchange - Bulk CSV import/export of the price table.

Format: newline-delimited, comma-separated, header first. Fields are
split on plain commas (no quoting or escaping).

Export column order:
    size, level, customerType, oneMonth, twoMonths, threeMonths,
    sixMonths, oneYear, oneDay, id
"""
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

import structlog

from ..engine.models import CustomerType, DurationKey, PriceRow

logger = structlog.get_logger()

EXPORT_COLUMNS = [
    'size', 'level', 'customerType',
    'oneMonth', 'twoMonths', 'threeMonths', 'sixMonths', 'oneYear', 'oneDay',
    'id',
]

REQUIRED_COLUMNS = ('size', 'level', 'customerType')

LEADING_INT = re.compile(r'\s*([+-]?\d+)')

# Column names used by legacy exports
HEADER_ALIASES = {
    'المقاس': 'size',
    'المستوى': 'level',
    'الزبون': 'customerType',
    'شهر واحد': 'oneMonth',
    '2 أشهر': 'twoMonths',
    '3 أشهر': 'threeMonths',
    '6 أشهر': 'sixMonths',
    'سنة كاملة': 'oneYear',
    'يوم واحد': 'oneDay',
}


@dataclass
class RejectedRow:
    """A data line that was not imported."""
    line_number: int
    reason: str
    raw: str


@dataclass
class ParseResult:
    """Rows accepted from an upload plus diagnostics for rejected lines."""
    rows: list[PriceRow] = field(default_factory=list)
    rejected: list[RejectedRow] = field(default_factory=list)


@dataclass
class ImportResult:
    """Outcome of a bulk import."""
    success: bool
    imported: int
    errors: list[str] = field(default_factory=list)
    rejected: list[RejectedRow] = field(default_factory=list)


def parse_int(value: str) -> Optional[int]:
    """Leading integer of a cell ('12.9' -> 12, '1e3' -> 1); None when there is none."""
    match = LEADING_INT.match(value)
    if not match:
        return None
    return int(match.group(1))


def normalize_header(name: str) -> str:
    name = name.strip().lstrip('\ufeff')
    return HEADER_ALIASES.get(name, name)


def parse_price_csv(text: str) -> ParseResult:
    """
    Parse a bulk upload into price rows.

    Lines missing size, level or customerType, lines with an unknown
    customer type, and repeated keys are rejected with a diagnostic;
    the remaining lines are still imported.
    """
    result = ParseResult()
    lines = text.replace('\r\n', '\n').replace('\r', '\n').split('\n')
    if not lines or not lines[0].strip():
        return result

    headers = [normalize_header(h) for h in lines[0].split(',')]
    seen_keys = set()

    for line_number, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue

        values = line.split(',')
        record = {
            header: values[i].strip() if i < len(values) else ''
            for i, header in enumerate(headers)
        }

        missing = [col for col in REQUIRED_COLUMNS if not record.get(col)]
        if missing:
            result.rejected.append(RejectedRow(line_number, f"Missing {', '.join(missing)}", line))
            continue

        try:
            customer_type = CustomerType.parse(record['customerType'])
        except ValueError:
            result.rejected.append(RejectedRow(
                line_number, f"Unknown customer type '{record['customerType']}'", line
            ))
            continue

        row = PriceRow(
            size=record['size'],
            level=record['level'],
            customer_type=customer_type,
            prices={key: parse_int(record.get(key.value, '')) or 0 for key in DurationKey},
            id=parse_int(record.get('id', '')),
        )

        if row.key in seen_keys:
            result.rejected.append(RejectedRow(
                line_number, f"Duplicate price row for {row.size}/{row.level}/{customer_type.value}", line
            ))
            continue
        seen_keys.add(row.key)
        result.rows.append(row)

    if result.rejected:
        logger.info("Rejected lines in price upload", rejected=len(result.rejected), accepted=len(result.rows))
    return result


def export_price_csv(rows: Iterable[PriceRow]) -> str:
    """Serialize rows in the bulk exchange format."""
    lines = [','.join(EXPORT_COLUMNS)]
    for row in rows:
        values = [row.size, row.level, row.customer_type.value]
        for column in EXPORT_COLUMNS[3:9]:
            price = row.prices.get(DurationKey(column))
            values.append(str(price if price is not None else 0))
        values.append(str(row.id) if row.id is not None else '')
        lines.append(','.join(values))
    return '\n'.join(lines)
