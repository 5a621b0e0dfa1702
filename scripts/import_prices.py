#!/usr/bin/env python
"""
Replace the price table with a CSV upload.

Usage:
    python scripts/import_prices.py prices.csv
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from billboard_pricing.config.settings import get_settings
from billboard_pricing.logging_config import configure_logging
from billboard_pricing.services.pricing_service import create_pricing_service


def main():
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(2)

    settings = get_settings()
    configure_logging(settings.log_level)

    csv_path = Path(sys.argv[1])
    if not csv_path.exists():
        print(f"ERROR: {csv_path} not found")
        sys.exit(1)

    service = create_pricing_service(settings)
    result = service.import_csv(csv_path.read_text(encoding='utf-8'))

    for rejected in result.rejected:
        print(f"  SKIPPED line {rejected.line_number}: {rejected.reason}")

    if not result.success:
        print("\n❌ IMPORT FAILED")
        for error in result.errors:
            print(f"  ERROR: {error}")
        sys.exit(1)

    print(f"\n✅ Imported {result.imported} rows into {settings.price_store_path}")


if __name__ == "__main__":
    main()
