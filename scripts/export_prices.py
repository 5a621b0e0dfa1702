#!/usr/bin/env python
"""
Export the price table in the bulk CSV format.

Usage:
    python scripts/export_prices.py [output.csv]

Writes to pricing_data_<date>.csv when no output path is given.
"""
import sys
from datetime import date
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from billboard_pricing.config.settings import get_settings
from billboard_pricing.logging_config import configure_logging
from billboard_pricing.services.pricing_service import create_pricing_service


def main():
    settings = get_settings()
    configure_logging(settings.log_level)

    output = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(f"pricing_data_{date.today().isoformat()}.csv")

    service = create_pricing_service(settings)
    output.write_text(service.export_csv(), encoding='utf-8')
    print(f"✅ Exported price table to {output}")


if __name__ == "__main__":
    main()
