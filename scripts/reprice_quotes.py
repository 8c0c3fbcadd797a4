"""
Reprice a quote export with the current pricing engine.

Usage:
    python scripts/reprice_quotes.py quotes.csv [--config tenant_config.json] [--out repriced.csv]
"""
import argparse
import json
import logging
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from quote_pricing.config.settings import get_settings
from quote_pricing.engine.models import PricingConfig
from quote_pricing.services.batch_service import load_quotes_csv, reprice_frame
from quote_pricing.utils.logger import setup_logging

logger = logging.getLogger("reprice_quotes")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Reprice exported quotes")
    parser.add_argument("quotes", type=Path, help="CSV export of quote rows")
    parser.add_argument("--config", type=Path, help="JSON file with the tenant pricing config row")
    parser.add_argument("--out", type=Path, help="Output CSV (default: <output_dir>/<name>_repriced.csv)")
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.log_level)

    config = None
    if args.config:
        with open(args.config, 'r', encoding='utf-8') as f:
            config = PricingConfig.from_row(json.load(f))

    try:
        frame = load_quotes_csv(args.quotes)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1

    result = reprice_frame(frame, config=config)

    out_path = args.out or settings.output_dir / f"{args.quotes.stem}_repriced.csv"
    out_path.parent.mkdir(parents=True, exist_ok=True)
    result.to_csv(out_path, index=False)
    logger.info("Wrote %s", out_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
