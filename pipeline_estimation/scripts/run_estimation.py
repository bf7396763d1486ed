#!/usr/bin/env python3
"""
Command-line script to recalculate estimated dates and write them back.

Usage:
    python -m pipeline_estimation.scripts.run_estimation [--reference-date YYYY-MM-DD] [--strategy NAME] [--store-file PATH]

Options:
    --reference-date YYYY-MM-DD  Reference date for calculations (defaults to today)
    --strategy NAME              flow_shop or throughput (defaults to ESTIMATION_STRATEGY)
    --store-file PATH            Read/write a local JSON snapshot instead of Airtable
"""

import argparse
import json
import sys
from datetime import datetime

from pipeline_estimation.config import get_config
from pipeline_estimation.estimation.estimator import create_estimator
from pipeline_estimation.estimation.service import run_estimation
from pipeline_estimation.exceptions import EstimationError
from pipeline_estimation.logging_config import configure_logging, get_logger
from pipeline_estimation.scripts._store import build_store


def main():
    parser = argparse.ArgumentParser(
        description='Recalculate estimated start/complete dates for all open jobs'
    )
    parser.add_argument(
        '--reference-date',
        type=str,
        help='Reference date for calculations (YYYY-MM-DD format, defaults to today)'
    )
    parser.add_argument(
        '--strategy',
        type=str,
        help='Estimation strategy: flow_shop or throughput (defaults to ESTIMATION_STRATEGY)'
    )
    parser.add_argument(
        '--store-file',
        type=str,
        help='JSON snapshot of the tables to use instead of Airtable'
    )

    args = parser.parse_args()

    config = get_config()
    configure_logging(log_level=config.LOG_LEVEL, log_file=config.LOG_FILE)
    logger = get_logger("pipeline_estimation.scripts.run_estimation")

    try:
        reference_date = None
        if args.reference_date:
            reference_date = datetime.fromisoformat(args.reference_date).date()

        estimator = None
        if args.strategy:
            estimator = create_estimator(
                args.strategy,
                tracked_category=config.TRACKED_CATEGORY or None,
                scale_by_quantity=config.SCALE_BY_QUANTITY
            )

        store = build_store(config, args.store_file)
        summary = run_estimation(store, config=config, reference_date=reference_date, estimator=estimator)

        print(json.dumps(summary, indent=2))

        if args.store_file:
            with open(args.store_file, 'w') as f:
                json.dump(store.tables, f, indent=2)

        # Per-record write failures are reported but do not fail the run
        sys.exit(0)

    except (EstimationError, ValueError) as e:
        logger.error("Estimation failed", error=str(e))
        print(f"\nFatal error: {e}", file=sys.stderr)
        sys.exit(1)

    except Exception as e:
        # Store and network failures
        logger.error("Estimation failed unexpectedly", error=str(e), error_type=type(e).__name__, exc_info=True)
        print(f"\nFatal error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
