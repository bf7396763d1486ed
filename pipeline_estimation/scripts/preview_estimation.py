#!/usr/bin/env python3
"""
Command-line script to preview estimation changes.

Usage:
    python -m pipeline_estimation.scripts.preview_estimation [--reference-date YYYY-MM-DD] [--show-all] [--summary-only]

Options:
    --reference-date YYYY-MM-DD  Reference date for calculations (defaults to today)
    --show-all                   Show all jobs, not just those with changes
    --summary-only               Show only summary, not detailed diffs
    --strategy NAME              flow_shop or throughput (defaults to ESTIMATION_STRATEGY)
    --store-file PATH            Read a local JSON snapshot instead of Airtable
"""

import argparse
import sys

from pipeline_estimation.config import get_config
from pipeline_estimation.estimation.preview import run_preview_script
from pipeline_estimation.logging_config import configure_logging
from pipeline_estimation.scripts._store import build_store


def main():
    parser = argparse.ArgumentParser(
        description='Preview estimation changes without updating the store'
    )
    parser.add_argument(
        '--reference-date',
        type=str,
        help='Reference date for calculations (YYYY-MM-DD format, defaults to today)'
    )
    parser.add_argument(
        '--show-all',
        action='store_true',
        help='Show all jobs, not just those with changes'
    )
    parser.add_argument(
        '--summary-only',
        action='store_true',
        help='Show only summary statistics, not detailed diffs'
    )
    parser.add_argument(
        '--strategy',
        type=str,
        help='Estimation strategy: flow_shop or throughput'
    )
    parser.add_argument(
        '--store-file',
        type=str,
        help='JSON snapshot of the tables to use instead of Airtable'
    )

    args = parser.parse_args()

    config = get_config()
    configure_logging(log_level=config.LOG_LEVEL, log_file=config.LOG_FILE)

    try:
        store = build_store(config, args.store_file)
        run_preview_script(
            store,
            reference_date_str=args.reference_date,
            show_all=args.show_all,
            detailed=not args.summary_only,
            strategy=args.strategy
        )
        sys.exit(0)

    except Exception as e:
        print(f"\nFatal error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
