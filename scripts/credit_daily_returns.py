#!/usr/bin/env python3
"""
Credit daily returns manually.

Usage:
    python scripts/credit_daily_returns.py
    python scripts/credit_daily_returns.py --date 2026-10-19 --no-lock
"""

import argparse
import asyncio
import json
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger

from investclub.tasks.daily_accrual_task import run_daily_accrual
from investclub.utils.logging import setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Credit one day of investment returns")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Accrual date (YYYY-MM-DD), defaults to today in UTC",
    )
    parser.add_argument(
        "--no-lock",
        action="store_true",
        help="Do not take the Redis lock",
    )
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    """Run the accrual and print its summary."""
    args = parse_args(argv)
    setup_logging()

    summary = await run_daily_accrual(args.date, use_lock=not args.no_lock)
    if summary is None:
        logger.warning("Accrual did not run")
        return 1

    print(json.dumps(summary.to_dict(), indent=2))
    return 0 if summary.failed == 0 else 2


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
