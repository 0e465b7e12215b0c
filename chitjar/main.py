"""
Main entry point for ChitJar analytics.

This module provides the CLI interface: it loads a fund and its monthly
entries from a JSON file, runs the analytics and exports the result as
JSON.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from chitjar.analytics import analyze_fund
from chitjar.models import FundAnalytics, FundConfig

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVEL_ENV = "CHITJAR_LOG_LEVEL"


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure root logging from CLI flags or the environment."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = getattr(logging, os.environ.get(LOG_LEVEL_ENV, "INFO").upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


def load_fund_file(path: str) -> Tuple[FundConfig, list]:
    """
    Load a fund definition from JSON.

    Expected shape::

        {"fund": {"chit_value": ..., "installment_amount": ...,
                  "start_month": "2024-01", "end_month": "2024-12"},
         "entries": [{"month_key": "2024-01", "is_paid": true,
                      "dividend_amount": 1000, "prize_money": 0}]}

    ``entries`` may also be an object keyed by month.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the JSON is malformed or has no fund.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Fund file not found: {path}")

    data = json.loads(file_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict) or not isinstance(data.get("fund"), dict):
        raise ValueError(f"No fund object in {path}")

    fund = FundConfig.from_dict(data["fund"])
    entries = data.get("entries") or []
    logger.debug(f"Loaded fund {fund.name or fund.start_month} with {len(entries)} entries")
    return fund, entries


def export_to_json(analytics: FundAnalytics, output_path: Optional[str] = None) -> str:
    """
    Export fund analytics to JSON.

    Args:
        analytics: Computed fund analytics.
        output_path: Optional path to write JSON file.

    Returns:
        JSON string representation.
    """
    json_str = json.dumps(analytics.to_dict(), indent=2, ensure_ascii=False)

    if output_path:
        Path(output_path).write_text(json_str, encoding="utf-8")
        logger.info(f"Exported JSON to: {output_path}")

    return json_str


def main(argv: Optional[List[str]] = None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Compute XIRR, summary and forecast for a chit fund",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s fund.json
  %(prog)s fund.json -o analytics.json
  %(prog)s fund.json --reference-rate 7.5 -v
        """,
    )
    parser.add_argument(
        "fund_file",
        help="Path to the fund JSON file",
    )
    parser.add_argument(
        "-o", "--output",
        help="Output JSON file path (default: stdout)",
    )
    parser.add_argument(
        "-r", "--reference-rate",
        type=float,
        help="Fixed deposit rate in percent to compare against",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress all output except errors",
    )

    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        fund, entries = load_fund_file(args.fund_file)
        analytics = analyze_fund(fund, entries, reference_rate=args.reference_rate)

        json_output = export_to_json(analytics, args.output)
        if not args.output:
            print(json_output)

        if not args.quiet:
            xirr_text = f"{analytics.xirr:.2f}%" if analytics.xirr is not None else "not available"
            print(
                f"\nCash flows: {len(analytics.series.events)}, "
                f"gaps: {len(analytics.series.gaps)}, XIRR: {xirr_text}",
                file=sys.stderr,
            )

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.exception("Failed to analyze fund")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
