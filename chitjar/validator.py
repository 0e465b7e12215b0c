"""
Validation module for ChitJar analytics.

Checks fund configuration integrity before any cash flows are built.
Configuration problems are caller-side data issues and are raised;
degenerate-but-valid inputs (no entries yet, one-sided flows) are not
validated here and surface as ``None`` results instead.
"""

import logging
import math

from chitjar.models import FundConfig
from chitjar.months import parse_month_key

logger = logging.getLogger(__name__)


class InvalidFundConfiguration(ValueError):
    """Fund month range or early-exit month is inconsistent."""


class InvalidReferenceRate(ValueError):
    """Benchmark rate outside the meaningful domain."""


def validate_fund_config(fund: FundConfig) -> None:
    """
    Validate a fund's month range.

    Args:
        fund: Fund configuration to validate.

    Raises:
        InvalidFundConfiguration: If a month key is malformed, the start
            month is after the end month, or the early-exit month lies
            outside [start, end].
    """
    try:
        start = parse_month_key(fund.start_month)
        end = parse_month_key(fund.end_month)
    except ValueError as e:
        raise InvalidFundConfiguration(str(e)) from e

    if start > end:
        raise InvalidFundConfiguration(
            f"Start month {fund.start_month} is after end month {fund.end_month}"
        )

    if fund.early_exit_month is not None:
        try:
            exit_month = parse_month_key(fund.early_exit_month)
        except ValueError as e:
            raise InvalidFundConfiguration(str(e)) from e
        if not (start <= exit_month <= end):
            raise InvalidFundConfiguration(
                f"Early exit month {fund.early_exit_month} must be between "
                f"{fund.start_month} and {fund.end_month}"
            )

    if fund.installment_amount < 0:
        logger.warning(
            f"Fund {fund.name or fund.start_month} has negative installment "
            f"amount {fund.installment_amount}"
        )


def validate_reference_rate(rate) -> float:
    """
    Validate a benchmark annual rate in percent.

    Returns:
        The rate as float.

    Raises:
        InvalidReferenceRate: If the rate is missing, not finite, or negative.
    """
    try:
        value = float(rate)
    except (TypeError, ValueError) as e:
        raise InvalidReferenceRate(f"Invalid reference rate: {rate!r}") from e
    if not math.isfinite(value):
        raise InvalidReferenceRate(f"Invalid reference rate: {rate!r}")
    if value < 0:
        raise InvalidReferenceRate(f"Reference rate cannot be negative: {rate}")
    return value
