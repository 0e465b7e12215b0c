"""
Benchmarking a fund against a fixed-deposit style reference rate.
"""

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from chitjar.models import BenchmarkResult, CashFlowEvent
from chitjar.validator import validate_reference_rate

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365
CENTS = Decimal("0.01")


def compare_to_reference(fund_rate_percent: Optional[float], reference_rate_percent) -> BenchmarkResult:
    """
    Compare a fund's XIRR with a reference annual rate.

    Args:
        fund_rate_percent: Fund XIRR in percent, or None when unavailable.
        reference_rate_percent: Reference rate in percent (e.g. 7.5 for an FD).

    Returns:
        BenchmarkResult; not comparable when the fund rate is None.

    Raises:
        InvalidReferenceRate: If the reference rate is negative or not a number.
    """
    reference = validate_reference_rate(reference_rate_percent)

    if fund_rate_percent is None:
        return BenchmarkResult(fund_rate=None, reference_rate=reference)

    fund_rate = float(fund_rate_percent)
    difference = fund_rate - reference
    return BenchmarkResult(
        fund_rate=fund_rate,
        reference_rate=reference,
        difference=difference,
        is_fund_better=difference > 0,
    )


def fixed_deposit_value(events: Iterable[CashFlowEvent], rate_percent,
                        as_of: Optional[date] = None) -> dict:
    """
    Value the same cash flows as if they had been kept in a fixed deposit.

    Every installment is deposited on its date and every receipt withdrawn
    on its date; the balance compounds annually on an actual/365 basis.
    Flows dated after ``as_of`` are ignored.

    Args:
        events: Cash flow events of a fund.
        rate_percent: Annual FD rate (e.g., 7.5 for 7.5%).
        as_of: Valuation date (default: date of the latest event).

    Returns:
        Dict with principal, current_value, interest_earned and as_of_date.
    """
    rate = validate_reference_rate(rate_percent) / 100
    events = sorted(events or [], key=lambda e: e.when)

    if not events:
        return {
            'principal': Decimal("0"),
            'current_value': Decimal("0"),
            'interest_earned': Decimal("0"),
            'as_of_date': as_of.isoformat() if as_of else None,
        }

    if as_of is None:
        as_of = events[-1].when

    principal = Decimal("0")
    value = 0.0
    for event in events:
        if event.when > as_of:
            continue
        deposit = -event.amount
        principal += deposit
        years = (as_of - event.when).days / DAYS_PER_YEAR
        value += float(deposit) * (1 + rate) ** years

    current_value = Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)
    logger.debug(f"FD equivalent at {rate_percent}%: {current_value} on {as_of}")

    return {
        'principal': principal,
        'current_value': current_value,
        'interest_earned': current_value - principal,
        'as_of_date': as_of.isoformat(),
    }
