"""
Pure Python XIRR (Extended Internal Rate of Return) calculator.

Uses Newton-Raphson from the conventional 10% guess, falling back to
bisection over a bounded rate interval. Day counting is actual/365 from
the earliest cash flow, matching spreadsheet XIRR.

Degenerate input (fewer than two flows, no sign change, bad dates) and
non-convergence both return None instead of raising.
"""

import logging
import math
from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple

from chitjar.models import CashFlowEvent

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.0
DEFAULT_GUESS = 0.1
NPV_TOLERANCE = 1e-6
RATE_TOLERANCE = 1e-7
MAX_ITERATIONS = 100
MIN_DERIVATIVE = 1e-12
RATE_LOWER_BOUND = -0.999
RATE_UPPER_BOUND = 10.0
BISECTION_ITERATIONS = 200

# Rates probed for a sign change when Newton-Raphson fails
_BRACKET_GRID = (
    -0.99, -0.95, -0.9, -0.75, -0.5, -0.25, -0.1, 0.0, 0.05, 0.1,
    0.2, 0.35, 0.5, 0.75, 1.0, 1.5, 2.0, 3.0, 5.0, 7.5,
)


def _parse_date(val) -> Optional[date]:
    """Parse a date from string or date object."""
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val
    if isinstance(val, str):
        for fmt in ('%Y-%m-%d', '%d-%m-%Y', '%d/%m/%Y', '%d-%b-%Y'):
            try:
                return datetime.strptime(val.strip(), fmt).date()
            except ValueError:
                continue
    return None


def _normalize(cashflows) -> Optional[List[Tuple[date, float]]]:
    """
    Convert events or (date, amount) pairs to sorted (date, float) pairs.

    Returns None if any date is unparseable or any amount is not finite.
    """
    pairs = []
    for cf in cashflows:
        if isinstance(cf, CashFlowEvent):
            when, amount = cf.when, cf.amount
        else:
            when, amount = cf
        d = _parse_date(when)
        if d is None:
            logger.debug(f"Unparseable cash flow date: {when!r}")
            return None
        try:
            value = float(amount)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(value):
            return None
        pairs.append((d, value))
    pairs.sort(key=lambda x: x[0])
    return pairs


def validate_cashflows_for_xirr(cashflows: Iterable) -> bool:
    """
    Check that a rate can be computed at all.

    Requires at least two flows on at least two distinct dates, valid
    dates, finite amounts, and both a negative and a positive amount.
    """
    return _solvable(_normalize(list(cashflows or [])))


def _solvable(pairs: Optional[List[Tuple[date, float]]]) -> bool:
    if pairs is None or len(pairs) < 2:
        return False
    if pairs[0][0] == pairs[-1][0]:
        logger.debug("All cash flows fall on one date")
        return False
    amounts = [a for _, a in pairs]
    return any(a > 0 for a in amounts) and any(a < 0 for a in amounts)


def _year_fractions(pairs: List[Tuple[date, float]]) -> List[Tuple[float, float]]:
    d0 = pairs[0][0]
    return [(amount, (d - d0).days / DAYS_PER_YEAR) for d, amount in pairs]


def _npv(flows: List[Tuple[float, float]], rate: float) -> float:
    return sum(amt / (1.0 + rate) ** yf for amt, yf in flows)


def _dnpv(flows: List[Tuple[float, float]], rate: float) -> float:
    return sum(-yf * amt / (1.0 + rate) ** (yf + 1.0) for amt, yf in flows)


def _safe_npv(flows, rate) -> Optional[float]:
    """NPV, or None when it cannot be evaluated in floating point."""
    if 1.0 + rate <= 0:
        return None
    try:
        value = _npv(flows, rate)
    except (OverflowError, ZeroDivisionError):
        return None
    return value if math.isfinite(value) else None


def npv(cashflows: Iterable, rate: float) -> Optional[float]:
    """
    Net present value of cash flows at an annual rate (actual/365).

    Returns None for unparseable input or when ``1 + rate <= 0``.
    """
    pairs = _normalize(list(cashflows or []))
    if not pairs:
        return None
    return _safe_npv(_year_fractions(pairs), rate)


def _newton_raphson(flows, guess, npv_tol, rate_tol, max_iterations) -> Optional[float]:
    """Run Newton-Raphson from the initial guess; None if it gives up."""
    rate = guess
    for _ in range(max_iterations):
        try:
            val = _npv(flows, rate)
            deriv = _dnpv(flows, rate)
        except (OverflowError, ZeroDivisionError):
            return None
        if not (math.isfinite(val) and math.isfinite(deriv)):
            return None
        if abs(deriv) < MIN_DERIVATIVE:
            logger.debug(f"Derivative vanished at rate {rate}")
            return None

        new_rate = rate - val / deriv
        if 1.0 + new_rate <= 0:
            logger.debug(f"Newton step left the domain: {new_rate}")
            return None

        new_val = _safe_npv(flows, new_rate)
        if new_val is None:
            return None
        if abs(new_val) < npv_tol or abs(new_rate - rate) < rate_tol:
            return new_rate
        rate = new_rate
    logger.debug(f"Newton-Raphson did not converge in {max_iterations} iterations")
    return None


def _find_bracket(flows, lo, hi) -> Optional[Tuple[float, float, float, float]]:
    """Scan the rate grid for adjacent points where NPV changes sign."""
    points = [lo] + [r for r in _BRACKET_GRID if lo < r < hi] + [hi]
    prev_rate, prev_val = None, None
    for rate in points:
        val = _safe_npv(flows, rate)
        if val is None:
            prev_rate, prev_val = None, None
            continue
        if val == 0:
            return rate, val, rate, val
        if prev_val is not None and prev_val * val < 0:
            return prev_rate, prev_val, rate, val
        prev_rate, prev_val = rate, val
    return None


def _bisection(flows, lo, hi, npv_tol, rate_tol) -> Optional[float]:
    """Bisection method as last-resort fallback."""
    bracket = _find_bracket(flows, lo, hi)
    if bracket is None:
        return None
    lo, f_lo, hi, _ = bracket
    if lo == hi:
        return lo

    for _ in range(BISECTION_ITERATIONS):
        mid = (lo + hi) / 2.0
        f_mid = _safe_npv(flows, mid)
        if f_mid is None:
            return None
        if abs(f_mid) < npv_tol or (hi - lo) < rate_tol:
            return mid
        if f_lo * f_mid < 0:
            hi = mid
        else:
            lo = mid
            f_lo = f_mid
    return (lo + hi) / 2.0


def xirr(cashflows: Iterable, guess: float = DEFAULT_GUESS,
         npv_tolerance: float = NPV_TOLERANCE, rate_tolerance: float = RATE_TOLERANCE,
         max_iterations: int = MAX_ITERATIONS, lower_bound: float = RATE_LOWER_BOUND,
         upper_bound: float = RATE_UPPER_BOUND) -> Optional[float]:
    """
    Calculate XIRR using Newton-Raphson with a bisection fallback.

    Args:
        cashflows: CashFlowEvents or (date, amount) tuples.
                   Negative = money paid, positive = money received.
        guess: Initial Newton-Raphson rate.
        npv_tolerance: Converged when |NPV| drops below this.
        rate_tolerance: Converged when the rate step drops below this.
        max_iterations: Newton-Raphson iteration cap.
        lower_bound: Lowest rate searched by bisection (must be > -1).
        upper_bound: Highest rate searched by bisection.

    Returns:
        Annualized return as float (e.g., 0.12 for 12%), or None if no
        solution found.
    """
    pairs = _normalize(list(cashflows or []))
    if not _solvable(pairs):
        return None

    flows = _year_fractions(pairs)

    result = _newton_raphson(flows, guess, npv_tolerance, rate_tolerance, max_iterations)
    if result is None:
        logger.debug("Falling back to bisection")
        result = _bisection(flows, lower_bound, upper_bound, npv_tolerance, rate_tolerance)

    if result is None or not math.isfinite(result) or 1.0 + result <= 0:
        logger.debug(f"No XIRR for {len(flows)} cash flows")
        return None
    return result


def xirr_percent(cashflows: Iterable, **kwargs) -> Optional[float]:
    """XIRR as a percentage (10.0 for 10%), or None."""
    result = xirr(cashflows, **kwargs)
    return result * 100 if result is not None else None
