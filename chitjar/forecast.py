"""
Cash flow forecasting using simple historical averages.

The expected payment for each remaining month is the installment less
the average dividend seen so far.
"""

import logging
from decimal import Decimal
from typing import List

from chitjar.models import CashFlowSeries, ForecastPoint, FundConfig
from chitjar.months import add_months, month_range, normalize_month_key, parse_month_key
from chitjar.validator import validate_fund_config

logger = logging.getLogger(__name__)

DEFAULT_PROJECTION_MONTHS = 12


def average_dividend(series: CashFlowSeries) -> Decimal:
    """
    Mean dividend over recorded months, for forecasting.

    Zero-dividend months are left out when at least one month paid a
    dividend; if every recorded dividend is zero the average is zero.
    """
    dividends = [m.dividend for m in series.months]
    nonzero = [d for d in dividends if d != 0]
    if not nonzero:
        return Decimal("0")
    return sum(nonzero, Decimal("0")) / len(nonzero)


def forecast_cash_flow(series: CashFlowSeries, fund: FundConfig) -> List[ForecastPoint]:
    """
    Forecast net cash flow for the months remaining in a fund.

    One point per month strictly after the last recorded month, up to and
    including the effective end month. Each point expects
    ``installment_amount - average_dividend``.

    Args:
        series: Output of ``build_cash_flow_series`` for the fund.
        fund: Fund configuration.

    Returns:
        Forecast points in month order; empty when there is no history yet
        or nothing remains.
    """
    validate_fund_config(fund)

    last = series.last_recorded_month
    if last is None:
        logger.debug("No recorded months, nothing to forecast from")
        return []

    end = normalize_month_key(fund.effective_end_month)
    remaining = month_range(add_months(last, 1), end)
    if not remaining:
        return []

    avg = average_dividend(series)
    expected = fund.installment_amount - avg

    return [
        ForecastPoint(
            month_key=month_key,
            when=parse_month_key(month_key),
            installment_amount=fund.installment_amount,
            average_dividend=avg,
            expected_net_cash_flow=expected,
        )
        for month_key in remaining
    ]


def average_cash_flow_projection(series: CashFlowSeries, months: int = DEFAULT_PROJECTION_MONTHS) -> dict:
    """
    Project the average signed monthly cash flow forward.

    The average is taken over recorded months (received minus paid) and
    repeated for ``months`` months after the last recorded month,
    regardless of the fund's end.

    Returns:
        Dict with projected_cash_flows, average_monthly_cash_flow and
        projected_months.
    """
    if not series.months or months <= 0:
        return {
            'projected_cash_flows': [],
            'average_monthly_cash_flow': Decimal("0"),
            'projected_months': max(months, 0),
        }

    total = sum((m.net for m in series.months), Decimal("0"))
    average = total / len(series.months)
    last = series.last_recorded_month

    projected = []
    for i in range(1, months + 1):
        month_key = add_months(last, i)
        projected.append({
            'month_key': month_key,
            'date': parse_month_key(month_key),
            'amount': average,
        })

    return {
        'projected_cash_flows': projected,
        'average_monthly_cash_flow': average,
        'projected_months': months,
    }
