"""
Fund analytics orchestration.

Runs the builder, solver, summary, forecast and benchmark steps for a fund
and aggregates several funds into dashboard figures.
"""

import logging
from typing import Iterable, Optional, Union

from chitjar.benchmark import compare_to_reference
from chitjar.cashflow import RecordsInput, build_cash_flow_series
from chitjar.forecast import forecast_cash_flow
from chitjar.models import FundAnalytics, FundConfig
from chitjar.summary import summarize, total_profit
from chitjar.xirr import xirr_percent

logger = logging.getLogger(__name__)


def analyze_fund(fund: Union[FundConfig, dict], records: RecordsInput,
                 reference_rate: Optional[float] = None) -> FundAnalytics:
    """
    Compute all analytics for one fund.

    Args:
        fund: Fund configuration (or a fund row dict).
        records: Monthly entries for the fund.
        reference_rate: Optional FD rate in percent to compare against.

    Returns:
        FundAnalytics. ``xirr`` is None when no rate can be computed.

    Raises:
        InvalidFundConfiguration: If the fund's month range is invalid.
        InvalidReferenceRate: If the reference rate is negative.
    """
    if isinstance(fund, dict):
        fund = FundConfig.from_dict(fund)

    series = build_cash_flow_series(fund, records)
    rate = xirr_percent(series.events)
    summary = summarize(series)
    forecast = forecast_cash_flow(series, fund)

    comparison = None
    if reference_rate is not None:
        comparison = compare_to_reference(rate, reference_rate)

    if rate is None and series.events:
        logger.info(f"XIRR not available for fund {fund.name or fund.start_month}")

    return FundAnalytics(
        fund=fund,
        series=series,
        summary=summary,
        xirr=rate,
        forecast=forecast,
        comparison=comparison,
    )


def build_dashboard(analyses: Iterable[FundAnalytics]) -> dict:
    """
    Aggregate analytics of several funds.

    Funds without any cash flow are counted but not listed.

    Returns:
        Dict with total_profit, fund_count and per-fund figures.
    """
    analyses = list(analyses)
    funds = []

    for analysis in analyses:
        if not analysis.series.events:
            continue
        funds.append({
            'fund_name': analysis.fund.name,
            'total_profit': analysis.summary.net_amount,
            'xirr': analysis.xirr,
            'cash_flow_count': len(analysis.series.events),
        })

    return {
        'total_profit': total_profit(a.series for a in analyses),
        'funds': funds,
        'fund_count': len(analyses),
    }
