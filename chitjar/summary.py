"""
Summary metrics over a fund's realized cash flows.

All figures are realized-to-date: months not yet recorded contribute
nothing to the net amount or ROI.
"""

import logging
from decimal import Decimal
from typing import Iterable, List, Union

from chitjar.models import CashFlowEvent, CashFlowSeries, SummaryMetrics
from chitjar.months import months_between

logger = logging.getLogger(__name__)


def _months_to_completion(series: CashFlowSeries) -> int:
    """Months after the latest recorded month up to the effective end."""
    if not series.end_month:
        return 0
    latest = series.last_recorded_month
    if latest is None:
        if not series.start_month:
            return 0
        return max(0, months_between(series.start_month, series.end_month) + 1)
    return max(0, months_between(latest, series.end_month))


def summarize(series: Union[CashFlowSeries, List[CashFlowEvent]]) -> SummaryMetrics:
    """
    Aggregate a cash flow series.

    Args:
        series: Output of ``build_cash_flow_series``, or a bare list of
                events (which carries no month breakdown, so the dividend
                average and months to completion are zero).

    Returns:
        SummaryMetrics; ``roi`` is None when nothing has been paid.
    """
    if not isinstance(series, CashFlowSeries):
        series = CashFlowSeries(events=list(series or []))

    total_paid = Decimal("0")
    total_received = Decimal("0")
    for event in series.events:
        if event.amount < 0:
            total_paid += -event.amount
        else:
            total_received += event.amount

    net_amount = total_received - total_paid

    if series.months:
        dividends = sum((m.dividend for m in series.months), Decimal("0"))
        average_dividend = dividends / len(series.months)
    else:
        average_dividend = Decimal("0")

    roi = float(net_amount / total_paid) if total_paid else None
    if roi is None:
        logger.debug("Nothing paid yet, ROI undefined")

    return SummaryMetrics(
        net_amount=net_amount,
        total_paid=total_paid,
        total_received=total_received,
        average_monthly_dividend=average_dividend,
        months_to_completion=_months_to_completion(series),
        roi=roi,
    )


def total_profit(series_list: Iterable[CashFlowSeries]) -> Decimal:
    """Net amount summed across several funds."""
    return sum((summarize(s).net_amount for s in series_list), Decimal("0"))
