"""
ChitJar chit fund analytics.

Builds dated cash flow series from a chit fund's monthly entries and
computes XIRR, summary metrics, forecasts and fixed-deposit comparisons.
"""

from chitjar.models import (
    BenchmarkResult,
    Bid,
    BiddingInsights,
    CashFlowEvent,
    CashFlowSeries,
    ForecastPoint,
    FundAnalytics,
    FundConfig,
    MonthlyRecord,
    SummaryMetrics,
)
from chitjar.validator import InvalidFundConfiguration, InvalidReferenceRate
from chitjar.cashflow import build_cash_flow_series, build_net_cash_flow_series
from chitjar.xirr import xirr, xirr_percent
from chitjar.forecast import forecast_cash_flow
from chitjar.summary import summarize
from chitjar.benchmark import compare_to_reference, fixed_deposit_value
from chitjar.analytics import analyze_fund, build_dashboard
from chitjar.insights import bidding_insights, collect_bidding_insights

__version__ = "1.0.0"
__all__ = [
    "BenchmarkResult",
    "Bid",
    "BiddingInsights",
    "CashFlowEvent",
    "CashFlowSeries",
    "ForecastPoint",
    "FundAnalytics",
    "FundConfig",
    "MonthlyRecord",
    "SummaryMetrics",
    "InvalidFundConfiguration",
    "InvalidReferenceRate",
    "build_cash_flow_series",
    "build_net_cash_flow_series",
    "xirr",
    "xirr_percent",
    "forecast_cash_flow",
    "summarize",
    "compare_to_reference",
    "fixed_deposit_value",
    "analyze_fund",
    "build_dashboard",
    "bidding_insights",
    "collect_bidding_insights",
]
