"""
Data models for ChitJar analytics.

This module defines the core data structures using dataclasses for:
- Fund configuration and recorded monthly entries
- Dated cash flow events and the series built from them
- Forecast, summary and benchmark results
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

ZERO = Decimal("0")


def _to_decimal(value) -> Decimal:
    """Coerce a numeric value to Decimal; None becomes zero."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass
class FundConfig:
    """
    Configuration of a single chit fund.

    Attributes:
        chit_value: Total value of the chit (pot size)
        installment_amount: Amount paid by the member every month
        start_month: First month of the fund (YYYY-MM)
        end_month: Nominal last month of the fund (YYYY-MM)
        early_exit_month: Month the member left the fund early (optional)
        total_months: Nominal duration in months (optional, informational)
        name: Display name of the fund (optional)
    """
    chit_value: Decimal
    installment_amount: Decimal
    start_month: str
    end_month: str
    early_exit_month: Optional[str] = None
    total_months: Optional[int] = None
    name: Optional[str] = None

    def __post_init__(self):
        """Normalize fund data."""
        self.chit_value = _to_decimal(self.chit_value)
        self.installment_amount = _to_decimal(self.installment_amount)
        self.start_month = self.start_month.strip() if self.start_month else ""
        self.end_month = self.end_month.strip() if self.end_month else ""
        if self.early_exit_month is not None:
            self.early_exit_month = self.early_exit_month.strip() or None
        if self.name:
            self.name = " ".join(self.name.split())

    @property
    def effective_end_month(self) -> str:
        """Early-exit month when the member left early, else the nominal end."""
        return self.early_exit_month or self.end_month

    @classmethod
    def from_dict(cls, data: dict) -> "FundConfig":
        """Build from a fund row as handed over by the persistence layer."""
        return cls(
            chit_value=data.get("chit_value"),
            installment_amount=data.get("installment_amount"),
            start_month=data.get("start_month"),
            end_month=data.get("end_month"),
            early_exit_month=data.get("early_exit_month"),
            total_months=data.get("total_months"),
            name=data.get("name"),
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "chit_value": str(self.chit_value),
            "installment_amount": str(self.installment_amount),
            "start_month": self.start_month,
            "end_month": self.end_month,
            "early_exit_month": self.early_exit_month,
            "effective_end_month": self.effective_end_month,
            "total_months": self.total_months,
        }


@dataclass
class MonthlyRecord:
    """
    A recorded month of activity in a fund.

    Attributes:
        month_key: Month of the entry (YYYY-MM)
        installment_paid: Whether the monthly installment was paid
        dividend: Dividend received that month
        prize_money: Prize money received that month (winning the auction)
    """
    month_key: str
    installment_paid: bool = False
    dividend: Decimal = ZERO
    prize_money: Decimal = ZERO

    def __post_init__(self):
        """Normalize entry data."""
        self.month_key = self.month_key.strip() if self.month_key else ""
        self.installment_paid = bool(self.installment_paid)
        self.dividend = _to_decimal(self.dividend)
        self.prize_money = _to_decimal(self.prize_money)

    @property
    def has_activity(self) -> bool:
        """True when anything was paid or received this month."""
        return self.installment_paid or self.dividend != 0 or self.prize_money != 0

    @classmethod
    def from_dict(cls, data: dict, month_key: Optional[str] = None) -> "MonthlyRecord":
        """
        Build from a monthly entry row.

        Accepts both the engine's field names and the entry table's
        (``is_paid``, ``dividend_amount``).
        """
        paid = data.get("installment_paid")
        if paid is None:
            paid = data.get("is_paid", False)
        dividend = data.get("dividend")
        if dividend is None:
            dividend = data.get("dividend_amount")
        return cls(
            month_key=month_key or data.get("month_key"),
            installment_paid=paid,
            dividend=dividend,
            prize_money=data.get("prize_money"),
        )


@dataclass
class Bid:
    """
    Winning bid of a fund's monthly auction.

    Attributes:
        month_key: Month of the auction (YYYY-MM)
        winning_bid: Amount the winner bid for the pot
        discount_amount: Discount given up by the winner
        bidder_name: Name of the winning member (optional)
        notes: Free-form notes (optional)
    """
    month_key: str
    winning_bid: Decimal
    discount_amount: Decimal = ZERO
    bidder_name: Optional[str] = None
    notes: Optional[str] = None

    def __post_init__(self):
        """Normalize bid data."""
        self.month_key = self.month_key.strip() if self.month_key else ""
        self.winning_bid = _to_decimal(self.winning_bid)
        self.discount_amount = _to_decimal(self.discount_amount)
        if self.bidder_name:
            self.bidder_name = " ".join(self.bidder_name.split())

    @classmethod
    def from_dict(cls, data: dict) -> "Bid":
        return cls(
            month_key=data.get("month_key"),
            winning_bid=data.get("winning_bid"),
            discount_amount=data.get("discount_amount"),
            bidder_name=data.get("bidder_name"),
            notes=data.get("notes"),
        )

    def to_dict(self) -> dict:
        return {
            "month_key": self.month_key,
            "winning_bid": str(self.winning_bid),
            "discount_amount": str(self.discount_amount),
            "bidder_name": self.bidder_name,
            "notes": self.notes,
        }


@dataclass
class CashFlowEvent:
    """
    A single dated, signed cash flow.

    Negative amounts are paid by the investor (installments), positive
    amounts are received (dividends, prize money).
    """
    amount: Decimal
    when: date

    def __post_init__(self):
        self.amount = _to_decimal(self.amount)
        if not self.amount.is_finite():
            raise ValueError(f"Cash flow amount must be finite, got {self.amount}")

    def as_tuple(self):
        """(date, float amount) pair as consumed by the XIRR solver."""
        return (self.when, float(self.amount))

    def to_dict(self) -> dict:
        return {
            "amount": str(self.amount),
            "when": self.when.isoformat() if isinstance(self.when, date) else self.when,
        }


@dataclass
class MonthlyCashFlow:
    """Per-month breakdown of a recorded month's flows."""
    month_key: str
    when: date
    installment: Decimal = ZERO
    dividend: Decimal = ZERO
    prize_money: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.dividend + self.prize_money - self.installment


@dataclass
class CashFlowSeries:
    """
    Ordered cash flows of one fund, as built from its monthly entries.

    Attributes:
        events: Cash flow events sorted by date, outflow before inflow
        gaps: Month keys in the fund range with no recorded activity
        months: Per-month breakdown for months with recorded activity
        start_month: First month of the fund
        end_month: Effective end month (early exit or nominal end)
    """
    events: List[CashFlowEvent] = field(default_factory=list)
    gaps: List[str] = field(default_factory=list)
    months: List[MonthlyCashFlow] = field(default_factory=list)
    start_month: Optional[str] = None
    end_month: Optional[str] = None

    @property
    def last_recorded_month(self) -> Optional[str]:
        if not self.months:
            return None
        return self.months[-1].month_key

    def to_dict(self) -> dict:
        return {
            "events": [e.to_dict() for e in self.events],
            "gaps": list(self.gaps),
            "start_month": self.start_month,
            "end_month": self.end_month,
        }


@dataclass
class NetCashFlowPoint:
    """Installment minus dividend for one month of a fund."""
    month_key: str
    when: date
    installment_amount: Decimal
    dividend_amount: Decimal
    net_cash_flow: Decimal

    def to_dict(self) -> dict:
        return {
            "month_key": self.month_key,
            "date": self.when.isoformat(),
            "installment_amount": str(self.installment_amount),
            "dividend_amount": str(self.dividend_amount),
            "net_cash_flow": str(self.net_cash_flow),
        }


@dataclass
class ForecastPoint:
    """
    Expected cash flow for a future month.

    ``expected_net_cash_flow`` is installment minus average dividend, i.e.
    the net amount the member is expected to pay that month.
    """
    month_key: str
    when: date
    installment_amount: Decimal
    average_dividend: Decimal
    expected_net_cash_flow: Decimal

    def to_dict(self) -> dict:
        return {
            "month_key": self.month_key,
            "date": self.when.isoformat(),
            "installment_amount": str(self.installment_amount),
            "average_dividend": str(self.average_dividend),
            "expected_net_cash_flow": str(self.expected_net_cash_flow),
        }


@dataclass
class SummaryMetrics:
    """
    Realized-to-date summary of a fund.

    Attributes:
        net_amount: Total received minus total paid
        total_paid: Sum of installments paid
        total_received: Sum of dividends and prize money received
        average_monthly_dividend: Mean dividend over recorded months
        months_to_completion: Months left after the latest recorded month
        roi: net_amount / total_paid as a fraction, None if nothing paid
    """
    net_amount: Decimal = ZERO
    total_paid: Decimal = ZERO
    total_received: Decimal = ZERO
    average_monthly_dividend: Decimal = ZERO
    months_to_completion: int = 0
    roi: Optional[float] = None

    @property
    def roi_percent(self) -> Optional[float]:
        return self.roi * 100 if self.roi is not None else None

    def to_dict(self) -> dict:
        return {
            "net_amount": str(self.net_amount),
            "total_paid": str(self.total_paid),
            "total_received": str(self.total_received),
            "average_monthly_dividend": str(self.average_monthly_dividend),
            "months_to_completion": self.months_to_completion,
            "roi": self.roi,
        }


@dataclass
class BenchmarkResult:
    """
    Fund rate compared against a reference annual rate (both in percent).

    When the fund rate is unknown the result is not comparable and
    ``difference``/``is_fund_better`` are None.
    """
    fund_rate: Optional[float]
    reference_rate: float
    difference: Optional[float] = None
    is_fund_better: Optional[bool] = None

    @property
    def comparable(self) -> bool:
        return self.difference is not None

    def to_dict(self) -> dict:
        return {
            "fund_rate": self.fund_rate,
            "reference_rate": self.reference_rate,
            "difference": self.difference,
            "is_fund_better": self.is_fund_better,
            "comparable": self.comparable,
        }


@dataclass
class BiddingInsights:
    """
    Auction history figures for one fund.

    Attributes:
        fund_name: Display name of the fund
        bid_count: Number of bids considered
        average_discount: Mean discount amount
        average_winning_bid: Mean winning bid
        average_discount_percentage: Mean discount as a percentage of the
            chit value, None when the chit value is zero
        latest_bids: Most recent bids, newest first
    """
    fund_name: Optional[str]
    bid_count: int
    average_discount: Decimal
    average_winning_bid: Decimal
    average_discount_percentage: Optional[float]
    latest_bids: List[Bid] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "fund_name": self.fund_name,
            "bid_count": self.bid_count,
            "average_discount": str(self.average_discount),
            "average_winning_bid": str(self.average_winning_bid),
            "average_discount_percentage": self.average_discount_percentage,
            "latest_bids": [b.to_dict() for b in self.latest_bids],
        }


@dataclass
class FundAnalytics:
    """
    Complete analytics for one fund.

    This is the top-level container returned by ``analyze_fund``.
    """
    fund: FundConfig
    series: CashFlowSeries
    summary: SummaryMetrics
    xirr: Optional[float] = None
    forecast: List[ForecastPoint] = field(default_factory=list)
    comparison: Optional[BenchmarkResult] = None

    def to_dict(self) -> dict:
        """
        Convert the analytics to a dictionary for JSON serialization.

        Returns:
            Dictionary representation with Decimals as strings.
        """
        return {
            "fund": self.fund.to_dict(),
            "cash_flow_series": self.series.to_dict(),
            "xirr": self.xirr,
            "summary": self.summary.to_dict(),
            "forecast": [p.to_dict() for p in self.forecast],
            "fd_comparison": self.comparison.to_dict() if self.comparison else None,
        }
