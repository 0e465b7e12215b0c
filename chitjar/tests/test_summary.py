"""Tests for summary metrics."""

from datetime import date
from decimal import Decimal

import pytest

from chitjar.cashflow import build_cash_flow_series
from chitjar.models import CashFlowEvent, CashFlowSeries, FundConfig, MonthlyRecord
from chitjar.summary import summarize, total_profit


def make_fund(**overrides):
    values = {
        "chit_value": 100000,
        "installment_amount": 5000,
        "start_month": "2024-01",
        "end_month": "2024-03",
    }
    values.update(overrides)
    return FundConfig(**values)


class TestSummarize:
    """Tests for summarize()."""

    def test_empty_series(self):
        """No flows: zero net, undefined ROI."""
        summary = summarize(CashFlowSeries())
        assert summary.net_amount == Decimal("0")
        assert summary.roi is None
        assert summary.roi_percent is None
        assert summary.average_monthly_dividend == Decimal("0")
        assert summary.months_to_completion == 0

    def test_empty_list(self):
        summary = summarize([])
        assert summary.net_amount == Decimal("0")
        assert summary.roi is None

    def test_realized_metrics(self):
        """Net, ROI and averages over the recorded months."""
        records = [
            MonthlyRecord("2024-01", installment_paid=True, dividend=1000),
            MonthlyRecord("2024-02", installment_paid=True, dividend=1200, prize_money=25000),
        ]
        summary = summarize(build_cash_flow_series(make_fund(), records))

        assert summary.total_paid == Decimal("10000")
        assert summary.total_received == Decimal("27200")
        assert summary.net_amount == Decimal("17200")
        assert summary.roi == pytest.approx(1.72)
        assert summary.roi_percent == pytest.approx(172.0)
        assert summary.average_monthly_dividend == Decimal("1100")
        assert summary.months_to_completion == 1

    def test_zero_dividend_months_count(self):
        """Zero-dividend months are part of the average's denominator."""
        records = [
            MonthlyRecord("2024-01", installment_paid=True, dividend=900),
            MonthlyRecord("2024-02", installment_paid=True, dividend=0),
            MonthlyRecord("2024-03", installment_paid=True, dividend=0),
        ]
        summary = summarize(build_cash_flow_series(make_fund(), records))
        assert summary.average_monthly_dividend == Decimal("300")

    def test_loss_has_negative_roi(self):
        records = [
            MonthlyRecord("2024-01", installment_paid=True, dividend=1000),
            MonthlyRecord("2024-02", installment_paid=True, dividend=1000),
        ]
        summary = summarize(build_cash_flow_series(make_fund(), records))
        assert summary.net_amount == Decimal("-8000")
        assert summary.roi == pytest.approx(-0.8)

    def test_nothing_recorded_counts_every_month(self):
        """A new fund still has all of its months to go."""
        summary = summarize(build_cash_flow_series(make_fund(end_month="2024-12"), {}))
        assert summary.months_to_completion == 12
        assert summary.roi is None

    def test_completed_fund(self):
        records = [MonthlyRecord(f"2024-0{m}", installment_paid=True) for m in range(1, 4)]
        summary = summarize(build_cash_flow_series(make_fund(), records))
        assert summary.months_to_completion == 0

    def test_early_exit_end(self):
        """Completion counts up to the early exit month."""
        fund = make_fund(end_month="2024-12", early_exit_month="2024-06")
        records = [MonthlyRecord("2024-01", installment_paid=True)]
        summary = summarize(build_cash_flow_series(fund, records))
        assert summary.months_to_completion == 5

    def test_only_receipts_roi_undefined(self):
        """Dividends without any paid installment leave ROI undefined."""
        records = [MonthlyRecord("2024-01", installment_paid=False, dividend=500)]
        summary = summarize(build_cash_flow_series(make_fund(), records))
        assert summary.net_amount == Decimal("500")
        assert summary.roi is None

    def test_bare_event_list(self):
        events = [
            CashFlowEvent(amount=-1000, when=date(2023, 1, 1)),
            CashFlowEvent(amount=1100, when=date(2024, 1, 1)),
        ]
        summary = summarize(events)
        assert summary.net_amount == Decimal("100")
        assert summary.roi == pytest.approx(0.1)
        assert summary.months_to_completion == 0

    def test_to_dict(self):
        summary = summarize([CashFlowEvent(amount=-1000, when=date(2023, 1, 1))])
        data = summary.to_dict()
        assert data["net_amount"] == "-1000"
        assert data["roi"] == pytest.approx(-1.0)


class TestTotalProfit:
    """Tests for total_profit()."""

    def test_sums_funds(self):
        a = CashFlowSeries(events=[CashFlowEvent(amount=-1000, when=date(2024, 1, 1)),
                                   CashFlowEvent(amount=1500, when=date(2024, 2, 1))])
        b = CashFlowSeries(events=[CashFlowEvent(amount=-300, when=date(2024, 1, 1))])
        assert total_profit([a, b]) == Decimal("200")

    def test_empty(self):
        assert total_profit([]) == Decimal("0")
