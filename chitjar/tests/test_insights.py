"""Tests for bidding insights."""

import logging
from decimal import Decimal

import pytest

from chitjar.insights import bidding_insights, collect_bidding_insights
from chitjar.models import Bid, FundConfig


@pytest.fixture
def fund():
    return FundConfig(
        name="Office Chit 2024",
        chit_value=100000,
        installment_amount=5000,
        start_month="2024-01",
        end_month="2025-08",
    )


@pytest.fixture
def bids():
    return [
        Bid("2024-01", winning_bid=90000, discount_amount=10000),
        Bid("2024-02", winning_bid=92000, discount_amount=8000),
        Bid("2024-03", winning_bid=94000, discount_amount=6000),
    ]


class TestBiddingInsights:
    """Tests for bidding_insights()."""

    def test_averages(self, fund, bids):
        insight = bidding_insights(fund, bids)

        assert insight.fund_name == "Office Chit 2024"
        assert insight.bid_count == 3
        assert insight.average_discount == Decimal("8000")
        assert insight.average_winning_bid == Decimal("92000")
        assert insight.average_discount_percentage == pytest.approx(8.0)

    def test_latest_bids_newest_first(self, fund):
        bids = [Bid(f"2024-{m:02d}", winning_bid=90000, discount_amount=10000) for m in range(1, 8)]
        insight = bidding_insights(fund, bids)

        assert insight.bid_count == 7
        assert [b.month_key for b in insight.latest_bids] == [
            "2024-07", "2024-06", "2024-05", "2024-04", "2024-03",
        ]

    def test_no_bids(self, fund):
        assert bidding_insights(fund, []) is None
        assert bidding_insights(fund, None) is None

    def test_bid_rows(self, fund):
        rows = [
            {"month_key": "2024-01", "winning_bid": "95000.50", "discount_amount": "4999.50"},
            {"month_key": "2024-02", "winning_bid": 97000, "discount_amount": None, "bidder_name": "  Ravi  K "},
        ]
        insight = bidding_insights(fund, rows)

        assert insight.bid_count == 2
        assert insight.latest_bids[0].discount_amount == Decimal("0")
        assert insight.latest_bids[0].bidder_name == "Ravi K"
        assert insight.average_discount == Decimal("2499.75")

    def test_invalid_bids_skipped(self, fund, bids, caplog):
        bad = [
            Bid("2024-13", winning_bid=90000, discount_amount=10000),
            Bid("2024-04", winning_bid=0, discount_amount=1000),
            Bid("2024-05", winning_bid=90000, discount_amount=-1),
            Bid("2024-06", winning_bid="NaN", discount_amount=100),
        ]
        with caplog.at_level(logging.WARNING, logger="chitjar.insights"):
            insight = bidding_insights(fund, bids + bad)

        assert insight.bid_count == 3
        assert "invalid month key" in caplog.text
        assert "Skipping bid for 2024-04" in caplog.text

    def test_later_bid_for_month_wins(self, fund, bids):
        bids.append(Bid("2024-03", winning_bid=96000, discount_amount=4000))
        insight = bidding_insights(fund, bids)

        assert insight.bid_count == 3
        assert insight.latest_bids[0].winning_bid == Decimal("96000")

    def test_zero_chit_value(self, bids):
        fund = FundConfig(chit_value=0, installment_amount=0, start_month="2024-01", end_month="2024-12")
        insight = bidding_insights(fund, bids)

        assert insight.average_discount_percentage is None
        assert insight.average_discount == Decimal("8000")

    def test_input_not_reordered(self, fund, bids):
        bidding_insights(fund, bids)
        assert [b.month_key for b in bids] == ["2024-01", "2024-02", "2024-03"]

    def test_to_dict(self, fund, bids):
        data = bidding_insights(fund, bids, latest=1).to_dict()

        assert data["bid_count"] == 3
        assert data["average_discount"] == "8000"
        assert data["latest_bids"] == [{
            "month_key": "2024-03",
            "winning_bid": "94000",
            "discount_amount": "6000",
            "bidder_name": None,
            "notes": None,
        }]


class TestCollectBiddingInsights:
    """Tests for collect_bidding_insights()."""

    def test_funds_without_bids_left_out(self, fund, bids):
        other = FundConfig(name="Family Chit", chit_value=50000, installment_amount=2500,
                           start_month="2024-01", end_month="2024-12")
        insights = collect_bidding_insights([(fund, bids), (other, [])])

        assert len(insights) == 1
        assert insights[0].fund_name == "Office Chit 2024"

    def test_empty(self):
        assert collect_bidding_insights([]) == []
