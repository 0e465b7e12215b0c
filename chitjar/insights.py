"""
Strategic bidding insights.

Summarizes the auction history of a fund: how many bids were recorded,
the average discount and winning bid, and the most recent bids.
"""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple, Union

from chitjar.models import Bid, BiddingInsights, FundConfig
from chitjar.months import normalize_month_key

logger = logging.getLogger(__name__)

LATEST_BIDS_COUNT = 5

BidsInput = Iterable[Union[Bid, dict]]


def _valid_bids(bids: BidsInput) -> List[Bid]:
    """
    Coerce bids and drop unusable ones.

    A bid needs a valid month key, a positive winning bid and a
    non-negative discount. A later bid for the same month replaces an
    earlier one.
    """
    indexed = {}
    for raw in bids or []:
        bid = raw if isinstance(raw, Bid) else Bid.from_dict(raw)
        try:
            key = normalize_month_key(bid.month_key)
        except ValueError:
            logger.warning(f"Skipping bid with invalid month key: {bid.month_key!r}")
            continue
        finite = bid.winning_bid.is_finite() and bid.discount_amount.is_finite()
        if not finite or bid.winning_bid <= 0 or bid.discount_amount < 0:
            logger.warning(
                f"Skipping bid for {key}: winning bid {bid.winning_bid}, "
                f"discount {bid.discount_amount}"
            )
            continue
        indexed[key] = replace(bid, month_key=key)
    return list(indexed.values())


def bidding_insights(fund: FundConfig, bids: BidsInput,
                     latest: int = LATEST_BIDS_COUNT) -> Optional[BiddingInsights]:
    """
    Compute bidding insights for one fund.

    Args:
        fund: Fund the bids belong to.
        bids: Bid objects or bid row dicts.
        latest: How many of the most recent bids to include.

    Returns:
        BiddingInsights, or None when the fund has no usable bids.
    """
    valid = _valid_bids(bids)
    if not valid:
        return None

    valid.sort(key=lambda b: b.month_key, reverse=True)
    count = len(valid)
    average_discount = sum((b.discount_amount for b in valid), Decimal("0")) / count
    average_winning_bid = sum((b.winning_bid for b in valid), Decimal("0")) / count

    if fund.chit_value:
        percentage = float(average_discount / fund.chit_value * 100)
    else:
        logger.debug(f"Chit value is zero for fund {fund.name}, no discount percentage")
        percentage = None

    return BiddingInsights(
        fund_name=fund.name,
        bid_count=count,
        average_discount=average_discount,
        average_winning_bid=average_winning_bid,
        average_discount_percentage=percentage,
        latest_bids=valid[:latest],
    )


def collect_bidding_insights(funds: Iterable[Tuple[FundConfig, BidsInput]]) -> List[BiddingInsights]:
    """Bidding insights for several funds; funds without bids are left out."""
    results = []
    for fund, bids in funds:
        insight = bidding_insights(fund, bids)
        if insight is not None:
            results.append(insight)
    return results
