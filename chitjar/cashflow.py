"""
Cash flow series builder.

Turns a fund's configuration and its recorded monthly entries into the
dated cash flows consumed by the XIRR solver, the summary metrics and the
forecaster.
"""

import logging
from collections import abc
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Union

from chitjar.models import (
    CashFlowEvent,
    CashFlowSeries,
    FundConfig,
    MonthlyCashFlow,
    MonthlyRecord,
    NetCashFlowPoint,
)
from chitjar.months import month_range, normalize_month_key, parse_month_key
from chitjar.validator import validate_fund_config

logger = logging.getLogger(__name__)

RecordsInput = Union[Mapping[str, Union[MonthlyRecord, dict]], Iterable[Union[MonthlyRecord, dict]]]


def _coerce_record(value, month_key=None) -> MonthlyRecord:
    if isinstance(value, MonthlyRecord):
        return value
    return MonthlyRecord.from_dict(value, month_key=month_key)


def _index_records(records: RecordsInput) -> Dict[str, MonthlyRecord]:
    """
    Index monthly records by normalized month key.

    Accepts a mapping of month key -> record, or an iterable of records.
    Records with unparseable month keys are dropped with a warning. A later
    record for the same month replaces an earlier one.
    """
    if records is None:
        return {}

    if isinstance(records, abc.Mapping):
        items = [_coerce_record(v, month_key=k) for k, v in records.items()]
    else:
        items = [_coerce_record(r) for r in records]

    indexed = {}
    for record in items:
        try:
            key = normalize_month_key(record.month_key)
        except ValueError:
            logger.warning(f"Skipping entry with invalid month key: {record.month_key!r}")
            continue
        if key in indexed:
            logger.debug(f"Duplicate entry for {key}, keeping the later one")
        indexed[key] = record
    return indexed


def build_cash_flow_series(fund: FundConfig, records: RecordsInput) -> CashFlowSeries:
    """
    Build the cash flow series of a fund.

    Convention: negative = installment paid by the member, positive =
    dividend plus prize money received. Every flow is dated to the 1st of
    its month so ordering does not depend on the day an entry was made.

    Months from start through the effective end month (early exit month if
    set) are walked in order. A month with neither a paid installment nor
    any receipt is reported in ``gaps`` and produces no events.

    Args:
        fund: Fund configuration.
        records: Monthly entries, as a month-key mapping or an iterable.

    Returns:
        CashFlowSeries with events, gaps and per-month breakdown.

    Raises:
        InvalidFundConfiguration: If the fund's month range is invalid.
    """
    validate_fund_config(fund)

    start = normalize_month_key(fund.start_month)
    end = normalize_month_key(fund.effective_end_month)
    expected = month_range(start, end)
    indexed = _index_records(records)

    outside = sorted(k for k in indexed if k < start or k > end)
    if outside:
        logger.warning(
            f"Ignoring {len(outside)} entries outside fund range {start}..{end}: {outside}"
        )

    series = CashFlowSeries(start_month=start, end_month=end)

    for month_key in expected:
        record = indexed.get(month_key)
        if record is None or not record.has_activity:
            series.gaps.append(month_key)
            continue

        when = parse_month_key(month_key)
        installment = fund.installment_amount if record.installment_paid else Decimal("0")
        received = record.dividend + record.prize_money

        # Outflow before inflow on the same date
        if record.installment_paid:
            series.events.append(CashFlowEvent(amount=-fund.installment_amount, when=when))
        if received != 0:
            series.events.append(CashFlowEvent(amount=received, when=when))

        series.months.append(MonthlyCashFlow(
            month_key=month_key,
            when=when,
            installment=installment,
            dividend=record.dividend,
            prize_money=record.prize_money,
        ))

    logger.debug(
        f"Built {len(series.events)} cash flows for {start}..{end}, "
        f"{len(series.gaps)} gaps"
    )
    return series


def build_net_cash_flow_series(fund: FundConfig, records: RecordsInput) -> List[NetCashFlowPoint]:
    """
    Net monthly cash flow (installment minus dividend) for every fund month.

    Months without an entry count a zero dividend, so the net equals the
    full installment.

    Raises:
        InvalidFundConfiguration: If the fund's month range is invalid.
    """
    validate_fund_config(fund)

    start = normalize_month_key(fund.start_month)
    end = normalize_month_key(fund.effective_end_month)
    indexed = _index_records(records)

    points = []
    for month_key in month_range(start, end):
        record = indexed.get(month_key)
        dividend = record.dividend if record else Decimal("0")
        points.append(NetCashFlowPoint(
            month_key=month_key,
            when=parse_month_key(month_key),
            installment_amount=fund.installment_amount,
            dividend_amount=dividend,
            net_cash_flow=fund.installment_amount - dividend,
        ))
    return points
