"""Tests for fund configuration validation."""

import logging

import pytest

from chitjar.models import FundConfig
from chitjar.validator import (
    InvalidFundConfiguration,
    InvalidReferenceRate,
    validate_fund_config,
    validate_reference_rate,
)


def make_fund(**overrides):
    values = {
        "chit_value": 100000,
        "installment_amount": 5000,
        "start_month": "2024-01",
        "end_month": "2024-12",
    }
    values.update(overrides)
    return FundConfig(**values)


class TestValidateFundConfig:
    """Tests for validate_fund_config()."""

    def test_valid_fund(self):
        validate_fund_config(make_fund())

    def test_single_month_fund(self):
        validate_fund_config(make_fund(end_month="2024-01"))

    def test_start_after_end(self):
        with pytest.raises(InvalidFundConfiguration, match="after end month"):
            validate_fund_config(make_fund(start_month="2025-01"))

    @pytest.mark.parametrize("exit_month", ["2024-01", "2024-06", "2024-12"])
    def test_early_exit_in_range(self, exit_month):
        validate_fund_config(make_fund(early_exit_month=exit_month))

    @pytest.mark.parametrize("exit_month", ["2023-12", "2025-01"])
    def test_early_exit_out_of_range(self, exit_month):
        with pytest.raises(InvalidFundConfiguration, match="Early exit month"):
            validate_fund_config(make_fund(early_exit_month=exit_month))

    def test_malformed_months(self):
        with pytest.raises(InvalidFundConfiguration):
            validate_fund_config(make_fund(end_month="2024-13"))
        with pytest.raises(InvalidFundConfiguration):
            validate_fund_config(make_fund(early_exit_month="June"))
        with pytest.raises(InvalidFundConfiguration):
            validate_fund_config(make_fund(start_month=None))

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            validate_fund_config(make_fund(start_month="2025-01"))

    def test_negative_installment_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="chitjar.validator"):
            validate_fund_config(make_fund(installment_amount=-1))
        assert "negative installment" in caplog.text


class TestValidateReferenceRate:
    """Tests for validate_reference_rate()."""

    def test_valid(self):
        assert validate_reference_rate(7.5) == 7.5
        assert validate_reference_rate("6.25") == 6.25
        assert validate_reference_rate(0) == 0.0

    @pytest.mark.parametrize("rate", [-0.01, -1, float("nan"), float("inf"), None, "abc"])
    def test_invalid(self, rate):
        with pytest.raises(InvalidReferenceRate):
            validate_reference_rate(rate)
