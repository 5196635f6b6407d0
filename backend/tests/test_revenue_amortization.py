"""Tests for straight-line monthly amortization."""

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from gymcore.core.errors import ValidationError
from gymcore.services.revenue_amortization import amortize, month_key, month_label


def _amounts(buckets):
    return {month: bucket.amount for month, bucket in buckets.items()}


class TestMonthHelpers:
    def test_month_key(self):
        assert month_key(date(2024, 3, 9)) == "2024-03"

    def test_month_label(self):
        assert month_label(date(2024, 1, 31)) == "Jan 2024"


class TestAmortize:
    def test_spans_two_months(self):
        buckets = amortize(Decimal("3100"), date(2024, 1, 16), date(2024, 2, 14))
        assert _amounts(buckets) == {
            "2024-01": Decimal("1653.33"),
            "2024-02": Decimal("1446.67"),
        }
        assert buckets["2024-01"].label == "Jan 2024"
        assert buckets["2024-02"].label == "Feb 2024"

    def test_single_day(self):
        buckets = amortize(100, date(2024, 3, 1), date(2024, 3, 1))
        assert _amounts(buckets) == {"2024-03": Decimal("100.00")}

    def test_whole_month_is_conserved(self):
        buckets = amortize("900", date(2024, 4, 1), date(2024, 4, 30))
        assert _amounts(buckets) == {"2024-04": Decimal("900.00")}

    def test_crosses_year_boundary(self):
        buckets = amortize(Decimal("600"), date(2023, 12, 17), date(2024, 1, 15))
        assert list(buckets) == ["2023-12", "2024-01"]
        assert buckets["2023-12"].amount == Decimal("300.00")
        assert buckets["2023-12"].label == "Dec 2023"
        assert buckets["2024-01"].amount == Decimal("300.00")

    def test_rounding_drift_is_not_corrected(self):
        buckets = amortize(Decimal("100"), date(2024, 1, 1), date(2024, 3, 31))
        assert _amounts(buckets) == {
            "2024-01": Decimal("34.07"),
            "2024-02": Decimal("31.87"),
            "2024-03": Decimal("34.07"),
        }
        assert sum(_amounts(buckets).values()) == Decimal("100.01")

    def test_datetimes_are_treated_as_days(self):
        buckets = amortize(
            Decimal("310"),
            datetime(2024, 1, 1, 18, 30, tzinfo=UTC),
            datetime(2024, 1, 31, 6, 0, tzinfo=UTC),
        )
        assert _amounts(buckets) == {"2024-01": Decimal("310.00")}

    def test_missing_start_date(self):
        assert amortize(Decimal("100"), None, date(2024, 1, 31)) == {}

    def test_missing_end_date(self):
        assert amortize(Decimal("100"), date(2024, 1, 1), None) == {}

    def test_end_before_start(self):
        with pytest.raises(ValidationError):
            amortize(Decimal("100"), date(2024, 2, 1), date(2024, 1, 1))

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-50")])
    def test_non_positive_amount(self, amount):
        with pytest.raises(ValidationError):
            amortize(amount, date(2024, 1, 1), date(2024, 1, 31))

    @pytest.mark.parametrize("amount", ["abc", float("nan"), Decimal("Infinity")])
    def test_non_finite_amount(self, amount):
        with pytest.raises(ValidationError):
            amortize(amount, date(2024, 1, 1), date(2024, 1, 31))
