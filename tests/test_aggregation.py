"""Tests for the aggregation engine."""

import math

import pytest

from mindthegap.calculations.aggregation import (
    BILLIONAIRES,
    DONATIONS_LABEL,
    REMAINING_LABEL,
    SELF_LABEL,
    aggregate,
    billionaire_comparison,
    build_metrics,
    donation_pie,
    donation_shares,
    income_pie,
    percentage_of_income,
    total_annual_donations,
)
from tests.conftest import make_donation


class TestTotals:

    def test_single_monthly_donation(self):
        """income 50000, 100 monthly -> 1200 a year, 2.4% of income."""
        result = aggregate(50000, [make_donation(amount=100, frequency="monthly")])
        assert result.total_annual == 1200
        assert result.percentage == pytest.approx(2.4)

    def test_mixed_frequencies(self):
        donations = [
            make_donation(amount=100, frequency="monthly", donation_id="a"),
            make_donation(amount=50, frequency="quarterly", donation_id="b"),
            make_donation(amount=300, frequency="yearly", donation_id="c"),
        ]
        assert total_annual_donations(donations) == 1200 + 200 + 300

    def test_zero_income_gives_zero_percentage(self):
        assert percentage_of_income(1200, 0) == 0

    def test_zero_giving_gives_zero_percentage(self):
        assert percentage_of_income(0, 50000) == 0

    def test_empty_state(self):
        """income 0, no donations -> percentage 0, pie [0, 0], no comparison."""
        result = aggregate(0, [], include_self=True)
        assert result.percentage == 0
        assert [s.value for s in result.income_pie] == [0, 0]
        assert result.billionaire_comparison == []
        assert result.shares == []


class TestShares:

    def test_shares_sum_to_hundred(self):
        donations = [
            make_donation(amount=100, frequency="monthly", donation_id="a"),
            make_donation(amount=7, frequency="quarterly", donation_id="b"),
            make_donation(amount=333, frequency="yearly", donation_id="c"),
        ]
        shares = donation_shares(donations)
        assert sum(s.share for s in shares) == pytest.approx(100)

    def test_zero_total_gives_zero_shares(self):
        shares = donation_shares([], total_annual=0)
        assert shares == []

    def test_removing_only_donation_never_nan(self):
        result = aggregate(50000, [])
        assert result.total_annual == 0
        assert result.percentage == 0
        assert not math.isnan(result.percentage)


class TestPies:

    def test_income_pie_labels(self):
        pie = income_pie(50000, 1200)
        assert [s.name for s in pie] == [DONATIONS_LABEL, REMAINING_LABEL]
        assert [s.value for s in pie] == [1200, 48800]

    def test_overshoot_is_clamped(self):
        """income 1000, yearly 5000 -> remaining 0, donated 5000."""
        result = aggregate(1000, [make_donation(amount=5000, frequency="yearly")])
        assert [s.value for s in result.income_pie] == [5000, 0]
        assert result.remaining_income == 0

    def test_donation_pie_sums_to_total(self):
        donations = [
            make_donation(charity_name="A", amount=10, frequency="monthly", donation_id="a"),
            make_donation(charity_name="B", amount=25, frequency="quarterly", donation_id="b"),
        ]
        result = aggregate(40000, donations)
        assert sum(s.value for s in result.donation_pie) == result.total_annual
        assert [s.name for s in result.donation_pie] == ["A", "B"]

    def test_donation_pie_colors_cycle(self):
        donations = [
            make_donation(charity_name=str(i), donation_id=str(i)) for i in range(7)
        ]
        pie = donation_pie(donation_shares(donations))
        assert pie[0].color == pie[5].color


class TestBillionaireComparison:

    def test_contribution_at_household_rate(self):
        bars = billionaire_comparison(2.4)
        assert [bar.name for bar in bars] == [b.name for b in BILLIONAIRES]
        assert bars[0].contribution == pytest.approx(226_000_000_000 * 0.024)
        assert bars[0].monthly_contribution == pytest.approx(bars[0].contribution / 12)

    def test_zero_rate_projects_nothing(self):
        assert billionaire_comparison(0) == []

    def test_self_bar_appended_last(self):
        bars = billionaire_comparison(2.4, total_annual=1200, include_self=True)
        assert len(bars) == len(BILLIONAIRES) + 1
        assert bars[-1].name == SELF_LABEL
        assert bars[-1].is_self
        assert bars[-1].contribution == 1200

    def test_self_bar_without_income(self):
        """Giving without income still shows the household's own total."""
        result = aggregate(0, [make_donation()], include_self=True)
        assert [bar.name for bar in result.billionaire_comparison] == [SELF_LABEL]

    def test_self_bar_needs_giving(self):
        assert billionaire_comparison(0, total_annual=0, include_self=True) == []


class TestMetrics:

    def test_metrics(self, formatter):
        result = aggregate(50000, [make_donation()])
        metrics = build_metrics(result, formatter)
        assert [m.label for m in metrics] == ["Annual income", "Yearly donations", "Share of income"]
        assert [m.value for m in metrics] == ["€ 50.000", "€ 1.200", "2.4%"]

    def test_metrics_zero_percentage(self, formatter):
        metrics = build_metrics(aggregate(0, []), formatter)
        assert metrics[2].value == "0%"

    def test_metrics_keep_one_decimal(self, formatter):
        """Whole percentages still show a decimal in the headline."""
        result = aggregate(12000, [make_donation(amount=20)])
        assert result.percentage == 2.0
        assert build_metrics(result, formatter)[2].value == "2.0%"
