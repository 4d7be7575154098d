"""Tests for wallet aggregate computation."""

from dataclasses import dataclass
from typing import Optional

from piggybank.modules.wallets.aggregates import (
    calculate_performance_percent,
    calculate_progress_percent,
    compute_aggregates,
    empty_aggregates,
)


@dataclass
class Row:
    goal_grosze: Optional[int]
    current_value_grosze: int
    invested_money_grosze: int


class TestPercentages:
    def test_progress_with_zero_target(self):
        assert calculate_progress_percent(5000, 0) == 0.0

    def test_progress_is_rounded_to_two_places(self):
        assert calculate_progress_percent(1, 3) == 33.33

    def test_performance_with_zero_invested(self):
        assert calculate_performance_percent(5000, 0) == 0.0

    def test_negative_performance(self):
        assert calculate_performance_percent(8000, 10000) == -20.0


class TestComputeAggregates:
    def test_sums_each_column(self):
        rows = [Row(10000, 12000, 10000), Row(None, 500, 1000), Row(40000, 7500, 5000)]
        aggregates = compute_aggregates(rows)

        assert aggregates.target_grosze == 50000
        assert aggregates.target_pln == "500.00"
        assert aggregates.current_value_grosze == 20000
        assert aggregates.current_value_pln == "200.00"
        assert aggregates.invested_sum_grosze == 16000
        assert aggregates.invested_sum_pln == "160.00"
        assert aggregates.progress_percent == round(20000 / 50000 * 100, 2)
        assert aggregates.performance_percent == 25.0

    def test_missing_goals_give_zero_progress(self):
        aggregates = compute_aggregates([Row(None, 12000, 10000)])
        assert aggregates.target_grosze == 0
        assert aggregates.progress_percent == 0.0
        assert aggregates.performance_percent == 20.0

    def test_empty_aggregates(self):
        aggregates = empty_aggregates()
        assert aggregates.current_value_pln == "0.00"
        assert aggregates.invested_sum_pln == "0.00"
        assert aggregates.target_pln == "0.00"
        assert aggregates.progress_percent == 0.0
        assert aggregates.performance_percent == 0.0
