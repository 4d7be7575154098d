"""Wallet-level aggregates computed from active instruments."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from piggybank.modules.currency import to_dual_format

from .models import WalletAggregates


class AggregateSource(Protocol):
    invested_money_grosze: int
    current_value_grosze: int
    goal_grosze: int | None


def _round2(value: float) -> float:
    return round(value, 2)


def calculate_progress_percent(current: int, target: int) -> float:
    if target <= 0:
        return 0.0
    return _round2(current / target * 100)


def calculate_performance_percent(current: int, invested: int) -> float:
    if invested <= 0:
        return 0.0
    return _round2((current - invested) / invested * 100)


def compute_aggregates(instruments: Iterable[AggregateSource]) -> WalletAggregates:
    target = current = invested = 0
    for instrument in instruments:
        target += instrument.goal_grosze or 0
        current += instrument.current_value_grosze
        invested += instrument.invested_money_grosze

    target_dual = to_dual_format(target)
    current_dual = to_dual_format(current)
    invested_dual = to_dual_format(invested)
    return WalletAggregates(
        target_grosze=target_dual.minor_units,
        target_pln=target_dual.display,
        current_value_grosze=current_dual.minor_units,
        current_value_pln=current_dual.display,
        invested_sum_grosze=invested_dual.minor_units,
        invested_sum_pln=invested_dual.display,
        progress_percent=calculate_progress_percent(current, target),
        performance_percent=calculate_performance_percent(current, invested),
    )


def empty_aggregates() -> WalletAggregates:
    return compute_aggregates(())


__all__ = [
    "calculate_performance_percent",
    "calculate_progress_percent",
    "compute_aggregates",
    "empty_aggregates",
]
