"""Wallet domain exports"""

from .aggregates import compute_aggregates, empty_aggregates
from .models import (
    Wallet,
    WalletAggregates,
    WalletCreateInput,
    WalletDeleted,
    WalletDetail,
    WalletSortField,
    WalletSummary,
    WalletUpdateInput,
)

__all__ = [
    "Wallet",
    "WalletAggregates",
    "WalletCreateInput",
    "WalletDeleted",
    "WalletDetail",
    "WalletSortField",
    "WalletSummary",
    "WalletUpdateInput",
    "compute_aggregates",
    "empty_aggregates",
]
