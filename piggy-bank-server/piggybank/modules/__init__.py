"""功能模块聚合与公共导出。"""

from . import common, currency, instruments, value_changes, wallets

__all__ = [
    "common",
    "currency",
    "instruments",
    "value_changes",
    "wallets",
]
