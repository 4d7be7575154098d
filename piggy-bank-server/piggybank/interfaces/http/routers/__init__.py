"""HTTP routers."""

from . import health, instruments, wallets

__all__ = ["health", "instruments", "wallets"]
