from fastapi import APIRouter

from piggybank.interfaces.http.routers import health, instruments, wallets


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(health.router, tags=["health"])
    router.include_router(wallets.router, prefix="/wallets", tags=["wallets"])
    router.include_router(instruments.wallet_router, prefix="/wallets", tags=["instruments"])
    router.include_router(instruments.router, prefix="/instruments", tags=["instruments"])
    return router


__all__ = [
    "create_api_router",
]
