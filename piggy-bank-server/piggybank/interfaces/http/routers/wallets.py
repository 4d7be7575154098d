"""Wallet endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from piggybank.interfaces.http.deps import get_current_owner, get_wallet_service
from piggybank.modules.common.models import SortOrder
from piggybank.modules.wallets.models import WalletCreateInput, WalletSortField, WalletUpdateInput
from piggybank.modules.wallets.service import WalletService
from piggybank.schemas import (
    DeletedResponse,
    WalletCreate,
    WalletDetailResponse,
    WalletListResponse,
    WalletResponse,
    WalletUpdate,
)

router = APIRouter()


@router.get("", response_model=WalletListResponse, summary="List wallets")
async def list_wallets(
    sort: WalletSortField = Query(WalletSortField.UPDATED_AT),
    order: SortOrder = Query(SortOrder.DESC),
    owner_id: str = Depends(get_current_owner),
    service: WalletService = Depends(get_wallet_service),
):
    summaries = await service.list_wallets(owner_id, sort=sort, order=order)
    return WalletListResponse(
        total=len(summaries),
        wallets=[WalletResponse.from_summary(summary) for summary in summaries],
    )


@router.post("", response_model=WalletResponse, status_code=status.HTTP_201_CREATED, summary="Create wallet")
async def create_wallet(
    payload: WalletCreate,
    owner_id: str = Depends(get_current_owner),
    service: WalletService = Depends(get_wallet_service),
):
    summary = await service.create_wallet(
        owner_id,
        WalletCreateInput(name=payload.name, description=payload.description),
    )
    return WalletResponse.from_summary(summary)


@router.get("/{wallet_id}", response_model=WalletDetailResponse, summary="Wallet detail")
async def get_wallet(
    wallet_id: UUID,
    owner_id: str = Depends(get_current_owner),
    service: WalletService = Depends(get_wallet_service),
):
    detail = await service.get_wallet_detail(owner_id, str(wallet_id))
    return WalletDetailResponse.from_detail(detail)


@router.patch("/{wallet_id}", response_model=WalletResponse, summary="Update wallet")
async def update_wallet(
    wallet_id: UUID,
    payload: WalletUpdate,
    owner_id: str = Depends(get_current_owner),
    service: WalletService = Depends(get_wallet_service),
):
    summary = await service.update_wallet(owner_id, str(wallet_id), WalletUpdateInput(**payload.provided()))
    return WalletResponse.from_summary(summary)


@router.delete("/{wallet_id}", response_model=DeletedResponse, summary="Soft delete wallet")
async def delete_wallet(
    wallet_id: UUID,
    owner_id: str = Depends(get_current_owner),
    service: WalletService = Depends(get_wallet_service),
):
    deleted = await service.soft_delete_wallet(owner_id, str(wallet_id))
    return DeletedResponse.model_validate(deleted)
