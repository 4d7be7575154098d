"""Instrument endpoints, both wallet-scoped and addressed by id."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from piggybank.interfaces.http.deps import (
    get_current_owner,
    get_instrument_service,
    get_value_change_service,
)
from piggybank.modules.common.models import SortOrder
from piggybank.modules.instruments.models import InstrumentCreateInput, InstrumentSortField, InstrumentUpdateInput
from piggybank.modules.instruments.service import InstrumentService
from piggybank.modules.value_changes.service import ValueChangeService
from piggybank.schemas import (
    DeletedResponse,
    InstrumentCreate,
    InstrumentListResponse,
    InstrumentResponse,
    InstrumentUpdate,
    ValueChangeListResponse,
    ValueChangeResponse,
)

router = APIRouter()
wallet_router = APIRouter()


def _to_schema(instrument) -> InstrumentResponse:
    return InstrumentResponse.model_validate(instrument)


@wallet_router.get("/{wallet_id}/instruments", response_model=InstrumentListResponse, summary="List instruments")
async def list_instruments(
    wallet_id: UUID,
    sort: InstrumentSortField = Query(InstrumentSortField.UPDATED_AT),
    order: SortOrder = Query(SortOrder.DESC),
    owner_id: str = Depends(get_current_owner),
    service: InstrumentService = Depends(get_instrument_service),
):
    instruments = await service.list_wallet_instruments(owner_id, str(wallet_id), sort=sort, order=order)
    return InstrumentListResponse(
        wallet_id=str(wallet_id),
        total=len(instruments),
        instruments=[_to_schema(item) for item in instruments],
    )


@wallet_router.post(
    "/{wallet_id}/instruments",
    response_model=InstrumentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create instrument",
)
async def create_instrument(
    wallet_id: UUID,
    payload: InstrumentCreate,
    owner_id: str = Depends(get_current_owner),
    service: InstrumentService = Depends(get_instrument_service),
):
    instrument = await service.create_instrument(owner_id, str(wallet_id), InstrumentCreateInput(**payload.model_dump()))
    return _to_schema(instrument)


@router.get("/{instrument_id}", response_model=InstrumentResponse, summary="Instrument detail")
async def get_instrument(
    instrument_id: UUID,
    owner_id: str = Depends(get_current_owner),
    service: InstrumentService = Depends(get_instrument_service),
):
    return _to_schema(await service.get_instrument(owner_id, str(instrument_id)))


@router.patch("/{instrument_id}", response_model=InstrumentResponse, summary="Update instrument")
async def update_instrument(
    instrument_id: UUID,
    payload: InstrumentUpdate,
    owner_id: str = Depends(get_current_owner),
    service: InstrumentService = Depends(get_instrument_service),
):
    instrument = await service.update_instrument(
        owner_id,
        str(instrument_id),
        InstrumentUpdateInput(**payload.provided()),
    )
    return _to_schema(instrument)


@router.delete("/{instrument_id}", response_model=DeletedResponse, summary="Soft delete instrument")
async def delete_instrument(
    instrument_id: UUID,
    owner_id: str = Depends(get_current_owner),
    service: InstrumentService = Depends(get_instrument_service),
):
    deleted = await service.soft_delete_instrument(owner_id, str(instrument_id))
    return DeletedResponse.model_validate(deleted)


@router.get(
    "/{instrument_id}/value-changes",
    response_model=ValueChangeListResponse,
    summary="Instrument value-change history",
)
async def list_value_changes(
    instrument_id: UUID,
    owner_id: str = Depends(get_current_owner),
    service: ValueChangeService = Depends(get_value_change_service),
):
    changes = await service.get_value_change_history(owner_id, str(instrument_id))
    return ValueChangeListResponse(
        instrument_id=str(instrument_id),
        total=len(changes),
        value_changes=[ValueChangeResponse.model_validate(change) for change in changes],
    )
