"""Pydantic schemas used across the project."""
import re
from datetime import datetime
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from piggybank.modules.currency import parse_amount_to_minor_units
from piggybank.modules.common.exceptions import ValidationError as DomainValidationError
from piggybank.modules.instruments.models import InstrumentType
from piggybank.modules.value_changes.models import ValueChangeDirection
from piggybank.modules.wallets.models import WalletDetail, WalletSummary

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def _clean_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("name must not be empty")
    if len(value) > NAME_MAX_LENGTH:
        raise ValueError(f"name must be at most {NAME_MAX_LENGTH} characters")
    if _CONTROL_CHARS.search(value):
        raise ValueError("name must not contain control characters")
    return value


def _clean_description(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if len(value) > DESCRIPTION_MAX_LENGTH:
        raise ValueError(f"description must be at most {DESCRIPTION_MAX_LENGTH} characters")
    return value


def _clean_amount(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    try:
        parse_amount_to_minor_units(value)
    except DomainValidationError as exc:
        raise ValueError(exc.message) from exc
    return value


class RequestModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    def provided(self) -> dict[str, Any]:
        """Fields explicitly present in the request body."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class PartialUpdateModel(RequestModel):
    required_when_present: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def check_fields(self) -> "PartialUpdateModel":
        if not self.model_fields_set:
            raise ValueError("at least one field must be provided")
        for name in self.required_when_present:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} must not be null")
        return self


class WalletCreate(RequestModel):
    name: str
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def clean_name(cls, v: str) -> str:
        return _clean_name(v)

    @field_validator("description")
    @classmethod
    def clean_description(cls, v: Optional[str]) -> Optional[str]:
        return _clean_description(v)


class WalletUpdate(PartialUpdateModel):
    required_when_present: ClassVar[tuple[str, ...]] = ("name",)

    name: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def clean_name(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _clean_name(v)

    @field_validator("description")
    @classmethod
    def clean_description(cls, v: Optional[str]) -> Optional[str]:
        return _clean_description(v)


class InstrumentCreate(RequestModel):
    type: InstrumentType
    name: str
    short_description: Optional[str] = None
    invested_money_pln: str
    current_value_pln: str
    goal_pln: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def normalise_type(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("name")
    @classmethod
    def clean_name(cls, v: str) -> str:
        return _clean_name(v)

    @field_validator("short_description")
    @classmethod
    def clean_description(cls, v: Optional[str]) -> Optional[str]:
        return _clean_description(v)

    @field_validator("invested_money_pln", "current_value_pln", "goal_pln")
    @classmethod
    def check_amount(cls, v: Optional[str]) -> Optional[str]:
        return _clean_amount(v)


class InstrumentUpdate(PartialUpdateModel):
    required_when_present: ClassVar[tuple[str, ...]] = ("type", "name", "invested_money_pln", "current_value_pln")

    type: Optional[InstrumentType] = None
    name: Optional[str] = None
    short_description: Optional[str] = None
    invested_money_pln: Optional[str] = None
    current_value_pln: Optional[str] = None
    goal_pln: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def normalise_type(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("name")
    @classmethod
    def clean_name(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _clean_name(v)

    @field_validator("short_description")
    @classmethod
    def clean_description(cls, v: Optional[str]) -> Optional[str]:
        return _clean_description(v)

    @field_validator("invested_money_pln", "current_value_pln", "goal_pln")
    @classmethod
    def check_amount(cls, v: Optional[str]) -> Optional[str]:
        return _clean_amount(v)


class WalletAggregatesResponse(BaseModel):
    target_grosze: int
    target_pln: str
    current_value_grosze: int
    current_value_pln: str
    invested_sum_grosze: int
    invested_sum_pln: str
    progress_percent: float
    performance_percent: float

    model_config = ConfigDict(from_attributes=True)


class InstrumentResponse(BaseModel):
    id: str
    wallet_id: str
    type: InstrumentType
    name: str
    short_description: Optional[str] = None
    invested_money_grosze: int
    invested_money_pln: str
    current_value_grosze: int
    current_value_pln: str
    goal_grosze: Optional[int] = None
    goal_pln: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class InstrumentListResponse(BaseModel):
    wallet_id: str
    total: int
    instruments: list[InstrumentResponse]


class WalletResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    aggregates: WalletAggregatesResponse

    @classmethod
    def from_summary(cls, summary: WalletSummary) -> "WalletResponse":
        wallet = summary.wallet
        return cls(
            id=wallet.id,
            name=wallet.name,
            description=wallet.description,
            created_at=wallet.created_at,
            updated_at=wallet.updated_at,
            aggregates=WalletAggregatesResponse.model_validate(summary.aggregates),
        )


class WalletDetailResponse(WalletResponse):
    instruments: list[InstrumentResponse] = Field(default_factory=list)

    @classmethod
    def from_detail(cls, detail: WalletDetail) -> "WalletDetailResponse":
        wallet = detail.wallet
        return cls(
            id=wallet.id,
            name=wallet.name,
            description=wallet.description,
            created_at=wallet.created_at,
            updated_at=wallet.updated_at,
            aggregates=WalletAggregatesResponse.model_validate(detail.aggregates),
            instruments=[InstrumentResponse.model_validate(item) for item in detail.instruments],
        )


class WalletListResponse(BaseModel):
    total: int
    wallets: list[WalletResponse]


class DeletedResponse(BaseModel):
    id: str
    deleted_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ValueChangeResponse(BaseModel):
    id: str
    instrument_id: str
    before_value_grosze: int
    before_value_pln: str
    after_value_grosze: int
    after_value_pln: str
    delta_grosze: int
    delta_pln: str
    direction: ValueChangeDirection
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ValueChangeListResponse(BaseModel):
    instrument_id: str
    total: int
    value_changes: list[ValueChangeResponse]


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Optional[Any] = None
    correlation_id: Optional[str] = None


class ErrorResponse(BaseModel):
    error: ErrorBody
