"""SQLAlchemy ORM models."""
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import BigInteger, CheckConstraint, Column, DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import relationship

from piggybank.infrastructure.database import Base

INSTRUMENT_TYPES = ("bonds", "etf", "stocks")


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive values returned by drivers without timezone support."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class Wallet(Base):
    __tablename__ = "wallets"
    __table_args__ = (
        CheckConstraint("length(name) > 0 AND length(name) <= 100", name="ck_wallets_name_length"),
        CheckConstraint(
            "description IS NULL OR length(description) <= 500",
            name="ck_wallets_description_length",
        ),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    owner_id = Column(String(36), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    deleted_at = Column(DateTime(timezone=True))

    instruments = relationship("Instrument", back_populates="wallet")


class Instrument(Base):
    __tablename__ = "instruments"
    __table_args__ = (
        CheckConstraint(
            "type IN ('bonds', 'etf', 'stocks')",
            name="ck_instruments_type",
        ),
        CheckConstraint("length(name) > 0 AND length(name) <= 100", name="ck_instruments_name_length"),
        CheckConstraint(
            "short_description IS NULL OR length(short_description) <= 500",
            name="ck_instruments_short_description_length",
        ),
        CheckConstraint("invested_money_grosze >= 0", name="ck_instruments_invested_non_negative"),
        CheckConstraint("current_value_grosze >= 0", name="ck_instruments_current_non_negative"),
        CheckConstraint("goal_grosze IS NULL OR goal_grosze >= 0", name="ck_instruments_goal_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    wallet_id = Column(String(36), ForeignKey("wallets.id"), nullable=False, index=True)
    owner_id = Column(String(36), nullable=False, index=True)
    type = Column(String(16), nullable=False)
    name = Column(String(100), nullable=False)
    short_description = Column(Text)
    invested_money_grosze = Column(BigInteger, nullable=False)
    current_value_grosze = Column(BigInteger, nullable=False)
    goal_grosze = Column(BigInteger)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    deleted_at = Column(DateTime(timezone=True))

    wallet = relationship("Wallet", back_populates="instruments")
    value_changes = relationship("InstrumentValueChange", back_populates="instrument")


class InstrumentValueChange(Base):
    __tablename__ = "instrument_value_changes"
    __table_args__ = (
        CheckConstraint("before_value_grosze >= 0", name="ck_value_changes_before_non_negative"),
        CheckConstraint("after_value_grosze >= 0", name="ck_value_changes_after_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    instrument_id = Column(String(36), ForeignKey("instruments.id"), nullable=False)
    before_value_grosze = Column(BigInteger, nullable=False)
    after_value_grosze = Column(BigInteger, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    instrument = relationship("Instrument", back_populates="value_changes")


# Active names are unique per owner (wallets) and per wallet (instruments), ignoring case.
Index(
    "uq_wallets_owner_active_name",
    Wallet.owner_id,
    func.lower(Wallet.name),
    unique=True,
    sqlite_where=Wallet.deleted_at.is_(None),
    postgresql_where=Wallet.deleted_at.is_(None),
)
Index(
    "uq_instruments_wallet_active_name",
    Instrument.wallet_id,
    func.lower(Instrument.name),
    unique=True,
    sqlite_where=Instrument.deleted_at.is_(None),
    postgresql_where=Instrument.deleted_at.is_(None),
)
Index("ix_wallets_owner_deleted", Wallet.owner_id, Wallet.deleted_at)
Index("ix_instruments_wallet_deleted", Instrument.wallet_id, Instrument.deleted_at)
Index(
    "ix_value_changes_instrument_created",
    InstrumentValueChange.instrument_id,
    InstrumentValueChange.created_at,
)
