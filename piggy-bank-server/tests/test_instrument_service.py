"""Tests for instrument use cases over a real SQLite session."""

import asyncio

import pytest
from sqlalchemy import func, select, update

from piggybank.db.models import InstrumentValueChange, Wallet as WalletModel, utcnow
from piggybank.modules.common.exceptions import (
    AlreadyDeletedError,
    AmountFormatError,
    AmountRangeError,
    ForbiddenError,
    NameConflictError,
    ParentSoftDeletedError,
    SoftDeletedError,
)
from piggybank.modules.common.guard import EntityMeta
from piggybank.modules.common.models import SortOrder
from piggybank.modules.instruments.models import (
    InstrumentCreateInput,
    InstrumentSortField,
    InstrumentType,
    InstrumentUpdateInput,
)
from piggybank.modules.wallets.models import WalletCreateInput


def instrument_input(name="ETF A", invested="100.00", current="120.00", goal=None, type_=InstrumentType.STOCKS):
    return InstrumentCreateInput(
        type=type_,
        name=name,
        invested_money_pln=invested,
        current_value_pln=current,
        goal_pln=goal,
    )


@pytest.fixture
async def wallet(wallet_service, owner_id):
    summary = await wallet_service.create_wallet(owner_id, WalletCreateInput(name="Vacation"))
    return summary.wallet


async def count_value_changes(session, instrument_id):
    stmt = select(func.count()).select_from(InstrumentValueChange).where(
        InstrumentValueChange.instrument_id == instrument_id
    )
    return (await session.execute(stmt)).scalar_one()


class TestCreateInstrument:
    async def test_converts_amounts_to_grosze(self, instrument_service, wallet, owner_id):
        instrument = await instrument_service.create_instrument(
            owner_id, wallet.id, instrument_input(invested="100", current="120.5", goal="1000")
        )

        assert instrument.wallet_id == wallet.id
        assert instrument.type is InstrumentType.STOCKS
        assert instrument.invested_money_grosze == 10000
        assert instrument.current_value_grosze == 12050
        assert instrument.goal_grosze == 100000
        assert instrument.current_value_pln == "120.50"
        assert instrument.goal_pln == "1000.00"

    async def test_goal_is_optional(self, instrument_service, wallet, owner_id):
        instrument = await instrument_service.create_instrument(owner_id, wallet.id, instrument_input())
        assert instrument.goal_grosze is None
        assert instrument.goal_pln is None

    async def test_touches_parent_wallet(self, instrument_service, wallet_service, wallet, owner_id):
        await instrument_service.create_instrument(owner_id, wallet.id, instrument_input())
        detail = await wallet_service.get_wallet_detail(owner_id, wallet.id)
        assert detail.wallet.updated_at >= wallet.updated_at

    async def test_exact_duplicate_name_conflicts(self, instrument_service, wallet, owner_id):
        await instrument_service.create_instrument(owner_id, wallet.id, instrument_input("ETF A"))
        with pytest.raises(NameConflictError):
            await instrument_service.create_instrument(owner_id, wallet.id, instrument_input("ETF A"))

    async def test_case_variant_is_rejected_by_the_store(self, instrument_service, session, wallet, owner_id):
        await instrument_service.create_instrument(owner_id, wallet.id, instrument_input("ETF A"))
        await session.commit()

        with pytest.raises(NameConflictError):
            await instrument_service.create_instrument(owner_id, wallet.id, instrument_input("etf a"))

        instruments = await instrument_service.list_wallet_instruments(owner_id, wallet.id)
        assert [item.name for item in instruments] == ["ETF A"]

    async def test_invalid_amount_is_rejected(self, instrument_service, wallet, owner_id):
        with pytest.raises(AmountFormatError):
            await instrument_service.create_instrument(owner_id, wallet.id, instrument_input(current="1.234"))

    async def test_out_of_range_amount_is_rejected(self, instrument_service, wallet, owner_id):
        with pytest.raises(AmountRangeError):
            await instrument_service.create_instrument(
                owner_id, wallet.id, instrument_input(invested="90071992547409.92")
            )

    async def test_foreign_wallet_is_forbidden(self, instrument_service, wallet, other_owner_id):
        with pytest.raises(ForbiddenError):
            await instrument_service.create_instrument(other_owner_id, wallet.id, instrument_input())

    async def test_deleted_wallet_rejects_new_instruments(self, instrument_service, wallet_service, wallet, owner_id):
        await wallet_service.soft_delete_wallet(owner_id, wallet.id)
        with pytest.raises(SoftDeletedError):
            await instrument_service.create_instrument(owner_id, wallet.id, instrument_input())


class TestListInstruments:
    async def test_sort_by_current_value(self, instrument_service, wallet, owner_id):
        await instrument_service.create_instrument(owner_id, wallet.id, instrument_input("Mid", current="50"))
        await instrument_service.create_instrument(owner_id, wallet.id, instrument_input("Low", current="5"))
        await instrument_service.create_instrument(owner_id, wallet.id, instrument_input("High", current="500"))

        instruments = await instrument_service.list_wallet_instruments(
            owner_id,
            wallet.id,
            InstrumentSortField.CURRENT_VALUE,
            SortOrder.ASC,
        )

        assert [item.name for item in instruments] == ["Low", "Mid", "High"]

    async def test_foreign_owner_cannot_list(self, instrument_service, wallet, other_owner_id):
        with pytest.raises(ForbiddenError):
            await instrument_service.list_wallet_instruments(other_owner_id, wallet.id)


class TestUpdateInstrument:
    async def test_identical_payload_performs_no_write(self, instrument_service, session, wallet, owner_id):
        created = await instrument_service.create_instrument(
            owner_id, wallet.id, instrument_input(invested="100.00", current="120.00", goal="500")
        )

        result = await instrument_service.update_instrument(
            owner_id,
            created.id,
            InstrumentUpdateInput(
                type=InstrumentType.STOCKS,
                name="ETF A",
                invested_money_pln="100",
                current_value_pln="120.0",
                goal_pln="500.00",
            ),
        )

        assert result == created
        assert await count_value_changes(session, created.id) == 0

    async def test_current_value_change_is_recorded(self, instrument_service, session, wallet, owner_id):
        created = await instrument_service.create_instrument(owner_id, wallet.id, instrument_input(current="120.00"))

        updated = await instrument_service.update_instrument(
            owner_id, created.id, InstrumentUpdateInput(current_value_pln="99.99")
        )

        assert updated.current_value_grosze == 9999
        assert updated.updated_at >= created.updated_at
        rows = (
            await session.execute(
                select(InstrumentValueChange).where(InstrumentValueChange.instrument_id == created.id)
            )
        ).scalars().all()
        assert [(row.before_value_grosze, row.after_value_grosze) for row in rows] == [(12000, 9999)]

    async def test_other_field_changes_do_not_record_history(self, instrument_service, session, wallet, owner_id):
        created = await instrument_service.create_instrument(owner_id, wallet.id, instrument_input())

        updated = await instrument_service.update_instrument(
            owner_id,
            created.id,
            InstrumentUpdateInput(type=InstrumentType.BONDS, short_description="treasury", goal_pln="10"),
        )

        assert updated.type is InstrumentType.BONDS
        assert updated.short_description == "treasury"
        assert updated.goal_grosze == 1000
        assert await count_value_changes(session, created.id) == 0

    async def test_goal_can_be_cleared(self, instrument_service, wallet, owner_id):
        created = await instrument_service.create_instrument(owner_id, wallet.id, instrument_input(goal="10"))
        updated = await instrument_service.update_instrument(owner_id, created.id, InstrumentUpdateInput(goal_pln=None))
        assert updated.goal_grosze is None

    async def test_rename_conflict_ignores_case(self, instrument_service, wallet, owner_id):
        await instrument_service.create_instrument(owner_id, wallet.id, instrument_input("ETF A"))
        other = await instrument_service.create_instrument(owner_id, wallet.id, instrument_input("Bonds"))

        with pytest.raises(NameConflictError):
            await instrument_service.update_instrument(owner_id, other.id, InstrumentUpdateInput(name="etf a"))

    async def test_same_name_in_other_wallet_is_fine(self, instrument_service, wallet_service, wallet, owner_id):
        other_wallet = await wallet_service.create_wallet(owner_id, WalletCreateInput(name="Other"))
        await instrument_service.create_instrument(owner_id, wallet.id, instrument_input("ETF A"))
        moved = await instrument_service.create_instrument(owner_id, other_wallet.wallet.id, instrument_input("X"))

        renamed = await instrument_service.update_instrument(owner_id, moved.id, InstrumentUpdateInput(name="ETF A"))
        assert renamed.name == "ETF A"

    async def test_foreign_instrument_is_forbidden(self, instrument_service, wallet, owner_id, other_owner_id):
        created = await instrument_service.create_instrument(owner_id, wallet.id, instrument_input())
        with pytest.raises(ForbiddenError):
            await instrument_service.update_instrument(other_owner_id, created.id, InstrumentUpdateInput(name="Mine"))

    async def test_deleted_parent_blocks_update(self, instrument_service, session, wallet, owner_id):
        created = await instrument_service.create_instrument(owner_id, wallet.id, instrument_input())
        # the wallet alone is marked deleted, leaving the instrument active
        await session.execute(update(WalletModel).where(WalletModel.id == wallet.id).values(deleted_at=utcnow()))

        with pytest.raises(ParentSoftDeletedError):
            await instrument_service.update_instrument(owner_id, created.id, InstrumentUpdateInput(name="New"))

    async def test_invalid_amount_is_rejected(self, instrument_service, wallet, owner_id):
        created = await instrument_service.create_instrument(owner_id, wallet.id, instrument_input())
        with pytest.raises(AmountFormatError):
            await instrument_service.update_instrument(
                owner_id, created.id, InstrumentUpdateInput(current_value_pln="-5")
            )


class TestSoftDeleteInstrument:
    async def test_second_delete_reports_already_deleted(self, instrument_service, wallet, owner_id):
        created = await instrument_service.create_instrument(owner_id, wallet.id, instrument_input())

        deleted = await instrument_service.soft_delete_instrument(owner_id, created.id)
        assert deleted.id == created.id

        with pytest.raises(AlreadyDeletedError):
            await instrument_service.soft_delete_instrument(owner_id, created.id)

    async def test_deleted_instrument_is_hidden(self, instrument_service, wallet, owner_id):
        created = await instrument_service.create_instrument(owner_id, wallet.id, instrument_input())
        await instrument_service.soft_delete_instrument(owner_id, created.id)

        with pytest.raises(SoftDeletedError):
            await instrument_service.get_instrument(owner_id, created.id)
        with pytest.raises(SoftDeletedError):
            await instrument_service.update_instrument(owner_id, created.id, InstrumentUpdateInput(name="Back"))

    async def test_deleted_and_foreign_instrument_reports_soft_delete_first(
        self, instrument_service, wallet, owner_id, other_owner_id
    ):
        created = await instrument_service.create_instrument(owner_id, wallet.id, instrument_input())
        await instrument_service.soft_delete_instrument(owner_id, created.id)

        with pytest.raises(SoftDeletedError):
            await instrument_service.get_instrument(other_owner_id, created.id)
        with pytest.raises(AlreadyDeletedError):
            await instrument_service.soft_delete_instrument(other_owner_id, created.id)

    async def test_delete_touches_parent_wallet(self, instrument_service, wallet, owner_id):
        created = await instrument_service.create_instrument(owner_id, wallet.id, instrument_input())
        before = (await instrument_service.wallets.get_wallet(wallet.id)).updated_at
        await asyncio.sleep(0.01)

        await instrument_service.soft_delete_instrument(owner_id, created.id)

        after = (await instrument_service.wallets.get_wallet(wallet.id)).updated_at
        assert after > before


def stale_meta(instrument, owner_id):
    """Metadata as it looked before a concurrent delete landed."""

    async def _get_meta(instrument_id):
        return EntityMeta(id=instrument.id, owner_id=owner_id, deleted_at=None, parent_id=instrument.wallet_id)

    return _get_meta


class TestConditionalWrites:
    async def test_delete_losing_a_race_reports_already_deleted(
        self, instrument_service, wallet, owner_id, monkeypatch
    ):
        created = await instrument_service.create_instrument(owner_id, wallet.id, instrument_input())
        await instrument_service.soft_delete_instrument(owner_id, created.id)
        monkeypatch.setattr(instrument_service.repository, "get_meta", stale_meta(created, owner_id))

        with pytest.raises(AlreadyDeletedError):
            await instrument_service.soft_delete_instrument(owner_id, created.id)

    async def test_update_losing_a_race_reports_soft_deleted(
        self, instrument_service, session, wallet, owner_id, monkeypatch
    ):
        created = await instrument_service.create_instrument(owner_id, wallet.id, instrument_input())
        await instrument_service.soft_delete_instrument(owner_id, created.id)
        monkeypatch.setattr(instrument_service.repository, "get_meta", stale_meta(created, owner_id))

        with pytest.raises(SoftDeletedError):
            await instrument_service.update_instrument(
                owner_id, created.id, InstrumentUpdateInput(name="Renamed", current_value_pln="1")
            )
        assert await count_value_changes(session, created.id) == 0

    async def test_store_rejects_case_variant_rename(self, instrument_service, session, wallet, owner_id):
        await instrument_service.create_instrument(owner_id, wallet.id, instrument_input("ETF A"))
        other = await instrument_service.create_instrument(owner_id, wallet.id, instrument_input("Bonds"))
        await session.commit()

        with pytest.raises(NameConflictError) as excinfo:
            await instrument_service.repository.update_instrument(
                other.id, owner_id, {"name": "etf a"}, wallet_id=wallet.id
            )

        assert excinfo.value.scope_id == wallet.id
        assert (await instrument_service.get_instrument(owner_id, other.id)).name == "Bonds"
