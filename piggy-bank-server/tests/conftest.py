"""Shared test fixtures for the piggy bank server."""

import uuid

import pytest
from fastapi.testclient import TestClient

from piggybank.core.config import AuthSettings, DatabaseSettings, Settings
from piggybank.core.security import create_access_token
from piggybank.infrastructure.database import Database


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        environment="test",
        database=DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'piggybank.db'}"),
        auth=AuthSettings(jwt_secret="test-secret-key", audience="authenticated"),
    )


@pytest.fixture
async def database(settings):
    db = Database(settings)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session_factory() as db_session:
        yield db_session


@pytest.fixture
def owner_id():
    return str(uuid.uuid4())


@pytest.fixture
def other_owner_id():
    return str(uuid.uuid4())


@pytest.fixture
def client(settings):
    from piggybank.main import create_app

    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(settings):
    """Build bearer headers for an owner id."""

    def _headers(owner: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(owner, settings)}"}

    return _headers


@pytest.fixture
def wallet_service(session):
    from piggybank.modules.wallets.service import WalletService

    return WalletService.with_session(session)


@pytest.fixture
def instrument_service(session):
    from piggybank.modules.instruments.service import InstrumentService

    return InstrumentService.with_session(session)


@pytest.fixture
def value_change_service(session):
    from piggybank.modules.value_changes.service import ValueChangeService

    return ValueChangeService.with_session(session)
