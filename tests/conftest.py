"""Shared fixtures: a fresh SQLite file per test, a wired app and tenant data."""

from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.deps import CurrentUser
from app.main import create_app
from app.security import hash_password
from config import Settings
from db import Database
from models import READ, WRITE, Account, Category, MasterAccount, User

TEST_PASSWORD = "secret123"


def _create_tenant(session, name: str, admin_email: str, reader_email: str) -> SimpleNamespace:
    master = MasterAccount(name=name, admin_email=admin_email)
    session.add(master)
    session.flush()

    writer = User(
        master_account_id=master.id,
        email=admin_email,
        password_hash=hash_password(TEST_PASSWORD, rounds=4),
        full_name=f"{name} admin",
        permission=WRITE,
    )
    reader = User(
        master_account_id=master.id,
        email=reader_email,
        password_hash=hash_password(TEST_PASSWORD, rounds=4),
        full_name=f"{name} reader",
        permission=READ,
    )
    session.add_all([writer, reader])
    session.commit()

    return SimpleNamespace(
        master_id=master.id,
        writer_id=writer.id,
        reader_id=reader.id,
        writer_email=admin_email,
        reader_email=reader_email,
        identity=CurrentUser(
            user_id=writer.id,
            master_account_id=master.id,
            permission=WRITE,
            email=admin_email,
        ),
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        jwt_secret="test-secret-key-that-is-long-enough-for-hs256",
        database_url=f"sqlite:///{tmp_path / 'finance.db'}",
        bcrypt_rounds=4,
        log_level="WARNING",
    )


@pytest.fixture
def database(settings):
    database = Database(settings.database_url)
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def session(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def client(settings, database):
    app = create_app(settings, database)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def tenant(session):
    return _create_tenant(session, "Family", "admin@family.com", "reader@family.com")


@pytest.fixture
def other_tenant(session):
    return _create_tenant(session, "Neighbours", "boss@neighbours.com", "kid@neighbours.com")


@pytest.fixture
def make_account(session, tenant):
    def _make(name="Cash", balance="100.00", master_id=None, is_active=True) -> str:
        account = Account(
            master_account_id=master_id or tenant.master_id,
            name=name,
            balance=Decimal(balance),
            is_active=is_active,
        )
        session.add(account)
        session.commit()
        return account.id

    return _make


@pytest.fixture
def make_category(session, tenant):
    def _make(name="Food", kind="expense", master_id=None, is_active=True) -> str:
        category = Category(
            master_account_id=master_id or tenant.master_id,
            name=name,
            kind=kind,
            is_active=is_active,
        )
        session.add(category)
        session.commit()
        return category.id

    return _make


@pytest.fixture
def balance_of(database):
    """Read an account balance through a fresh session."""

    def _balance(account_id: str) -> Decimal:
        with database.session() as fresh:
            return fresh.get(Account, account_id).balance

    return _balance


@pytest.fixture
def token_for(client):
    def _login(email: str, password: str = TEST_PASSWORD) -> dict:
        response = client.post("/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['data']['token']}"}

    return _login


@pytest.fixture
def writer_headers(token_for, tenant):
    return token_for(tenant.writer_email)


@pytest.fixture
def reader_headers(token_for, tenant):
    return token_for(tenant.reader_email)
