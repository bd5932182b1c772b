"""
Shared fixtures: a fresh SQLite database per test, the services built on
it, and an HTTP client with the store and hasher dependencies overridden.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test-accounts.db")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from api.dependencies import get_hasher, get_store
from auth.password import CredentialHasher
from auth.tokens import TokenIssuer
from core.authenticator import Authenticator
from core.provisioner import AccountProvisioner
from database.models import Base
from database.store import DocumentStore
from main import app


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'accounts.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def store(engine):
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    return DocumentStore(factory)


@pytest.fixture
def hasher():
    # Minimum bcrypt cost keeps the suite fast.
    return CredentialHasher(rounds=4)


@pytest.fixture
def issuer():
    return TokenIssuer()


@pytest.fixture
def provisioner(store, hasher):
    return AccountProvisioner(store, hasher)


@pytest.fixture
def authenticator(store, hasher, issuer):
    return Authenticator(store, hasher, issuer)


@pytest.fixture
def sign_up_payload():
    return {
        "credentials": {
            "email": "a@b.com",
            "password": "p1",
            "password_confirmation": "p1",
        },
        "character": {"name": "Zed", "class": "Mage"},
        "todo": {},
    }


@pytest.fixture
async def client(store, hasher):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_hasher] = lambda: hasher

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
