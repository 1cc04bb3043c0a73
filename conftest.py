import os

# Settings are read at import time, so the test environment must be in place first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "testing"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ.pop("SPECIAL_USER_ID", None)

import uuid

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as AsyncSessionSQLModel

import tastebuddy.models  # noqa: F401
from tastebuddy.core.security import create_access_token, get_password_hash, scopes_for
from tastebuddy.db.database import get_db
from tastebuddy.main import app
from tastebuddy.models.user import User
from tastebuddy.schemas.enums import EmailVisibility

TEST_PASSWORD = "secret123"
# bcrypt is slow; hash once and reuse for every test user
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


@pytest_asyncio.fixture(scope="function")
async def async_test_engine():
    """Fresh in-memory database for each test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture(scope="function")
def session_factory(async_test_engine):
    return sessionmaker(
        bind=async_test_engine,
        class_=AsyncSessionSQLModel,
        expire_on_commit=False,
        autoflush=False
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(session_factory):
    """HTTP client whose requests each get their own session on the test database"""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    async def _make_user(
        name: str = "Test Cook",
        email: str = None,
        email_visibility: EmailVisibility = EmailVisibility.HIDDEN,
        is_admin: bool = False,
        is_active: bool = True
    ) -> User:
        user = User(
            name=name,
            email=email or f"cook-{uuid.uuid4().hex[:8]}@example.com",
            hashed_password=TEST_PASSWORD_HASH,
            email_visibility=email_visibility,
            is_admin=is_admin,
            is_active=is_active
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict:
        token = create_access_token(user_id=user.id, scopes=scopes_for(user))
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest_asyncio.fixture
async def alice(make_user):
    return await make_user(name="Alice", email="alice@example.com")


@pytest_asyncio.fixture
async def bob(make_user):
    return await make_user(name="Bob", email="bob@example.com")


@pytest_asyncio.fixture
async def admin_user(make_user):
    return await make_user(name="Admin", email="admin@example.com", is_admin=True)
