"""Pytest configuration and shared fixtures"""

import os
from typing import AsyncGenerator, Callable, Dict

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from tradehub.api.dependencies import get_storage
from tradehub.config import Settings
from tradehub.database import Base, build_engine, build_session_factory, get_db
from tradehub.main import create_app
from tradehub.models import Professional, Supplier, User, UserType
from tradehub.services.account_service import token_claims
from tradehub.services.auth_service import PasswordHasher, TokenService

from helpers import TEST_PASSWORD, FakeStorage


# Test database URL (in-memory SQLite unless a separate test database is given)
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")


@pytest.fixture
def test_settings() -> Settings:
    """Settings for tests: throwaway secret, cheap bcrypt"""
    return Settings(
        environment="test",
        database_url=TEST_DATABASE_URL,
        secret_key="test-secret-key",
        bcrypt_rounds=4,
        s3_bucket="test-bucket",
        aws_region="us-east-1",
        max_upload_size_mb=1,
        max_portfolio_files=3,
    )


@pytest.fixture
def token_service(test_settings: Settings) -> TokenService:
    return TokenService(test_settings)


@pytest.fixture
def password_hasher(test_settings: Settings) -> PasswordHasher:
    return PasswordHasher(rounds=test_settings.bcrypt_rounds)


@pytest.fixture
def fake_storage() -> FakeStorage:
    return FakeStorage()


@pytest_asyncio.fixture(scope="function")
async def test_engine(test_settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    """Create a test database engine"""
    engine = build_engine(test_settings)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for testing"""
    async_session_maker = build_session_factory(test_engine)

    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def app(test_settings: Settings, test_engine: AsyncEngine, db_session: AsyncSession, fake_storage: FakeStorage) -> FastAPI:
    """Application wired to the test database and fake storage"""
    application = create_app(test_settings)
    application.state.engine = test_engine
    application.state.session_factory = build_session_factory(test_engine)

    async def override_get_db():
        yield db_session

    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_storage] = lambda: fake_storage
    return application


@pytest_asyncio.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async test client driving the app in-process"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def _create_user(
    db_session: AsyncSession,
    password_hasher: PasswordHasher,
    user_type: UserType,
    name: str,
    email: str,
    **extra,
) -> User:
    user = User(
        user_type=user_type.value,
        name=name,
        username="".join(name.split()).lower(),
        email=email,
        password_hash=password_hasher.hash_password(TEST_PASSWORD),
        profile_picture_url="https://example.com/avatar.jpg",
        cover_picture_url="https://example.com/cover.png",
        is_verified=True,
        **extra,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def homeowner_user(db_session: AsyncSession, password_hasher: PasswordHasher) -> User:
    """Create a homeowner for testing"""
    return await _create_user(
        db_session, password_hasher, UserType.HOMEOWNER, "Holly Owner", "holly@example.com"
    )


@pytest_asyncio.fixture
async def professional_user(db_session: AsyncSession, password_hasher: PasswordHasher) -> User:
    """Create a professional account (without its profile row)"""
    return await _create_user(
        db_session, password_hasher, UserType.PROFESSIONAL, "Pat Plumber", "pat@example.com"
    )


@pytest_asyncio.fixture
async def professional_profile(db_session: AsyncSession, professional_user: User) -> Professional:
    """Create the Professional row of professional_user"""
    professional = Professional(
        user_id=professional_user.id,
        service_type="Plumbing",
        years_experience=12,
        bio="Leaks fixed fast",
        certifications="Licensed plumber",
        portfolio_link="https://example.com/pat",
        portfolio=["https://example.com/p/0.jpg", "https://example.com/p/1.jpg"],
    )
    db_session.add(professional)
    await db_session.commit()
    await db_session.refresh(professional)
    return professional


@pytest_asyncio.fixture
async def supplier_user(db_session: AsyncSession, password_hasher: PasswordHasher) -> User:
    """Create a supplier account (without its profile row)"""
    return await _create_user(
        db_session, password_hasher, UserType.SUPPLIER, "Sam Supply", "sam@example.com"
    )


@pytest_asyncio.fixture
async def supplier_profile(db_session: AsyncSession, supplier_user: User) -> Supplier:
    """Create the Supplier row of supplier_user"""
    supplier = Supplier(
        user_id=supplier_user.id,
        business_name="Sam's Lumber",
        contact_info="555-0100",
        additional_details="Delivery on weekdays",
    )
    db_session.add(supplier)
    await db_session.commit()
    await db_session.refresh(supplier)
    return supplier


@pytest_asyncio.fixture
async def federated_user(db_session: AsyncSession) -> User:
    """Create an account that signs in through Google (no password)"""
    user = User(
        user_type=UserType.HOMEOWNER.value,
        name="Gia Google",
        username="giagoogle",
        email="gia@example.com",
        google_id="google-oauth-123",
        is_verified=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(token_service: TokenService) -> Callable[[User], Dict[str, str]]:
    """Build an Authorization header carrying a valid token for a user"""

    def _headers(user: User) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token_service.issue(token_claims(user))}"}

    return _headers
