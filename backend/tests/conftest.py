"""
Pytest fixtures for testing.
"""
import pytest
import pytest_asyncio
from typing import AsyncGenerator

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Import database module BEFORE app to allow override
import app.database
from app.database import Base
# Import ALL models so Base.metadata knows about all tables
from app.models.user import User
from app.models.company import Company
from app.models.job import Job
from app.services.sections import default_sections
from app.api.auth import create_access_token

# Now import app (after we can override database)
from app.main import app as fastapi_app


# Test database URL (use in-memory SQLite for fast tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh database for each test.
    Ensures cleanup happens even if test fails.
    """
    # Use StaticPool to keep single connection alive and reuse it
    # This ensures all sessions see the same in-memory database
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Replace the app's engine and sessionmaker so get_db() uses the test DB
    original_engine = app.database.engine
    original_sessionmaker = app.database.AsyncSessionLocal

    app.database.engine = test_engine
    app.database.AsyncSessionLocal = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    async_session = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    session = async_session()

    try:
        yield session
    finally:
        try:
            await session.close()
        except Exception as e:
            print(f"Warning: Failed to close session: {e}")

        try:
            async with test_engine.begin() as conn:
                await conn.run_sync(Base.metadata.drop_all)
        except Exception as e:
            print(f"Warning: Failed to drop tables: {e}")

        try:
            await test_engine.dispose()
        except Exception as e:
            print(f"Warning: Failed to dispose engine: {e}")

        app.database.engine = original_engine
        app.database.AsyncSessionLocal = original_sessionmaker


@pytest_asyncio.fixture
async def async_client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async HTTP client for testing endpoints.

    The db fixture already replaced app.database.engine with test engine,
    so all endpoints will automatically use the test database.
    """
    transport = ASGITransport(app=fastapi_app)

    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=True  # Follow 307 redirects for trailing slashes
    ) as client:
        yield client


@pytest_asyncio.fixture
async def test_user(db: AsyncSession) -> User:
    """Recruiter used by authenticated tests."""
    user = User(email="recruiter@example.com", full_name="Test Recruiter")
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def other_user(db: AsyncSession) -> User:
    """A second recruiter, for ownership checks."""
    user = User(email="someone-else@example.com", full_name="Other Recruiter")
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def client(async_client: AsyncClient, test_user: User) -> AsyncClient:
    """
    Authenticated client with httpOnly cookie.

    The cookie holds a signed token for test_user.
    """
    async_client.cookies.set("auth_token", create_access_token(test_user.id))
    return async_client


@pytest_asyncio.fixture
async def company(db: AsyncSession, test_user: User) -> Company:
    """Draft company owned by test_user."""
    company = Company(
        owner_id=test_user.id,
        name="TechCorp Inc.",
        slug="techcorp-inc",
        sections=default_sections(),
        social_links={},
    )
    db.add(company)
    await db.commit()
    await db.refresh(company)
    return company


@pytest.fixture
def make_job(company: Company):
    """Factory for Job rows of the company fixture (not yet added to the session)."""
    def _make(**overrides) -> Job:
        fields = {
            "company_id": company.id,
            "slug": "engineer",
            "title": "Engineer",
            "description": "Build things.",
            "location": "Remote",
        }
        fields.update(overrides)
        return Job(**fields)
    return _make
