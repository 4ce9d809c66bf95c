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
import jobforms.database
from jobforms.database import Base
# Import ALL models so Base.metadata knows about all tables
from jobforms.models.user import User, UserRole
from jobforms.models.subscription import Subscription
from jobforms.models.job_posting import JobPosting
from jobforms.models.application_form import ApplicationForm
from jobforms.models.job_application import JobApplication
from jobforms.models.draft_entry import DraftEntry
from jobforms.services.draft_store import InMemoryDraftStore

# Now import app (after we can override database)
from jobforms.main import app as fastapi_app


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

    # Create all tables FIRST
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # THEN replace the app's engine and sessionmaker
    # This ensures get_db() uses sessions connected to DB with tables
    original_engine = jobforms.database.engine
    original_sessionmaker = jobforms.database.AsyncSessionLocal

    jobforms.database.engine = test_engine
    jobforms.database.AsyncSessionLocal = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    # Create session for direct test use
    async_session = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    session = async_session()

    try:
        yield session
    finally:
        # Step 1: Close session
        try:
            await session.close()
        except Exception as e:
            print(f"Warning: Failed to close session: {e}")

        # Step 2: Drop tables (best effort)
        try:
            async with test_engine.begin() as conn:
                await conn.run_sync(Base.metadata.drop_all)
        except Exception as e:
            print(f"Warning: Failed to drop tables: {e}")
            print("In-memory DB will be destroyed on engine disposal")

        # Step 3: Dispose test engine
        try:
            await test_engine.dispose()
        except Exception as e:
            print(f"Warning: Failed to dispose engine: {e}")

        # Step 4: Restore original engine
        jobforms.database.engine = original_engine
        jobforms.database.AsyncSessionLocal = original_sessionmaker


@pytest_asyncio.fixture
async def async_client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async HTTP client for testing endpoints.

    The db fixture already replaced jobforms.database.engine with test engine,
    so all endpoints will automatically use the test database.
    """
    transport = ASGITransport(app=fastapi_app)

    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=True  # Follow 307 redirects for trailing slashes
    ) as client:
        yield client


async def _make_user(db: AsyncSession, **kwargs) -> User:
    user = User(**kwargs)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def employer_user(db: AsyncSession) -> User:
    """Employer on no paid plan: may post jobs and build forms, no prescreen questions."""
    return await _make_user(
        db,
        email="employer@example.com",
        full_name="Basic Employer",
        role=UserRole.EMPLOYER
    )


@pytest_asyncio.fixture
async def premium_employer(db: AsyncSession) -> User:
    """Employer with an active premium subscription."""
    return await _make_user(
        db,
        email="premium@example.com",
        full_name="Premium Employer",
        role=UserRole.EMPLOYER,
        subscription=Subscription(plan_type="premium", status="active")
    )


@pytest_asyncio.fixture
async def job_seeker(db: AsyncSession) -> User:
    return await _make_user(
        db,
        email="seeker@example.com",
        full_name="Ada Applicant",
        role=UserRole.JOB_SEEKER
    )


@pytest_asyncio.fixture
async def super_admin(db: AsyncSession) -> User:
    return await _make_user(
        db,
        email="root@example.com",
        full_name="Super Admin",
        role=UserRole.SUPER_ADMIN
    )


@pytest_asyncio.fixture
async def client(async_client: AsyncClient, employer_user: User) -> AsyncClient:
    """
    Authenticated client with httpOnly cookie.

    Cookie contains just the user_id (employer_user).
    """
    async_client.cookies.set("auth_token", str(employer_user.id))
    return async_client


@pytest_asyncio.fixture
async def job_posting(db: AsyncSession, employer_user: User) -> JobPosting:
    """Active internal-application job posted by employer_user, no prescreen questions."""
    job = JobPosting(
        title="Backend Engineer",
        description="Build APIs",
        company="Test Corp",
        location="Makati, Metro Manila",
        application_method="internal",
        prescreen_questions=[],
        posted_by_id=employer_user.id,
        status="published",
        is_active=True
    )
    db.add(job)
    await db.commit()
    await db.refresh(job)
    return job


@pytest.fixture
def draft_store() -> InMemoryDraftStore:
    return InMemoryDraftStore()
