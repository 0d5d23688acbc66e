"""Test configuration and fixtures."""

from datetime import date, timedelta

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from travelpod.core.database import Base, get_db
from travelpod.core.security import create_access_token, create_admin_token, hash_password
from travelpod.models import *  # noqa: F403 - Import all models
from travelpod.models.discount import Discount, DiscountType
from travelpod.models.user import Superadmin, User

# Test database URL (in-memory SQLite for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "secret123"
ADMIN_PASSWORD = "admin-pass"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine):
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def test_app(test_session):
    """Create a test FastAPI application."""
    from fastapi import FastAPI
    from fastapi.exceptions import RequestValidationError
    from fastapi.middleware.cors import CORSMiddleware

    from travelpod.core.exceptions import (
        ProblemDetailsException,
        generic_exception_handler,
        problem_details_handler,
        request_validation_handler,
    )
    from travelpod.core.middleware import setup_middleware
    from travelpod.routers import admin, auth, catalog, health, metrics, passenger, trip, user

    # Create a simplified test app without lifespan
    app = FastAPI(
        title="TravelPod API (Test)",
        description="Test version of the API",
        version="1.0.0-test",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Simplified for tests
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["*"],
    )
    setup_middleware(app, enable_logging=True)

    # Register exception handlers
    app.add_exception_handler(ProblemDetailsException, problem_details_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "service": "travelpod-api",
            "version": "1.0.0",
            "environment": "test",
            "debug": True,
        }

    # Register API routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(user.router)
    app.include_router(catalog.router)
    app.include_router(passenger.router)
    app.include_router(trip.router)
    app.include_router(admin.router)
    app.include_router(metrics.router)

    # Override database dependency
    async def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db

    yield app

    # Clean up
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app):
    """Create a test HTTP client."""
    from httpx import ASGITransport
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture(scope="function")
async def test_user(test_session):
    """A registered customer."""
    user = User(
        username="traveler",
        email="traveler@example.com",
        password_hash=hash_password(TEST_PASSWORD),
        first_name="Asha",
        last_name="Rao",
    )
    test_session.add(user)
    await test_session.commit()
    return user


@pytest_asyncio.fixture(scope="function")
async def other_user(test_session):
    """A second customer, for ownership checks."""
    user = User(
        username="someone",
        email="someone@example.com",
        password_hash=hash_password(TEST_PASSWORD),
    )
    test_session.add(user)
    await test_session.commit()
    return user


@pytest_asyncio.fixture(scope="function")
async def admin_user(test_session, test_user):
    """A superadmin attached to the test user."""
    admin = Superadmin(user_id=test_user.id, password_hash=hash_password(ADMIN_PASSWORD))
    test_session.add(admin)
    await test_session.commit()
    return admin


@pytest.fixture
def auth_headers(test_user):
    """Bearer headers for the test user."""
    token = create_access_token(subject=test_user.id, email=test_user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers(other_user):
    token = create_access_token(subject=other_user.id, email=other_user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user, test_user):
    """Admin session headers."""
    token = create_admin_token(admin_user.user_id, email=test_user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture(scope="function")
async def percentage_discount(test_session):
    """An active 10 percent discount code."""
    discount = Discount(code="SAVE10", discount_type=DiscountType.PERCENTAGE, amount=10, is_active=True)
    test_session.add(discount)
    await test_session.commit()
    return discount


@pytest_asyncio.fixture(scope="function")
async def expired_discount(test_session):
    discount = Discount(
        code="OLD50",
        discount_type=DiscountType.FIXED,
        amount=50_000,
        expiry_date=date.today() - timedelta(days=1),
        is_active=True,
    )
    test_session.add(discount)
    await test_session.commit()
    return discount


@pytest.fixture
def trip_dates():
    """A five-day trip starting a month from now."""
    start = date.today() + timedelta(days=30)
    return start, start + timedelta(days=4)


@pytest.fixture
def sample_trip_data(trip_dates):
    """Trip details for a two-person international trip to Paris."""
    start, end = trip_dates
    return {
        "origin": "Mumbai",
        "destination": "Paris",
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
        "travelers": 2,
    }


@pytest.fixture
def admin_password():
    """Plain password of the admin_user fixture."""
    return ADMIN_PASSWORD
