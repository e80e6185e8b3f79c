"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool, Pool

from backend.app.main import app
from backend.app.db.session import get_db, Base
from backend.app.core.exceptions import PaymentGatewayError
from backend.tests.helpers import auth_headers, create_user
from backend.app.models.enums import UserRole
from backend.app.models.rider import Rider
from backend.app.models.rider_enums import RiderStatus, WorkStatus
from backend.app.services.payment_gateway import get_payment_gateway

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


class StubPaymentGateway:
    """Records intents instead of calling the gateway."""

    def __init__(self):
        self.intents = []
        self.fail_with = None

    async def create_payment_intent(self, amount, currency=None):
        if self.fail_with:
            raise PaymentGatewayError(self.fail_with)
        self.intents.append(amount)
        return {"id": f"pi_test_{len(self.intents)}", "client_secret": f"pi_test_{len(self.intents)}_secret"}


@pytest.fixture
def payment_gateway_stub():
    return StubPaymentGateway()


@pytest.fixture(autouse=True)
def apply_overrides(payment_gateway_stub):
    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    async def override_get_payment_gateway():
        return payment_gateway_stub

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = override_get_payment_gateway
    yield
    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session

@pytest.fixture
async def admin_headers(db_session):
    await create_user(db_session, "admin@test.com", UserRole.ADMIN)
    return auth_headers("admin@test.com")


@pytest.fixture
async def sender_headers(db_session):
    await create_user(db_session, "sender@test.com")
    return auth_headers("sender@test.com")


@pytest.fixture
async def active_rider(db_session):
    """Approved, idle rider; returns (rider_id, headers)."""
    await create_user(db_session, "rider@test.com", UserRole.RIDER)
    rider = Rider(
        name="Rider One",
        email="rider@test.com",
        phone="0100000000",
        district="Dhaka",
        status=RiderStatus.ACTIVE,
        work_status=WorkStatus.IDLE,
        total_earning=0.0,
    )
    db_session.add(rider)
    await db_session.commit()
    await db_session.refresh(rider)
    return rider.id, auth_headers("rider@test.com")
