"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from fleet_backend.app.main import app
from fleet_backend.app.db.session import get_db, Base
from fleet_backend.app.core.jwt import create_access_token
from fleet_backend.app.core.redis_client import get_redis
from fleet_backend.app.models.enums import AppRole, VehicleStatus
from fleet_backend.app.models.vehicle import Vehicle
from fleet_backend.app.services.accounts import AccountService
import fleet_backend.app.core.redis_client as redis_client_module

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Event handler to enable foreign keys for SQLite
from sqlalchemy import event
from sqlalchemy.pool import Pool

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

# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}
        self._closed = False

    async def ping(self):
        if self._closed:
            return False
        return True

    async def get(self, key):
        if self._closed:
            return None
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        if self._closed:
            return False
        self.store[key] = value
        return True

    async def setex(self, key, seconds, value):
        return await self.set(key, value, ex=seconds)

    async def delete(self, key):
        if self._closed:
            return 0
        if key in self.store:
            del self.store[key]
            return 1
        return 0

    async def exists(self, key):
        if self._closed:
            return 0
        return 1 if key in self.store else 0

    async def flushdb(self):
        if not self._closed:
            self.store = {}

    async def aclose(self):
        self._closed = True
        self.store = {}

# One fake shared by the app and the tests
mock_redis = MockRedis()

@pytest.fixture
def redis_client_session():
    return mock_redis

@pytest.fixture(scope="session", autouse=True)
def apply_overrides():
    """Apply overrides once for the session.
    Global override is safer here than per-test override to avoid app state flux.
    """

    # Patch the global redis client used by the health check
    original_client = redis_client_module.redis_client
    redis_client_module.redis_client = mock_redis

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    async def override_get_redis():
        return mock_redis

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis
    yield

    # Restore and clear
    app.dependency_overrides = {}
    redis_client_module.redis_client = original_client

@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await mock_redis.flushdb()

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


async def make_user(db: AsyncSession, email: str, role=None, full_name: str = "Test User", password: str = "Secret2024!"):
    """Create a committed user with profile and optional role."""
    user = await AccountService.add_user(db, email=email, password=password, full_name=full_name, role=role)
    await db.commit()
    return user


def auth_headers(user) -> dict:
    token = create_access_token(data={"sub": user.email, "user_id": user.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def manager_headers(db_session):
    user = await make_user(db_session, "manager@safirismart.co.ke", AppRole.FLEET_MANAGER, "Grace Wanjiru")
    return auth_headers(user)


@pytest.fixture
async def operations_headers(db_session):
    user = await make_user(db_session, "operations@safirismart.co.ke", AppRole.OPERATIONS, "Peter Otieno")
    return auth_headers(user)


@pytest.fixture
async def finance_headers(db_session):
    user = await make_user(db_session, "finance@safirismart.co.ke", AppRole.FINANCE, "Amina Hassan")
    return auth_headers(user)


@pytest.fixture
async def vehicle(db_session):
    """An active truck on the Nairobi-Mombasa route."""
    v = Vehicle(
        license_plate="KCA 123A",
        vehicle_type="Truck",
        status=VehicleStatus.ACTIVE,
        route_assigned="Nairobi-Mombasa",
        fuel_efficiency_kml=4.5,
        monthly_fuel_consumption_liters=900,
    )
    db_session.add(v)
    await db_session.commit()
    await db_session.refresh(v)
    return v


@pytest.fixture
def create_user(db_session):
    """Factory returning ``(user, headers)`` for a user with the given role."""
    async def _create(email: str, role=None, full_name: str = "Test User"):
        user = await make_user(db_session, email, role, full_name)
        return user, auth_headers(user)
    return _create
