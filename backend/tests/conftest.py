"""
ShipTrack Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── identity / admin_identity: Authenticated callers for service tests
    ├── make_shipment: Builds transient Shipment rows
    └── api_client: HTTPX AsyncClient backed by a throwaway SQLite database
"""

import os
import tempfile
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before the first `import shiptrack...`: settings are read at import.
_scratch_dir = tempfile.mkdtemp(prefix="shiptrack_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_scratch_dir}/test.db"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"  # cost 12 would make every register/login ~250ms
os.environ["LOG_LEVEL"] = "WARNING"


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_lookup(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = user
            result = await store.find_user_by_email(mock_db_session, "a@b.com")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def identity():
    from shiptrack.schemas.auth import AuthenticatedIdentity

    return AuthenticatedIdentity(id=1, email="owner@example.com", is_admin=False)


@pytest.fixture
def admin_identity():
    from shiptrack.schemas.auth import AuthenticatedIdentity

    return AuthenticatedIdentity(id=99, email="admin@example.com", is_admin=True)


@pytest.fixture
def make_shipment():
    """Factory for transient Shipment rows with every column populated."""
    from shiptrack.models.shipment import Shipment

    def _make(**overrides):
        now = datetime.now(timezone.utc)
        fields = {
            "id": 1,
            "tracking_number": "TRK1718035200123ABCDE",
            "user_id": 1,
            "sender_name": "Ada Sender",
            "sender_address": "1 Origin Road",
            "recipient_name": "Bob Recipient",
            "recipient_address": "2 Destination Ave",
            "package_description": "Books",
            "package_weight": 2.5,
            "package_dimensions": "30x20x10",
            "status": "Pending",
            "created_at": now,
            "updated_at": now,
        }
        fields.update(overrides)
        return Shipment(**fields)

    return _make


@pytest_asyncio.fixture
async def api_client(tmp_path):
    """
    HTTPX AsyncClient talking to the FastAPI app in-process.

    The database dependency is overridden with sessions on a fresh SQLite file
    per test, so tests never share rows. The lifespan does not run under
    ASGITransport; JWT_SECRET is already set above.
    """
    from shiptrack.database import Base, get_db_session
    from shiptrack.main import app
    from shiptrack.models.shipment import Shipment  # noqa: F401
    from shiptrack.models.user import User  # noqa: F401

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    await engine.dispose()
