"""
Pytest configuration and fixtures for TalentLedger tests.
"""

import sys
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from talentledger.api.main import create_app
from talentledger.config import Settings
from talentledger.scoring import ScoringService
from talentledger.storage import (
    Database,
    AdjustmentRepository,
    ScoreAggregator,
    TalentRepository,
    UserRepository,
    SessionRegistry,
)


# =============================================================================
# Test Settings
# =============================================================================

def get_test_settings() -> Settings:
    """Return settings configured for testing."""
    return Settings(
        database_url="sqlite:///:memory:",
        database_echo=False,
        environment="test",
        debug=True,
    )


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
def db():
    """Fresh in-memory database with tables."""
    database = Database("sqlite:///:memory:")
    database.create_tables()
    yield database
    database.dispose()


@pytest.fixture
def file_db(tmp_path):
    """File-backed database, for tests that hit it from several threads."""
    database = Database(sqlite_path=tmp_path / "talents.db")
    database.create_tables()
    yield database
    database.dispose()


@pytest.fixture
def users(db) -> UserRepository:
    return UserRepository(db)


@pytest.fixture
def aggregator(db) -> ScoreAggregator:
    return ScoreAggregator(db)


@pytest.fixture
def ledger(db) -> AdjustmentRepository:
    return AdjustmentRepository(db)


@pytest.fixture
def catalog(db, aggregator) -> TalentRepository:
    return TalentRepository(db, aggregator)


@pytest.fixture
def scoring(catalog, ledger) -> ScoringService:
    return ScoringService(catalog, ledger)


@pytest.fixture
def sessions() -> SessionRegistry:
    return SessionRegistry()


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def owner(users) -> int:
    """Id of a registered user."""
    return users.create("alice", "not-a-real-hash")


@pytest.fixture
def other_owner(users) -> int:
    return users.create("bob", "not-a-real-hash")


@pytest.fixture
def sample_talent_data() -> dict:
    """Sample talent payload for API tests."""
    return {
        "name": "山田花子",
        "affiliation": "Sakura Productions",
        "beauty": 5,
        "cuteness": 6,
        "talent": 7,
    }


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest_asyncio.fixture(scope="function")
async def app():
    """Create FastAPI application for testing."""
    application = create_app(get_test_settings())

    yield application

    application.state.services.close()


@pytest_asyncio.fixture(scope="function")
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def auth_client(client) -> AsyncClient:
    """Client holding a session cookie for user 'alice'."""
    credentials = {"username": "alice", "password": "wonderland"}
    await client.post("/api/v1/auth/register", json=credentials)
    response = await client.post("/api/v1/auth/login", json=credentials)
    assert response.status_code == 200
    return client
