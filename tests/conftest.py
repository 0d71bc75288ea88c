"""Pytest fixtures for testing."""
import os

# Settings are read at import time, so the environment must be ready first.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-long-enough-for-hs256-signing"
os.environ["DEBUG"] = "false"
os.environ["ARGON2_TIME_COST"] = "1"
os.environ["ARGON2_MEMORY_COST"] = "8192"
os.environ["ARGON2_PARALLELISM"] = "1"

from typing import AsyncGenerator
from uuid import UUID

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.pool import StaticPool

from accounts.main import app
from accounts.common.database import Database, get_db
from accounts.domain.password_service import hash_password
from accounts.models.user import User


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

WENDY = {
    "name": "Wendy Pan",
    "username": "wendy",
    "email": "wendypan@example.com",
    "password": "123123123",
}

PETER = {
    "name": "Peter Pan",
    "username": "peter",
    "email": "peterpan@example.com",
    "password": "password123",
}


@pytest.fixture(scope="function")
async def test_db() -> AsyncGenerator[Database, None]:
    """Create a fresh in-memory database and route the app's sessions to it."""
    db = Database(TEST_DATABASE_URL, max_attempts=1, poolclass=StaticPool)
    await db.connect()

    async def override_get_db():
        async with db.session() as session:
            yield session

    # Override dependency
    app.dependency_overrides[get_db] = override_get_db

    yield db

    # Cleanup
    app.dependency_overrides.clear()
    await db.close()


@pytest.fixture
async def client(test_db) -> AsyncGenerator[AsyncClient, None]:
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


async def _create_user(db: Database, data: dict) -> User:
    async with db.session_maker() as session:
        user = User(
            name=data["name"],
            username=data["username"],
            email=data["email"],
            password_hash=hash_password(data["password"]),
            favorites=[],
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


async def fetch_user(db: Database, user_id: UUID) -> User | None:
    """Load a user in a fresh session, bypassing any cached state."""
    async with db.session_maker() as session:
        return await session.get(User, user_id)


@pytest.fixture
async def user_a(test_db: Database) -> User:
    """Create test user A (Wendy)."""
    return await _create_user(test_db, WENDY)


@pytest.fixture
async def user_b(test_db: Database) -> User:
    """Create test user B (Peter)."""
    return await _create_user(test_db, PETER)


async def _login(client: AsyncClient, data: dict) -> dict:
    response = await client.post(
        "/api/v1/auth/login",
        json={"username": data["username"], "password": data["password"]}
    )
    assert response.status_code == 200
    return response.json()


@pytest.fixture
async def user_a_tokens(client: AsyncClient, user_a: User) -> dict:
    """Get access and refresh tokens for user A."""
    return await _login(client, WENDY)


@pytest.fixture
async def user_a_jwt(user_a_tokens: dict) -> str:
    """Get access token for user A."""
    return user_a_tokens["access_token"]


@pytest.fixture
async def user_b_jwt(client: AsyncClient, user_b: User) -> str:
    """Get access token for user B."""
    return (await _login(client, PETER))["access_token"]
