"""
Pytest fixtures for the SMM Matrix test suite.

This module provides:
- A throwaway SQLite database, recreated for every test
- An httpx AsyncClient bound to the ASGI app
- Helpers for creating accounts and signing in
"""

import os
import tempfile

_TEST_DIR = tempfile.mkdtemp(prefix="smm-matrix-tests-")
os.environ["SMM_DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test.db"
os.environ["SMM_SECRET_KEY"] = "test-secret"
os.environ["SMM_PASSWORD_HASH_ROUNDS"] = "4"
os.environ["SMM_SEED_DEMO_DATA"] = "false"

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient, Response  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from smm_matrix.database import AsyncSessionMaker, drop_db, engine, init_db  # noqa: E402
from smm_matrix.models import User, UserRole  # noqa: E402
from smm_matrix.services import create_account, seed_catalogue  # noqa: E402
from smm_matrix_server import create_app  # noqa: E402


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[None, None]:
    """Start every test from empty tables."""
    await drop_db()
    await init_db()
    yield
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(database: None) -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionMaker() as session:
        yield session


@pytest_asyncio.fixture
async def catalogue(db_session: AsyncSession) -> None:
    """Seed plans, posts and reviews."""
    await seed_catalogue(db_session)


@pytest_asyncio.fixture
async def client(database: None) -> AsyncGenerator[AsyncClient, None]:
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as http_client:
        yield http_client


@pytest_asyncio.fixture
async def make_user(database: None) -> Callable[..., Awaitable[User]]:
    """Factory creating an account with its dependent rows."""

    async def _make_user(
        email: str,
        password: str = "secret-pass",
        role: UserRole = UserRole.USER,
        **fields,
    ) -> User:
        async with AsyncSessionMaker() as session:
            return await create_account(session, email=email, password=password, role=role, **fields)

    return _make_user


@pytest_asyncio.fixture
async def login(client: AsyncClient) -> Callable[[str, str], Awaitable[Response]]:
    async def _login(email: str, password: str = "secret-pass") -> Response:
        return await client.post("/login", data={"email": email, "password": password})

    return _login


@pytest_asyncio.fixture
async def admin_client(client: AsyncClient, make_user, login) -> AsyncClient:
    await make_user("admin@example.com", role=UserRole.ADMIN, name="Ada Admin")
    response = await login("admin@example.com")
    assert response.status_code == 303
    return client


@pytest_asyncio.fixture
async def staff_client(client: AsyncClient, make_user, login) -> AsyncClient:
    await make_user("staff@example.com", role=UserRole.STAFF)
    response = await login("staff@example.com")
    assert response.status_code == 303
    return client
