"""Shared test configuration and fixtures.

Uses a transactional rollback strategy per test for full isolation:
each test runs inside one connection-level transaction that is rolled back
afterwards. Tests run against an in-memory SQLite database unless
``TEST_DATABASE_URL`` points at a PostgreSQL test database.
"""

import os
import uuid
from collections.abc import AsyncGenerator
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from langchain_core.messages import AIMessage
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from hostelconnect.api.v1.chat import get_assistant_bridge
from hostelconnect.assistant.bridge import AssistantBridge
from hostelconnect.auth.jwt import create_token_pair
from hostelconnect.auth.passwords import hash_password
from hostelconnect.auth.roles import Role
from hostelconnect.database import Base, get_db
from hostelconnect.main import app
from hostelconnect.models.hostel import Hostel
from hostelconnect.models.user import User
from hostelconnect.services import hostel_service

TEST_PASSWORD = "testpass123"

_test_db_url = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


def _make_engine():
    if _test_db_url.startswith("sqlite"):
        # One shared connection so every session sees the same in-memory database
        return create_async_engine(
            _test_db_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(_test_db_url, echo=False, pool_pre_ping=True)


# ---------------------------------------------------------------------------
# Engine and schema, created per test on the test's own event loop
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine():
    engine = _make_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


# ---------------------------------------------------------------------------
# Per-test: transactional rollback for isolation
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session wrapped in a transaction that always rolls back."""
    async with test_engine.connect() as connection:
        transaction = await connection.begin()
        session = AsyncSession(bind=connection, expire_on_commit=False)

        try:
            yield session
        finally:
            await session.close()
            if transaction.is_active:
                await transaction.rollback()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to use the test DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


async def create_user(
    db: AsyncSession,
    role: Role,
    *,
    full_name: str | None = None,
    is_active: bool = True,
) -> User:
    """Insert a user with ``TEST_PASSWORD`` directly in the DB."""
    unique = uuid.uuid4().hex[:8]
    user = User(
        email=f"{role.value}-{unique}@test.com",
        hashed_password=hash_password(TEST_PASSWORD),
        full_name=full_name or f"Test {role.value.capitalize()}",
        phone_number="+254712345678",
        role=role.value,
        is_active=is_active,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


def headers_for(user: User) -> dict[str, str]:
    """Authorization headers for ``user``."""
    tokens = create_token_pair(str(user.id), role=user.role)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Factory fixture: ``await make_user(Role.OWNER)``."""

    async def _make(role: Role, **kwargs) -> User:
        return await create_user(db_session, role, **kwargs)

    return _make


@pytest.fixture
def auth_headers_for():
    return headers_for


@pytest_asyncio.fixture
async def student(db_session: AsyncSession) -> User:
    return await create_user(db_session, Role.STUDENT, full_name="Amina Student")


@pytest_asyncio.fixture
async def other_student(db_session: AsyncSession) -> User:
    return await create_user(db_session, Role.STUDENT, full_name="Brian Student")


@pytest_asyncio.fixture
async def owner(db_session: AsyncSession) -> User:
    return await create_user(db_session, Role.OWNER, full_name="Wanjiru Owner")


@pytest_asyncio.fixture
async def other_owner(db_session: AsyncSession) -> User:
    return await create_user(db_session, Role.OWNER, full_name="Otieno Owner")


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> User:
    return await create_user(db_session, Role.ADMIN, full_name="Platform Admin")


@pytest.fixture
def student_headers(student: User) -> dict[str, str]:
    return headers_for(student)


@pytest.fixture
def owner_headers(owner: User) -> dict[str, str]:
    return headers_for(owner)


@pytest.fixture
def other_owner_headers(other_owner: User) -> dict[str, str]:
    return headers_for(other_owner)


@pytest.fixture
def admin_headers(admin: User) -> dict[str, str]:
    return headers_for(admin)


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def hostel(db_session: AsyncSession, owner: User) -> Hostel:
    """A listing owned by ``owner``, created through the service."""
    return await hostel_service.create_hostel(
        db_session,
        owner,
        name="Kutus Comfort Hostel",
        location="Kutus, near Kirinyaga University",
        price=Decimal("6500.00"),
        rooms=24,
        description="Single rooms with a shared kitchen.",
        amenities=["wifi", "water", "security"],
        images=["https://img.test/front.jpg", "https://img.test/room.jpg"],
    )


@pytest_asyncio.fixture
async def other_hostel(db_session: AsyncSession, other_owner: User) -> Hostel:
    """A listing owned by ``other_owner``."""
    return await hostel_service.create_hostel(
        db_session,
        other_owner,
        name="Kerugoya Scholars Hostel",
        location="Kerugoya town",
        price=Decimal("4500.00"),
        rooms=30,
        amenities=["water", "electricity"],
    )


# ---------------------------------------------------------------------------
# Assistant
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_llm() -> AsyncMock:
    """Stands in for the chat model; replies with a fixed message."""
    llm = AsyncMock()
    llm.ainvoke.return_value = AIMessage(content="Try the hostels in Kutus, they are close to campus.")
    return llm


@pytest.fixture
def bridge(fake_llm: AsyncMock) -> AssistantBridge:
    return AssistantBridge(llm=fake_llm, max_history=20)


@pytest_asyncio.fixture
async def chat_client(client: AsyncClient, bridge: AssistantBridge) -> AsyncClient:
    """``client`` with the assistant bridge replaced by the fake model."""
    app.dependency_overrides[get_assistant_bridge] = lambda: bridge
    return client
