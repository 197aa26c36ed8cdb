"""
iBuddy Backend — Test Configuration (conftest.py)
===================================================

What:  Shared fixtures: an in-memory SQLite document store, sessions on it,
       record factories, and an HTTPX client wired to the FastAPI app.
Why:   Store behaviour (range queries, cascading deletes, read-after-write)
       is exercised against a real SQL engine instead of mocks.

Fixture Hierarchy (all function-scoped, so every test starts empty):
    database ─┬─ db_session ── make_user / make_mentee
              └─ test_client
"""

import os

# Must happen before any ibuddy import reads the settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-not-real"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import date, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from ibuddy.auth.jwt_handler import create_access_token
from ibuddy.database import Database
from ibuddy.models.user import Role
from ibuddy.schemas.mentee import MenteeCreate
from ibuddy.schemas.user import User, UserCreate
from ibuddy.services.mentee_service import mentee_service
from ibuddy.services.user_service import user_service

DEFAULT_PASSWORD = "correct-horse-battery"


def future(days: int = 365) -> date:
    return date.today() + timedelta(days=days)


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[Database, None]:
    """
    A Database handle on a private in-memory SQLite store.

    StaticPool keeps the single connection alive, so every session opened
    during the test sees the same data.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    db = Database(engine)
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def user_data():
    """Returns a builder of valid UserCreate payloads."""

    def build(email: str = "jane.doe@example.com", role: Role = Role.BUDDY, **overrides) -> UserCreate:
        fields = {
            "email": email,
            "first_name": "Jane",
            "last_name": "Doe",
            "faculty": "Computer Science",
            "role": role,
            "agreement_start_date": date.today() - timedelta(days=30),
            "agreement_end_date": future(),
            "password": DEFAULT_PASSWORD,
        }
        fields.update(overrides)
        return UserCreate(**fields)

    return build


@pytest.fixture
def mentee_data():
    """Returns a builder of valid MenteeCreate keyword arguments."""

    def build(buddy_id: str, email: str = "mentee@uni.example.org", **overrides) -> dict:
        fields = {
            "buddy_id": buddy_id,
            "first_name": "Marco",
            "last_name": "Rossi",
            "email": email,
            "country_code": "it",
            "home_university": "Università di Bologna",
            "host_faculty": "Faculty of Engineering",
            "gender": "male",
            "degree": "master",
            "agreement_start_date": date.today(),
            "agreement_end_date": future(180),
        }
        fields.update(overrides)
        return fields

    return build


@pytest.fixture
def make_user(db_session, user_data):
    async def create(email: str = "jane.doe@example.com", role: Role = Role.BUDDY, **overrides) -> User:
        user = await user_service.create_user(db_session, user_data(email, role, **overrides))
        await db_session.commit()
        return user

    return create


@pytest.fixture
def make_mentee(db_session, mentee_data):
    async def create(buddy_id: str, email: str = "mentee@uni.example.org", **overrides):
        mentee = await mentee_service.create_mentee(
            db_session, MenteeCreate(**mentee_data(buddy_id, email, **overrides))
        )
        await db_session.commit()
        return mentee

    return create


@pytest.fixture
def auth_headers():
    """Returns a builder of Authorization headers carrying a valid token."""

    def build(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return build


@pytest_asyncio.fixture
async def test_client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX client talking to a fresh app.

    ASGITransport does not run the lifespan, so the test Database handle is
    attached to app.state directly, just as the lifespan would do.
    """
    from ibuddy.main import create_app

    app = create_app()
    app.state.database = database
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
