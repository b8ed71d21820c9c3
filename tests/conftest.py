"""Shared fixtures: in-memory database, fixed clock and test settings."""

import os

os.environ.setdefault("SECRET", "test-signing-secret-with-enough-bytes-for-hs256")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from datetime import timedelta  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from otp_login.config import Settings  # noqa: E402
from otp_login.models.session import AuthSession  # noqa: E402
from otp_login.models.user import Base, User  # noqa: E402
from otp_login.services.clock import utc_now  # noqa: E402

TEST_SECRET = os.environ["SECRET"]


@pytest.fixture
def now():
    """A fixed "current time" close to the real one, so issued JWTs still verify."""
    return utc_now().replace(microsecond=0)


@pytest.fixture
def clock(now):
    return lambda: now


@pytest.fixture
def config() -> Settings:
    return Settings(secret=TEST_SECRET, environment="development")


@pytest_asyncio.fixture
async def session_factory():
    """Fresh in-memory DB per test, shared across sessions through one connection."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def pending_user(db_session, now):
    """User ``u1`` with a live OTP ``482913`` and no failed attempts."""
    user = User(
        id="u1",
        email="u1@example.com",
        role="role-editor",
        otp="482913",
        otp_expires=now + timedelta(minutes=5),
        otp_attempts=0,
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def stale_sessions(db_session, now):
    """Two sessions that already expired and one still alive, owned by ``other``."""
    db_session.add(User(id="other", email="other@example.com", status="active"))
    db_session.add_all(
        [
            AuthSession(token="dead-1", user_id="other", expires=now - timedelta(days=1)),
            AuthSession(token="dead-2", user_id="other", expires=now - timedelta(seconds=1)),
            AuthSession(token="alive-1", user_id="other", expires=now + timedelta(days=3)),
        ]
    )
    await db_session.commit()
