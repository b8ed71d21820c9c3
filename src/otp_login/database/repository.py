"""Repositories: data access for users and refresh-token sessions."""

from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from otp_login.models.session import AuthSession
from otp_login.models.user import STATUS_ACTIVE, User


class UserRepository:
    """Encapsulates all database queries related to users."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, user_id: str) -> User | None:
        """Look up a user by primary key."""
        stmt = select(User).where(User.id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def increment_otp_attempts(self, user_id: str) -> None:
        """Add one failed attempt in a single ``UPDATE`` so concurrent tries all count."""
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(otp_attempts=User.otp_attempts + 1)
        )
        await self._session.execute(stmt)

    async def reset_challenge_and_activate(self, user_id: str, now: datetime) -> None:
        """Clear the OTP challenge, stamp ``last_access`` and mark the account active."""
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(
                otp=None,
                otp_expires=None,
                otp_attempts=0,
                last_access=now,
                status=STATUS_ACTIVE,
            )
        )
        await self._session.execute(stmt)


class SessionRepository:
    """Insert and purge rows of the refresh-token session table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def insert(self, record: AuthSession) -> None:
        self._session.add(record)
        await self._session.flush()

    async def delete_expired(self, now: datetime) -> int:
        """Delete every session that expired before *now*; returns the row count."""
        stmt = (
            delete(AuthSession)
            .where(AuthSession.expires < now)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def list_for_user(self, user_id: str) -> list[AuthSession]:
        stmt = select(AuthSession).where(AuthSession.user_id == user_id)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())
