"""Seed script: populates the database with sample users holding a pending OTP."""

import asyncio
import secrets
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from otp_login.database.engine import async_session_factory, init_db
from otp_login.models.user import User
from otp_login.services.clock import utc_now

OTP_TTL = timedelta(minutes=5)

SAMPLE_USERS = [
    ("alice@example.com", "a7c1e2d4-0000-4000-8000-000000000001"),
    ("bob@example.com", "a7c1e2d4-0000-4000-8000-000000000002"),
    ("carol@example.com", None),
]


async def seed() -> None:
    """Insert sample users, each with a fresh 6-digit OTP."""
    await init_db()
    expires = utc_now() + OTP_TTL
    async with async_session_factory() as session:
        session: AsyncSession
        users = [
            User(
                email=email,
                role=role,
                otp=f"{secrets.randbelow(1_000_000):06d}",
                otp_expires=expires,
            )
            for email, role in SAMPLE_USERS
        ]
        session.add_all(users)
        await session.commit()

    print(f"✅ Seeded {len(users)} users into the database.")
    for user in users:
        print(f"   {user.email:<20} id={user.id}  otp={user.otp}")


if __name__ == "__main__":
    asyncio.run(seed())
