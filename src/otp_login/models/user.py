"""SQLAlchemy User model."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Directus account statuses this service writes
STATUS_UNVERIFIED = "unverified"
STATUS_ACTIVE = "active"


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""


class User(Base):
    """An account that may hold a pending OTP challenge.

    ``otp``, ``otp_expires`` and ``otp_attempts`` only mean something while
    ``otp`` is set; they are written by whatever issues the code and cleared
    here once the code is accepted.
    """

    __tablename__ = "directus_users"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid4())
    )
    email: Mapped[str | None] = mapped_column(String(128), unique=True)
    role: Mapped[str | None] = mapped_column(String(36), doc="Authorization role id")
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=STATUS_UNVERIFIED
    )
    otp: Mapped[str | None] = mapped_column(String(32))
    otp_expires: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    otp_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_access: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} status={self.status!r}>"
