"""SQLAlchemy model for issued refresh-token sessions."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from otp_login.models.user import Base


class AuthSession(Base):
    """One refresh token handed out by a successful login.

    Rows are inserted once and never updated; a row whose ``expires`` has
    passed is dead and gets purged on a later login.
    """

    __tablename__ = "directus_sessions"

    token: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        "user",
        String(36),
        ForeignKey("directus_users.id", ondelete="CASCADE"),
        nullable=False,
    )
    expires: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ip: Mapped[str | None] = mapped_column(String(255))
    user_agent: Mapped[str | None] = mapped_column(String(255))
    origin: Mapped[str | None] = mapped_column(String(255))

    __table_args__ = (Index("ix_directus_sessions_expires", "expires"),)

    def __repr__(self) -> str:
        return f"<AuthSession user={self.user_id} expires={self.expires.isoformat()}>"
