"""Session issuer: mints tokens and records the session after a verified OTP."""

from __future__ import annotations

import logging
from collections.abc import Callable

from otp_login.config import Settings
from otp_login.database.repository import SessionRepository, UserRepository
from otp_login.durations import to_milliseconds
from otp_login.models.session import AuthSession
from otp_login.models.user import User
from otp_login.services.clock import Clock, utc_now
from otp_login.services.outcomes import Credentials, RefreshCookie, RequestContext
from otp_login.services.tokens import generate_refresh_token, sign_access_token

logger = logging.getLogger(__name__)


class SessionIssuer:
    """Turns an accepted OTP into an access token plus a stored refresh session.

    Every call creates a fresh refresh token and a new session row; nothing
    is reused.  Store or signing errors propagate so the caller can roll the
    whole issuance back.
    """

    def __init__(
        self,
        users: UserRepository,
        sessions: SessionRepository,
        config: Settings,
        clock: Clock = utc_now,
        token_factory: Callable[[], str] = generate_refresh_token,
    ) -> None:
        self._users = users
        self._sessions = sessions
        self._config = config
        self._clock = clock
        self._token_factory = token_factory

    async def issue(
        self, user: User, context: RequestContext, session_mode: bool = False
    ) -> Credentials:
        """Mint credentials for *user*.

        In session mode the refresh token is also embedded in the access
        token as ``session`` and returned as a cookie instruction.
        """
        now = self._clock()
        user_id = user.id

        claims: dict[str, object] = {
            "id": user_id,
            "role": user.role,
            "app_access": False,
            "admin_access": False,
        }

        refresh_token = self._token_factory()
        refresh_expires = now + self._config.refresh_token_ttl

        if session_mode:
            claims["session"] = refresh_token
            access_ttl = self._config.session_cookie_ttl
        else:
            access_ttl = self._config.access_token_ttl

        access_token = sign_access_token(claims, self._config.secret, access_ttl, now=now)

        await self._sessions.insert(
            AuthSession(
                token=refresh_token,
                user_id=user_id,
                expires=refresh_expires,
                ip=context.ip,
                user_agent=context.user_agent,
                origin=context.origin,
            )
        )

        purged = await self._sessions.delete_expired(now)
        if purged:
            logger.debug("Purged %d expired sessions", purged)

        await self._users.reset_challenge_and_activate(user_id, now)

        cookie = None
        if session_mode:
            cookie = RefreshCookie(
                name=self._config.refresh_token_cookie_name,
                value=refresh_token,
                expires=refresh_expires,
                secure=self._config.is_production,
            )

        logger.info(
            "Issued %s session for user %s (expires %s)",
            "cookie" if session_mode else "token",
            user_id,
            refresh_expires.isoformat(),
        )
        return Credentials(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in_ms=to_milliseconds(access_ttl),
            user_id=user_id,
            refresh_token_expires_at=refresh_expires,
            cookie=cookie,
        )
