"""OTP login service: runs the verifier and, on success, the issuer."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from otp_login.config import Settings
from otp_login.database.repository import SessionRepository, UserRepository
from otp_login.services import outcomes
from otp_login.services.clock import Clock, utc_now
from otp_login.services.issuer import SessionIssuer
from otp_login.services.outcomes import Failure, LoginResult, RequestContext
from otp_login.services.verifier import OtpVerifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginRequest:
    """One OTP submission as seen by the service."""

    user_id: str | None
    otp: str | None
    session_mode: bool = False
    context: RequestContext = RequestContext()


class OtpLoginService:
    """Verifies an OTP submission and issues credentials within one DB session.

    Rejections are committed too, so a failed guess keeps its attempt count.
    Anything unexpected is rolled back, logged here once and reported as
    ``INTERNAL``; no credentials are returned unless every write committed.
    """

    def __init__(
        self,
        db_session: AsyncSession,
        config: Settings,
        clock: Clock = utc_now,
    ) -> None:
        self._db = db_session
        users = UserRepository(db_session)
        self._verifier = OtpVerifier(users, config, clock=clock)
        self._issuer = SessionIssuer(users, SessionRepository(db_session), config, clock=clock)

    async def login(self, request: LoginRequest) -> LoginResult:
        try:
            outcome = await self._verifier.verify(request.user_id, request.otp)
            if isinstance(outcome, Failure):
                await self._db.commit()
                return outcome

            credentials = await self._issuer.issue(
                outcome.user, request.context, request.session_mode
            )
            await self._db.commit()
            return credentials
        except Exception:
            logger.exception("OTP login failed for user %s", request.user_id)
            await self._db.rollback()
            return outcomes.INTERNAL
