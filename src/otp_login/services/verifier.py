"""OTP verifier: checks a submitted code against the user's pending challenge."""

from __future__ import annotations

import logging

from otp_login.config import Settings
from otp_login.database.repository import UserRepository
from otp_login.services import outcomes
from otp_login.services.clock import Clock, as_utc, utc_now
from otp_login.services.outcomes import Accepted, VerificationOutcome

logger = logging.getLogger(__name__)


class OtpVerifier:
    """Decides whether a ``(user_id, otp)`` pair opens a session.

    Checks run in a fixed order:

    1. unknown user                         → ``INVALID_USER``
    2. attempts already at the limit        → ``TOO_MANY_ATTEMPTS``
    3. code mismatch (attempt is counted)   → ``INVALID_OTP``
    4. matching code past ``otp_expires``   → ``EXPIRED``

    Expiry is only looked at once the code matches, so a wrong guess on a
    dead challenge still reports ``INVALID_OTP`` and still burns an attempt.
    The attempt increment is the only write this class performs.
    """

    def __init__(
        self,
        users: UserRepository,
        config: Settings,
        clock: Clock = utc_now,
    ) -> None:
        self._users = users
        self._max_attempts = config.otp_max_attempts
        self._clock = clock

    async def verify(self, user_id: str | None, otp: str | None) -> VerificationOutcome:
        if not user_id or not otp:
            return outcomes.BAD_REQUEST

        user = await self._users.find_by_id(user_id)
        if user is None:
            logger.info("OTP submitted for unknown user %s", user_id)
            return outcomes.INVALID_USER

        if user.otp_attempts >= self._max_attempts:
            logger.info("User %s is out of OTP attempts", user_id)
            return outcomes.TOO_MANY_ATTEMPTS

        if user.otp != otp:
            attempt = user.otp_attempts + 1
            await self._users.increment_otp_attempts(user_id)
            logger.info(
                "Invalid OTP for user %s (attempt %d of %d)",
                user_id,
                attempt,
                self._max_attempts,
            )
            return outcomes.INVALID_OTP

        if user.otp_expires is None or as_utc(user.otp_expires) < self._clock():
            logger.info("Expired OTP for user %s", user_id)
            return outcomes.EXPIRED

        return Accepted(user=user)
