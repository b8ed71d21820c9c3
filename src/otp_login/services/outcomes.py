"""Result types for the OTP login flow.

Expected failures travel as :class:`Failure` values rather than exceptions,
so callers branch on the returned type::

    outcome = await verifier.verify(user_id, otp)
    if isinstance(outcome, Failure):
        ...
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from otp_login.models.user import User

# Front-end step the caller should go back to when the challenge is dead
RESTART_STEP = "enter-email"


class FailureKind(StrEnum):
    BAD_REQUEST = "bad_request"
    INVALID_USER = "invalid_user"
    TOO_MANY_ATTEMPTS = "too_many_attempts"
    INVALID_OTP = "invalid_otp"
    EXPIRED = "expired"
    INTERNAL = "internal"


_STATUS_CODES = {
    FailureKind.BAD_REQUEST: 400,
    FailureKind.INTERNAL: 500,
}


@dataclass(frozen=True)
class Failure:
    """A login attempt that did not produce credentials."""

    kind: FailureKind
    message: str
    step: str | None = None

    @property
    def status_code(self) -> int:
        return _STATUS_CODES.get(self.kind, 403)

    def to_payload(self) -> dict[str, str]:
        payload = {"message": self.message}
        if self.step is not None:
            payload["step"] = self.step
        return payload


BAD_REQUEST = Failure(FailureKind.BAD_REQUEST, "userId and otp are required")
INVALID_USER = Failure(FailureKind.INVALID_USER, "Invalid user")
TOO_MANY_ATTEMPTS = Failure(
    FailureKind.TOO_MANY_ATTEMPTS, "Too many attempts", step=RESTART_STEP
)
INVALID_OTP = Failure(FailureKind.INVALID_OTP, "Invalid OTP")
EXPIRED = Failure(FailureKind.EXPIRED, "OTP expired", step=RESTART_STEP)
INTERNAL = Failure(FailureKind.INTERNAL, "Internal server error")


@dataclass(frozen=True)
class Accepted:
    """The submitted code matched a live challenge."""

    user: User


@dataclass(frozen=True)
class RequestContext:
    """Provenance recorded on the session row, taken verbatim from the request."""

    ip: str | None = None
    user_agent: str | None = None
    origin: str | None = None


@dataclass(frozen=True)
class RefreshCookie:
    """Instruction for the transport to set the refresh-token cookie."""

    name: str
    value: str
    expires: datetime
    secure: bool
    http_only: bool = True
    same_site: str = "strict"


@dataclass(frozen=True)
class Credentials:
    """Everything a successful login hands back."""

    access_token: str
    refresh_token: str
    expires_in_ms: int
    user_id: str
    refresh_token_expires_at: datetime
    cookie: RefreshCookie | None = None

    def to_payload(self) -> dict[str, object]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_in_ms": self.expires_in_ms,
            "id": self.user_id,
        }


VerificationOutcome = Accepted | Failure
LoginResult = Credentials | Failure
