"""OTP verification endpoint: exchanges a valid code for access and refresh tokens."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from otp_login.config import settings
from otp_login.database.engine import get_session
from otp_login.services.otp_login import LoginRequest, OtpLoginService
from otp_login.services.outcomes import Failure, RequestContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth/otp", tags=["otp"])


# ── Request model ────────────────────────────────────────

class OTPVerifyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(default=None, alias="userId")
    otp: str | None = None
    session: bool = False


# ── Endpoints ────────────────────────────────────────────

@router.post("/verify")
async def verify_otp(
    body: OTPVerifyRequest,
    request: Request,
    db_session: AsyncSession = Depends(get_session),
) -> JSONResponse:
    """Verify an OTP and, on success, return a fresh token pair.

    With ``"session": true`` the refresh token is bound into the access
    token and also set as an http-only cookie.
    """
    context = RequestContext(
        ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
        origin=request.headers.get("origin"),
    )
    service = OtpLoginService(db_session, settings)
    result = await service.login(
        LoginRequest(
            user_id=body.user_id,
            otp=body.otp,
            session_mode=body.session,
            context=context,
        )
    )

    if isinstance(result, Failure):
        return JSONResponse(status_code=result.status_code, content=result.to_payload())

    response = JSONResponse(content={"data": result.to_payload()})
    if result.cookie is not None:
        cookie = result.cookie
        response.set_cookie(
            key=cookie.name,
            value=cookie.value,
            expires=cookie.expires,
            httponly=cookie.http_only,
            secure=cookie.secure,
            samesite=cookie.same_site,
        )
    return response
