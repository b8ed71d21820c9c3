"""Exception handlers: keep every error body in the ``{"message": ...}`` shape."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from otp_login.services import outcomes

logger = logging.getLogger(__name__)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies are caller errors, same as a missing ``userId``/``otp``."""
    logger.info("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=outcomes.BAD_REQUEST.to_payload(),
    )


async def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort for errors raised outside the login service; no details leak."""
    logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=outcomes.INTERNAL.to_payload(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unexpected_exception_handler)
