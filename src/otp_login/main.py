"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from otp_login.api.otp import router as otp_router
from otp_login.config import settings
from otp_login.database.engine import init_db
from otp_login.exceptions import register_exception_handlers

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle hook."""
    logger.info("Starting %s (%s) …", settings.app_name, settings.environment)
    await init_db()
    logger.info("Database initialised")
    yield
    logger.info("Shutting down %s …", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    description="OTP second-factor verification issuing access and refresh tokens",
    version="0.1.0",
    lifespan=lifespan,
)

register_exception_handlers(app)
app.include_router(otp_router)


@app.get("/health")
async def health_check():
    """Simple liveness probe."""
    return {"status": "healthy", "app": settings.app_name}
