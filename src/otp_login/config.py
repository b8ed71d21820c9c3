"""OTP Login: configuration loaded from environment."""

from datetime import timedelta

from pydantic import field_validator
from pydantic_settings import BaseSettings

from otp_login.durations import parse_duration


class Settings(BaseSettings):
    """Application-wide settings, loaded from .env or environment variables."""

    # ── Tokens ────────────────────────────────────────────
    secret: str
    refresh_token_ttl: timedelta = timedelta(days=7)
    access_token_ttl: timedelta = timedelta(minutes=15)
    session_cookie_ttl: timedelta = timedelta(days=1)
    refresh_token_cookie_name: str = "directus_refresh_token"

    # ── OTP challenge ─────────────────────────────────────
    otp_max_attempts: int = 3

    # ── Database ──────────────────────────────────────────
    database_url: str = "sqlite+aiosqlite:///./otp_login.db"

    # ── App ───────────────────────────────────────────────
    app_name: str = "OTP Login"
    environment: str = "development"
    debug: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @field_validator("secret")
    @classmethod
    def secret_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("SECRET must not be empty")
        return value

    @field_validator(
        "refresh_token_ttl", "access_token_ttl", "session_cookie_ttl", mode="before"
    )
    @classmethod
    def parse_ttl(cls, value: object) -> object:
        """Accept ``ms``-style strings (``"15m"``, ``"7d"``) as well as timedeltas."""
        if isinstance(value, str):
            return parse_duration(value)
        return value

    @field_validator("refresh_token_ttl", "access_token_ttl", "session_cookie_ttl")
    @classmethod
    def ttl_positive(cls, value: timedelta) -> timedelta:
        if value <= timedelta(0):
            raise ValueError("token lifetimes must be positive")
        return value

    @field_validator("otp_max_attempts")
    @classmethod
    def attempts_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("OTP_MAX_ATTEMPTS must be at least 1")
        return value

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"


# Singleton settings instance
settings = Settings()
