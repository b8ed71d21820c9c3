"""Tests for the SessionIssuer: token contents, session rows and cleanup."""

from __future__ import annotations

import re
from datetime import timedelta

import pytest
from sqlalchemy import select

from otp_login.config import Settings
from otp_login.database.repository import SessionRepository, UserRepository
from otp_login.models.session import AuthSession
from otp_login.services.clock import as_utc
from otp_login.services.issuer import SessionIssuer
from otp_login.services.outcomes import RequestContext
from otp_login.services.tokens import decode_access_token

URL_SAFE = re.compile(r"^[A-Za-z0-9_-]{64}$")

CONTEXT = RequestContext(ip="203.0.113.7", user_agent="pytest-agent/1.0", origin="https://app.example.com")


def _issuer(db_session, config, clock) -> SessionIssuer:
    return SessionIssuer(
        UserRepository(db_session), SessionRepository(db_session), config, clock=clock
    )


async def _sessions(db_session) -> dict[str, AuthSession]:
    rows = (await db_session.execute(select(AuthSession))).scalars().all()
    return {row.token: row for row in rows}


# ──────────────────────────────────────────────────────────
# Access token
# ──────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_token_mode_claims(db_session, pending_user, config, clock, now):
    creds = await _issuer(db_session, config, clock).issue(pending_user, CONTEXT, session_mode=False)

    claims = decode_access_token(creds.access_token, config.secret)
    assert claims["id"] == "u1"
    assert claims["role"] == "role-editor"
    assert claims["app_access"] is False
    assert claims["admin_access"] is False
    assert claims["iss"] == "directus"
    assert "session" not in claims
    assert claims["exp"] - claims["iat"] == 15 * 60
    assert creds.expires_in_ms == 900_000
    assert creds.user_id == "u1"
    assert creds.cookie is None


@pytest.mark.asyncio
async def test_session_mode_binds_refresh_token(db_session, pending_user, config, clock, now):
    creds = await _issuer(db_session, config, clock).issue(pending_user, CONTEXT, session_mode=True)

    claims = decode_access_token(creds.access_token, config.secret)
    assert claims["session"] == creds.refresh_token
    assert creds.expires_in_ms == int(config.session_cookie_ttl.total_seconds() * 1000)

    cookie = creds.cookie
    assert cookie is not None
    assert cookie.name == "directus_refresh_token"
    assert cookie.value == creds.refresh_token
    assert cookie.http_only is True
    assert cookie.same_site == "strict"
    assert cookie.secure is False
    assert cookie.expires == now + timedelta(days=7)


@pytest.mark.asyncio
async def test_cookie_is_secure_in_production(db_session, pending_user, clock):
    config = Settings(secret="production-signing-secret-0123456789", environment="production")

    creds = await _issuer(db_session, config, clock).issue(pending_user, CONTEXT, session_mode=True)

    assert creds.cookie.secure is True


@pytest.mark.asyncio
async def test_ttls_come_from_config(db_session, pending_user, clock, now):
    config = Settings(
        secret="ttl-test-signing-secret-0123456789",
        access_token_ttl="2h",
        refresh_token_ttl="30d",
    )

    creds = await _issuer(db_session, config, clock).issue(pending_user, CONTEXT, session_mode=False)

    assert creds.expires_in_ms == 2 * 3_600_000
    assert creds.refresh_token_expires_at == now + timedelta(days=30)


# ──────────────────────────────────────────────────────────
# Refresh token and session row
# ──────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_session_row_records_provenance(db_session, pending_user, config, clock, now):
    creds = await _issuer(db_session, config, clock).issue(pending_user, CONTEXT)
    await db_session.commit()

    assert URL_SAFE.match(creds.refresh_token)
    row = (await _sessions(db_session))[creds.refresh_token]
    assert row.user_id == "u1"
    assert as_utc(row.expires) == now + timedelta(days=7)
    assert row.ip == "203.0.113.7"
    assert row.user_agent == "pytest-agent/1.0"
    assert row.origin == "https://app.example.com"


@pytest.mark.asyncio
async def test_issuance_is_not_idempotent(db_session, pending_user, config, clock):
    issuer = _issuer(db_session, config, clock)

    first = await issuer.issue(pending_user, CONTEXT)
    second = await issuer.issue(pending_user, CONTEXT)
    await db_session.commit()

    assert first.refresh_token != second.refresh_token
    rows = await _sessions(db_session)
    assert {first.refresh_token, second.refresh_token} <= set(rows)
    assert len([r for r in rows.values() if r.user_id == "u1"]) == 2


# ──────────────────────────────────────────────────────────
# Cleanup and challenge reset
# ──────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_expired_sessions_are_purged_store_wide(
    db_session, pending_user, stale_sessions, config, clock
):
    creds = await _issuer(db_session, config, clock).issue(pending_user, CONTEXT)
    await db_session.commit()

    tokens = set(await _sessions(db_session))
    assert "dead-1" not in tokens
    assert "dead-2" not in tokens
    assert "alive-1" in tokens
    assert creds.refresh_token in tokens


@pytest.mark.asyncio
async def test_challenge_is_cleared_and_account_activated(
    db_session, pending_user, config, clock, now
):
    pending_user.otp_attempts = 2
    await db_session.commit()

    await _issuer(db_session, config, clock).issue(pending_user, CONTEXT)
    await db_session.commit()
    await db_session.refresh(pending_user)

    assert pending_user.otp is None
    assert pending_user.otp_expires is None
    assert pending_user.otp_attempts == 0
    assert pending_user.status == "active"
    assert as_utc(pending_user.last_access) == now


@pytest.mark.asyncio
async def test_store_failure_propagates(db_session, pending_user, config, clock, monkeypatch):
    async def boom(self, now):
        raise RuntimeError("disk full")

    monkeypatch.setattr(SessionRepository, "delete_expired", boom)

    with pytest.raises(RuntimeError):
        await _issuer(db_session, config, clock).issue(pending_user, CONTEXT)
