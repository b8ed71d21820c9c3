"""Refresh-token generation and access-token signing."""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import Any

import jwt

# Issuer tag expected by Directus when it validates our access tokens
TOKEN_ISSUER = "directus"
TOKEN_ALGORITHM = "HS256"

REFRESH_TOKEN_LENGTH = 64
URL_SAFE_ALPHABET = (
    "useandom-26T198340PX75pxJACKVERYMINDBUSHWOLF_GQZbfghjklqvwyzrict"
)


def generate_refresh_token(length: int = REFRESH_TOKEN_LENGTH) -> str:
    """Return a random URL-safe token (nanoid alphabet) of *length* characters."""
    return "".join(secrets.choice(URL_SAFE_ALPHABET) for _ in range(length))


def sign_access_token(
    claims: dict[str, Any],
    secret: str,
    ttl: timedelta,
    *,
    now: datetime,
    issuer: str = TOKEN_ISSUER,
) -> str:
    """Sign *claims* as an HS256 JWT that expires *ttl* after *now*."""
    payload = dict(claims)
    payload["iat"] = int(now.timestamp())
    payload["exp"] = int((now + ttl).timestamp())
    payload["iss"] = issuer
    return jwt.encode(payload, secret, algorithm=TOKEN_ALGORITHM)


def decode_access_token(
    token: str, secret: str, *, issuer: str = TOKEN_ISSUER, leeway: int = 0
) -> dict[str, Any]:
    """Verify signature, issuer and expiry; raises ``jwt.InvalidTokenError``."""
    return jwt.decode(
        token,
        key=secret,
        algorithms=[TOKEN_ALGORITHM],
        issuer=issuer,
        leeway=leeway,
        options={"require": ["exp", "iss"]},
    )
