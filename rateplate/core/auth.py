from __future__ import annotations

import uuid
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
import structlog
from rateplate.core.config import Settings, get_settings
from rateplate.domain import IssuedToken, Principal

logger = structlog.get_logger()

RESERVED_CLAIMS = frozenset(
    {
        "sub",
        "unique_name",
        "jti",
        "name",
        "email",
        "given_name",
        "family_name",
        "roles",
        "nbf",
        "exp",
        "iat",
        "iss",
        "aud",
    }
)


class TokenError(Exception):
    """Raised when a token cannot be decoded or validated."""


def build_claims(principal: Principal) -> dict[str, Any]:
    """Assemble the identity and authorization claims embedded in an access token."""
    claims: dict[str, Any] = {
        "sub": principal.user_id,
        "unique_name": principal.user_name,
        "jti": str(uuid.uuid4()),
        "name": principal.user_name,
        "email": principal.email,
        "given_name": principal.first_name,
        "family_name": principal.last_name or "",
        "roles": list(principal.roles),
    }

    for claim_type, values in _group_claims(principal.claims).items():
        if claim_type in RESERVED_CLAIMS:
            logger.warning(
                "supplemental_claim_skipped", user_id=principal.user_id, claim=claim_type
            )
            continue
        claims[claim_type] = values[0] if len(values) == 1 else values

    return claims


def create_access_token(
    principal: Principal,
    *,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> IssuedToken:
    """Generate a signed, time-limited JWT access token for the principal."""
    settings = settings or get_settings()

    issued_at = (now or datetime.now(UTC)).replace(microsecond=0)
    expires_at = issued_at + timedelta(minutes=settings.jwt_expiration_minutes)

    payload = build_claims(principal)
    payload.update(
        {
            "iat": int(issued_at.timestamp()),
            "nbf": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "iss": settings.jwt_issuer,
            "aud": settings.jwt_audience,
        }
    )

    token = jwt.encode(payload, settings.jwt_security_key, algorithm=settings.jwt_algorithm)
    return IssuedToken(
        token=token,
        token_id=payload["jti"],
        not_before=issued_at,
        expires_at=expires_at,
    )


def decode_access_token(token: str, *, settings: Settings | None = None) -> dict[str, Any]:
    """Decode and validate a JWT access token."""
    settings = settings or get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.jwt_security_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            leeway=settings.jwt_clock_skew_seconds,
            options={"require": ["sub", "exp", "nbf", "iss", "aud"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenError("Token expired") from exc
    except jwt.PyJWTError as exc:
        raise TokenError("Invalid token") from exc

    return payload


def principal_from_claims(payload: dict[str, Any]) -> Principal:
    """Rebuild the request principal from verified token claims."""
    roles = payload.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]

    supplemental: list[tuple[str, str]] = []
    for claim_type, value in payload.items():
        if claim_type in RESERVED_CLAIMS:
            continue
        values = value if isinstance(value, list) else [value]
        supplemental.extend((claim_type, str(item)) for item in values)

    try:
        return Principal(
            user_id=payload["sub"],
            user_name=payload.get("unique_name"),
            email=payload.get("email"),
            first_name=payload.get("given_name", ""),
            last_name=payload.get("family_name") or None,
            roles=list(roles),
            claims=supplemental,
        )
    except (KeyError, ValueError) as exc:
        raise TokenError("Token missing identity claims") from exc


def _group_claims(claims: Iterable[tuple[str, str]]) -> dict[str, list[str]]:
    grouped: dict[str, list[str]] = {}
    for claim_type, value in claims:
        grouped.setdefault(claim_type, []).append(value)
    return grouped
