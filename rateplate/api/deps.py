from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Sequence
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from rateplate.core.auth import TokenError, decode_access_token, principal_from_claims
from rateplate.domain import Principal
from rateplate.infrastructure.db.session import get_session
from rateplate.infrastructure.repositories import UnitOfWork
from sqlalchemy.ext.asyncio import AsyncSession

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
) -> Principal:
    """Resolve the authenticated principal from a bearer token."""
    if credentials is None:
        raise _unauthorized("Missing bearer token")

    try:
        payload = decode_access_token(credentials.credentials)
        return principal_from_claims(payload)
    except TokenError as exc:
        raise _unauthorized(str(exc)) from exc


def require_roles(required_roles: Sequence[str]) -> Callable[[Principal], Principal]:
    """Dependency factory enforcing that the principal holds one of the required roles."""
    required = set(required_roles)
    if not required:
        raise ValueError("At least one role is required")

    def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:  # noqa: B008
        if not any(principal.has_role(role) for role in required):
            raise _forbidden("Insufficient role privileges")
        return principal

    return dependency


def require_claim(
    claim_type: str, value: str | None = None
) -> Callable[[Principal], Principal]:
    """Dependency factory enforcing that the principal carries a claim, optionally with a value."""

    def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:  # noqa: B008
        values = principal.claim_values(claim_type)
        if not values or (value is not None and value not in values):
            raise _forbidden(f"Missing required claim '{claim_type}'")
        return principal

    return dependency


def parse_guid(value: str) -> str | None:
    """Canonical form of a GUID path segment, or None when it is not one."""
    try:
        return str(UUID(value))
    except ValueError:
        return None


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session for API handlers."""
    async for session in get_session():
        yield session


async def get_uow(session: AsyncSession = Depends(get_db_session)) -> UnitOfWork:  # noqa: B008
    """Wrap the request session in a unit of work exposing the repositories."""
    return UnitOfWork(session)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
