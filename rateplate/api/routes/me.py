from __future__ import annotations

from fastapi import APIRouter, Depends
from rateplate.api.deps import get_current_principal
from rateplate.api.problems import UNAUTHORIZED_RESPONSE
from rateplate.api.schemas.auth import UserResponse
from rateplate.domain import Principal

router = APIRouter(prefix="/me", tags=["authentication"])


@router.get(
    "",
    response_model=UserResponse,
    summary="Get current user",
    responses={401: UNAUTHORIZED_RESPONSE},
)
async def get_me(principal: Principal = Depends(get_current_principal)) -> UserResponse:
    """Return the caller's identity as carried by their token; no database round-trip."""
    return UserResponse(
        id=principal.user_id,
        user_name=principal.user_name,
        email=principal.email,
        first_name=principal.first_name,
        last_name=principal.last_name,
        roles=principal.roles,
    )
