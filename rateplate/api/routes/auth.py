"""Authentication routes - register and login."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from rateplate.api.deps import get_uow
from rateplate.api.schemas.auth import (
    AuthResponse,
    IdentityErrorResponse,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    RegistrationErrorResponse,
    UserResponse,
)
from rateplate.domain.services import AuthService, InvalidCredentialsError, RegistrationError
from rateplate.infrastructure.repositories import UnitOfWork

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Create a new user account; the email doubles as the user name.",
    responses={400: {"model": RegistrationErrorResponse}},
)
async def register(
    payload: RegisterRequest,
    uow: UnitOfWork = Depends(get_uow),
) -> RegisterResponse | JSONResponse:
    """Register a new user."""
    service = AuthService(uow)

    try:
        principal = await service.register_user(
            email=payload.email,
            password=payload.password,
            first_name=payload.first_name,
            last_name=payload.last_name,
        )
    except RegistrationError as exc:
        body = RegistrationErrorResponse(
            errors=[
                IdentityErrorResponse(code=error.code, description=error.description)
                for error in exc.errors
            ]
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=body.model_dump(by_alias=True),
        )

    return RegisterResponse(
        user=UserResponse(
            id=principal.user_id,
            user_name=principal.user_name,
            email=principal.email,
            first_name=principal.first_name,
            last_name=principal.last_name,
            roles=principal.roles,
        )
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="User login",
    description="Authenticate with user name or email and password; returns a JWT bearer token.",
)
async def login(
    payload: LoginRequest,
    uow: UnitOfWork = Depends(get_uow),
) -> AuthResponse:
    """Authenticate user and return a token."""
    service = AuthService(uow)

    try:
        issued = await service.login(login=payload.email, password=payload.password)
    except InvalidCredentialsError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    return AuthResponse(token=issued.token, expires_at=issued.expires_at)
