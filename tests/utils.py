from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

from rateplate.core.auth import create_access_token
from rateplate.domain import Principal
from rateplate.domain.services.auth_service import hash_password
from rateplate.infrastructure.db.models import (
    RatingModel,
    RestaurantModel,
    RoleModel,
    UserClaimModel,
    UserModel,
)
from rateplate.infrastructure.repositories.users import normalize
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

DEFAULT_PASSWORD = "secret-password"


async def create_restaurant(
    session_factory: async_sessionmaker[AsyncSession], *, name: str, city: str | None = "Roma"
) -> str:
    async with session_factory() as session:
        restaurant = RestaurantModel(
            name=name,
            phone_number="+39 06 000000",
            address_location="Via Roma 1",
            address_postal_code="00100",
            address_city=city,
            address_province="RM",
            address_country="Italy",
        )
        session.add(restaurant)
        await session.commit()
        return restaurant.id


async def create_user(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    email: str,
    first_name: str = "Test",
    last_name: str | None = "User",
    password: str = DEFAULT_PASSWORD,
    roles: Sequence[str] = (),
    claims: Sequence[tuple[str, str]] = (),
) -> str:
    async with session_factory() as session:
        user = UserModel(
            user_name=email,
            normalized_user_name=normalize(email),
            email=email,
            normalized_email=normalize(email),
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            roles=[RoleModel(name=role, normalized_name=normalize(role)) for role in roles],
            claims=[
                UserClaimModel(claim_type=claim_type, claim_value=value)
                for claim_type, value in claims
            ],
        )
        session.add(user)
        await session.commit()
        return user.id


async def add_rating(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    restaurant_id: str,
    user_id: str,
    score: float,
    created_at: datetime,
    comment: str | None = None,
) -> str:
    async with session_factory() as session:
        rating = RatingModel(
            restaurant_id=restaurant_id,
            user_id=user_id,
            score=score,
            comment=comment,
            created_at=created_at,
        )
        session.add(rating)
        await session.commit()
        return rating.id


def timestamp(minute: int) -> datetime:
    """Fixed UTC instant; a larger minute is more recent."""
    return datetime(2026, 1, 1, 12, minute, tzinfo=UTC)


def auth_headers(
    user_id: str = "user-1",
    *,
    email: str = "user@example.com",
    roles: Sequence[str] = (),
    claims: Sequence[tuple[str, str]] = (),
) -> dict[str, str]:
    principal = Principal(
        user_id=user_id,
        user_name=email,
        email=email,
        first_name="Test",
        last_name="User",
        roles=list(roles),
        claims=list(claims),
    )
    issued = create_access_token(principal)
    return {"Authorization": f"Bearer {issued.token}"}
