from __future__ import annotations

from datetime import UTC, datetime

from rateplate.domain.models import ListResult, Rating
from rateplate.infrastructure.db.models import RatingModel
from rateplate.infrastructure.repositories.pagination import fetch_page
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload


def display_name(first_name: str | None, last_name: str | None) -> str:
    """Join first and last name into a trimmed display string; never None."""
    return f"{first_name or ''} {last_name or ''}".strip()


def as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back; every stored timestamp is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _to_rating(row: RatingModel) -> Rating:
    user = row.user
    return Rating(
        rating_id=row.id,
        score=row.score,
        comment=row.comment,
        date=as_utc(row.created_at),
        user=display_name(user.first_name, user.last_name) if user is not None else "",
    )


class SQLAlchemyRatingRepository:
    """Rating persistence backed by an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_for_restaurant(
        self, restaurant_id: str, *, page_index: int, items_per_page: int
    ) -> ListResult[Rating]:
        query = select(RatingModel).where(RatingModel.restaurant_id == restaurant_id)
        return await fetch_page(
            self.session,
            query,
            page_index=page_index,
            items_per_page=items_per_page,
            order_by=(RatingModel.created_at.desc(), RatingModel.id.desc()),
            options=(joinedload(RatingModel.user),),
            mapper=_to_rating,
        )

    async def get_for_restaurant(self, restaurant_id: str, rating_id: str) -> Rating | None:
        stmt = (
            select(RatingModel)
            .where(RatingModel.id == rating_id, RatingModel.restaurant_id == restaurant_id)
            .options(joinedload(RatingModel.user))
        )
        row = await self.session.scalar(stmt)
        return _to_rating(row) if row is not None else None

    async def add(
        self,
        *,
        restaurant_id: str,
        user_id: str,
        score: float,
        comment: str | None,
        created_at: datetime,
    ) -> str:
        rating = RatingModel(
            restaurant_id=restaurant_id,
            user_id=user_id,
            score=score,
            comment=comment,
            created_at=created_at,
        )
        self.session.add(rating)
        await self.session.flush()
        return rating.id

    async def average_score(self, restaurant_id: str) -> float | None:
        stmt = select(func.avg(RatingModel.score)).where(RatingModel.restaurant_id == restaurant_id)
        average = await self.session.scalar(stmt)
        return float(average) if average is not None else None
