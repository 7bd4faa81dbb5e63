"""Rating queries and submission."""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal

import structlog
from rateplate.domain.models import ListResult, NewRating, Rating
from rateplate.domain.services.common import check_page_bounds
from rateplate.domain.services.restaurants import RestaurantNotFoundError
from rateplate.infrastructure.repositories import UnitOfWork

logger = structlog.get_logger()

_TWO_PLACES = Decimal("0.01")


class RatingNotFoundError(Exception):
    """Raised when a rating does not exist under the given restaurant."""


def round_score(value: float) -> float:
    """Round an average to two decimals, ties away from zero (4.125 -> 4.13)."""
    # Decimal(str(x)) uses the shortest repr, so 1.005 rounds to 1.01 rather than 1.0
    return float(Decimal(str(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


class RatingsService:
    """Service for listing, reading and submitting restaurant ratings."""

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def list_ratings(
        self, restaurant_id: str, *, page_index: int, items_per_page: int
    ) -> ListResult[Rating]:
        check_page_bounds(page_index, items_per_page)

        await logger.adebug(
            "ratings_list",
            restaurant_id=restaurant_id,
            page_index=page_index,
            items_per_page=items_per_page,
        )
        result = await self.uow.ratings.list_for_restaurant(
            restaurant_id, page_index=page_index, items_per_page=items_per_page
        )
        await logger.adebug(
            "ratings_listed", restaurant_id=restaurant_id, total_count=result.total_count
        )
        return result

    async def get_rating(self, restaurant_id: str, rating_id: str) -> Rating:
        rating = await self.uow.ratings.get_for_restaurant(restaurant_id, rating_id)
        if rating is None:
            await logger.ainfo(
                "rating_not_found", restaurant_id=restaurant_id, rating_id=rating_id
            )
            raise RatingNotFoundError(f"Rating {rating_id} not found")
        return rating

    async def rate(
        self,
        restaurant_id: str,
        *,
        score: float,
        comment: str | None,
        user_id: str,
    ) -> NewRating:
        """
        Store a rating and return the restaurant's refreshed average.

        The average is recomputed over every stored score after the commit,
        so it always matches persisted state at read time. Concurrent
        submitters may each see a different committed snapshot.
        """
        if not await self.uow.restaurants.exists(restaurant_id):
            raise RestaurantNotFoundError(f"Restaurant {restaurant_id} not found")

        rating_id = await self.uow.ratings.add(
            restaurant_id=restaurant_id,
            user_id=user_id,
            score=score,
            comment=comment,
            created_at=datetime.now(UTC),
        )
        await self.uow.commit()

        average = await self.uow.ratings.average_score(restaurant_id)
        average_score = round_score(average if average is not None else score)

        await logger.ainfo(
            "rating_created",
            rating_id=rating_id,
            restaurant_id=restaurant_id,
            user_id=user_id,
            average_score=average_score,
        )
        return NewRating(restaurant_id=restaurant_id, average_score=average_score)
