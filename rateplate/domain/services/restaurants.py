from __future__ import annotations

import structlog
from rateplate.domain.models import ListResult, Restaurant
from rateplate.domain.services.common import check_page_bounds
from rateplate.infrastructure.repositories import UnitOfWork

logger = structlog.get_logger()


class RestaurantNotFoundError(Exception):
    """Raised when a restaurant does not exist."""


class RestaurantsService:
    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def list_restaurants(
        self, *, page_index: int, items_per_page: int
    ) -> ListResult[Restaurant]:
        check_page_bounds(page_index, items_per_page)
        return await self.uow.restaurants.list_restaurants(
            page_index=page_index, items_per_page=items_per_page
        )

    async def get_restaurant(self, restaurant_id: str) -> Restaurant:
        restaurant = await self.uow.restaurants.get(restaurant_id)
        if restaurant is None:
            await logger.ainfo("restaurant_not_found", restaurant_id=restaurant_id)
            raise RestaurantNotFoundError(f"Restaurant {restaurant_id} not found")
        return restaurant
