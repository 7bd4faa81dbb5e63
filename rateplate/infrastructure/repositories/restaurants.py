from __future__ import annotations

from rateplate.domain.models import Address, ListResult, Restaurant
from rateplate.infrastructure.db.models import RestaurantModel
from rateplate.infrastructure.repositories.pagination import fetch_page
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


def _to_restaurant(row: RestaurantModel) -> Restaurant:
    address = row.address
    if address is not None and not any(
        (address.location, address.postal_code, address.city, address.province, address.country)
    ):
        address = None

    return Restaurant(
        restaurant_id=row.id,
        name=row.name,
        address=Address(
            location=address.location,
            postal_code=address.postal_code,
            city=address.city,
            province=address.province,
            country=address.country,
        )
        if address is not None
        else None,
        phone_number=row.phone_number,
        email=row.email,
        website_url=row.website_url,
    )


class SQLAlchemyRestaurantRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_restaurants(
        self, *, page_index: int, items_per_page: int
    ) -> ListResult[Restaurant]:
        return await fetch_page(
            self.session,
            select(RestaurantModel),
            page_index=page_index,
            items_per_page=items_per_page,
            order_by=(RestaurantModel.name, RestaurantModel.id),
            mapper=_to_restaurant,
        )

    async def get(self, restaurant_id: str) -> Restaurant | None:
        row = await self.session.get(RestaurantModel, restaurant_id)
        return _to_restaurant(row) if row is not None else None

    async def exists(self, restaurant_id: str) -> bool:
        found = await self.session.scalar(
            select(RestaurantModel.id).where(RestaurantModel.id == restaurant_id)
        )
        return found is not None
