from __future__ import annotations

import uuid

import pytest
from rateplate.domain.services import (
    InvalidArgumentError,
    RestaurantNotFoundError,
    RestaurantsService,
)
from rateplate.infrastructure.db.models import RestaurantModel
from rateplate.infrastructure.repositories import UnitOfWork
from tests.utils import create_restaurant


@pytest.mark.asyncio
async def test_restaurants_listed_by_name(uow: UnitOfWork, session_factory) -> None:
    for name in ["Zuma", "Al Pompiere", "Marzapane"]:
        await create_restaurant(session_factory, name=name)

    result = await RestaurantsService(uow).list_restaurants(page_index=0, items_per_page=2)

    assert [restaurant.name for restaurant in result.items] == ["Al Pompiere", "Marzapane"]
    assert result.total_count == 3
    assert result.has_more is True


@pytest.mark.asyncio
async def test_empty_catalogue(uow: UnitOfWork) -> None:
    result = await RestaurantsService(uow).list_restaurants(page_index=0, items_per_page=20)

    assert result.items == []
    assert result.total_count == 0
    assert result.has_more is False


@pytest.mark.asyncio
async def test_list_rejects_zero_page_size(uow: UnitOfWork) -> None:
    with pytest.raises(InvalidArgumentError):
        await RestaurantsService(uow).list_restaurants(page_index=0, items_per_page=0)


@pytest.mark.asyncio
async def test_get_restaurant_with_address(uow: UnitOfWork, restaurant_id: str) -> None:
    restaurant = await RestaurantsService(uow).get_restaurant(restaurant_id)

    assert restaurant.restaurant_id == restaurant_id
    assert restaurant.name == "Trattoria da Enzo"
    assert restaurant.address is not None
    assert restaurant.address.city == "Roma"
    assert restaurant.address.country == "Italy"


@pytest.mark.asyncio
async def test_restaurant_without_address(uow: UnitOfWork, session_factory) -> None:
    async with session_factory() as session:
        row = RestaurantModel(name="Food Truck")
        session.add(row)
        await session.commit()

    restaurant = await RestaurantsService(uow).get_restaurant(row.id)

    assert restaurant.address is None


@pytest.mark.asyncio
async def test_get_unknown_restaurant(uow: UnitOfWork) -> None:
    with pytest.raises(RestaurantNotFoundError):
        await RestaurantsService(uow).get_restaurant(str(uuid.uuid4()))
