"""Restaurant and rating endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status
from rateplate.api.deps import get_current_principal, get_uow, parse_guid
from rateplate.api.problems import UNAUTHORIZED_RESPONSE
from rateplate.api.schemas.common import ListResponse
from rateplate.api.schemas.restaurants import (
    AddressResponse,
    NewRatingResponse,
    RatingRequest,
    RatingResponse,
    RestaurantResponse,
)
from rateplate.core.config import get_settings
from rateplate.domain import Principal, Rating, Restaurant
from rateplate.domain.services import (
    InvalidArgumentError,
    RatingNotFoundError,
    RatingsService,
    RestaurantNotFoundError,
    RestaurantsService,
)
from rateplate.infrastructure.repositories import UnitOfWork

router = APIRouter(prefix="/restaurants", tags=["Restaurants"])

GUID_DESCRIPTION = "GUID; any other value is reported as not found"


def _page_size() -> int:
    return get_settings().default_page_size


def _restaurant_response(restaurant: Restaurant) -> RestaurantResponse:
    address = restaurant.address
    return RestaurantResponse(
        id=restaurant.restaurant_id,
        name=restaurant.name,
        address=AddressResponse(
            location=address.location,
            postal_code=address.postal_code,
            city=address.city,
            province=address.province,
            country=address.country,
        )
        if address is not None
        else None,
        phone_number=restaurant.phone_number,
        email=restaurant.email,
        website_url=restaurant.website_url,
    )


def _rating_response(rating: Rating) -> RatingResponse:
    return RatingResponse(
        id=rating.rating_id,
        score=rating.score,
        comment=rating.comment,
        date=rating.date,
        user=rating.user,
    )


def _bad_request(exc: InvalidArgumentError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def _not_found() -> Response:
    return Response(status_code=status.HTTP_404_NOT_FOUND)


@router.get("", response_model=ListResponse[RestaurantResponse], summary="List restaurants")
async def list_restaurants(
    page: int = Query(0, description="Zero-based page index"),
    size: int | None = Query(None, description="Items per page"),
    uow: UnitOfWork = Depends(get_uow),
) -> ListResponse[RestaurantResponse]:
    """Return a page of restaurants ordered by name."""
    service = RestaurantsService(uow)
    try:
        result = await service.list_restaurants(
            page_index=page, items_per_page=size if size is not None else _page_size()
        )
    except InvalidArgumentError as exc:
        raise _bad_request(exc) from exc

    return ListResponse[RestaurantResponse](
        items=[_restaurant_response(item) for item in result.items],
        total_count=result.total_count,
        has_more=result.has_more,
    )


@router.get(
    "/{restaurant_id}",
    response_model=RestaurantResponse,
    summary="Get a restaurant",
    responses={404: {"description": "Restaurant not found"}},
)
async def get_restaurant(
    restaurant_id: str = Path(..., description=GUID_DESCRIPTION),
    uow: UnitOfWork = Depends(get_uow),
) -> RestaurantResponse | Response:
    key = parse_guid(restaurant_id)
    if key is None:
        return _not_found()

    service = RestaurantsService(uow)
    try:
        restaurant = await service.get_restaurant(key)
    except RestaurantNotFoundError:
        return _not_found()

    return _restaurant_response(restaurant)


@router.get(
    "/{restaurant_id}/ratings",
    response_model=ListResponse[RatingResponse],
    summary="List ratings of a restaurant",
    responses={404: {"description": "Restaurant id is not a GUID"}},
)
async def list_ratings(
    restaurant_id: str = Path(..., description=GUID_DESCRIPTION),
    page: int = Query(0, description="Zero-based page index"),
    size: int | None = Query(None, description="Items per page"),
    uow: UnitOfWork = Depends(get_uow),
) -> ListResponse[RatingResponse] | Response:
    """Return a page of ratings for the restaurant, newest first."""
    key = parse_guid(restaurant_id)
    if key is None:
        return _not_found()

    service = RatingsService(uow)
    try:
        result = await service.list_ratings(
            key,
            page_index=page,
            items_per_page=size if size is not None else _page_size(),
        )
    except InvalidArgumentError as exc:
        raise _bad_request(exc) from exc

    return ListResponse[RatingResponse](
        items=[_rating_response(item) for item in result.items],
        total_count=result.total_count,
        has_more=result.has_more,
    )


@router.get(
    "/{restaurant_id}/ratings/{rating_id}",
    response_model=RatingResponse,
    summary="Get a rating",
    responses={404: {"description": "Rating not found for this restaurant"}},
)
async def get_rating(
    restaurant_id: str = Path(..., description=GUID_DESCRIPTION),
    rating_id: str = Path(..., description=GUID_DESCRIPTION),
    uow: UnitOfWork = Depends(get_uow),
) -> RatingResponse | Response:
    restaurant_key = parse_guid(restaurant_id)
    rating_key = parse_guid(rating_id)
    if restaurant_key is None or rating_key is None:
        return _not_found()

    service = RatingsService(uow)
    try:
        rating = await service.get_rating(restaurant_key, rating_key)
    except RatingNotFoundError:
        return _not_found()

    return _rating_response(rating)


@router.post(
    "/{restaurant_id}/ratings",
    response_model=NewRatingResponse,
    summary="Rate a restaurant",
    responses={401: UNAUTHORIZED_RESPONSE, 404: {"description": "Restaurant not found"}},
)
async def rate(
    payload: RatingRequest,
    restaurant_id: str = Path(..., description=GUID_DESCRIPTION),
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_uow),
) -> NewRatingResponse | Response:
    """Store the caller's rating and return the restaurant's new average score."""
    key = parse_guid(restaurant_id)
    if key is None:
        return _not_found()

    service = RatingsService(uow)
    try:
        result = await service.rate(
            key,
            score=payload.score,
            comment=payload.comment,
            user_id=principal.user_id,
        )
    except RestaurantNotFoundError:
        return _not_found()

    return NewRatingResponse(
        restaurant_id=result.restaurant_id, average_score=result.average_score
    )
