from __future__ import annotations

from datetime import datetime

from pydantic import Field
from rateplate.api.schemas.common import CamelModel


class AddressResponse(CamelModel):
    location: str | None = None
    postal_code: str | None = None
    city: str | None = None
    province: str | None = None
    country: str | None = None


class RestaurantResponse(CamelModel):
    id: str
    name: str
    address: AddressResponse | None = None
    phone_number: str | None = None
    email: str | None = None
    website_url: str | None = None


class RatingResponse(CamelModel):
    id: str
    score: float
    comment: str | None = None
    date: datetime
    user: str = Field(..., description="Author display name, empty when unknown")


class RatingRequest(CamelModel):
    score: float = Field(..., ge=0, le=5, description="Score between 0 and 5")
    comment: str | None = Field(None, max_length=4000)


class NewRatingResponse(CamelModel):
    restaurant_id: str
    average_score: float
