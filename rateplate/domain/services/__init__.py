"""Domain services."""

from rateplate.domain.services.auth_service import (
    AuthService,
    IdentityError,
    InvalidCredentialsError,
    RegistrationError,
)
from rateplate.domain.services.common import InvalidArgumentError
from rateplate.domain.services.ratings import RatingNotFoundError, RatingsService
from rateplate.domain.services.restaurants import RestaurantNotFoundError, RestaurantsService

__all__ = [
    "AuthService",
    "IdentityError",
    "InvalidArgumentError",
    "InvalidCredentialsError",
    "RatingNotFoundError",
    "RatingsService",
    "RegistrationError",
    "RestaurantNotFoundError",
    "RestaurantsService",
]
