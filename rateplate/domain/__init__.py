from rateplate.domain.models import (
    Address,
    IssuedToken,
    ListResult,
    NewRating,
    Principal,
    Priority,
    Rating,
    Restaurant,
)

__all__ = [
    "Address",
    "IssuedToken",
    "ListResult",
    "NewRating",
    "Principal",
    "Priority",
    "Rating",
    "Restaurant",
]
