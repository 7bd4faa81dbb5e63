from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(slots=True)
class Principal:
    """An authenticated identity, projected from the user record or from token claims.

    User name and email are interchangeable: a principal needs at least one,
    and when only one is set the other mirrors it.
    """

    user_id: str
    first_name: str
    user_name: str | None = None
    email: str | None = None
    last_name: str | None = None
    roles: list[str] = field(default_factory=list)
    claims: list[tuple[str, str]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.user_name and not self.email:
            raise ValueError("Principal requires a user name or an email")
        if not self.user_name:
            self.user_name = self.email
        if not self.email:
            self.email = self.user_name

    def has_role(self, role: str) -> bool:
        return role in self.roles

    def claim_values(self, claim_type: str) -> list[str]:
        return [value for name, value in self.claims if name == claim_type]


@dataclass(slots=True)
class IssuedToken:
    """A signed bearer token together with its validity window."""

    token: str
    token_id: str
    not_before: datetime
    expires_at: datetime


@dataclass(slots=True)
class Address:
    """Postal address owned by a restaurant."""

    location: str | None = None
    postal_code: str | None = None
    city: str | None = None
    province: str | None = None
    country: str | None = None


@dataclass(slots=True)
class Restaurant:
    restaurant_id: str
    name: str
    address: Address | None = None
    phone_number: str | None = None
    email: str | None = None
    website_url: str | None = None


@dataclass(slots=True)
class Rating:
    """Public projection of a stored rating."""

    rating_id: str
    score: float
    date: datetime
    user: str
    comment: str | None = None


@dataclass(slots=True)
class NewRating:
    """Outcome of a rating submission: the restaurant's refreshed average."""

    restaurant_id: str
    average_score: float


@dataclass(slots=True)
class ListResult(Generic[T]):
    """One page of items plus the total count and an overflow flag."""

    items: list[T]
    total_count: int
    has_more: bool


class Priority(str, enum.Enum):
    LOW = "low"
    STANDARD = "standard"
    HIGH = "high"
