"""
Repository interfaces.

Services depend on these protocols, not on the SQLAlchemy implementations,
so every query returns plain domain data and no ORM session state leaks out.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, runtime_checkable

from rateplate.domain.models import ListResult, Rating, Restaurant


@dataclass(slots=True)
class UserRecord:
    """Stored identity as seen by the credential verification flow."""

    user_id: str
    user_name: str | None
    email: str | None
    first_name: str
    last_name: str | None
    password_hash: str
    access_failed_count: int = 0
    lockout_end: datetime | None = None


@runtime_checkable
class RatingRepository(Protocol):
    async def list_for_restaurant(
        self, restaurant_id: str, *, page_index: int, items_per_page: int
    ) -> ListResult[Rating]:
        """Return one page of ratings, newest first, with total count and overflow flag."""
        ...

    async def get_for_restaurant(self, restaurant_id: str, rating_id: str) -> Rating | None:
        """Return the rating only when it belongs to the given restaurant."""
        ...

    async def add(
        self,
        *,
        restaurant_id: str,
        user_id: str,
        score: float,
        comment: str | None,
        created_at: datetime,
    ) -> str:
        """Stage a new rating and return its id."""
        ...

    async def average_score(self, restaurant_id: str) -> float | None:
        """Mean of every stored score for the restaurant, or None when it has none."""
        ...


@runtime_checkable
class RestaurantRepository(Protocol):
    async def list_restaurants(
        self, *, page_index: int, items_per_page: int
    ) -> ListResult[Restaurant]:
        ...

    async def get(self, restaurant_id: str) -> Restaurant | None:
        ...

    async def exists(self, restaurant_id: str) -> bool:
        ...


@runtime_checkable
class UserRepository(Protocol):
    async def find_by_login(self, login: str, *, case_sensitive: bool) -> UserRecord | None:
        """Look a user up by user name first, then by email."""
        ...

    async def user_name_exists(self, user_name: str) -> bool:
        ...

    async def email_exists(self, email: str) -> bool:
        ...

    async def add(
        self,
        *,
        user_name: str,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str | None,
    ) -> str:
        ...

    async def get_roles(self, user_id: str) -> list[str]:
        ...

    async def get_claims(self, user_id: str) -> list[tuple[str, str]]:
        ...

    async def record_failed_access(
        self, user_id: str, *, max_attempts: int, lockout_until: datetime
    ) -> None:
        ...

    async def reset_failed_access(self, user_id: str) -> None:
        ...
