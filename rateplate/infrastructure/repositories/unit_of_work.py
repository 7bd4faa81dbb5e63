from __future__ import annotations

import structlog
from rateplate.domain.interfaces import RatingRepository, RestaurantRepository, UserRepository
from rateplate.infrastructure.repositories.ratings import SQLAlchemyRatingRepository
from rateplate.infrastructure.repositories.restaurants import SQLAlchemyRestaurantRepository
from rateplate.infrastructure.repositories.users import SQLAlchemyUserRepository
from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


class UnitOfWork:
    """Bundles the per-entity repositories over one request-scoped session."""

    ratings: RatingRepository
    restaurants: RestaurantRepository
    users: UserRepository

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.ratings = SQLAlchemyRatingRepository(session)
        self.restaurants = SQLAlchemyRestaurantRepository(session)
        self.users = SQLAlchemyUserRepository(session)

    async def __aenter__(self) -> UnitOfWork:
        logger.debug("uow_enter")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc:
            await self.rollback()
        else:
            await self.commit()
        logger.debug("uow_exit", exc_type=str(exc_type) if exc_type else None)

    async def commit(self) -> None:
        await self.session.commit()
        logger.debug("uow_commit")

    async def rollback(self) -> None:
        await self.session.rollback()
        logger.debug("uow_rollback")
