from .ratings import SQLAlchemyRatingRepository
from .restaurants import SQLAlchemyRestaurantRepository
from .unit_of_work import UnitOfWork
from .users import SQLAlchemyUserRepository

__all__ = [
    "SQLAlchemyRatingRepository",
    "SQLAlchemyRestaurantRepository",
    "SQLAlchemyUserRepository",
    "UnitOfWork",
]
