from __future__ import annotations

import uuid
from datetime import datetime

from rateplate.domain.models import Address
from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, composite, mapped_column, relationship

from .base import Base

user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class UserModel(Base):
    """SQLAlchemy model for the identity store's users table."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    normalized_user_name: Mapped[str | None] = mapped_column(
        String(256), unique=True, nullable=True, index=True
    )
    # Uniqueness of email is a configurable policy enforced by the auth service
    email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    normalized_email: Mapped[str | None] = mapped_column(String(256), nullable=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(256), nullable=False)
    last_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    access_failed_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    lockout_end: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    roles: Mapped[list[RoleModel]] = relationship(secondary=user_roles)
    claims: Mapped[list[UserClaimModel]] = relationship(
        back_populates="user", cascade="all,delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, user_name={self.user_name})>"


class RoleModel(Base):
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    normalized_name: Mapped[str] = mapped_column(String(256), unique=True, nullable=False)


class UserClaimModel(Base):
    """Supplemental key/value claim attached to a user and copied into their tokens."""

    __tablename__ = "user_claims"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    claim_type: Mapped[str] = mapped_column(String(256), nullable=False)
    claim_value: Mapped[str] = mapped_column(Text, nullable=False)

    user: Mapped[UserModel] = relationship(back_populates="claims")


class RestaurantModel(Base):
    __tablename__ = "restaurants"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    phone_number: Mapped[str | None] = mapped_column(String(50))
    email: Mapped[str | None] = mapped_column(String(256))
    website_url: Mapped[str | None] = mapped_column(String(512))

    # Address is a value object stored inline with its owning restaurant
    address_location: Mapped[str | None] = mapped_column(String(256))
    address_postal_code: Mapped[str | None] = mapped_column(String(20))
    address_city: Mapped[str | None] = mapped_column(String(128))
    address_province: Mapped[str | None] = mapped_column(String(128))
    address_country: Mapped[str | None] = mapped_column(String(128))
    address: Mapped[Address] = composite(
        "address_location",
        "address_postal_code",
        "address_city",
        "address_province",
        "address_country",
    )

    ratings: Mapped[list[RatingModel]] = relationship(
        back_populates="restaurant", cascade="all,delete-orphan"
    )


class RatingModel(Base):
    __tablename__ = "ratings"
    __table_args__ = (Index("ix_ratings_restaurant_created", "restaurant_id", "created_at"),)

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    restaurant_id: Mapped[str] = mapped_column(
        ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    score: Mapped[float] = mapped_column(Float, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    restaurant: Mapped[RestaurantModel] = relationship(back_populates="ratings")
    user: Mapped[UserModel] = relationship()
