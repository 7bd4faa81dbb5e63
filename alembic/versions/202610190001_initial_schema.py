"""Initial schema: identity store, restaurants and ratings

Revision ID: 202610190001
Revises:
Create Date: 2026-10-19 00:01:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "202610190001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_name", sa.String(length=256), nullable=True),
        sa.Column("normalized_user_name", sa.String(length=256), nullable=True),
        sa.Column("email", sa.String(length=256), nullable=True),
        sa.Column("normalized_email", sa.String(length=256), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=256), nullable=False),
        sa.Column("last_name", sa.String(length=256), nullable=True),
        sa.Column("access_failed_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("lockout_end", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "ix_users_normalized_user_name", "users", ["normalized_user_name"], unique=True
    )
    op.create_index("ix_users_normalized_email", "users", ["normalized_email"])

    op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.Column("normalized_name", sa.String(length=256), nullable=False, unique=True),
    )

    op.create_table(
        "user_roles",
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "role_id",
            sa.Integer(),
            sa.ForeignKey("roles.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )

    op.create_table(
        "user_claims",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("claim_type", sa.String(length=256), nullable=False),
        sa.Column("claim_value", sa.Text(), nullable=False),
    )
    op.create_index("ix_user_claims_user_id", "user_claims", ["user_id"])

    op.create_table(
        "restaurants",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.Column("phone_number", sa.String(length=50), nullable=True),
        sa.Column("email", sa.String(length=256), nullable=True),
        sa.Column("website_url", sa.String(length=512), nullable=True),
        sa.Column("address_location", sa.String(length=256), nullable=True),
        sa.Column("address_postal_code", sa.String(length=20), nullable=True),
        sa.Column("address_city", sa.String(length=128), nullable=True),
        sa.Column("address_province", sa.String(length=128), nullable=True),
        sa.Column("address_country", sa.String(length=128), nullable=True),
    )
    op.create_index("ix_restaurants_name", "restaurants", ["name"])

    op.create_table(
        "ratings",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "restaurant_id",
            sa.String(length=36),
            sa.ForeignKey("restaurants.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("score", sa.Float(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_ratings_restaurant_created", "ratings", ["restaurant_id", "created_at"]
    )
    op.create_index("ix_ratings_user_id", "ratings", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_ratings_user_id", "ratings")
    op.drop_index("ix_ratings_restaurant_created", "ratings")
    op.drop_table("ratings")
    op.drop_index("ix_restaurants_name", "restaurants")
    op.drop_table("restaurants")
    op.drop_index("ix_user_claims_user_id", "user_claims")
    op.drop_table("user_claims")
    op.drop_table("user_roles")
    op.drop_table("roles")
    op.drop_index("ix_users_normalized_email", "users")
    op.drop_index("ix_users_normalized_user_name", "users")
    op.drop_table("users")
