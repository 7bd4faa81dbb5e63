#!/usr/bin/env python3
"""
Seed sample restaurants, a demo user and the admin role.

Run with:
    python scripts/seed_restaurants.py
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import asyncio

from sqlalchemy import select

from rateplate.domain.services.auth_service import hash_password
from rateplate.infrastructure.db.models import RestaurantModel, RoleModel, UserModel
from rateplate.infrastructure.db.session import dispose_engine, get_session_factory
from rateplate.infrastructure.repositories.users import normalize

RESTAURANTS = [
    {
        "name": "Trattoria da Enzo",
        "phone_number": "+39 06 581 2260",
        "website_url": "https://example.com/da-enzo",
        "address_location": "Via dei Vascellari 29",
        "address_postal_code": "00153",
        "address_city": "Roma",
        "address_province": "RM",
        "address_country": "Italy",
    },
    {
        "name": "Osteria Francescana",
        "phone_number": "+39 059 223912",
        "address_location": "Via Stella 22",
        "address_postal_code": "41121",
        "address_city": "Modena",
        "address_province": "MO",
        "address_country": "Italy",
    },
    {
        "name": "Pizzeria Brandi",
        "address_location": "Salita Sant'Anna di Palazzo 1",
        "address_postal_code": "80132",
        "address_city": "Napoli",
        "address_province": "NA",
        "address_country": "Italy",
    },
]

DEMO_EMAIL = "demo@rateplate.local"
DEMO_PASSWORD = "demo-password"


async def seed() -> None:
    session_factory = get_session_factory()
    async with session_factory() as session:
        existing = set((await session.scalars(select(RestaurantModel.name))).all())
        created = 0
        for data in RESTAURANTS:
            if data["name"] in existing:
                continue
            session.add(RestaurantModel(**data))
            created += 1

        admin = await session.scalar(
            select(RoleModel).where(RoleModel.normalized_name == normalize("admin"))
        )
        if admin is None:
            admin = RoleModel(name="admin", normalized_name=normalize("admin"))
            session.add(admin)

        demo = await session.scalar(
            select(UserModel).where(UserModel.normalized_user_name == normalize(DEMO_EMAIL))
        )
        if demo is None:
            session.add(
                UserModel(
                    user_name=DEMO_EMAIL,
                    normalized_user_name=normalize(DEMO_EMAIL),
                    email=DEMO_EMAIL,
                    normalized_email=normalize(DEMO_EMAIL),
                    password_hash=hash_password(DEMO_PASSWORD),
                    first_name="Demo",
                    last_name="User",
                    roles=[admin],
                )
            )

        await session.commit()
        print(f"Seeded {created} restaurant(s); demo login {DEMO_EMAIL} / {DEMO_PASSWORD}")

    await dispose_engine()


if __name__ == "__main__":
    asyncio.run(seed())
