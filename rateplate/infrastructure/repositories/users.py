from __future__ import annotations

from datetime import datetime

from rateplate.domain.interfaces import UserRecord
from rateplate.infrastructure.db.models import RoleModel, UserClaimModel, UserModel, user_roles
from rateplate.infrastructure.repositories.ratings import as_utc
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession


def normalize(value: str) -> str:
    """Key used for case-insensitive identity lookups."""
    return value.strip().upper()


def _to_record(user: UserModel) -> UserRecord:
    return UserRecord(
        user_id=user.id,
        user_name=user.user_name,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        password_hash=user.password_hash,
        access_failed_count=user.access_failed_count,
        lockout_end=as_utc(user.lockout_end) if user.lockout_end is not None else None,
    )


class SQLAlchemyUserRepository:
    """Identity store: users with their roles and supplemental claims."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_login(self, login: str, *, case_sensitive: bool) -> UserRecord | None:
        if case_sensitive:
            by_name = UserModel.user_name == login
            by_email = UserModel.email == login
        else:
            key = normalize(login)
            by_name = UserModel.normalized_user_name == key
            by_email = UserModel.normalized_email == key

        user = await self.session.scalar(select(UserModel).where(by_name))
        if user is None:
            # Email is only unique when the policy says so; take the oldest match
            user = await self.session.scalar(
                select(UserModel).where(by_email).order_by(UserModel.created_at).limit(1)
            )
        return _to_record(user) if user is not None else None

    async def user_name_exists(self, user_name: str) -> bool:
        found = await self.session.scalar(
            select(UserModel.id).where(UserModel.normalized_user_name == normalize(user_name))
        )
        return found is not None

    async def email_exists(self, email: str) -> bool:
        found = await self.session.scalar(
            select(UserModel.id).where(UserModel.normalized_email == normalize(email)).limit(1)
        )
        return found is not None

    async def add(
        self,
        *,
        user_name: str,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str | None,
    ) -> str:
        user = UserModel(
            user_name=user_name,
            normalized_user_name=normalize(user_name),
            email=email,
            normalized_email=normalize(email),
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
        )
        self.session.add(user)
        await self.session.flush()
        return user.id

    async def get_roles(self, user_id: str) -> list[str]:
        stmt = (
            select(RoleModel.name)
            .join(user_roles, user_roles.c.role_id == RoleModel.id)
            .where(user_roles.c.user_id == user_id)
            .order_by(RoleModel.name)
        )
        return list((await self.session.scalars(stmt)).all())

    async def get_claims(self, user_id: str) -> list[tuple[str, str]]:
        stmt = (
            select(UserClaimModel.claim_type, UserClaimModel.claim_value)
            .where(UserClaimModel.user_id == user_id)
            .order_by(UserClaimModel.id)
        )
        return [(claim_type, value) for claim_type, value in (await self.session.execute(stmt))]

    async def record_failed_access(
        self, user_id: str, *, max_attempts: int, lockout_until: datetime
    ) -> None:
        user = await self.session.get(UserModel, user_id)
        if user is None:
            return
        user.access_failed_count += 1
        if user.access_failed_count >= max_attempts:
            user.lockout_end = lockout_until
            user.access_failed_count = 0
        await self.session.flush()

    async def reset_failed_access(self, user_id: str) -> None:
        await self.session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(access_failed_count=0, lockout_end=None)
        )
