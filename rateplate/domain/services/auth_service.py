"""Authentication service: registration, credential verification and token issuance."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import structlog
from email_validator import EmailNotValidError, validate_email
from passlib.context import CryptContext
from rateplate.core.auth import create_access_token
from rateplate.core.config import Settings, get_settings
from rateplate.domain.interfaces import UserRecord
from rateplate.domain.models import IssuedToken, Principal
from rateplate.infrastructure.repositories import UnitOfWork
from sqlalchemy.exc import IntegrityError

logger = structlog.get_logger()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

NAME_MAX_LENGTH = 256
INVALID_CREDENTIALS_MESSAGE = "Invalid user name or password"


@dataclass(slots=True, frozen=True)
class IdentityError:
    """One registration rule violation."""

    code: str
    description: str


class AuthError(Exception):
    """Base exception for authentication errors."""


class RegistrationError(AuthError):
    """Raised with every violation found while registering a user."""

    def __init__(self, errors: list[IdentityError]) -> None:
        super().__init__("; ".join(error.description for error in errors))
        self.errors = errors


class InvalidCredentialsError(AuthError):
    """Raised for any failed login; never says which check failed."""

    def __init__(self) -> None:
        super().__init__(INVALID_CREDENTIALS_MESSAGE)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, uow: UnitOfWork, settings: Settings | None = None) -> None:
        self.uow = uow
        self.settings = settings or get_settings()

    async def register_user(
        self,
        *,
        email: str,
        password: str,
        first_name: str,
        last_name: str | None = None,
    ) -> Principal:
        """
        Register a new user whose user name is their email.

        All rule violations are collected and raised together.
        """
        await logger.ainfo("register_attempt", email=email)

        email = (email or "").strip()
        first_name = (first_name or "").strip()
        last_name = (last_name or "").strip() or None

        errors = self._validate_registration(email, password, first_name, last_name)
        if email:
            errors.extend(await self._check_uniqueness(email))

        if errors:
            await logger.awarning(
                "register_rejected", email=email, codes=[error.code for error in errors]
            )
            raise RegistrationError(errors)

        try:
            user_id = await self.uow.users.add(
                user_name=email,
                email=email,
                password_hash=hash_password(password),
                first_name=first_name,
                last_name=last_name,
            )
            await self.uow.commit()
        except IntegrityError as exc:
            await self.uow.rollback()
            await logger.awarning("register_duplicate_user_name", email=email)
            raise RegistrationError([_duplicate_user_name(email)]) from exc

        await logger.ainfo("register_success", user_id=user_id, email=email)

        return Principal(
            user_id=user_id,
            user_name=email,
            email=email,
            first_name=first_name,
            last_name=last_name,
        )

    async def login(self, *, login: str, password: str) -> IssuedToken:
        """
        Verify credentials and issue a signed access token.

        Unknown users, locked accounts and wrong passwords all raise the same
        InvalidCredentialsError.
        """
        await logger.ainfo("login_attempt", login=login)

        user = await self.uow.users.find_by_login(
            login, case_sensitive=self.settings.login_case_sensitive
        )

        if user is None:
            # Spend the same hashing time as a real verification
            pwd_context.dummy_verify()
            await logger.awarning("login_failed", login=login, reason="unknown_user")
            raise InvalidCredentialsError()

        if self._is_locked_out(user):
            verify_password(password, user.password_hash)
            await logger.awarning("login_failed", login=login, reason="locked_out")
            raise InvalidCredentialsError()

        if not verify_password(password, user.password_hash):
            if self.settings.lockout_enabled:
                await self.uow.users.record_failed_access(
                    user.user_id,
                    max_attempts=self.settings.lockout_max_failed_attempts,
                    lockout_until=datetime.now(UTC)
                    + timedelta(minutes=self.settings.lockout_minutes),
                )
                await self.uow.commit()
            await logger.awarning("login_failed", login=login, reason="invalid_password")
            raise InvalidCredentialsError()

        if user.access_failed_count or user.lockout_end is not None:
            await self.uow.users.reset_failed_access(user.user_id)
            await self.uow.commit()

        principal = Principal(
            user_id=user.user_id,
            user_name=user.user_name,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            roles=await self.uow.users.get_roles(user.user_id),
            claims=await self.uow.users.get_claims(user.user_id),
        )
        issued = create_access_token(principal, settings=self.settings)

        await logger.ainfo(
            "login_success",
            user_id=user.user_id,
            token_id=issued.token_id,
            expires_at=issued.expires_at.isoformat(),
        )
        return issued

    def _validate_registration(
        self, email: str, password: str, first_name: str, last_name: str | None
    ) -> list[IdentityError]:
        errors: list[IdentityError] = []

        if not email:
            errors.append(IdentityError("InvalidEmail", "Email is required."))
        else:
            try:
                validate_email(email, check_deliverability=False)
            except EmailNotValidError:
                errors.append(IdentityError("InvalidEmail", f"Email '{email}' is invalid."))

        min_length = self.settings.password_min_length
        if len(password or "") < min_length:
            errors.append(
                IdentityError(
                    "PasswordTooShort",
                    f"Passwords must be at least {min_length} characters.",
                )
            )

        if not first_name:
            errors.append(IdentityError("FirstNameRequired", "First name is required."))
        elif len(first_name) > NAME_MAX_LENGTH:
            errors.append(
                IdentityError(
                    "FirstNameTooLong",
                    f"First name must be at most {NAME_MAX_LENGTH} characters.",
                )
            )

        if last_name is not None and len(last_name) > NAME_MAX_LENGTH:
            errors.append(
                IdentityError(
                    "LastNameTooLong",
                    f"Last name must be at most {NAME_MAX_LENGTH} characters.",
                )
            )

        return errors

    async def _check_uniqueness(self, email: str) -> list[IdentityError]:
        errors: list[IdentityError] = []
        if await self.uow.users.user_name_exists(email):
            errors.append(_duplicate_user_name(email))
        if self.settings.require_unique_email and await self.uow.users.email_exists(email):
            errors.append(IdentityError("DuplicateEmail", f"Email '{email}' is already taken."))
        return errors

    def _is_locked_out(self, user: UserRecord) -> bool:
        if not self.settings.lockout_enabled or user.lockout_end is None:
            return False
        return user.lockout_end > datetime.now(UTC)


def _duplicate_user_name(user_name: str) -> IdentityError:
    return IdentityError("DuplicateUserName", f"Username '{user_name}' is already taken.")
