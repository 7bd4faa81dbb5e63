"""Unit tests for authentication service."""

from __future__ import annotations

import jwt
import pytest
from rateplate.core.config import get_settings
from rateplate.domain.services.auth_service import (
    INVALID_CREDENTIALS_MESSAGE,
    AuthService,
    InvalidCredentialsError,
    RegistrationError,
    hash_password,
    verify_password,
)
from rateplate.infrastructure.db.models import UserModel
from rateplate.infrastructure.repositories import UnitOfWork
from sqlalchemy import func, select
from tests.utils import DEFAULT_PASSWORD, create_user


class TestPasswordHashing:
    """Tests for password hashing functions."""

    def test_hash_password_returns_bcrypt_hash(self) -> None:
        """Hash should start with bcrypt prefix."""
        hashed = hash_password("test_password_123")

        assert hashed.startswith("$2b$")
        assert len(hashed) == 60

    def test_hash_password_unique_per_call(self) -> None:
        """Same password should produce different hashes (due to salt)."""
        assert hash_password("test_password_123") != hash_password("test_password_123")

    def test_verify_password(self) -> None:
        hashed = hash_password("TestPassword123")

        assert verify_password("TestPassword123", hashed) is True
        assert verify_password("testpassword123", hashed) is False
        assert verify_password("wrong_password", hashed) is False


async def _user_count(uow: UnitOfWork) -> int:
    return await uow.session.scalar(select(func.count()).select_from(UserModel))


class TestRegistration:
    """Tests for AuthService.register_user."""

    @pytest.mark.asyncio
    async def test_register_creates_user_named_after_email(self, uow: UnitOfWork) -> None:
        principal = await AuthService(uow).register_user(
            email="  anna@example.com ",
            password="longenough",
            first_name="Anna",
            last_name="Bianchi",
        )

        assert principal.user_name == "anna@example.com"
        assert principal.email == "anna@example.com"
        assert principal.first_name == "Anna"
        assert principal.last_name == "Bianchi"
        assert principal.roles == []

        stored = await uow.users.find_by_login("anna@example.com", case_sensitive=True)
        assert stored is not None
        assert stored.user_id == principal.user_id
        assert verify_password("longenough", stored.password_hash)

    @pytest.mark.asyncio
    async def test_blank_last_name_is_stored_as_none(self, uow: UnitOfWork) -> None:
        principal = await AuthService(uow).register_user(
            email="solo@example.com", password="longenough", first_name="Solo", last_name="  "
        )

        assert principal.last_name is None

    @pytest.mark.asyncio
    async def test_every_violation_is_reported(self, uow: UnitOfWork) -> None:
        """A single call reports all broken rules, not just the first."""
        with pytest.raises(RegistrationError) as exc_info:
            await AuthService(uow).register_user(
                email="not-an-email",
                password="123",
                first_name="",
                last_name="x" * 300,
            )

        codes = [error.code for error in exc_info.value.errors]
        assert codes == [
            "InvalidEmail",
            "PasswordTooShort",
            "FirstNameRequired",
            "LastNameTooLong",
        ]
        assert await _user_count(uow) == 0

    @pytest.mark.asyncio
    async def test_first_name_too_long(self, uow: UnitOfWork) -> None:
        with pytest.raises(RegistrationError) as exc_info:
            await AuthService(uow).register_user(
                email="long@example.com", password="longenough", first_name="x" * 257
            )

        assert [error.code for error in exc_info.value.errors] == ["FirstNameTooLong"]

    @pytest.mark.asyncio
    async def test_password_minimum_follows_settings(self, uow: UnitOfWork) -> None:
        settings = get_settings().model_copy(update={"password_min_length": 12})

        with pytest.raises(RegistrationError) as exc_info:
            await AuthService(uow, settings).register_user(
                email="pw@example.com", password="elevenchars", first_name="Pw"
            )

        assert [error.code for error in exc_info.value.errors] == ["PasswordTooShort"]
        assert "12" in exc_info.value.errors[0].description

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected_without_creating_record(
        self, uow: UnitOfWork, session_factory
    ) -> None:
        await create_user(session_factory, email="taken@example.com")

        with pytest.raises(RegistrationError) as exc_info:
            await AuthService(uow).register_user(
                email="TAKEN@example.com", password="longenough", first_name="Copy"
            )

        codes = {error.code for error in exc_info.value.errors}
        assert codes == {"DuplicateUserName", "DuplicateEmail"}
        assert await _user_count(uow) == 1


class TestLogin:
    """Tests for AuthService.login."""

    @pytest.mark.asyncio
    async def test_login_issues_token_with_roles_and_claims(
        self, uow: UnitOfWork, session_factory
    ) -> None:
        settings = get_settings()
        user_id = await create_user(
            session_factory,
            email="critic@example.com",
            first_name="Carla",
            last_name=None,
            roles=["critic"],
            claims=[("tier", "gold")],
        )

        issued = await AuthService(uow).login(login="critic@example.com", password=DEFAULT_PASSWORD)

        payload = jwt.decode(
            issued.token,
            settings.jwt_security_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
        assert payload["sub"] == user_id
        assert payload["email"] == "critic@example.com"
        assert payload["given_name"] == "Carla"
        assert payload["family_name"] == ""
        assert payload["roles"] == ["critic"]
        assert payload["tier"] == "gold"
        assert payload["jti"] == issued.token_id

    @pytest.mark.asyncio
    async def test_unknown_user_and_wrong_password_fail_identically(
        self, uow: UnitOfWork, session_factory
    ) -> None:
        await create_user(session_factory, email="real@example.com")
        service = AuthService(uow)

        with pytest.raises(InvalidCredentialsError) as wrong_password:
            await service.login(login="real@example.com", password="not-the-password")
        with pytest.raises(InvalidCredentialsError) as unknown_user:
            await service.login(login="ghost@example.com", password=DEFAULT_PASSWORD)

        assert str(wrong_password.value) == INVALID_CREDENTIALS_MESSAGE
        assert str(unknown_user.value) == str(wrong_password.value)

    @pytest.mark.asyncio
    async def test_login_ignores_case_by_default(self, uow: UnitOfWork, session_factory) -> None:
        await create_user(session_factory, email="Mixed.Case@Example.com")

        issued = await AuthService(uow).login(
            login="mixed.case@example.com", password=DEFAULT_PASSWORD
        )

        assert issued.token

    @pytest.mark.asyncio
    async def test_case_sensitive_login_setting(self, uow: UnitOfWork, session_factory) -> None:
        await create_user(session_factory, email="Mixed.Case@Example.com")
        settings = get_settings().model_copy(update={"login_case_sensitive": True})
        service = AuthService(uow, settings)

        with pytest.raises(InvalidCredentialsError):
            await service.login(login="mixed.case@example.com", password=DEFAULT_PASSWORD)

        issued = await service.login(login="Mixed.Case@Example.com", password=DEFAULT_PASSWORD)
        assert issued.token

    @pytest.mark.asyncio
    async def test_failures_do_not_lock_out_by_default(
        self, uow: UnitOfWork, session_factory
    ) -> None:
        await create_user(session_factory, email="retry@example.com")
        service = AuthService(uow)

        for _ in range(10):
            with pytest.raises(InvalidCredentialsError):
                await service.login(login="retry@example.com", password="wrong")

        issued = await service.login(login="retry@example.com", password=DEFAULT_PASSWORD)
        assert issued.token

    @pytest.mark.asyncio
    async def test_lockout_after_repeated_failures(self, uow: UnitOfWork, session_factory) -> None:
        await create_user(session_factory, email="locked@example.com")
        settings = get_settings().model_copy(
            update={"lockout_enabled": True, "lockout_max_failed_attempts": 2}
        )
        service = AuthService(uow, settings)

        for _ in range(2):
            with pytest.raises(InvalidCredentialsError):
                await service.login(login="locked@example.com", password="wrong")

        with pytest.raises(InvalidCredentialsError):
            await service.login(login="locked@example.com", password=DEFAULT_PASSWORD)

    @pytest.mark.asyncio
    async def test_locked_account_still_verifies_the_password(
        self, uow: UnitOfWork, session_factory, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        await create_user(session_factory, email="slow@example.com")
        settings = get_settings().model_copy(
            update={"lockout_enabled": True, "lockout_max_failed_attempts": 1}
        )
        service = AuthService(uow, settings)
        with pytest.raises(InvalidCredentialsError):
            await service.login(login="slow@example.com", password="wrong")

        calls: list[str] = []

        def counting_verify(password: str, hashed: str) -> bool:
            calls.append(password)
            return verify_password(password, hashed)

        monkeypatch.setattr(
            "rateplate.domain.services.auth_service.verify_password", counting_verify
        )

        with pytest.raises(InvalidCredentialsError):
            await service.login(login="slow@example.com", password=DEFAULT_PASSWORD)

        assert calls == [DEFAULT_PASSWORD]

    @pytest.mark.asyncio
    async def test_successful_login_resets_failure_count(
        self, uow: UnitOfWork, session_factory
    ) -> None:
        await create_user(session_factory, email="reset@example.com")
        settings = get_settings().model_copy(
            update={"lockout_enabled": True, "lockout_max_failed_attempts": 2}
        )
        service = AuthService(uow, settings)

        with pytest.raises(InvalidCredentialsError):
            await service.login(login="reset@example.com", password="wrong")
        await service.login(login="reset@example.com", password=DEFAULT_PASSWORD)

        with pytest.raises(InvalidCredentialsError):
            await service.login(login="reset@example.com", password="wrong")
        issued = await service.login(login="reset@example.com", password=DEFAULT_PASSWORD)

        assert issued.token
