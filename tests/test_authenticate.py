"""
Sign-in tests.

Covers the authenticate action's mapping of verifier failures to
user-facing messages and the users-table credential verifier.
"""

from __future__ import annotations

import pytest
from argon2 import PasswordHasher

from conftest import StubVerifier, UnknownAuthError
from invoicedesk.domain.errors import AuthError, CredentialsSignin, PersistenceError
from invoicedesk.domain.models import Redirect, User
from invoicedesk.services.actions import (
    INVALID_CREDENTIALS_MESSAGE,
    SIGN_IN_FAILED_MESSAGE,
    authenticate,
)
from invoicedesk.services.auth import UserCredentialVerifier

LOGIN_FORM = {"email": "user@nextmail.com", "password": "123456"}


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_success_returns_verifier_redirect(self) -> None:
        verifier = StubVerifier(redirect="/dashboard")

        outcome = await authenticate(verifier, None, LOGIN_FORM)

        assert outcome == Redirect("/dashboard")
        assert verifier.calls == [("credentials", LOGIN_FORM)]

    @pytest.mark.asyncio
    async def test_previous_error_is_discarded(self) -> None:
        outcome = await authenticate(StubVerifier(), "Invalid credentials.", LOGIN_FORM)

        assert outcome == Redirect("/dashboard")

    @pytest.mark.asyncio
    async def test_credentials_signin_maps_to_invalid_credentials(self) -> None:
        outcome = await authenticate(StubVerifier(error=CredentialsSignin()), None, LOGIN_FORM)

        assert outcome == INVALID_CREDENTIALS_MESSAGE == "Invalid credentials."

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            UnknownAuthError(),
            AuthError("callback failed", type="CallbackRouteError"),
            AuthError(),
        ],
    )
    async def test_other_auth_errors_map_to_generic_message(self, error: AuthError) -> None:
        outcome = await authenticate(StubVerifier(error=error), None, LOGIN_FORM)

        assert outcome == SIGN_IN_FAILED_MESSAGE == "Something went wrong."

    @pytest.mark.asyncio
    async def test_non_auth_errors_are_reraised_unchanged(self) -> None:
        error = ConnectionError("auth service down")

        with pytest.raises(ConnectionError) as excinfo:
            await authenticate(StubVerifier(error=error), None, LOGIN_FORM)
        assert excinfo.value is error


# --- UserCredentialVerifier ---


class FakeUserGateway:
    """In-memory users table keyed by email."""

    def __init__(self, users: list[User] | None = None) -> None:
        self.users = {user.email: user for user in users or []}
        self.lookups: list[str] = []
        self.error: Exception | None = None

    async def get_user_by_email(self, email: str) -> User | None:
        self.lookups.append(email)
        if self.error:
            raise self.error
        return self.users.get(email)


@pytest.fixture(scope="module")
def hasher() -> PasswordHasher:
    # Cheap parameters keep the suite fast
    return PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture
def users(hasher: PasswordHasher) -> FakeUserGateway:
    return FakeUserGateway(
        [User("u1", "User", "user@nextmail.com", hasher.hash("123456"))]
    )


@pytest.fixture
def verifier(users: FakeUserGateway, hasher: PasswordHasher) -> UserCredentialVerifier:
    return UserCredentialVerifier(users, default_redirect="/dashboard", hasher=hasher)


class TestUserCredentialVerifier:
    @pytest.mark.asyncio
    async def test_valid_credentials_redirect_to_default(
        self, verifier: UserCredentialVerifier
    ) -> None:
        assert await verifier.sign_in("credentials", LOGIN_FORM) == Redirect("/dashboard")

    @pytest.mark.asyncio
    async def test_redirect_to_local_path(self, verifier: UserCredentialVerifier) -> None:
        form = {**LOGIN_FORM, "redirectTo": "/dashboard/invoices"}

        assert await verifier.sign_in("credentials", form) == Redirect("/dashboard/invoices")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("target", ["https://evil.example", "//evil.example", "", "dashboard"])
    async def test_off_site_redirect_falls_back_to_default(
        self, verifier: UserCredentialVerifier, target: str
    ) -> None:
        form = {**LOGIN_FORM, "redirectTo": target}

        assert await verifier.sign_in("credentials", form) == Redirect("/dashboard")

    @pytest.mark.asyncio
    async def test_wrong_password(self, verifier: UserCredentialVerifier) -> None:
        with pytest.raises(CredentialsSignin):
            await verifier.sign_in("credentials", {**LOGIN_FORM, "password": "654321"})

    @pytest.mark.asyncio
    async def test_unknown_user(self, verifier: UserCredentialVerifier) -> None:
        with pytest.raises(CredentialsSignin):
            await verifier.sign_in("credentials", {**LOGIN_FORM, "email": "nobody@nextmail.com"})

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "form",
        [
            {},
            {"email": "not-an-email", "password": "123456"},
            {"email": "user@", "password": "123456"},
            {"email": "user@nextmail.com", "password": "123"},
        ],
    )
    async def test_malformed_credentials_skip_lookup(
        self, verifier: UserCredentialVerifier, users: FakeUserGateway, form: dict[str, str]
    ) -> None:
        with pytest.raises(CredentialsSignin):
            await verifier.sign_in("credentials", form)
        assert users.lookups == []

    @pytest.mark.asyncio
    async def test_corrupt_hash_is_rejected(
        self, users: FakeUserGateway, hasher: PasswordHasher
    ) -> None:
        users.users["user@nextmail.com"] = User("u1", "User", "user@nextmail.com", "plaintext")
        verifier = UserCredentialVerifier(users, hasher=hasher)

        with pytest.raises(CredentialsSignin):
            await verifier.sign_in("credentials", LOGIN_FORM)

    @pytest.mark.asyncio
    async def test_unsupported_strategy(self, verifier: UserCredentialVerifier) -> None:
        with pytest.raises(AuthError) as excinfo:
            await verifier.sign_in("github", LOGIN_FORM)
        assert excinfo.value.type == "InvalidProvider"

    @pytest.mark.asyncio
    async def test_lookup_failure_is_a_callback_error(
        self, verifier: UserCredentialVerifier, users: FakeUserGateway
    ) -> None:
        users.error = PersistenceError("timeout")

        with pytest.raises(AuthError) as excinfo:
            await verifier.sign_in("credentials", LOGIN_FORM)
        assert excinfo.value.type == "CallbackRouteError"
        assert not isinstance(excinfo.value, CredentialsSignin)

    @pytest.mark.asyncio
    async def test_end_to_end_messages(
        self, verifier: UserCredentialVerifier, users: FakeUserGateway
    ) -> None:
        assert await authenticate(verifier, None, {**LOGIN_FORM, "password": "wrong!"}) == (
            "Invalid credentials."
        )

        users.error = PersistenceError("timeout")
        assert await authenticate(verifier, None, LOGIN_FORM) == "Something went wrong."

    @pytest.mark.asyncio
    async def test_email_domain_case_is_normalized(
        self, verifier: UserCredentialVerifier, users: FakeUserGateway
    ) -> None:
        form = {**LOGIN_FORM, "email": "user@NEXTMAIL.COM"}

        assert await verifier.sign_in("credentials", form) == Redirect("/dashboard")
        assert users.lookups == ["user@nextmail.com"]
