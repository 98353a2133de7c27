"""
Unit tests for the identity gateway and the current-user stream.
"""
from unittest.mock import AsyncMock

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from brainsort.exceptions import AuthError, AuthErrorKind
from brainsort.models import User
from brainsort.services.auth import decode_access_token
from brainsort.services.identity import CurrentUserStream, IdentityGateway


class TestCurrentUserStream:
    """Tests for the first-emission contract."""

    def test_unresolved_stream_does_not_call_subscriber(self):
        stream = CurrentUserStream()
        seen = []

        stream.subscribe(seen.append)

        assert seen == []
        assert stream.resolved is False

    def test_subscriber_called_on_resolution_with_none(self):
        stream = CurrentUserStream()
        seen = []
        stream.subscribe(seen.append)

        stream.emit(None)

        assert seen == [None]
        assert stream.resolved is True

    def test_late_subscriber_gets_current_state_once(self):
        stream = CurrentUserStream()
        user = User(email="sam@example.com")
        stream.emit(user)
        seen = []

        stream.subscribe(seen.append)

        assert seen == [user]

    def test_every_change_is_delivered(self):
        stream = CurrentUserStream()
        user = User(email="sam@example.com")
        seen = []
        stream.subscribe(seen.append)

        stream.emit(None)
        stream.emit(user)
        stream.emit(None)

        assert seen == [None, user, None]

    def test_unsubscribe_stops_delivery(self):
        stream = CurrentUserStream()
        seen = []
        unsubscribe = stream.subscribe(seen.append)

        unsubscribe()
        stream.emit(None)
        unsubscribe()

        assert seen == []


class TestSignup:

    @pytest.mark.asyncio
    async def test_signup_signs_user_in(self, gateway, users, sessions):
        seen = []
        gateway.stream.subscribe(seen.append)

        user = await gateway.signup("Sam@Example.com", "secret123")

        assert user.email == "sam@example.com"
        assert gateway.current_user == user
        assert seen == [user]
        assert len(users.documents) == 1
        assert users.documents[0]["password_hash"] != "secret123"
        assert len(sessions.documents) == 1

        payload = decode_access_token(gateway.token)
        assert payload["sub"] == user.id
        assert payload["sid"] == sessions.documents[0]["id"]

    @pytest.mark.asyncio
    async def test_duplicate_email(self, gateway, users):
        await gateway.signup("sam@example.com", "secret123")
        other = IdentityGateway(users, gateway.sessions)

        with pytest.raises(AuthError) as exc_info:
            await other.signup("SAM@example.com", "another-secret")

        assert exc_info.value.kind == AuthErrorKind.EMAIL_ALREADY_IN_USE
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_duplicate_key_race(self, gateway, users):
        users.find_one = AsyncMock(return_value=None)
        users.documents.append({"id": "u-1", "email": "sam@example.com"})

        with pytest.raises(AuthError) as exc_info:
            await gateway.signup("sam@example.com", "secret123")

        assert exc_info.value.kind == AuthErrorKind.EMAIL_ALREADY_IN_USE

    @pytest.mark.asyncio
    async def test_short_password(self, gateway, users):
        with pytest.raises(AuthError) as exc_info:
            await gateway.signup("sam@example.com", "12345")

        assert exc_info.value.kind == AuthErrorKind.OTHER
        assert "6 characters" in exc_info.value.user_message
        assert users.documents == []

    @pytest.mark.asyncio
    async def test_invalid_email(self, gateway):
        with pytest.raises(AuthError) as exc_info:
            await gateway.signup("not-an-email", "secret123")

        assert exc_info.value.kind == AuthErrorKind.OTHER


class TestLogin:

    @pytest.fixture
    async def existing_user(self, users, sessions):
        return await IdentityGateway(users, sessions).signup("sam@example.com", "secret123")

    @pytest.mark.asyncio
    async def test_login_success(self, gateway, existing_user):
        seen = []
        gateway.stream.subscribe(seen.append)

        user = await gateway.login("SAM@example.com", "secret123")

        assert user.id == existing_user.id
        assert seen == [user]
        assert gateway.token

    @pytest.mark.asyncio
    async def test_wrong_password(self, gateway, existing_user):
        with pytest.raises(AuthError) as exc_info:
            await gateway.login("sam@example.com", "wrong-password")

        assert exc_info.value.kind == AuthErrorKind.INVALID_CREDENTIAL
        assert exc_info.value.status_code == 401
        assert gateway.stream.resolved is False

    @pytest.mark.asyncio
    async def test_unknown_email(self, gateway):
        with pytest.raises(AuthError) as exc_info:
            await gateway.login("nobody@example.com", "secret123")

        assert exc_info.value.kind == AuthErrorKind.INVALID_CREDENTIAL

    @pytest.mark.asyncio
    async def test_provider_unavailable(self, gateway, users):
        users.find_one = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))

        with pytest.raises(AuthError) as exc_info:
            await gateway.login("sam@example.com", "secret123")

        assert exc_info.value.kind == AuthErrorKind.OTHER
        assert exc_info.value.status_code == 503


class TestRestoreAndLogout:

    @pytest.mark.asyncio
    async def test_restore_valid_token(self, gateway, users, sessions):
        user = await gateway.signup("sam@example.com", "secret123")
        fresh = IdentityGateway(users, sessions)

        restored = await fresh.restore(gateway.token)

        assert restored.id == user.id
        assert fresh.stream.current.id == user.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, "", "not-a-jwt"])
    async def test_restore_without_valid_token_emits_none(self, gateway, token):
        seen = []
        gateway.stream.subscribe(seen.append)

        assert await gateway.restore(token) is None
        assert seen == [None]

    @pytest.mark.asyncio
    async def test_logout_revokes_session(self, gateway, users, sessions):
        await gateway.signup("sam@example.com", "secret123")
        token = gateway.token
        seen = []
        gateway.stream.subscribe(seen.append)

        await gateway.logout()

        assert seen[-1] is None
        assert gateway.token is None
        assert sessions.documents == []
        assert await IdentityGateway(users, sessions).restore(token) is None

    @pytest.mark.asyncio
    async def test_logout_only_ends_own_session(self, users, sessions):
        first = IdentityGateway(users, sessions)
        await first.signup("sam@example.com", "secret123")
        second = IdentityGateway(users, sessions)
        await second.login("sam@example.com", "secret123")

        await first.logout()

        assert await IdentityGateway(users, sessions).restore(second.token) is not None
