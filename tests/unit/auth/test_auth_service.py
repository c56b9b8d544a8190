"""Tests for the MongoDB-backed auth provider, with storage services stubbed out."""

from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.requests import Request

from authgate.core.modules.auth.models import ErrorCode, SignInEmailBody, SignUpEmailBody
from authgate.core.modules.auth.service import AuthService, client_ip
from authgate.core.modules.session.models import SessionRecord
from authgate.core.modules.user.models import User
from authgate.errors import ProviderError
from authgate.utils import now


@pytest.fixture
def user():
    return User(email="alice@example.com", name="Alice", password_hash="$2b$12$hashed_password_here")


@pytest.fixture
def session_record(user):
    return SessionRecord(
        user_id=user.id,
        token="valid-token",
        expires_at=now() + timedelta(days=7),
        ip_address="203.0.113.7",
        user_agent="pytest",
    )


@pytest.fixture
def services():
    return SimpleNamespace(user=AsyncMock(), session=AsyncMock())


@pytest.fixture
def auth_service(config, services):
    service = AuthService(MagicMock())
    service.set_core(SimpleNamespace(config=config, services=services))  # type: ignore[arg-type]
    return service


class TestSignInEmail:
    async def test_success_sets_cookie_and_returns_user(self, auth_service, services, user, session_record):
        services.user.verify_credentials.return_value = user
        services.session.create_session.return_value = session_record

        body = SignInEmailBody(email="alice@example.com", password="correct-horse", callback_url="/test")
        headers = {"x-forwarded-for": "203.0.113.7, 10.0.0.1", "user-agent": "pytest"}
        response = await auth_service.sign_in_email(body, headers)

        assert response.status_code == 200
        assert b'"url":"/test"' in response.body
        assert b'"redirect":true' in response.body
        assert b"password_hash" not in response.body
        assert "session=valid-token" in response.headers["set-cookie"]
        assert "httponly" in response.headers["set-cookie"].lower()
        services.session.create_session.assert_awaited_once_with(user.id, ip_address="203.0.113.7", user_agent="pytest")

    async def test_rejected_credentials_render_error_response(self, auth_service, services):
        services.user.verify_credentials.side_effect = ProviderError(
            ErrorCode.INVALID_EMAIL_OR_PASSWORD, "Invalid email or password", 401
        )

        response = await auth_service.sign_in_email(SignInEmailBody(email="a@b.com", password="wrong"))

        assert response.status_code == 401
        assert response.body == b'{"code":"INVALID_EMAIL_OR_PASSWORD","message":"Invalid email or password"}'
        assert "set-cookie" not in response.headers
        services.session.create_session.assert_not_awaited()


class TestSignUpEmail:
    async def test_success_creates_user_and_session(self, auth_service, services, user, session_record):
        services.user.create_user.return_value = user
        services.session.create_session.return_value = session_record

        body = SignUpEmailBody(email="alice@example.com", password="correct-horse", name="Alice")
        response = await auth_service.sign_up_email(body)

        assert response.status_code == 200
        assert b'"token":"valid-token"' in response.body
        assert "session=valid-token" in response.headers["set-cookie"]
        services.user.create_user.assert_awaited_once_with("Alice", "alice@example.com", "correct-horse")

    async def test_duplicate_email(self, auth_service, services):
        services.user.create_user.side_effect = ProviderError(
            ErrorCode.USER_ALREADY_EXISTS, "User already exists. Use another email.", 422
        )

        body = SignUpEmailBody(email="alice@example.com", password="correct-horse", name="Alice")
        response = await auth_service.sign_up_email(body)

        assert response.status_code == 422
        assert b"USER_ALREADY_EXISTS" in response.body


class TestGetSession:
    async def test_no_cookie_skips_lookup(self, auth_service, services):
        assert await auth_service.get_session({}) is None
        services.session.get_valid_session.assert_not_awaited()

    async def test_unknown_or_expired_token(self, auth_service, services):
        services.session.get_valid_session.return_value = None
        assert await auth_service.get_session({"cookie": "session=stale"}) is None
        services.session.get_valid_session.assert_awaited_once_with("stale")

    async def test_valid_session(self, auth_service, services, user, session_record):
        services.session.get_valid_session.return_value = session_record
        services.user.find_user.return_value = user

        session = await auth_service.get_session({"cookie": "session=valid-token"})

        assert session is not None
        assert session.session.token == "valid-token"
        assert session.user.email == "alice@example.com"

    async def test_session_of_deleted_user_is_absent(self, auth_service, services, session_record):
        services.session.get_valid_session.return_value = session_record
        services.user.find_user.return_value = None

        assert await auth_service.get_session({"cookie": "session=valid-token"}) is None

    async def test_repeated_calls_are_equivalent(self, auth_service, services, user, session_record):
        services.session.get_valid_session.return_value = session_record
        services.user.find_user.return_value = user
        headers = {"cookie": "session=valid-token"}

        assert await auth_service.get_session(headers) == await auth_service.get_session(headers)


class TestSignOut:
    async def test_invalidates_session_and_clears_cookie(self, auth_service, services):
        response = await auth_service.sign_out({"cookie": "session=valid-token"})

        assert response.status_code == 200
        assert response.body == b'{"success":true}'
        assert 'session=""' in response.headers["set-cookie"]
        services.session.invalidate_session.assert_awaited_once_with("valid-token")

    async def test_without_session_cookie(self, auth_service, services):
        response = await auth_service.sign_out({})

        assert response.status_code == 400
        assert b"FAILED_TO_GET_SESSION" in response.body
        services.session.invalidate_session.assert_not_awaited()


class TestHasSessionCookie:
    def test_presence_only(self, auth_service, services):
        request = Request({"type": "http", "headers": [(b"cookie", b"session=anything")]})
        assert auth_service.has_session_cookie(request) is True
        services.session.get_valid_session.assert_not_called()

    def test_absent(self, auth_service):
        assert auth_service.has_session_cookie(Request({"type": "http", "headers": []})) is False


class TestClientIp:
    def test_first_forwarded_address(self):
        assert client_ip({"x-forwarded-for": "198.51.100.1, 10.0.0.1"}) == "198.51.100.1"

    def test_real_ip_fallback(self):
        assert client_ip({"x-real-ip": "198.51.100.2"}) == "198.51.100.2"

    def test_unknown(self):
        assert client_ip({}) is None
