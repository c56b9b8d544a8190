"""Shared pytest fixtures."""

from collections.abc import Mapping
from datetime import timedelta
from uuid import UUID

import pytest
from fastapi.testclient import TestClient
from starlette.requests import HTTPConnection
from starlette.responses import JSONResponse, Response

from authgate.app import App
from authgate.config import Config
from authgate.core.modules.auth.cookies import get_session_cookie
from authgate.core.modules.auth.models import SignInEmailBody, SignUpEmailBody
from authgate.core.modules.session.models import Session, SessionRecord
from authgate.core.modules.user.models import UserRecord
from authgate.utils import now
from authgate.web.server import create_fastapi_app


class InMemoryAuthProvider:
    """Auth provider keeping users and sessions in dicts, recording every call."""

    def __init__(self, cookie_name: str = "session") -> None:
        self.cookie_name = cookie_name
        self.users: dict[str, tuple[UserRecord, str]] = {}
        self.sessions: dict[str, Session] = {}
        self.calls: list[tuple[str, object]] = []

    def add_user(self, email: str, password: str, name: str = "Test User") -> UserRecord:
        user = UserRecord(
            id=UUID(int=len(self.users) + 1),
            created_at=now(),
            updated_at=now(),
            email=email,
            email_verified=False,
            name=name,
        )
        self.users[email] = (user, password)
        return user

    def add_session(self, user: UserRecord, token: str, expires_in: timedelta = timedelta(days=7)) -> Session:
        record = SessionRecord(user_id=user.id, token=token, expires_at=now() + expires_in)
        self.sessions[token] = Session(session=record, user=user)
        return self.sessions[token]

    async def sign_in_email(self, body: SignInEmailBody, headers: Mapping[str, str] | None = None) -> Response:
        self.calls.append(("sign_in_email", body))
        entry = self.users.get(body.email)
        if entry is None or entry[1] != body.password:
            return JSONResponse(
                status_code=401, content={"code": "INVALID_EMAIL_OR_PASSWORD", "message": "Invalid email or password"}
            )
        session = self.add_session(entry[0], f"token-{len(self.sessions) + 1}")
        response = JSONResponse({"redirect": True, "token": session.session.token, "url": body.callback_url})
        response.set_cookie(self.cookie_name, session.session.token, httponly=True, samesite="lax")
        return response

    async def sign_up_email(self, body: SignUpEmailBody, headers: Mapping[str, str] | None = None) -> Response:
        self.calls.append(("sign_up_email", body))
        if body.email in self.users:
            return JSONResponse(
                status_code=422, content={"code": "USER_ALREADY_EXISTS", "message": "User already exists. Use another email."}
            )
        user = self.add_user(body.email, body.password, body.name)
        session = self.add_session(user, f"token-{len(self.sessions) + 1}")
        response = JSONResponse({"token": session.session.token})
        response.set_cookie(self.cookie_name, session.session.token, httponly=True, samesite="lax")
        return response

    async def sign_out(self, headers: Mapping[str, str]) -> Response:
        self.calls.append(("sign_out", None))
        token = get_session_cookie(headers, self.cookie_name)
        if token is None:
            return JSONResponse(status_code=400, content={"code": "FAILED_TO_GET_SESSION", "message": "Failed to get session"})
        self.sessions.pop(token, None)
        response = JSONResponse({"success": True})
        response.delete_cookie(self.cookie_name)
        return response

    async def get_session(self, headers: Mapping[str, str]) -> Session | None:
        self.calls.append(("get_session", None))
        token = get_session_cookie(headers, self.cookie_name)
        if token is None:
            return None
        session = self.sessions.get(token)
        if session is None or session.session.is_expired():
            return None
        return session

    def has_session_cookie(self, request: HTTPConnection) -> bool:
        return get_session_cookie(request.headers, self.cookie_name) is not None


@pytest.fixture
def config():
    """Create a test configuration without touching the environment."""
    return Config(
        _env_file=None,
        database_url="mongodb://localhost:27017/authgate_test",
        host="127.0.0.1",
        port=3000,
        debug=False,
    )


@pytest.fixture
def provider():
    return InMemoryAuthProvider()


@pytest.fixture
def app(config, provider):
    return App(config, provider=provider)


@pytest.fixture
def client(app, config):
    with TestClient(create_fastapi_app(app, config)) as test_client:
        yield test_client


@pytest.fixture
def signed_in_user(provider):
    """A registered user with a live session under token `valid-token`."""
    user = provider.add_user("alice@example.com", "correct-horse")
    provider.add_session(user, "valid-token")
    return user
