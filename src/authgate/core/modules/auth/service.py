from collections.abc import Mapping
from typing import Any

import structlog
from starlette.requests import HTTPConnection
from starlette.responses import JSONResponse, Response

from authgate.core.core import Service
from authgate.core.modules.auth.cookies import clear_session_cookie_kwargs, get_session_cookie, session_cookie_kwargs
from authgate.core.modules.auth.models import ErrorCode, SignInEmailBody, SignUpEmailBody
from authgate.core.modules.session.models import Session, SessionRecord
from authgate.core.modules.user.models import User, UserRecord
from authgate.errors import ProviderError

logger = structlog.get_logger(__name__)


def error_response(error: ProviderError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content={"code": error.code, "message": str(error)})


def client_ip(headers: Mapping[str, str]) -> str | None:
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip() or None
    return headers.get("x-real-ip") or None


class AuthService(Service):
    """MongoDB-backed auth provider built on the user and session services."""

    @property
    def cookie_name(self) -> str:
        return self.core.config.session_cookie_name

    async def sign_in_email(self, body: SignInEmailBody, headers: Mapping[str, str] | None = None) -> Response:
        """Verify credentials, create a session and set the session cookie."""
        try:
            user = await self.core.services.user.verify_credentials(body.email, body.password)
        except ProviderError as e:
            logger.info("sign_in_rejected", code=e.code)
            return error_response(e)

        session = await self._start_session(user, headers or {})
        response = JSONResponse(
            {
                "redirect": body.callback_url is not None,
                "token": session.token,
                "url": body.callback_url,
                "user": self._user_payload(user),
            }
        )
        response.set_cookie(**session_cookie_kwargs(self.core.config, session.token))
        logger.info("user_signed_in", user_id=user.id)
        return response

    async def sign_up_email(self, body: SignUpEmailBody, headers: Mapping[str, str] | None = None) -> Response:
        """Create the account, sign it in immediately and set the session cookie."""
        try:
            user = await self.core.services.user.create_user(body.name, body.email, body.password)
        except ProviderError as e:
            logger.info("sign_up_rejected", code=e.code)
            return error_response(e)

        session = await self._start_session(user, headers or {})
        response = JSONResponse({"token": session.token, "user": self._user_payload(user)})
        response.set_cookie(**session_cookie_kwargs(self.core.config, session.token))
        logger.info("user_signed_up", user_id=user.id)
        return response

    async def sign_out(self, headers: Mapping[str, str]) -> Response:
        """Invalidate the current session and clear the session cookie."""
        token = get_session_cookie(headers, self.cookie_name)
        if token is None:
            return error_response(ProviderError(ErrorCode.FAILED_TO_GET_SESSION, "Failed to get session"))

        await self.core.services.session.invalidate_session(token)
        response = JSONResponse({"success": True})
        response.delete_cookie(**clear_session_cookie_kwargs(self.core.config))
        logger.info("user_signed_out")
        return response

    async def get_session(self, headers: Mapping[str, str]) -> Session | None:
        token = get_session_cookie(headers, self.cookie_name)
        if token is None:
            return None

        record = await self.core.services.session.get_valid_session(token)
        if record is None:
            return None

        # A session whose user no longer exists is not a session
        user = await self.core.services.user.find_user(record.user_id)
        if user is None:
            logger.warning("session_without_user", session_id=record.id, user_id=record.user_id)
            return None

        return Session(session=record, user=UserRecord.from_domain(user))

    def has_session_cookie(self, request: HTTPConnection) -> bool:
        return get_session_cookie(request.headers, self.cookie_name) is not None

    async def _start_session(self, user: User, headers: Mapping[str, str]) -> SessionRecord:
        return await self.core.services.session.create_session(
            user.id, ip_address=client_ip(headers), user_agent=headers.get("user-agent")
        )

    @staticmethod
    def _user_payload(user: User) -> dict[str, Any]:
        return UserRecord.from_domain(user).model_dump(mode="json")
