"""Capability surface the application consumes from an authentication provider."""

from collections.abc import Mapping
from typing import Protocol

from starlette.requests import HTTPConnection
from starlette.responses import Response

from authgate.core.modules.auth.models import SignInEmailBody, SignUpEmailBody
from authgate.core.modules.session.models import Session


class AuthProvider(Protocol):
    """Authentication provider.

    Two separate tiers for checking who is calling:

    - `has_session_cookie` is a fast, side-effect-free presence check. It never
      validates anything and must not be used as an authorization decision.
    - `get_session` is the authoritative check (expiry, revocation, user lookup).

    Sign-in, sign-up and sign-out return the provider's own HTTP response,
    including any Set-Cookie headers and `{code, message}` error payloads.
    """

    async def sign_in_email(self, body: SignInEmailBody, headers: Mapping[str, str] | None = None) -> Response: ...

    async def sign_up_email(self, body: SignUpEmailBody, headers: Mapping[str, str] | None = None) -> Response: ...

    async def sign_out(self, headers: Mapping[str, str]) -> Response: ...

    async def get_session(self, headers: Mapping[str, str]) -> Session | None: ...

    def has_session_cookie(self, request: HTTPConnection) -> bool: ...
