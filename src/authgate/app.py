from collections.abc import AsyncGenerator, Mapping
from contextlib import asynccontextmanager

from starlette.responses import Response

from authgate.config import Config
from authgate.core.core import Core
from authgate.core.modules.auth.models import SignInEmailBody, SignUpEmailBody
from authgate.core.modules.auth.provider import AuthProvider
from authgate.core.modules.session.models import Session


class App:
    """Facade for auth operations, a pass-through boundary to the auth provider.

    Provider results are never validated or rewritten here. Error responses
    come back exactly as the provider built them and provider exceptions
    propagate unchanged.
    """

    def __init__(self, config: Config, provider: AuthProvider | None = None) -> None:
        self._config = config
        self._core: Core | None = None
        if provider is None:
            self._core = Core(config)
            provider = self._core.services.auth
        self._provider = provider

    @property
    def provider(self) -> AuthProvider:
        return self._provider

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core when the provider is MongoDB-backed."""
        if self._core is None:
            yield
            return
        async with self._core.lifespan():
            yield

    async def sign_in_with_email(self, email: str, password: str, headers: Mapping[str, str] | None = None) -> Response:
        """Forward credentials to the provider's email sign-in."""
        body = SignInEmailBody(email=email, password=password, callback_url=self._config.callback_url)
        return await self._provider.sign_in_email(body, headers)

    async def sign_up_with_email(
        self, name: str, email: str, password: str, headers: Mapping[str, str] | None = None
    ) -> Response:
        """Forward a new account to the provider's email sign-up."""
        body = SignUpEmailBody(email=email, password=password, name=name, callback_url=self._config.callback_url)
        return await self._provider.sign_up_email(body, headers)

    async def sign_out(self, headers: Mapping[str, str]) -> Response:
        """Ask the provider to end the current session."""
        return await self._provider.sign_out(headers)

    async def get_session(self, headers: Mapping[str, str]) -> Session | None:
        """Authoritative session for the given inbound request headers, None when unauthenticated."""
        return await self._provider.get_session(headers)
