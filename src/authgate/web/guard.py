"""Route guard: cheap session-cookie gate in front of protected pages.

Only checks that a session cookie is present. A forged or stale cookie passes,
so pages behind the guard must still call the session accessor before
disclosing anything tied to the user.
"""

import re
from collections.abc import Iterable
from enum import StrEnum

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp

from authgate.core.modules.auth.provider import AuthProvider

logger = structlog.get_logger(__name__)

PARAM_RE = re.compile(r"^:(\w+)([*+]?)$")


class GuardDecision(StrEnum):
    ALLOWED = "allowed"
    REDIRECTED = "redirected"


def compile_matcher(pattern: str) -> re.Pattern[str]:
    """Compile a path pattern into a regex.

    Supported segments:
    - literal, e.g. `/test`
    - `:name` - exactly one segment
    - `:name*` - zero or more segments
    - `:name+` - one or more segments

    A single trailing slash on the request path is ignored.
    """
    regex = ""
    for part in (p for p in pattern.strip("/").split("/") if p):
        param = PARAM_RE.fullmatch(part)
        if param is None:
            regex += "/" + re.escape(part)
        elif param.group(2) == "*":
            regex += "(?:/[^/]+)*"
        elif param.group(2) == "+":
            regex += "(?:/[^/]+)+"
        else:
            regex += "/[^/]+"
    return re.compile(f"^{regex}/?$")


class RouteGuard:
    def __init__(self, provider: AuthProvider, patterns: Iterable[str], home_path: str) -> None:
        self._provider = provider
        self._matchers = [compile_matcher(p) for p in patterns]
        self._home_path = home_path

    def matches(self, path: str) -> bool:
        return any(m.match(path) for m in self._matchers)

    def evaluate(self, request: Request) -> GuardDecision:
        """Decide whether the request may proceed. Never raises."""
        if not self.matches(request.url.path):
            return GuardDecision.ALLOWED

        try:
            has_cookie = self._provider.has_session_cookie(request)
        except Exception:
            # Unreadable cookie header counts as no cookie
            logger.warning("session_cookie_inspection_failed", path=request.url.path, exc_info=True)
            has_cookie = False

        return GuardDecision.ALLOWED if has_cookie else GuardDecision.REDIRECTED

    def redirect(self, request: Request) -> RedirectResponse:
        url = request.url.replace(path=self._home_path, query="", fragment="")
        return RedirectResponse(url=str(url), status_code=307)


class RouteGuardMiddleware(BaseHTTPMiddleware):
    """Redirect requests for protected paths that carry no session cookie to the home path."""

    def __init__(self, app: ASGIApp, guard: RouteGuard) -> None:
        super().__init__(app)
        self.guard = guard

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        decision = self.guard.evaluate(request)
        logger.debug("route_guard", path=request.url.path, decision=decision)
        if decision is GuardDecision.REDIRECTED:
            return self.guard.redirect(request)
        return await call_next(request)
