from collections.abc import Mapping
from typing import Any

from starlette.requests import cookie_parser

from authgate.config import Config

SECURE_PREFIX = "__Secure-"


def session_cookie_name(config: Config) -> str:
    # Browsers only accept the __Secure- prefix on cookies set with Secure over HTTPS.
    if config.cookie_secure:
        return f"{SECURE_PREFIX}{config.session_cookie_name}"
    return config.session_cookie_name


def get_session_cookie(headers: Mapping[str, str], cookie_name: str) -> str | None:
    """Return the session cookie value from request headers, or None if absent or empty.

    Looks for both the plain and the __Secure- prefixed name. The value is not
    decoded or verified.
    """
    raw = headers.get("cookie")
    if not raw:
        return None
    cookies = cookie_parser(raw)
    for name in (cookie_name, f"{SECURE_PREFIX}{cookie_name}"):
        value = cookies.get(name)
        if value:
            return value
    return None


def session_cookie_kwargs(config: Config, token: str) -> dict[str, Any]:
    return {
        "key": session_cookie_name(config),
        "value": token,
        "max_age": config.session_expires_in,
        "httponly": True,
        "secure": config.cookie_secure,
        "samesite": "lax",
        "path": "/",
    }


def clear_session_cookie_kwargs(config: Config) -> dict[str, Any]:
    return {
        "key": session_cookie_name(config),
        "httponly": True,
        "secure": config.cookie_secure,
        "samesite": "lax",
        "path": "/",
    }
