"""Auth provider request bodies and error codes."""

from enum import StrEnum

from pydantic import BaseModel


class ErrorCode(StrEnum):
    INVALID_EMAIL = "INVALID_EMAIL"
    INVALID_EMAIL_OR_PASSWORD = "INVALID_EMAIL_OR_PASSWORD"  # noqa: S105
    PASSWORD_TOO_SHORT = "PASSWORD_TOO_SHORT"  # noqa: S105
    PASSWORD_TOO_LONG = "PASSWORD_TOO_LONG"  # noqa: S105
    USER_ALREADY_EXISTS = "USER_ALREADY_EXISTS"
    FAILED_TO_GET_SESSION = "FAILED_TO_GET_SESSION"


class SignInEmailBody(BaseModel):
    """Email sign-in request as received by the provider."""

    email: str
    password: str
    callback_url: str | None = None


class SignUpEmailBody(BaseModel):
    """Email sign-up request as received by the provider."""

    email: str
    password: str
    name: str
    callback_url: str | None = None
