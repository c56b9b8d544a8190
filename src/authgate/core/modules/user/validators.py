from authgate.core.modules.auth.models import ErrorCode
from authgate.errors import ProviderError
from authgate.utils import is_email


def normalize_email(email: str) -> str:
    """Lowercase and strip an email address for storage and lookup."""
    return email.strip().lower()


def validate_email(email: str) -> None:
    """Validate email address shape.

    Raises:
        ProviderError: INVALID_EMAIL if the address is malformed
    """
    if not is_email(email):
        raise ProviderError(ErrorCode.INVALID_EMAIL, "Invalid email")


def validate_password(password: str, min_length: int, max_length: int) -> None:
    """Validate password meets length requirements.

    Requirements:
    - At least `min_length` characters
    - At most `max_length` bytes once UTF-8 encoded

    Raises:
        ProviderError: PASSWORD_TOO_SHORT or PASSWORD_TOO_LONG
    """
    if len(password) < min_length:
        raise ProviderError(ErrorCode.PASSWORD_TOO_SHORT, "Password too short")

    if len(password.encode("utf-8")) > max_length:
        raise ProviderError(ErrorCode.PASSWORD_TOO_LONG, "Password too long")
