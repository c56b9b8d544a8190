import secrets
from typing import Any
from uuid import UUID

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from authgate.core.core import Service
from authgate.core.modules.auth.models import ErrorCode
from authgate.core.modules.user.models import User
from authgate.core.modules.user.validators import normalize_email, validate_email, validate_password
from authgate.errors import ProviderError

logger = structlog.get_logger(__name__)

BCRYPT_MAX_BYTES = 72
# Hash of a random secret, compared against when there is no real hash to check
DUMMY_HASH = bcrypt.hashpw(secrets.token_bytes(32), bcrypt.gensalt())


class UserService(Service):
    """Stores users and verifies their credentials."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("email", 1)], unique=True)
        logger.debug("user_service_started")

    async def find_user(self, user_id: UUID) -> User | None:
        """Get user by ID, or None if it does not exist."""
        doc = await self._collection.find_one({"_id": user_id})
        if doc is None:
            return None
        return User.model_validate(doc)

    async def find_user_by_email(self, email: str) -> User | None:
        """Get user by email (case-insensitive), or None if it does not exist."""
        doc = await self._collection.find_one({"email": normalize_email(email)})
        if doc is None:
            return None
        return User.model_validate(doc)

    async def create_user(self, name: str, email: str, password: str) -> User:
        """Create user with hashed password."""
        email = normalize_email(email)
        validate_email(email)
        validate_password(password, self.core.config.min_password_length, self.core.config.max_password_length)

        if await self.find_user_by_email(email) is not None:
            raise ProviderError(ErrorCode.USER_ALREADY_EXISTS, "User already exists. Use another email.", 422)

        password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
        user = User(email=email, name=name, password_hash=password_hash)
        try:
            await self._collection.insert_one(user.to_mongo())
        except DuplicateKeyError as e:
            # Lost a race with a concurrent sign-up for the same email
            raise ProviderError(ErrorCode.USER_ALREADY_EXISTS, "User already exists. Use another email.", 422) from e

        logger.info("user_created", user_id=user.id)
        return user

    async def verify_credentials(self, email: str, password: str) -> User:
        """Return the user owning these credentials or raise INVALID_EMAIL_OR_PASSWORD.

        Unknown emails and over-long passwords still pay for one bcrypt check,
        so response time does not reveal which emails have accounts.
        """
        validate_email(normalize_email(email))
        user = await self.find_user_by_email(email)

        password_bytes = password.encode("utf-8")
        if user is None or len(password_bytes) > self.core.config.max_password_length:
            bcrypt.checkpw(password_bytes[:BCRYPT_MAX_BYTES], DUMMY_HASH)
            raise ProviderError(ErrorCode.INVALID_EMAIL_OR_PASSWORD, "Invalid email or password", 401)

        if not bcrypt.checkpw(password_bytes, user.password_hash.encode("utf-8")):
            raise ProviderError(ErrorCode.INVALID_EMAIL_OR_PASSWORD, "Invalid email or password", 401)
        return user
