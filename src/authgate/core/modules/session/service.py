import secrets
from datetime import timedelta
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from authgate.core.core import Service
from authgate.core.modules.session.models import SessionRecord
from authgate.utils import now

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Service for managing user sessions."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        # Unique index for token (for authentication lookups)
        await self._collection.create_index([("token", 1)], unique=True)
        # Single index for user_id (for finding sessions by user)
        await self._collection.create_index([("user_id", 1)])
        # TTL index, MongoDB removes documents once expires_at has passed
        await self._collection.create_index([("expires_at", 1)], expireAfterSeconds=0)

    async def create_session(
        self, user_id: UUID, ip_address: str | None = None, user_agent: str | None = None
    ) -> SessionRecord:
        session = SessionRecord(
            user_id=user_id,
            token=secrets.token_urlsafe(32),
            expires_at=now() + timedelta(seconds=self.core.config.session_expires_in),
            ip_address=ip_address,
            user_agent=user_agent,
        )
        await self._collection.insert_one(session.to_mongo())
        logger.debug("session_created", session_id=session.id, user_id=user_id)
        return session

    async def get_valid_session(self, token: str) -> SessionRecord | None:
        """Get a non-expired session by token.

        The TTL monitor runs only periodically, so expiry is checked here as well.
        """
        doc = await self._collection.find_one({"token": token})
        if doc is None:
            return None
        session = SessionRecord.model_validate(doc)
        if session.is_expired():
            return None
        return session

    async def invalidate_session(self, token: str) -> bool:
        """Invalidate a session by removing it from the database."""
        result = await self._collection.delete_one({"token": token})
        return result.deleted_count > 0
