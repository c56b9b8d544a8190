"""Session management models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from authgate.core.db import MongoModel
from authgate.core.modules.user.models import UserRecord
from authgate.utils import now


class SessionRecord(MongoModel):
    """User authentication session.

    Indexed on token - unique, user_id, expires_at (TTL).
    """

    user_id: UUID
    token: str
    expires_at: datetime
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    def is_expired(self, at: datetime | None = None) -> bool:
        """A session is valid only while the current time is before expires_at."""
        return (at or now()) >= self.expires_at


class Session(BaseModel):
    """Authoritative session: the session record with its user."""

    session: SessionRecord
    user: UserRecord
