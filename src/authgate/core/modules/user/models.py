from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from authgate.core.db import MongoModel
from authgate.utils import now


class User(MongoModel):
    """User domain model with credentials.

    Indexed on email - unique, stored lowercased.
    """

    email: str
    email_verified: bool = False
    name: str
    image: str | None = None
    password_hash: str  # bcrypt hash
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)


class UserRecord(BaseModel):
    """User account information (API representation, no credentials)."""

    id: UUID = Field(..., description="User ID")
    created_at: datetime = Field(..., description="Account creation time")
    updated_at: datetime = Field(..., description="Last account update time")
    email: str = Field(..., description="Email address, unique")
    email_verified: bool = Field(..., description="Whether the email address has been verified")
    name: str = Field(..., description="Display name")
    image: str | None = Field(None, description="Avatar image reference")

    @classmethod
    def from_domain(cls, user: User) -> "UserRecord":
        """Create view model from domain model."""
        return cls(
            id=user.id,
            created_at=user.created_at,
            updated_at=user.updated_at,
            email=user.email,
            email_verified=user.email_verified,
            name=user.name,
            image=user.image,
        )
