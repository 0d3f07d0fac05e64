from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from delpro.core.db import MongoModel
from delpro.utils import now


class UserRole(StrEnum):
    SUPER_ADMIN = "super_admin"
    INTERNAL_STAFF = "internal_staff"
    CLIENT = "client"


class User(MongoModel):
    """User domain model with credentials."""

    email: str  # stored lowercased
    name: str
    role: UserRole
    password_hash: str  # bcrypt hash
    is_active: bool = True
    created_at: datetime = Field(default_factory=now)


class UserView(BaseModel):
    """User account information (API representation)."""

    id: UUID = Field(..., description="User ID")
    email: str = Field(..., description="Email address used to log in")
    name: str = Field(..., description="Display name")
    role: UserRole = Field(..., description="Account role")
    is_active: bool = Field(..., description="Whether the account may log in")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(id=user.id, email=user.email, name=user.name, role=user.role, is_active=user.is_active)
