from types import MappingProxyType
from typing import Any
from uuid import UUID

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase

from delpro.core.core import Service
from delpro.core.modules.user.models import User, UserRole
from delpro.core.modules.user.validators import normalize_email, validate_name, validate_password
from delpro.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


class UserService(Service):
    """Manages user accounts with in-memory cache."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")
        self._users: dict[UUID, User] = {}

    def get_user(self, user_id: UUID) -> User:
        """Get user by ID from cache."""
        if user_id not in self._users:
            raise NotFoundError(f"User '{user_id}' not found")
        return self._users[user_id]

    def find_user_by_email(self, email: str) -> User | None:
        email = email.strip().lower()
        return next((u for u in self._users.values() if u.email == email), None)

    def get_user_by_email(self, email: str) -> User:
        """Get user by email from cache."""
        user = self.find_user_by_email(email)
        if user is None:
            raise NotFoundError(f"User '{email}' not found")
        return user

    def has_user(self, user_id: UUID) -> bool:
        return user_id in self._users

    def has_email(self, email: str) -> bool:
        return self.find_user_by_email(email) is not None

    def get_all_users(self) -> list[User]:
        """Get all users from cache, oldest first."""
        return sorted(self._users.values(), key=lambda u: u.created_at)

    def get_user_cache(self) -> MappingProxyType[UUID, User]:
        """Get read-only view of user cache for resolving record authors."""
        return MappingProxyType(self._users)

    async def create_user(self, email: str, name: str, password: str, role: UserRole, is_active: bool = True) -> User:
        """Create user with hashed password."""
        email = normalize_email(email)
        name = validate_name(name)
        if self.has_email(email):
            raise ValidationError(f"User '{email}' already exists")

        validate_password(password)
        user = User(email=email, name=name, role=role, password_hash=hash_password(password), is_active=is_active)
        res = await self._collection.insert_one(user.to_mongo())
        logger.info("user_created", user_id=res.inserted_id, role=role)
        return await self.update_user_cache(res.inserted_id)

    def verify_password(self, email: str, password: str) -> bool:
        """Verify password against stored hash."""
        user = self.find_user_by_email(email)
        if user is None:
            return False
        return check_password(password, user.password_hash)

    async def change_password(self, user_id: UUID, old_password: str, new_password: str) -> None:
        """Change user password after verifying current password."""
        user = self.get_user(user_id)
        if not check_password(old_password, user.password_hash):
            raise ValidationError("Invalid current password")

        validate_password(new_password)
        await self._collection.update_one({"_id": user_id}, {"$set": {"password_hash": hash_password(new_password)}})
        await self.update_user_cache(user_id)

    async def set_active(self, user_id: UUID, is_active: bool) -> User:
        """Enable or disable login for an account."""
        self.get_user(user_id)
        await self._collection.update_one({"_id": user_id}, {"$set": {"is_active": is_active}})
        return await self.update_user_cache(user_id)

    async def delete_user(self, user_id: UUID) -> None:
        """Delete a user from the system."""
        if not self.has_user(user_id):
            raise NotFoundError(f"User '{user_id}' not found")

        await self._collection.delete_one({"_id": user_id})
        del self._users[user_id]
        logger.info("user_deleted", user_id=user_id)

    async def ensure_super_admin_exists(self) -> None:
        """Create the configured super admin if no account uses its email."""
        config = self.core.config
        if not self.has_email(config.admin_email):
            await self.create_user(config.admin_email, config.admin_name, config.admin_password, UserRole.SUPER_ADMIN)

    async def update_all_users_cache(self) -> None:
        """Reload all users cache from database."""
        users = await User.list_cursor(self._collection.find())
        self._users = {user.id: user for user in users}

    async def update_user_cache(self, user_id: UUID) -> User:
        """Reload a specific user cache from database."""
        user = await self._collection.find_one({"_id": user_id})
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found")
        self._users[user_id] = User.model_validate(user)
        return self._users[user_id]

    async def on_start(self) -> None:
        """Initialize indexes, cache, and super admin."""
        await self._collection.create_index([("email", 1)], unique=True)
        await self._collection.create_index([("role", 1)])
        await self.update_all_users_cache()
        await self.ensure_super_admin_exists()
        logger.debug("user_service_started", user_count=len(self._users))
