import secrets
from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from delpro.core.core import Service
from delpro.core.modules.session.models import SESSION_TTL_SECONDS, AuthToken, Session
from delpro.core.modules.user.models import User
from delpro.errors import AccessDeniedError, AuthenticationError


class SessionService(Service):
    """Service for managing user sessions."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")
        self._session_users: dict[AuthToken, UUID] = {}

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("auth_token", 1)], unique=True)
        await self._collection.create_index([("user_id", 1)])
        await self._collection.create_index([("created_at", 1)], expireAfterSeconds=SESSION_TTL_SECONDS)

    async def create_session(self, user_id: UUID) -> AuthToken:
        auth_token = AuthToken(secrets.token_urlsafe(32))
        new_session = Session(user_id=user_id, auth_token=auth_token)
        await self._collection.insert_one(new_session.to_mongo())
        return auth_token

    async def get_authenticated_user(self, auth_token: AuthToken) -> User:
        user_id = self._session_users.get(auth_token)
        if user_id is None:
            session = await self._collection.find_one({"auth_token": auth_token})
            if session is None:
                raise AuthenticationError("Invalid or expired session")
            user_id = session["user_id"]

        # Users are resolved on every call so role and activation changes apply immediately
        if not self.core.services.user.has_user(user_id):
            self._session_users.pop(auth_token, None)
            raise AuthenticationError("Invalid or expired session")

        user = self.core.services.user.get_user(user_id)
        if not user.is_active:
            raise AccessDeniedError("Account not activated")

        self._session_users[auth_token] = user_id
        return user

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        """Check that the token maps to a live session.

        A deactivated account raises AccessDeniedError instead of returning
        False, so the client sees "Account not activated" rather than a
        token error.
        """
        try:
            await self.get_authenticated_user(auth_token)
        except AuthenticationError:
            return False
        return True

    async def invalidate_session(self, auth_token: AuthToken) -> None:
        """Invalidate a session by removing it from the database."""
        self._session_users.pop(auth_token, None)
        await self._collection.delete_one({"auth_token": auth_token})

    async def invalidate_user_sessions(self, user_id: UUID) -> int:
        """Remove every session of a user, returning how many were deleted."""
        self._session_users = {token: uid for token, uid in self._session_users.items() if uid != user_id}
        result = await self._collection.delete_many({"user_id": user_id})
        return result.deleted_count
