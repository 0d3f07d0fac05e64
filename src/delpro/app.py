from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from delpro.config import Config
from delpro.core.core import Core
from delpro.core.modules.fasttrack.models import FastTrack, FastTrackCreator, FastTrackView, FtsType, GeneratedIdentifiers
from delpro.core.modules.session.models import AuthToken
from delpro.core.modules.user.models import User, UserRole, UserView
from delpro.core.pagination import PaginationResult
from delpro.errors import AccessDeniedError, AuthenticationError, ValidationError

# Roles allowed to read FastTrack records; everything else on them is super admin only
FASTTRACK_READERS = (UserRole.SUPER_ADMIN, UserRole.INTERNAL_STAFF)


class App:
    """Facade for all application operations, validates permissions before delegating to Core."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        return await self._core.services.session.is_auth_token_valid(auth_token)

    # === Auth and profile ===
    async def login(self, email: str, password: str) -> AuthToken:
        """Authenticate user and create session."""
        if not self._core.services.user.verify_password(email, password):
            raise AuthenticationError("Invalid email or password")
        user = self._core.services.user.get_user_by_email(email)
        if not user.is_active:
            raise AccessDeniedError("Account not activated")
        return await self._core.services.session.create_session(user.id)

    async def logout(self, auth_token: AuthToken) -> None:
        await self._core.services.access.ensure_authenticated(auth_token)
        await self._core.services.session.invalidate_session(auth_token)

    async def get_current_user(self, auth_token: AuthToken) -> UserView:
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        return UserView.from_domain(current_user)

    async def change_password(self, auth_token: AuthToken, old_password: str, new_password: str) -> None:
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        await self._core.services.user.change_password(current_user.id, old_password, new_password)

    # === Users ===
    async def get_all_users(self, auth_token: AuthToken) -> list[UserView]:
        """Get all users (super admin only)."""
        await self._core.services.access.ensure_super_admin(auth_token)
        return [UserView.from_domain(user) for user in self._core.services.user.get_all_users()]

    async def create_user(self, auth_token: AuthToken, email: str, name: str, password: str, role: UserRole) -> UserView:
        """Create a new account with any role (super admin only)."""
        await self._core.services.access.ensure_super_admin(auth_token)
        user = await self._core.services.user.create_user(email, name, password, role)
        return UserView.from_domain(user)

    async def set_user_active(self, auth_token: AuthToken, email: str, is_active: bool) -> UserView:
        """Activate or deactivate an account (super admin only, not self)."""
        current_user = await self._core.services.access.ensure_super_admin(auth_token)
        user = self._resolve_user(email)
        if user.id == current_user.id:
            raise ValidationError("Cannot change activation of your own account")

        user = await self._core.services.user.set_active(user.id, is_active)
        if not is_active:
            await self._core.services.session.invalidate_user_sessions(user.id)
        return UserView.from_domain(user)

    async def delete_user(self, auth_token: AuthToken, email: str) -> None:
        """Delete an account (super admin only, cannot delete self)."""
        current_user = await self._core.services.access.ensure_super_admin(auth_token)
        user = self._resolve_user(email)

        if user.id == current_user.id:
            raise ValidationError("Cannot delete yourself")

        await self._core.services.session.invalidate_user_sessions(user.id)
        await self._core.services.user.delete_user(user.id)

    # === FastTrack ===
    async def generate_fasttrack_ids(self, auth_token: AuthToken, fts_type: str) -> GeneratedIdentifiers:
        """Propose identifiers for a new record (super admin only)."""
        await self._core.services.access.ensure_super_admin(auth_token)
        return await self._core.services.fasttrack.generate_identifiers(fts_type)

    async def get_fasttracks(self, auth_token: AuthToken, limit: int = 50, offset: int = 0) -> PaginationResult[FastTrackView]:
        """Get paginated records, newest first (super admin and internal staff)."""
        await self._core.services.access.ensure_role(auth_token, *FASTTRACK_READERS)
        page = await self._core.services.fasttrack.list_fasttracks(limit, offset)
        return PaginationResult(
            items=[self._to_view(item) for item in page.items], total=page.total, limit=page.limit, offset=page.offset
        )

    async def get_fasttrack(self, auth_token: AuthToken, identifier: str) -> FastTrackView:
        """Get a record by short code or docket number (super admin and internal staff)."""
        await self._core.services.access.ensure_role(auth_token, *FASTTRACK_READERS)
        return self._to_view(await self._core.services.fasttrack.get_fasttrack(identifier))

    async def create_fasttrack(
        self, auth_token: AuthToken, title: str, small_id: str, docket_number: str, fts_type: str
    ) -> FastTrackView:
        """Create a record with the given identifiers (super admin only)."""
        current_user = await self._core.services.access.ensure_super_admin(auth_token)
        fast_track = await self._core.services.fasttrack.create_fasttrack(
            current_user.id, title, small_id, docket_number, fts_type
        )
        return self._to_view(fast_track)

    async def update_fasttrack(self, auth_token: AuthToken, identifier: str, title: str) -> FastTrackView:
        """Update the title of a record (super admin only)."""
        await self._core.services.access.ensure_super_admin(auth_token)
        return self._to_view(await self._core.services.fasttrack.update_title(identifier, title))

    async def publish_fasttrack(self, auth_token: AuthToken, identifier: str) -> FastTrackView:
        """Mark a record as published (super admin only)."""
        await self._core.services.access.ensure_super_admin(auth_token)
        return self._to_view(await self._core.services.fasttrack.publish(identifier))

    async def delete_fasttrack(self, auth_token: AuthToken, identifier: str) -> None:
        """Delete a record (super admin only)."""
        await self._core.services.access.ensure_super_admin(auth_token)
        await self._core.services.fasttrack.delete_fasttrack(identifier)

    # === Metadata ===
    async def get_fasttrack_types(self, auth_token: AuthToken) -> list[FtsType]:
        await self._core.services.access.ensure_authenticated(auth_token)
        return list(FtsType)

    async def get_version(self, auth_token: AuthToken) -> dict[str, str]:
        await self._core.services.access.ensure_authenticated(auth_token)
        config = self._core.config
        return {
            "git_commit_hash": config.git_commit_hash,
            "git_commit_date": config.git_commit_date,
            "build_time": config.build_time,
        }

    # === Private helpers ===
    def _resolve_user(self, email: str) -> User:
        """Resolve email to User object. Raises NotFoundError if not found."""
        return self._core.services.user.get_user_by_email(email)

    def _to_view(self, fast_track: FastTrack) -> FastTrackView:
        users = self._core.services.user.get_user_cache()
        author = users.get(fast_track.created_by)
        creator = FastTrackCreator(id=author.id, name=author.name) if author else None
        return FastTrackView.from_domain(fast_track, creator)
