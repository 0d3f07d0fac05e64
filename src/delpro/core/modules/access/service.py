from delpro.core.core import Service
from delpro.core.modules.session.models import AuthToken
from delpro.core.modules.user.models import User, UserRole
from delpro.errors import AccessDeniedError


class AccessService(Service):
    async def ensure_authenticated(self, auth_token: AuthToken) -> User:
        """Ensure the user is authenticated and active."""
        return await self.core.services.session.get_authenticated_user(auth_token)

    async def ensure_role(self, auth_token: AuthToken, *roles: UserRole) -> User:
        """Ensure the authenticated user holds one of the given roles."""
        user = await self.core.services.session.get_authenticated_user(auth_token)
        if user.role not in roles:
            raise AccessDeniedError("Insufficient permissions")
        return user

    async def ensure_super_admin(self, auth_token: AuthToken) -> User:
        """Ensure the authenticated user is a super admin, raise AccessDeniedError if not."""
        return await self.ensure_role(auth_token, UserRole.SUPER_ADMIN)
