from delpro.web.routers.auth import router as auth_router
from delpro.web.routers.fasttrack import router as fasttrack_router
from delpro.web.routers.metadata import router as metadata_router
from delpro.web.routers.profile import router as profile_router
from delpro.web.routers.users import router as users_router

__all__ = [
    "auth_router",
    "fasttrack_router",
    "metadata_router",
    "profile_router",
    "users_router",
]
