"""Metadata endpoints for exposing system information."""

from fastapi import APIRouter

from delpro.core.modules.fasttrack.models import FtsType
from delpro.web.deps import AppDep, AuthTokenDep
from delpro.web.openapi import ErrorResponse

router = APIRouter(tags=["metadata"])


@router.get(
    "/metadata/fasttrack-types",
    summary="List FastTrack types",
    description="Returns the fixed FastTrack types. Each type has its own docket number sequence per year.",
    operation_id="getFastTrackTypes",
    responses={
        200: {"description": "FastTrack types"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_fasttrack_types(app: AppDep, auth_token: AuthTokenDep) -> list[FtsType]:
    return await app.get_fasttrack_types(auth_token)


@router.get(
    "/metadata/version",
    summary="Get version information",
    description="Returns build information: git commit hash, commit date and build time.",
    operation_id="getVersion",
    responses={
        200: {"description": "Version and build information"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_version(app: AppDep, auth_token: AuthTokenDep) -> dict[str, str]:
    return await app.get_version(auth_token)
