from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from delpro.core.modules.fasttrack.models import FastTrackView, FtsType, GeneratedIdentifiers
from delpro.core.pagination import PaginationResult
from delpro.web.deps import AppDep, AuthTokenDep
from delpro.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["fasttrack"])

# Record routes use a path converter because docket numbers contain slashes
IDENTIFIER_DESCRIPTION = "Short code (e.g. `DPL001`) or docket number (e.g. `Delpro/Report/2025/001`)"


class CreateFastTrackRequest(BaseModel):
    """Request to create a FastTrack record."""

    title: str = Field(..., description="Title (1-200 characters)")
    small_id: str = Field(..., description="Short code, normally taken from the generate-id endpoint")
    docket_number: str = Field(..., description="Docket number, normally taken from the generate-id endpoint")
    fts_type: str = Field(FtsType.REPORT.value, description="FastTrack type; must match the docket number's type segment")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "title": "Tensile test summary",
                    "smallId": "DPL001",
                    "docketNumber": "Delpro/Report/2025/001",
                    "ftsType": "Report",
                }
            ]
        },
    )


class GenerateIdRequest(BaseModel):
    fts_type: str = Field(FtsType.REPORT.value, description="FastTrack type")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UpdateFastTrackRequest(BaseModel):
    title: str = Field(..., description="New title (1-200 characters)")


@router.get(
    "/fasttrack/generate-id",
    summary="Generate FastTrack identifiers",
    description=(
        "Propose a short code and a docket number for a new record of the given type. Nothing is reserved: "
        "pass the values to `createFastTrack`, and if that fails with `duplicate_value` because another record "
        "took them in the meantime, generate again. Only accessible by super admins."
    ),
    operation_id="generateFastTrackIds",
    responses={
        200: {"description": "Proposed identifiers"},
        400: {"model": ErrorResponse, "description": "Unknown FastTrack type"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Super admin privileges required"},
        500: {"model": ErrorResponse, "description": "No free short code could be found"},
    },
)
async def generate_ids(
    app: AppDep,
    auth_token: AuthTokenDep,
    fts_type: Annotated[str, Query(alias="ftsType", description="FastTrack type")] = FtsType.REPORT.value,
) -> GeneratedIdentifiers:
    return await app.generate_fasttrack_ids(auth_token, fts_type)


@router.post(
    "/fasttrack/generate-id",
    summary="Generate FastTrack identifiers (type in body)",
    description="Same as the GET variant, with the type given as `ftsType` in a JSON body. Only accessible by super admins.",
    operation_id="generateFastTrackIdsFromBody",
    responses={
        200: {"description": "Proposed identifiers"},
        400: {"model": ErrorResponse, "description": "Unknown FastTrack type"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Super admin privileges required"},
        500: {"model": ErrorResponse, "description": "No free short code could be found"},
    },
)
async def generate_ids_from_body(request: GenerateIdRequest, app: AppDep, auth_token: AuthTokenDep) -> GeneratedIdentifiers:
    return await app.generate_fasttrack_ids(auth_token, request.fts_type)


@router.get(
    "/fasttrack",
    summary="List FastTrack records",
    description="Get paginated FastTrack records, newest first. Accessible by super admins and internal staff.",
    operation_id="listFastTracks",
    responses={
        200: {"description": "Paginated list of records"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
    },
)
async def list_fasttracks(
    app: AppDep,
    auth_token: AuthTokenDep,
    limit: Annotated[int, Query(ge=1, le=500, description="Maximum items to return")] = 50,
    offset: Annotated[int, Query(ge=0, description="Number of items to skip")] = 0,
) -> PaginationResult[FastTrackView]:
    return await app.get_fasttracks(auth_token, limit, offset)


@router.post(
    "/fasttrack",
    summary="Create FastTrack record",
    description="Create a record with the given identifiers. Both must be unused. Only accessible by super admins.",
    operation_id="createFastTrack",
    status_code=201,
    responses={
        201: {"description": "Record created"},
        400: {"model": ErrorResponse, "description": "Invalid data, unknown type, or identifier already exists"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Super admin privileges required"},
    },
)
async def create_fasttrack(request: CreateFastTrackRequest, app: AppDep, auth_token: AuthTokenDep) -> FastTrackView:
    return await app.create_fasttrack(auth_token, request.title, request.small_id, request.docket_number, request.fts_type)


@router.put(
    "/fasttrack/{identifier:path}/publish",
    summary="Publish FastTrack record",
    description="Mark a record as published. Only accessible by super admins.",
    operation_id="publishFastTrack",
    responses={
        200: {"description": "Record published"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Super admin privileges required"},
        404: {"model": ErrorResponse, "description": "Record not found"},
    },
)
async def publish_fasttrack(identifier: str, app: AppDep, auth_token: AuthTokenDep) -> FastTrackView:
    return await app.publish_fasttrack(auth_token, identifier)


@router.get(
    "/fasttrack/{identifier:path}",
    summary="Get FastTrack record",
    description=f"Get a record by identifier. {IDENTIFIER_DESCRIPTION}.",
    operation_id="getFastTrack",
    responses={
        200: {"description": "Record details"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
        404: {"model": ErrorResponse, "description": "Record not found"},
    },
)
async def get_fasttrack(identifier: str, app: AppDep, auth_token: AuthTokenDep) -> FastTrackView:
    return await app.get_fasttrack(auth_token, identifier)


@router.put(
    "/fasttrack/{identifier:path}",
    summary="Update FastTrack record",
    description="Update the title of a record. Identifiers cannot be changed. Only accessible by super admins.",
    operation_id="updateFastTrack",
    responses={
        200: {"description": "Record updated"},
        400: {"model": ErrorResponse, "description": "Invalid title"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Super admin privileges required"},
        404: {"model": ErrorResponse, "description": "Record not found"},
    },
)
async def update_fasttrack(
    identifier: str, request: UpdateFastTrackRequest, app: AppDep, auth_token: AuthTokenDep
) -> FastTrackView:
    return await app.update_fasttrack(auth_token, identifier, request.title)


@router.delete(
    "/fasttrack/{identifier:path}",
    summary="Delete FastTrack record",
    description="Delete a record. Gaps left in the sequences are not backfilled. Only accessible by super admins.",
    operation_id="deleteFastTrack",
    status_code=204,
    responses={
        204: {"description": "Record deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Super admin privileges required"},
        404: {"model": ErrorResponse, "description": "Record not found"},
    },
)
async def delete_fasttrack(identifier: str, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.delete_fasttrack(auth_token, identifier)
