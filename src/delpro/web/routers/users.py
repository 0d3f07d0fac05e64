from fastapi import APIRouter
from pydantic import BaseModel, Field

from delpro.core.modules.user.models import UserRole, UserView
from delpro.web.deps import AppDep, AuthTokenDep
from delpro.web.openapi import ErrorResponse

router = APIRouter(tags=["users"])


class CreateUserRequest(BaseModel):
    """Request to create a new account."""

    email: str = Field(..., min_length=1, description="Email address, used to log in")
    name: str = Field(..., min_length=1, description="Display name (2-100 characters)")
    password: str = Field(..., min_length=1, description="Password (6+ characters with upper, lower and digit)")
    role: UserRole = Field(..., description="Account role")


class UpdateUserActiveRequest(BaseModel):
    is_active: bool = Field(..., description="Whether the account may log in")


@router.get(
    "/users",
    summary="List all users",
    description="Get all accounts. Only accessible by super admins.",
    operation_id="listUsers",
    responses={
        200: {"description": "List of all users"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Super admin privileges required"},
    },
)
async def list_users(app: AppDep, auth_token: AuthTokenDep) -> list[UserView]:
    return await app.get_all_users(auth_token)


@router.post(
    "/users",
    summary="Create new user",
    description="Create a client, internal staff or super admin account. Only accessible by super admins.",
    operation_id="createUser",
    status_code=201,
    responses={
        201: {"description": "User created successfully"},
        400: {"model": ErrorResponse, "description": "Invalid request or email already registered"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Super admin privileges required"},
    },
)
async def create_user(create_data: CreateUserRequest, app: AppDep, auth_token: AuthTokenDep) -> UserView:
    return await app.create_user(auth_token, create_data.email, create_data.name, create_data.password, create_data.role)


@router.patch(
    "/users/{email}/active",
    summary="Activate or deactivate user",
    description="Enable or disable login for an account. Deactivation ends all of its sessions.",
    operation_id="setUserActive",
    responses={
        200: {"description": "Updated user"},
        400: {"model": ErrorResponse, "description": "Cannot change own activation"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Super admin privileges required"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
async def set_user_active(
    email: str, request: UpdateUserActiveRequest, app: AppDep, auth_token: AuthTokenDep
) -> UserView:
    return await app.set_user_active(auth_token, email, request.is_active)


@router.delete(
    "/users/{email}",
    summary="Delete user",
    description="Delete an account. Only accessible by super admins. Cannot delete yourself.",
    operation_id="deleteUser",
    status_code=204,
    responses={
        204: {"description": "User deleted successfully"},
        400: {"model": ErrorResponse, "description": "Cannot delete yourself"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Super admin privileges required"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
async def delete_user(email: str, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.delete_user(auth_token, email)
