from fastapi import APIRouter, Depends, Query, Request

from marketplace.auth.dependencies import protect, require_super_admin
from marketplace.exceptions import InsufficientPermissionError
from marketplace.rbac import (
    Identity,
    Permission,
    check_ownership,
    has_any_permission,
    require_permission,
)
from marketplace.utils import success_response
from .repository import UserRepository, get_user_repository
from .schemas import CreateAdminRequest, UpdatePermissionsRequest
from .service import UserService

users_router = APIRouter()


async def get_user_service(
    users: UserRepository = Depends(get_user_repository),
) -> UserService:
    return UserService(users)


@users_router.get("/")
async def list_users(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    _: Identity = Depends(require_super_admin),
    svc: UserService = Depends(get_user_service),
):
    users, total = await svc.list_users(limit=limit, offset=offset)
    return success_response(
        data={"users": users, "total": total, "limit": limit, "offset": offset}
    )


@users_router.post("/admins")
async def create_admin(
    body: CreateAdminRequest,
    admin: Identity = Depends(require_super_admin),
    svc: UserService = Depends(get_user_service),
):
    user = await svc.create_admin(body.model_dump(), created_by=admin.id)
    return success_response(data=user, message="Admin account created successfully", code=201)


@users_router.get("/{user_id}")
async def get_user(
    user_id: str,
    identity: Identity = Depends(protect),
    svc: UserService = Depends(get_user_service),
):
    """Users may read their own profile; anyone else needs USER_READ."""
    own_profile = check_ownership(identity.id, {"user_id": user_id})
    if not own_profile and not has_any_permission(identity, [Permission.USER_READ]):
        raise InsufficientPermissionError(required=[Permission.USER_READ.value])
    return success_response(data=await svc.get_user(user_id))


@users_router.patch("/{user_id}/permissions", dependencies=[Depends(protect)])
@require_permission(Permission.USER_UPDATE)
async def update_permissions(
    request: Request,
    user_id: str,
    body: UpdatePermissionsRequest,
    svc: UserService = Depends(get_user_service),
):
    user = await svc.set_permissions(user_id, body.permissions)
    return success_response(data=user, message="Permissions updated")


@users_router.delete("/{user_id}", dependencies=[Depends(protect)])
@require_permission(Permission.USER_DELETE)
async def delete_user(
    request: Request,
    user_id: str,
    svc: UserService = Depends(get_user_service),
):
    return success_response(data=await svc.delete_user(user_id), message="User deleted")
