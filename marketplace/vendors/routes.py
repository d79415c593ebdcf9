from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from marketplace.auth.dependencies import protect
from marketplace.rbac import (
    Permission,
    RequestContext,
    current_identity,
    require_all_permissions,
    require_ownership,
    require_permission,
)
from marketplace.users.repository import UserRepository, get_user_repository
from marketplace.utils import success_response
from .repository import VendorRepository, get_vendor_repository
from .schemas import SuspendVendorRequest, UpdateVendorProfileRequest
from .service import VendorService

vendors_router = APIRouter(dependencies=[Depends(protect)])


async def get_vendor_service(
    vendors: VendorRepository = Depends(get_vendor_repository),
    users: UserRepository = Depends(get_user_repository),
) -> VendorService:
    return VendorService(vendors, users)


async def _vendor_owner(ctx: RequestContext):
    """Resolve the vendor profile named in the path, for the ownership check."""
    svc: VendorService = ctx.arguments["svc"]
    return await svc.vendors.find_by_id(ctx.path_params["vendor_id"])


@vendors_router.get("/")
@require_permission(Permission.VENDOR_READ)
async def list_vendors(
    request: Request,
    approved: Optional[bool] = Query(None),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    svc: VendorService = Depends(get_vendor_service),
):
    """List vendors, optionally filtered by approval state."""
    vendors, total = await svc.list_vendors(approved=approved, limit=limit, offset=offset)
    return success_response(
        data={"vendors": vendors, "total": total, "limit": limit, "offset": offset}
    )


@vendors_router.get("/profile")
async def get_own_profile(request: Request, svc: VendorService = Depends(get_vendor_service)):
    """The calling vendor's own profile."""
    vendor = await svc.get_own_profile(current_identity(request).id)
    return success_response(data=vendor)


@vendors_router.get("/stats")
async def get_own_stats(request: Request, svc: VendorService = Depends(get_vendor_service)):
    stats = await svc.get_own_stats(current_identity(request).id)
    return success_response(data=stats)


@vendors_router.patch("/{vendor_id}/approve")
@require_permission(Permission.VENDOR_APPROVE)
async def approve_vendor(
    request: Request,
    vendor_id: str,
    svc: VendorService = Depends(get_vendor_service),
):
    vendor = await svc.approve_vendor(vendor_id, approved_by=current_identity(request).id)
    return success_response(data=vendor, message="Vendor approved successfully.")


@vendors_router.patch("/{vendor_id}/suspend")
@require_all_permissions(Permission.VENDOR_SUSPEND, Permission.VENDOR_UPDATE)
async def suspend_vendor(
    request: Request,
    vendor_id: str,
    body: Optional[SuspendVendorRequest] = None,
    svc: VendorService = Depends(get_vendor_service),
):
    vendor = await svc.suspend_vendor(
        vendor_id,
        suspended_by=current_identity(request).id,
        reason=body.reason if body else None,
    )
    return success_response(data=vendor, message="Vendor suspended")


@vendors_router.put("/{vendor_id}/profile")
@require_ownership(_vendor_owner)
async def update_vendor_profile(
    request: Request,
    vendor_id: str,
    body: UpdateVendorProfileRequest,
    svc: VendorService = Depends(get_vendor_service),
):
    """Only the vendor's own user may edit its profile."""
    vendor = await svc.update_profile(vendor_id, body.model_dump(exclude_unset=True))
    return success_response(data=vendor, message="Vendor profile updated")
