"""Vendor service — approval, suspension and profile updates."""

from typing import Optional

from marketplace.exceptions import NotFoundError
from marketplace.users.repository import UserRepository
from marketplace.utils import Logger, serialize_mongo_doc

from .repository import VendorRepository

logger = Logger("vendors")

STAT_FIELDS = ("total_sales", "total_orders", "rating", "review_count")


def _public_vendor(doc: dict) -> dict:
    safe = serialize_mongo_doc(dict(doc))
    safe.pop("approval_token", None)
    return safe


class VendorService:
    def __init__(self, vendors: VendorRepository, users: UserRepository):
        self.vendors = vendors
        self.users = users

    async def list_vendors(
        self, approved: Optional[bool] = None, limit: int = 20, offset: int = 0
    ) -> tuple[list[dict], int]:
        docs, total = await self.vendors.list(approved=approved, limit=limit, offset=offset)
        return [_public_vendor(d) for d in docs], total

    async def _require(self, vendor_id: str) -> dict:
        vendor = await self.vendors.find_by_id(vendor_id)
        if not vendor:
            raise NotFoundError("Vendor not found")
        return vendor

    async def get_own_profile(self, user_id: str) -> dict:
        vendor = await self.vendors.find_by_user_id(user_id)
        if not vendor:
            raise NotFoundError("Vendor profile not found")
        return _public_vendor(vendor)

    async def get_own_stats(self, user_id: str) -> dict:
        vendor = await self.vendors.find_by_user_id(user_id)
        if not vendor:
            raise NotFoundError("Vendor profile not found")
        return {field: vendor.get(field, 0) for field in STAT_FIELDS}

    async def approve_vendor(self, vendor_id: str, approved_by: str) -> dict:
        vendor = await self._require(vendor_id)
        updated = await self.vendors.update(
            vendor_id,
            {"is_approved": True, "approval_token": None, "approved_by": approved_by},
        )
        await self.users.update(vendor["user_id"], {"is_approved": True})
        logger.info(f"Vendor {vendor_id} approved by {approved_by}")
        return _public_vendor(updated)

    async def suspend_vendor(
        self, vendor_id: str, suspended_by: str, reason: Optional[str] = None
    ) -> dict:
        """Suspend the vendor and deactivate its user so it can no longer log in."""
        vendor = await self._require(vendor_id)
        updated = await self.vendors.update(
            vendor_id,
            {"is_suspended": True, "suspended_by": suspended_by, "suspension_reason": reason},
        )
        await self.users.update(vendor["user_id"], {"is_active": False})
        logger.info(f"Vendor {vendor_id} suspended by {suspended_by}")
        return _public_vendor(updated)

    async def update_profile(self, vendor_id: str, fields: dict) -> dict:
        await self._require(vendor_id)
        clean = {k: v for k, v in fields.items() if v is not None}
        updated = await self.vendors.update(vendor_id, clean)
        return _public_vendor(updated)
