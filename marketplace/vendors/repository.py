"""Vendor profiles: one per vendor user, linked through ``user_id``."""

from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from marketplace.config import get_database


class VendorRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.vendors = db["vendors"]

    async def find_by_id(self, vendor_id: str) -> Optional[dict]:
        if not ObjectId.is_valid(str(vendor_id)):
            return None
        return await self.vendors.find_one({"_id": ObjectId(str(vendor_id))})

    async def find_by_user_id(self, user_id: str) -> Optional[dict]:
        return await self.vendors.find_one({"user_id": str(user_id)})

    async def find_by_approval_token(self, token: str) -> Optional[dict]:
        if not token:
            return None
        return await self.vendors.find_one({"approval_token": token})

    async def create(self, data: dict) -> dict:
        now = datetime.now(timezone.utc)
        doc = {**data, "created_at": now, "updated_at": now}
        result = await self.vendors.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    async def list(
        self,
        approved: Optional[bool] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[dict], int]:
        filters: dict = {}
        if approved is not None:
            filters["is_approved"] = approved
        total = await self.vendors.count_documents(filters)
        cursor = self.vendors.find(filters).skip(offset).limit(limit).sort("created_at", -1)
        return [v async for v in cursor], total

    async def update(self, vendor_id: str, fields: dict) -> Optional[dict]:
        if not ObjectId.is_valid(str(vendor_id)):
            return None
        fields = {**fields, "updated_at": datetime.now(timezone.utc)}
        return await self.vendors.find_one_and_update(
            {"_id": ObjectId(str(vendor_id))},
            {"$set": fields},
            return_document=True,
        )


async def get_vendor_repository(
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> VendorRepository:
    return VendorRepository(db)
