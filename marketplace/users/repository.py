"""User store — the identity lookup behind the authentication gate."""

from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from marketplace.config import get_database


def _object_id(user_id: str) -> Optional[ObjectId]:
    if not ObjectId.is_valid(str(user_id)):
        return None
    return ObjectId(str(user_id))


class UserRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.users = db["users"]

    async def find_by_id(self, user_id: str) -> Optional[dict]:
        oid = _object_id(user_id)
        if oid is None:
            return None
        return await self.users.find_one({"_id": oid, "is_deleted": {"$ne": True}})

    async def find_by_email(self, email: str) -> Optional[dict]:
        return await self.users.find_one(
            {"email": email.lower(), "is_deleted": {"$ne": True}}
        )

    async def create(self, data: dict) -> dict:
        now = datetime.now(timezone.utc)
        doc = {
            **data,
            "email": data["email"].lower(),
            "is_deleted": False,
            "created_at": now,
            "updated_at": now,
        }
        result = await self.users.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    async def list(self, limit: int = 20, offset: int = 0) -> tuple[list[dict], int]:
        filters = {"is_deleted": {"$ne": True}}
        total = await self.users.count_documents(filters)
        cursor = self.users.find(filters).skip(offset).limit(limit).sort("created_at", -1)
        return [u async for u in cursor], total

    async def update(self, user_id: str, fields: dict) -> Optional[dict]:
        oid = _object_id(user_id)
        if oid is None:
            return None
        fields = {**fields, "updated_at": datetime.now(timezone.utc)}
        return await self.users.find_one_and_update(
            {"_id": oid, "is_deleted": {"$ne": True}},
            {"$set": fields},
            return_document=True,
        )

    async def delete(self, user_id: str) -> bool:
        """Soft delete; a deleted user no longer authenticates."""
        updated = await self.update(user_id, {"is_deleted": True, "is_active": False})
        return updated is not None


async def get_user_repository(
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> UserRepository:
    """FastAPI dependency — tests override it with an in-memory store."""
    return UserRepository(db)
