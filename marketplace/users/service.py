"""User administration on top of the user repository."""

from marketplace.auth.helpers import hash_password
from marketplace.exceptions import ConflictError, NotFoundError
from marketplace.rbac import Permission, Role
from marketplace.utils import Logger, public_user

from .repository import UserRepository

logger = Logger("users")


class UserService:
    def __init__(self, users: UserRepository):
        self.users = users

    async def list_users(self, limit: int = 20, offset: int = 0) -> tuple[list[dict], int]:
        docs, total = await self.users.list(limit=limit, offset=offset)
        return [public_user(d) for d in docs], total

    async def get_user(self, user_id: str) -> dict:
        user = await self.users.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return public_user(user)

    async def create_admin(self, data: dict, created_by: str) -> dict:
        if await self.users.find_by_email(data["email"]):
            raise ConflictError("User already exists")
        user = await self.users.create(
            {
                "name": data["name"],
                "email": data["email"],
                "password": hash_password(data["password"]),
                "role": Role.SUPER_ADMIN.value,
                "permissions": [],
                "is_active": True,
                "created_by": created_by,
            }
        )
        logger.info(f"Super admin {user['_id']} created by {created_by}")
        return public_user(user)

    async def set_permissions(self, user_id: str, permissions: list[Permission]) -> dict:
        values = list(dict.fromkeys(p.value for p in permissions))
        user = await self.users.update(user_id, {"permissions": values})
        if not user:
            raise NotFoundError("User not found")
        logger.info(f"Direct grants for {user_id} set to {values}")
        return public_user(user)

    async def delete_user(self, user_id: str) -> dict:
        if not await self.users.delete(user_id):
            raise NotFoundError("User not found")
        return {"id": user_id, "deleted": True}
