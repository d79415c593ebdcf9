from pydantic import BaseModel, EmailStr, Field
from typing import List

from marketplace.rbac import Permission


class CreateAdminRequest(BaseModel):
    """POST /users/admins"""
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)


class UpdatePermissionsRequest(BaseModel):
    """PATCH /users/{user_id}/permissions — replaces the direct grants."""
    permissions: List[Permission] = Field(default_factory=list)
