"""
Role definitions and the role → permission matrix.

Every role except SUPER_ADMIN maps to an explicit subset of ``Permission``.
SUPER_ADMIN is never listed: its grant is computed from the ``Permission``
enumeration, so new permissions reach it without a separate edit.
"""

from enum import Enum
from types import MappingProxyType
from typing import Optional

from .permissions import Permission, all_permissions


class Role(str, Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    VENDOR = "VENDOR"
    CUSTOMER = "CUSTOMER"
    SUPPORT = "SUPPORT"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value) -> Optional["Role"]:
        """Case-insensitive lookup that also accepts legacy role names."""
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        name = str(value).strip().upper()
        name = _LEGACY_ROLE_NAMES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            return None


_LEGACY_ROLE_NAMES = {"SELLER": "VENDOR"}


ROLE_PERMISSIONS: MappingProxyType = MappingProxyType(
    {
        Role.VENDOR: (
            Permission.PRODUCT_READ,
            Permission.PRODUCT_CREATE,
            Permission.PRODUCT_UPDATE,
            Permission.PRODUCT_DELETE,
            Permission.ORDER_READ,
            Permission.ORDER_UPDATE,
            Permission.COMMISSION_READ,
        ),
        Role.CUSTOMER: (
            Permission.PRODUCT_READ,
            Permission.ORDER_READ,
            Permission.ORDER_CREATE,
            Permission.ORDER_CANCEL,
        ),
        Role.SUPPORT: (
            Permission.USER_READ,
            Permission.VENDOR_READ,
            Permission.PRODUCT_READ,
            Permission.ORDER_READ,
            Permission.ORDER_UPDATE,
        ),
    }
)


def get_role_permissions(role) -> list[Permission]:
    """
    Return the ordered permission list for a role.

    Unknown roles get an empty list; this never raises.
    """
    parsed = Role.parse(role)
    if parsed is Role.SUPER_ADMIN:
        return list(all_permissions())
    if parsed is None:
        return []
    return list(ROLE_PERMISSIONS.get(parsed, ()))
