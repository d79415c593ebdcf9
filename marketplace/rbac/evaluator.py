"""
Permission evaluation.

All functions here are pure and total: they never raise and never touch I/O.
"""

from typing import Any, Iterable, Optional

from .identity import Identity, OwnershipDescriptor
from .permissions import Permission, all_permissions
from .roles import Role, get_role_permissions


def has_permission(identity: Identity, permission: Permission) -> bool:
    if identity.role is Role.SUPER_ADMIN:
        return True

    # Direct grants are additive overrides, checked before the role matrix.
    if permission in identity.permissions:
        return True

    return permission in get_role_permissions(identity.role)


def has_any_permission(
    identity: Identity, permissions: Iterable[Permission]
) -> bool:
    return any(has_permission(identity, p) for p in permissions)


def has_all_permissions(
    identity: Identity, permissions: Iterable[Permission]
) -> bool:
    return all(has_permission(identity, p) for p in permissions)


def check_ownership(identity_id: Optional[str], resource: Any) -> bool:
    """
    True when the identity matches the resource's vendor, user or owner field.

    ``resource`` may be an ``OwnershipDescriptor``, a mapping or an object.
    """
    if identity_id is None or resource is None:
        return False
    descriptor = OwnershipDescriptor.from_resource(resource)
    identity_id = str(identity_id)
    return (
        descriptor.vendor_id == identity_id
        or descriptor.user_id == identity_id
        or descriptor.owner_id == identity_id
    )


def get_effective_permissions(identity: Identity) -> list[Permission]:
    """Role grants followed by direct grants, without duplicates."""
    if identity.role is Role.SUPER_ADMIN:
        return list(all_permissions())

    effective = dict.fromkeys(get_role_permissions(identity.role))
    for permission in sorted(identity.permissions, key=lambda p: p.value):
        effective.setdefault(permission)
    return list(effective)
