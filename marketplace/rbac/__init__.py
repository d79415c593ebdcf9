from .permissions import Permission, all_permissions, parse_permission, parse_permissions
from .roles import ROLE_PERMISSIONS, Role, get_role_permissions
from .identity import Identity, OwnershipDescriptor
from .evaluator import (
    check_ownership,
    get_effective_permissions,
    has_all_permissions,
    has_any_permission,
    has_permission,
)
from .guards import (
    ALLOW,
    Decision,
    all_permissions_guard,
    any_permission_guard,
    evaluate_chain,
    ownership_guard,
    permission_guard,
)
from .decorators import (
    RequestContext,
    current_identity,
    guard_dependency,
    require_all_permissions,
    require_any_permission,
    require_ownership,
    require_permission,
)

__all__ = [
    "Permission",
    "all_permissions",
    "parse_permission",
    "parse_permissions",
    "ROLE_PERMISSIONS",
    "Role",
    "get_role_permissions",
    "Identity",
    "OwnershipDescriptor",
    "check_ownership",
    "get_effective_permissions",
    "has_all_permissions",
    "has_any_permission",
    "has_permission",
    "ALLOW",
    "Decision",
    "all_permissions_guard",
    "any_permission_guard",
    "evaluate_chain",
    "ownership_guard",
    "permission_guard",
    "RequestContext",
    "current_identity",
    "guard_dependency",
    "require_all_permissions",
    "require_any_permission",
    "require_ownership",
    "require_permission",
]
