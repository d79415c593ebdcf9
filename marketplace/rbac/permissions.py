"""
Permission catalog.

Permissions are atomic capability tokens named ``{DOMAIN}_{ACTION}``. There is
no implication between them: holding ``PRODUCT_MODERATE`` says nothing about
``PRODUCT_UPDATE``. The only blanket grant is the super-admin role, see
``roles.py``.
"""

from enum import Enum
from typing import Iterable, Optional

from marketplace.utils import Logger

logger = Logger("rbac")


class Permission(str, Enum):
    # ── Users ────────────────────────────────────────────────────
    USER_READ = "USER_READ"
    USER_CREATE = "USER_CREATE"
    USER_UPDATE = "USER_UPDATE"
    USER_DELETE = "USER_DELETE"

    # ── Vendors ──────────────────────────────────────────────────
    VENDOR_READ = "VENDOR_READ"
    VENDOR_CREATE = "VENDOR_CREATE"
    VENDOR_UPDATE = "VENDOR_UPDATE"
    VENDOR_APPROVE = "VENDOR_APPROVE"
    VENDOR_SUSPEND = "VENDOR_SUSPEND"
    VENDOR_DELETE = "VENDOR_DELETE"

    # ── Products ─────────────────────────────────────────────────
    PRODUCT_READ = "PRODUCT_READ"
    PRODUCT_CREATE = "PRODUCT_CREATE"
    PRODUCT_UPDATE = "PRODUCT_UPDATE"
    PRODUCT_DELETE = "PRODUCT_DELETE"
    PRODUCT_MODERATE = "PRODUCT_MODERATE"

    # ── Orders ───────────────────────────────────────────────────
    ORDER_READ = "ORDER_READ"
    ORDER_CREATE = "ORDER_CREATE"
    ORDER_UPDATE = "ORDER_UPDATE"
    ORDER_CANCEL = "ORDER_CANCEL"
    ORDER_REFUND = "ORDER_REFUND"

    # ── Commission ───────────────────────────────────────────────
    COMMISSION_READ = "COMMISSION_READ"
    COMMISSION_CONFIGURE = "COMMISSION_CONFIGURE"

    # ── Platform ─────────────────────────────────────────────────
    PLATFORM_SETTINGS = "PLATFORM_SETTINGS"
    ANALYTICS_VIEW = "ANALYTICS_VIEW"

    def __str__(self) -> str:
        return self.value


def all_permissions() -> tuple[Permission, ...]:
    """Every defined permission, in declaration order."""
    return tuple(Permission)


def parse_permission(value) -> Optional[Permission]:
    """Return the matching ``Permission`` or None for unknown values."""
    if isinstance(value, Permission):
        return value
    try:
        return Permission(str(value).strip().upper())
    except ValueError:
        return None


def parse_permissions(values: Iterable | None) -> frozenset[Permission]:
    """
    Parse a list of permission names coming from a token or a stored record.

    Unknown names are dropped with a warning rather than failing the request.
    """
    parsed = set()
    for value in values or ():
        permission = parse_permission(value)
        if permission is None:
            logger.warning(f"Ignoring unknown permission {value!r}")
            continue
        parsed.add(permission)
    return frozenset(parsed)
