"""
Authorization guard decisions, independent of any HTTP framework.

Each factory takes the route's requirement and returns a check that maps the
current identity (None when the request never authenticated) to a
``Decision``. ``decorators.py`` adapts these checks to FastAPI handlers.
"""

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Optional, Sequence, Type, Union

from marketplace.exceptions import (
    AuthenticationRequiredError,
    InsufficientPermissionError,
    MarketplaceError,
    OwnershipDeniedError,
    ResourceAbsentError,
    ResourceLookupFailureError,
)
from marketplace.utils import Logger

from .evaluator import check_ownership, has_all_permissions, has_any_permission, has_permission
from .identity import Identity
from .permissions import Permission

logger = Logger("rbac.guards")

Check = Callable[[Optional[Identity]], "Decision"]
ResourceGetter = Callable[[Any], Union[Any, Awaitable[Any]]]


@dataclass(frozen=True)
class Decision:
    allowed: bool
    error: Optional[Type[MarketplaceError]] = None
    required: Union[str, list[str], None] = None

    @property
    def status_code(self) -> int:
        return 200 if self.allowed else self.error.default_status

    @property
    def message(self) -> Optional[str]:
        return None if self.allowed else self.error.default_message

    def to_error(self) -> MarketplaceError:
        if self.allowed:
            raise ValueError("An allowed decision has no error")
        if self.required is None:
            return self.error()
        return self.error(required=self.required)

    def to_body(self) -> dict:
        """The rejection payload a client receives for this decision."""
        body = {"success": self.allowed}
        if not self.allowed:
            body["message"] = self.message
            if self.required is not None:
                body["required"] = self.required
        return body


ALLOW = Decision(allowed=True)
UNAUTHENTICATED = Decision(allowed=False, error=AuthenticationRequiredError)


def _deny(required: Union[Permission, Sequence[Permission]]) -> Decision:
    if isinstance(required, Permission):
        payload = required.value
    else:
        payload = [p.value for p in required]
    return Decision(allowed=False, error=InsufficientPermissionError, required=payload)


def permission_guard(permission: Permission) -> Check:
    def check(identity: Optional[Identity]) -> Decision:
        if identity is None:
            return UNAUTHENTICATED
        if not has_permission(identity, permission):
            return _deny(permission)
        return ALLOW

    return check


def any_permission_guard(permissions: Iterable[Permission]) -> Check:
    permissions = tuple(permissions)

    def check(identity: Optional[Identity]) -> Decision:
        if identity is None:
            return UNAUTHENTICATED
        if not has_any_permission(identity, permissions):
            return _deny(permissions)
        return ALLOW

    return check


def all_permissions_guard(permissions: Iterable[Permission]) -> Check:
    permissions = tuple(permissions)

    def check(identity: Optional[Identity]) -> Decision:
        if identity is None:
            return UNAUTHENTICATED
        if not has_all_permissions(identity, permissions):
            return _deny(permissions)
        return ALLOW

    return check


def ownership_guard(
    resource_getter: ResourceGetter,
) -> Callable[[Optional[Identity], Any], Awaitable[Decision]]:
    """
    Ownership check backed by an external resource lookup.

    ``resource_getter`` receives the request context and may be sync or
    async. A failing lookup is reported as a 500 decision; the underlying
    error is logged, never returned.
    """

    async def check(identity: Optional[Identity], context: Any) -> Decision:
        if identity is None:
            return UNAUTHENTICATED

        try:
            resource = resource_getter(context)
            if inspect.isawaitable(resource):
                resource = await resource
        except Exception:
            logger.exception("Resource lookup failed during ownership check")
            return Decision(allowed=False, error=ResourceLookupFailureError)

        if resource is None:
            return Decision(allowed=False, error=ResourceAbsentError)

        if not check_ownership(identity.id, resource):
            return Decision(allowed=False, error=OwnershipDeniedError)

        return ALLOW

    return check


def evaluate_chain(identity: Optional[Identity], checks: Iterable[Check]) -> Decision:
    """Run checks in order and stop at the first rejection."""
    for check in checks:
        decision = check(identity)
        if not decision.allowed:
            return decision
    return ALLOW
