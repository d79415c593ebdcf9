"""
Declarative permission decorators for route handlers.

Usage:
    @router.patch("/{vendor_id}/approve", dependencies=[Depends(protect)])
    @require_permission(Permission.VENDOR_APPROVE)
    async def approve_vendor(request: Request, vendor_id: str):
        ...

The identity is read from ``request.state.identity``, which ``protect`` sets.
Permission decorators attach their check to the handler as a FastAPI
dependency, so it runs after ``protect`` and before the body is validated.
``require_ownership`` needs the handler's resolved arguments and runs inside
the handler call; handlers using it must accept ``request: Request``.
Stacked decorators run top to bottom and the first rejection ends the request.
"""

import inspect
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, Optional

from fastapi import Depends, HTTPException, status
from starlette.requests import Request

from .guards import (
    Check,
    ResourceGetter,
    all_permissions_guard,
    any_permission_guard,
    ownership_guard,
    permission_guard,
)
from .identity import Identity
from .permissions import Permission

_GUARD_PARAM_PREFIX = "_guard_"


@dataclass
class RequestContext:
    """What an ownership resource getter receives."""

    request: Request
    arguments: dict[str, Any] = field(default_factory=dict)

    @property
    def path_params(self) -> dict:
        return self.request.path_params


def _find_request(args, kwargs) -> Request:
    request: Request | None = kwargs.get("request")
    if request is None:
        for arg in args:
            if isinstance(arg, Request):
                request = arg
                break

    if request is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Request object not found in handler",
        )
    return request


def current_identity(request: Request) -> Optional[Identity]:
    return getattr(request.state, "identity", None)


def guard_dependency(check: Check) -> Callable:
    """Wrap a guard check as a FastAPI dependency."""

    async def dependency(request: Request) -> None:
        decision = check(current_identity(request))
        if not decision.allowed:
            raise decision.to_error()

    return dependency


def _guard_with(check: Check) -> Callable:
    def decorator(func):
        signature = inspect.signature(func)
        params = list(signature.parameters.values())
        name = _GUARD_PARAM_PREFIX + str(
            sum(1 for p in params if p.name.startswith(_GUARD_PARAM_PREFIX))
        )
        # Keyword-only guards of inner decorators come after ours, so the
        # outermost decorator's check is resolved first.
        position = next(
            (
                i
                for i, p in enumerate(params)
                if p.kind in (inspect.Parameter.KEYWORD_ONLY, inspect.Parameter.VAR_KEYWORD)
            ),
            len(params),
        )
        params.insert(
            position,
            inspect.Parameter(
                name,
                inspect.Parameter.KEYWORD_ONLY,
                default=Depends(guard_dependency(check)),
            ),
        )

        @wraps(func)
        async def wrapper(*args, **kwargs):
            kwargs.pop(name, None)
            return await func(*args, **kwargs)

        wrapper.__signature__ = signature.replace(parameters=params)
        return wrapper

    return decorator


def require_permission(permission: Permission) -> Callable:
    return _guard_with(permission_guard(permission))


def require_any_permission(*permissions: Permission) -> Callable:
    return _guard_with(any_permission_guard(permissions))


def require_all_permissions(*permissions: Permission) -> Callable:
    return _guard_with(all_permissions_guard(permissions))


def require_ownership(resource_getter: ResourceGetter) -> Callable:
    """
    Allow the request only if the identity owns the resource returned by
    ``resource_getter(RequestContext)``.
    """
    check = ownership_guard(resource_getter)

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            request = _find_request(args, kwargs)
            arguments = {
                k: v for k, v in kwargs.items() if not k.startswith(_GUARD_PARAM_PREFIX)
            }
            context = RequestContext(request=request, arguments=arguments)
            decision = await check(current_identity(request), context)
            if not decision.allowed:
                raise decision.to_error()
            return await func(*args, **kwargs)

        return wrapper

    return decorator
