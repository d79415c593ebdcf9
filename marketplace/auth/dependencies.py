"""FastAPI dependencies wrapping the authentication gate."""

from fastapi import Depends
from starlette.requests import Request

from marketplace.config import settings
from marketplace.exceptions import InsufficientRoleError, MarketplaceError
from marketplace.rbac import Identity, Role
from marketplace.users.repository import UserRepository, get_user_repository
from marketplace.utils import Logger

from .blacklist import TokenBlacklist, get_token_blacklist
from .gate import AuthenticationGate, extract_bearer_token

logger = Logger("auth")


async def protect(
    request: Request,
    blacklist: TokenBlacklist = Depends(get_token_blacklist),
    users: UserRepository = Depends(get_user_repository),
) -> Identity:
    """
    Authenticate the request and attach the identity to ``request.state``.

    Use as ``dependencies=[Depends(protect)]`` or as a parameter dependency.
    """
    token = extract_bearer_token(
        request.headers, request.cookies, settings.access_cookie_name
    )
    gate = AuthenticationGate(blacklist, users.find_by_id)
    try:
        identity = await gate.authenticate(token)
    except MarketplaceError as exc:
        logger.warning(
            f"Rejected {request.method} {request.url.path}: {exc.kind}"
        )
        raise

    request.state.identity = identity
    return identity


async def require_super_admin(identity: Identity = Depends(protect)) -> Identity:
    """Administrator-only routes: authenticated and SUPER_ADMIN, nothing else."""
    if identity.role is not Role.SUPER_ADMIN:
        raise InsufficientRoleError()
    return identity
