from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from marketplace.config import settings
from marketplace.rbac import Identity, get_effective_permissions
from marketplace.users.repository import UserRepository, get_user_repository
from marketplace.utils import success_response
from marketplace.vendors.repository import VendorRepository, get_vendor_repository

from .blacklist import TokenBlacklist, get_token_blacklist
from .dependencies import protect
from .gate import extract_bearer_token
from .schemas import LoginRequest, RegisterRequest, TokenRequest, VendorRegisterRequest
from .service import AuthService

auth_router = APIRouter()


async def get_auth_service(
    users: UserRepository = Depends(get_user_repository),
    vendors: VendorRepository = Depends(get_vendor_repository),
    blacklist: TokenBlacklist = Depends(get_token_blacklist),
) -> AuthService:
    return AuthService(users, blacklist, vendors)


def _set_auth_cookies(
    response: JSONResponse, access_token: str, refresh_token: Optional[str] = None
) -> JSONResponse:
    response.set_cookie(
        settings.access_cookie_name,
        access_token,
        max_age=settings.access_token_lifetime_ms // 1000,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    if refresh_token:
        response.set_cookie(
            settings.refresh_cookie_name,
            refresh_token,
            max_age=settings.refresh_token_lifetime_ms // 1000,
            httponly=True,
            secure=settings.cookie_secure,
            samesite="lax",
        )
    return response


@auth_router.post("/register")
async def register(
    body: RegisterRequest,
    svc: AuthService = Depends(get_auth_service),
):
    """Create a customer account and return its tokens."""
    result = await svc.register_customer(body.model_dump())
    response = success_response(
        data=result, message="Customer account created successfully", code=201
    )
    return _set_auth_cookies(response, result["access_token"], result["refresh_token"])


@auth_router.post("/register-vendor")
async def register_vendor(
    body: VendorRegisterRequest,
    svc: AuthService = Depends(get_auth_service),
):
    """Create a vendor account; it stays inactive until approved."""
    result = await svc.register_vendor(body.model_dump())
    return success_response(
        data=result,
        message="Vendor account created successfully, pending approval.",
        code=201,
    )


@auth_router.get("/approve-vendor/{token}")
async def approve_vendor_by_token(
    token: str,
    svc: AuthService = Depends(get_auth_service),
):
    """Approval link sent to administrators when a vendor registers."""
    result = await svc.approve_vendor_by_token(token)
    return success_response(data=result, message="Vendor approved successfully.")


@auth_router.post("/login")
async def login(
    body: LoginRequest,
    svc: AuthService = Depends(get_auth_service),
):
    """Authenticate user and return access + refresh tokens."""
    result = await svc.login(body.email, body.password)
    response = success_response(data=result, message="Login successful")
    return _set_auth_cookies(response, result["access_token"], result["refresh_token"])


@auth_router.post("/logout")
async def logout(
    request: Request,
    body: Optional[TokenRequest] = None,
    svc: AuthService = Depends(get_auth_service),
):
    """Revoke the current access and refresh tokens and clear the cookies."""
    access_token = extract_bearer_token(
        request.headers, request.cookies, settings.access_cookie_name
    )
    refresh_token = (body.refresh_token if body else None) or request.cookies.get(
        settings.refresh_cookie_name
    )
    revoked = svc.logout(access_token, refresh_token)

    response = success_response(data={"revoked": revoked}, message="Logout Successful")
    response.delete_cookie(settings.access_cookie_name)
    response.delete_cookie(settings.refresh_cookie_name)
    return response


@auth_router.post("/refresh")
async def refresh(
    request: Request,
    body: Optional[TokenRequest] = None,
    svc: AuthService = Depends(get_auth_service),
):
    """Issue a new access token from a refresh token."""
    refresh_token = (body.refresh_token if body else None) or request.cookies.get(
        settings.refresh_cookie_name
    )
    result = await svc.refresh(refresh_token)
    response = success_response(data=result, message="Token refreshed")
    return _set_auth_cookies(response, result["access_token"])


@auth_router.get("/me")
async def me(identity: Identity = Depends(protect)):
    """The authenticated identity and everything it is allowed to do."""
    return success_response(
        data={
            **identity.to_dict(),
            "effective_permissions": [p.value for p in get_effective_permissions(identity)],
        }
    )
