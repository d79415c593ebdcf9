"""Authentication service — registration, login, logout and token refresh."""

import secrets
from typing import Optional

from marketplace.config import settings
from marketplace.exceptions import (
    AccountSuspendedError,
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InvalidCredentialError,
    InvalidLoginError,
    RevokedCredentialError,
    UnknownSubjectError,
)
from marketplace.rbac import Role, get_effective_permissions
from marketplace.users.repository import UserRepository
from marketplace.utils import Logger, public_user
from marketplace.vendors.repository import VendorRepository

from .blacklist import TokenBlacklist
from .gate import build_identity
from .helpers import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    remaining_lifetime_ms,
    verify_password,
)

logger = Logger("auth.service")


class AuthService:
    def __init__(
        self,
        users: UserRepository,
        blacklist: TokenBlacklist,
        vendors: Optional[VendorRepository] = None,
    ):
        self.users = users
        self.blacklist = blacklist
        self.vendors = vendors

    # ── Token issuing ────────────────────────────────────────────
    @staticmethod
    def issue_tokens(user: dict) -> dict:
        user_id = str(user["_id"])
        role = Role.parse(user.get("role")) or Role.CUSTOMER
        return {
            "access_token": create_access_token(
                user_id, role.value, user.get("permissions") or []
            ),
            "refresh_token": create_refresh_token(user_id),
            "token_type": "bearer",
        }

    # ── Registration ─────────────────────────────────────────────
    async def _ensure_email_free(self, email: str) -> None:
        if await self.users.find_by_email(email):
            raise ConflictError("User already exists")

    async def register_customer(self, data: dict) -> dict:
        """Create a CUSTOMER account and log it straight in."""
        await self._ensure_email_free(data["email"])
        user = await self.users.create(
            {
                "name": data["name"],
                "email": data["email"],
                "password": hash_password(data["password"]),
                "role": Role.CUSTOMER.value,
                "permissions": [],
                "is_active": True,
            }
        )
        logger.info(f"Registered customer {user['_id']}")
        return {"user": public_user(user), **self.issue_tokens(user)}

    async def register_vendor(self, data: dict) -> dict:
        """
        Create a VENDOR account plus its vendor profile. The account cannot
        log in until an administrator approves it.
        """
        await self._ensure_email_free(data["email"])
        approval_token = secrets.token_hex(32)
        user = await self.users.create(
            {
                "name": data["name"],
                "email": data["email"],
                "password": hash_password(data["password"]),
                "role": Role.VENDOR.value,
                "permissions": [],
                "is_active": True,
                "is_approved": False,
            }
        )
        vendor = await self.vendors.create(
            {
                "user_id": str(user["_id"]),
                "business_name": data["business_name"],
                "phone_number": data["phone_number"],
                "address": data.get("address"),
                "city": data.get("city"),
                "state": data.get("state"),
                "is_approved": False,
                "is_suspended": False,
                "approval_token": approval_token,
                "total_sales": 0,
                "total_orders": 0,
                "rating": 0,
                "review_count": 0,
            }
        )
        logger.info(f"Registered vendor {vendor['_id']} pending approval")
        return {"user": public_user(user), "vendor_id": str(vendor["_id"])}

    async def approve_vendor_by_token(self, token: str) -> dict:
        """
        Approve the vendor whose registration issued ``token``. The token is
        cleared on use, so a link works once.
        """
        vendor = await self.vendors.find_by_approval_token(token)
        if not vendor:
            raise BadRequestError("Invalid or expired token.")

        vendor_id = str(vendor["_id"])
        await self.vendors.update(vendor_id, {"is_approved": True, "approval_token": None})
        await self.users.update(vendor["user_id"], {"is_approved": True})
        logger.info(f"Vendor {vendor_id} approved through its approval link")
        return {"vendor_id": vendor_id, "user_id": vendor["user_id"]}

    # ── Login / logout ───────────────────────────────────────────
    async def login(self, email: str, password: str) -> dict:
        user = await self.users.find_by_email(email)
        if not user or not verify_password(password, user.get("password", "")):
            raise InvalidLoginError()

        if not user.get("is_active", True):
            raise AccountSuspendedError()

        if Role.parse(user.get("role")) is Role.VENDOR and user.get("is_approved") is False:
            raise ForbiddenError("Vendor account pending approval")

        return {"user": public_user(user), **self.issue_tokens(user)}

    def logout(self, access_token: Optional[str], refresh_token: Optional[str]) -> int:
        """
        Revoke both credentials for whatever lifetime they have left.
        Returns how many tokens were revoked.

        Tokens that fail verification for their type are skipped, so only
        credentials this service signed ever reach the blacklist.
        """
        revoked = 0
        for token, token_type, max_ms in (
            (access_token, ACCESS_TOKEN_TYPE, settings.access_token_lifetime_ms),
            (refresh_token, REFRESH_TOKEN_TYPE, settings.refresh_token_lifetime_ms),
        ):
            if not token:
                continue
            try:
                claims = decode_token(token, expected_type=token_type)
            except InvalidCredentialError:
                logger.debug(f"Logout ignored an unverifiable {token_type} token")
                continue
            ttl_ms = remaining_lifetime_ms(claims, max_ms)
            if ttl_ms <= 0:
                continue
            self.blacklist.add(token, ttl_ms)
            revoked += 1
        logger.info(f"Logout revoked {revoked} token(s)")
        return revoked

    # ── Refresh ──────────────────────────────────────────────────
    async def refresh(self, refresh_token: Optional[str]) -> dict:
        """Trade a valid refresh token for a new access token."""
        if not refresh_token:
            raise InvalidLoginError("Refresh token required")
        if self.blacklist.has(refresh_token):
            raise RevokedCredentialError()

        claims = decode_token(refresh_token, expected_type=REFRESH_TOKEN_TYPE)
        user = await self.users.find_by_id(claims["sub"])
        if not user:
            raise UnknownSubjectError()
        if not user.get("is_active", True):
            raise AccountSuspendedError()

        identity = build_identity(user, {})
        return {
            "access_token": create_access_token(
                identity.id,
                identity.role.value,
                [p.value for p in identity.permissions],
            ),
            "token_type": "bearer",
            "permissions": [p.value for p in get_effective_permissions(identity)],
        }
