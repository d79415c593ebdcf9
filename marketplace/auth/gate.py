"""
Authentication gate.

Turns a bearer credential into an ``Identity``:

  1. no credential                      → MissingCredentialError
  2. credential revoked                 → RevokedCredentialError
  3. bad signature / expired / wrong type → InvalidCredentialError
  4. subject lookup fails or finds nothing → InvalidCredentialError / UnknownSubjectError
  5. subject deactivated (suspended)     → AccountSuspendedError
  6. otherwise an Identity built from the stored record plus token grants
"""

from typing import Awaitable, Callable, Mapping, Optional

from marketplace.exceptions import (
    AccountSuspendedError,
    InvalidCredentialError,
    MissingCredentialError,
    RevokedCredentialError,
    UnknownSubjectError,
)
from marketplace.rbac import Identity, Role, parse_permissions
from marketplace.utils import Logger

from .blacklist import TokenBlacklist
from .helpers import ACCESS_TOKEN_TYPE, decode_token

logger = Logger("auth.gate")

IdentityLookup = Callable[[str], Awaitable[Optional[Mapping]]]


def extract_bearer_token(
    headers: Mapping[str, str],
    cookies: Mapping[str, str],
    cookie_name: str,
) -> Optional[str]:
    """Header ``Authorization: Bearer <token>`` wins over the cookie."""
    auth_header = headers.get("authorization") or ""
    if auth_header.startswith("Bearer "):
        token = auth_header.split(" ", 1)[1].strip()
        if token:
            return token
    return cookies.get(cookie_name) or None


def build_identity(record: Mapping, claims: Mapping) -> Identity:
    """
    Identity from the freshest stored record, with any direct grants from
    the record and the token merged together.
    """
    raw_role = record.get("role")
    role = Role.parse(raw_role)
    if role is None:
        logger.warning(f"Unknown role {raw_role!r} on user record; treating as CUSTOMER")
        role = Role.CUSTOMER

    subject_id = record.get("_id", record.get("id"))
    permissions = parse_permissions(record.get("permissions")) | parse_permissions(
        claims.get("permissions")
    )
    return Identity(id=str(subject_id), role=role, permissions=permissions)


class AuthenticationGate:
    def __init__(self, blacklist: TokenBlacklist, identity_lookup: IdentityLookup):
        self.blacklist = blacklist
        self.identity_lookup = identity_lookup

    async def authenticate(self, token: Optional[str]) -> Identity:
        if not token:
            raise MissingCredentialError()

        if self.blacklist.has(token):
            raise RevokedCredentialError()

        # Refresh tokens carry type="refresh" and are rejected here.
        claims = decode_token(token, expected_type=ACCESS_TOKEN_TYPE)

        try:
            record = await self.identity_lookup(claims["sub"])
        except Exception as exc:
            logger.error(f"Identity lookup failed for subject {claims['sub']}: {exc}")
            raise InvalidCredentialError() from exc

        if not record:
            raise UnknownSubjectError()

        if not record.get("is_active", True):
            raise AccountSuspendedError()

        return build_identity(record, claims)
