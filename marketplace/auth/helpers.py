"""Low-level auth helpers: password hashing + JWT encode/decode."""

import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from passlib.context import CryptContext
from jose import JWTError, jwt

from marketplace.config import settings
from marketplace.exceptions import InvalidCredentialError

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# ── Password hashing ────────────────────────────────────────────
_pwd_ctx = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain: str) -> str:
    return _pwd_ctx.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return _pwd_ctx.verify(plain, hashed)
    except ValueError:
        # Stored value is not a recognised hash.
        return False


# ── JWT ──────────────────────────────────────────────────────────
def _encode(claims: dict, lifetime: timedelta) -> str:
    to_encode = claims.copy()
    now = datetime.now(timezone.utc)
    to_encode["iat"] = now
    to_encode["exp"] = now + lifetime
    # Two tokens minted for the same subject in the same second must differ,
    # otherwise revoking one would revoke the other.
    to_encode["jti"] = uuid.uuid4().hex
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def create_access_token(
    subject: str,
    role: str,
    permissions: Iterable[str] = (),
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Short-lived credential accepted by the authentication gate."""
    return _encode(
        {
            "sub": str(subject),
            "role": str(role),
            "permissions": [str(p) for p in permissions],
            "type": ACCESS_TOKEN_TYPE,
        },
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes),
    )


def create_refresh_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """Long-lived credential, only good for minting new access tokens."""
    return _encode(
        {"sub": str(subject), "type": REFRESH_TOKEN_TYPE},
        expires_delta or timedelta(days=settings.refresh_token_expire_days),
    )


def decode_token(token: str, expected_type: Optional[str] = None) -> dict:
    """
    Decode and verify a JWT.

    Raises ``InvalidCredentialError`` on a bad signature, malformed token,
    expired token, missing subject, or a ``type`` claim other than
    ``expected_type``.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as exc:
        raise InvalidCredentialError() from exc

    if not payload.get("sub"):
        raise InvalidCredentialError()
    if expected_type is not None and payload.get("type") != expected_type:
        raise InvalidCredentialError()
    return payload


def remaining_lifetime_ms(claims: dict, max_ms: int) -> int:
    """
    Milliseconds until a verified token's ``exp``, capped at ``max_ms``.

    Used to size revocation entries. Claims without an expiry count as
    already expired.
    """
    exp = claims.get("exp")
    if not isinstance(exp, (int, float)):
        return 0
    return min(max(int((exp - time.time()) * 1000), 0), max_ms)
