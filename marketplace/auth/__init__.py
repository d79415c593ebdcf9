"""
Authentication: token issuing, the invalidation store and the gate.

Routers are imported from ``marketplace.auth.routes`` directly.
"""

from .blacklist import TokenBlacklist, get_token_blacklist, token_blacklist
from .gate import AuthenticationGate, build_identity, extract_bearer_token

__all__ = [
    "TokenBlacklist",
    "get_token_blacklist",
    "token_blacklist",
    "AuthenticationGate",
    "build_identity",
    "extract_bearer_token",
]
