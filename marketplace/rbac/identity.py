from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .permissions import Permission
from .roles import Role


@dataclass(frozen=True)
class Identity:
    """The authenticated subject of one request."""

    id: str
    role: Role
    permissions: frozenset[Permission] = field(default_factory=frozenset)

    def __post_init__(self):
        if not isinstance(self.permissions, frozenset):
            object.__setattr__(self, "permissions", frozenset(self.permissions))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "role": self.role.value,
            "permissions": sorted(p.value for p in self.permissions),
        }


@dataclass(frozen=True)
class OwnershipDescriptor:
    """Owner fields of a resource, as far as the ownership check cares."""

    vendor_id: Optional[str] = None
    user_id: Optional[str] = None
    owner_id: Optional[str] = None

    @classmethod
    def from_resource(cls, resource: Any) -> "OwnershipDescriptor":
        """
        Build a descriptor from a dict (snake_case or camelCase keys) or
        from any object exposing the same attributes.
        """
        if isinstance(resource, cls):
            return resource

        def pick(snake: str, camel: str):
            if isinstance(resource, Mapping):
                value = resource.get(snake, resource.get(camel))
            else:
                value = getattr(resource, snake, getattr(resource, camel, None))
            return None if value is None else str(value)

        return cls(
            vendor_id=pick("vendor_id", "vendorId"),
            user_id=pick("user_id", "userId"),
            owner_id=pick("owner_id", "ownerId"),
        )
