"""Actors, tenant memberships and resolved permission levels."""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel

UNKNOWN_USER = "Unknown user"


class Role(StrEnum):
    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


class Profile(BaseModel):
    """Directory profile for a user."""

    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None


class Actor(BaseModel):
    """The authenticated user performing an operation."""

    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None

    @classmethod
    def from_profile(cls, profile: Profile) -> Actor:
        return cls(id=profile.id, email=profile.email, full_name=profile.full_name)

    @property
    def display_name(self) -> str:
        """Full name, falling back to email, falling back to ``Unknown user``."""
        return self.full_name or self.email or UNKNOWN_USER


class TenantMembership(BaseModel):
    """Stored membership row linking a user to a tenant."""

    user_id: str
    tenant_id: str
    role: Role = Role.USER
    is_owner: bool = False
    is_primary: bool = False


class EffectiveRole(BaseModel):
    """Permission level of a user within one tenant after the owner rule.

    ``role`` is ``None`` when the user is not a member of the tenant.
    """

    user_id: str
    tenant_id: str
    role: Optional[Role] = None
    stored_role: Optional[Role] = None
    is_owner: bool = False

    @property
    def is_member(self) -> bool:
        return self.role is not None

    @property
    def is_admin_equivalent(self) -> bool:
        return self.role is Role.ADMIN

    def satisfies(self, required: Role) -> bool:
        """Apply the permission matrix for an action requiring ``required``."""
        if self.role is None:
            return False
        if required is Role.ADMIN:
            return self.role is Role.ADMIN
        if required is Role.MANAGER:
            return self.role in (Role.ADMIN, Role.MANAGER)
        return True
