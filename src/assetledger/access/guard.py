"""Authorization guard: tenant-scoped effective roles and mutation gates.

Nothing here is cached. Every check re-reads the membership from the
directory so a role change or tenant switch takes effect on the next call.
"""

from __future__ import annotations

from typing import Optional

from assetledger.core.exceptions import PermissionDenied
from assetledger.core.logging import get_logger
from assetledger.core.protocols import IDirectory
from assetledger.models.membership import Actor, EffectiveRole, Role

logger = get_logger(__name__)


class AuthorizationGuard:
    """Resolves what an actor may do inside one tenant."""

    def __init__(self, directory: IDirectory) -> None:
        self._directory = directory

    def effective_role(self, actor: Actor, tenant_id: str) -> EffectiveRole:
        """Stored role with the owner rule applied; ``role=None`` for non-members."""
        membership = self._directory.get_membership(actor.id, tenant_id)
        if membership is None:
            return EffectiveRole(user_id=actor.id, tenant_id=tenant_id)

        role = Role.ADMIN if membership.is_owner else membership.role
        return EffectiveRole(
            user_id=actor.id,
            tenant_id=tenant_id,
            role=role,
            stored_role=membership.role,
            is_owner=membership.is_owner,
        )

    def has_permission(self, actor: Actor, tenant_id: str, required: Role) -> bool:
        return self.effective_role(actor, tenant_id).satisfies(required)

    def can_mutate(
        self, actor: Actor, tenant_id: str, target_owner_id: Optional[str] = None
    ) -> bool:
        """Members may always change their own records; others need admin."""
        effective = self.effective_role(actor, tenant_id)
        if not effective.is_member:
            return False
        if target_owner_id is not None and target_owner_id == actor.id:
            return True
        return effective.is_admin_equivalent

    def require(self, actor: Actor, tenant_id: str, required: Role, action: str) -> None:
        """Raise PermissionDenied unless the actor holds ``required`` in the tenant."""
        if not self.has_permission(actor, tenant_id, required):
            logger.debug(
                "permission_denied",
                actor_id=actor.id,
                tenant_id=tenant_id,
                required=required.value,
                action=action,
            )
            raise PermissionDenied(actor.id, tenant_id, action)

    def require_mutation(
        self,
        actor: Actor,
        tenant_id: str,
        target_owner_id: Optional[str],
        action: str,
    ) -> None:
        if not self.can_mutate(actor, tenant_id, target_owner_id):
            logger.debug(
                "mutation_denied",
                actor_id=actor.id,
                tenant_id=tenant_id,
                target_owner_id=target_owner_id,
                action=action,
            )
            raise PermissionDenied(actor.id, tenant_id, action)
