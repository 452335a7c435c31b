"""Tests for effective roles and mutation gating."""

from __future__ import annotations

import pytest

from assetledger.core.exceptions import PermissionDenied
from assetledger.models.membership import Role, TenantMembership

TENANT = "tenant-1"


class TestEffectiveRole:
    def test_owner_supersedes_stored_role(self, guard, owner):
        eff = guard.effective_role(owner, TENANT)
        assert eff.role is Role.ADMIN
        assert eff.stored_role is Role.USER
        assert eff.is_owner

    @pytest.mark.parametrize("required", list(Role))
    def test_owner_passes_every_check(self, guard, owner, required):
        assert guard.has_permission(owner, TENANT, required)

    def test_non_member_has_no_role(self, guard, outsider):
        eff = guard.effective_role(outsider, TENANT)
        assert eff.role is None
        assert not eff.is_member

    def test_membership_is_per_tenant(self, guard, owner):
        assert not guard.effective_role(owner, "other-tenant").is_member

    def test_role_change_is_seen_immediately(self, guard, directory, user):
        assert not guard.has_permission(user, TENANT, Role.ADMIN)
        directory.put_membership(TenantMembership(user_id=user.id, tenant_id=TENANT, role=Role.ADMIN))
        assert guard.has_permission(user, TENANT, Role.ADMIN)


class TestPermissionMatrix:
    @pytest.mark.parametrize(
        ("who", "required", "allowed"),
        [
            ("manager", Role.ADMIN, False),
            ("manager", Role.MANAGER, True),
            ("manager", Role.USER, True),
            ("user", Role.MANAGER, False),
            ("user", Role.USER, True),
            ("outsider", Role.USER, False),
        ],
    )
    def test_matrix(self, request, guard, who, required, allowed):
        actor = request.getfixturevalue(who)
        assert guard.has_permission(actor, TENANT, required) is allowed


class TestCanMutate:
    def test_member_may_mutate_own_record(self, guard, user):
        assert guard.can_mutate(user, TENANT, user.id)

    def test_member_may_not_mutate_others(self, guard, user, manager):
        assert not guard.can_mutate(user, TENANT, manager.id)
        assert not guard.can_mutate(manager, TENANT, user.id)

    def test_owner_may_mutate_anything(self, guard, owner, user):
        assert guard.can_mutate(owner, TENANT, user.id)

    def test_outsider_may_not_mutate_even_own_id(self, guard, outsider):
        assert not guard.can_mutate(outsider, TENANT, outsider.id)

    def test_require_mutation_raises(self, guard, user, manager):
        with pytest.raises(PermissionDenied) as exc_info:
            guard.require_mutation(user, TENANT, manager.id, "edit asset")
        assert exc_info.value.action == "edit asset"

    def test_require_raises_for_insufficient_role(self, guard, user):
        with pytest.raises(PermissionDenied):
            guard.require(user, TENANT, Role.MANAGER, "import employee")
