"""Effective-role lookup for role-gated client affordances."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from assetledger.api.deps import Services, get_actor, get_services, get_tenant_id
from assetledger.models.membership import Actor, EffectiveRole

router = APIRouter(tags=["access"])


@router.get("/effective-role", response_model=EffectiveRole)
def effective_role(
    actor: Actor = Depends(get_actor),
    tenant_id: str = Depends(get_tenant_id),
    services: Services = Depends(get_services),
) -> EffectiveRole:
    # Computed per request; clients must not cache this across tenant switches.
    return services.guard.effective_role(actor, tenant_id)
