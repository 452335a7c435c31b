"""Request dependencies: wired services and the calling actor."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Header, HTTPException, Request

from assetledger.access.guard import AuthorizationGuard
from assetledger.core.config import AppSettings
from assetledger.importing.service import ImportService
from assetledger.models.membership import Actor
from assetledger.persistence import Persistence
from assetledger.records.service import RecordService


@dataclass
class Services:
    settings: AppSettings
    persistence: Persistence
    guard: AuthorizationGuard
    imports: ImportService
    records: RecordService


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_actor(
    request: Request,
    x_user_id: str | None = Header(default=None),
) -> Actor:
    """Resolve the caller from ``X-User-Id``; authentication happens upstream."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    services = get_services(request)
    profile = services.persistence.directory.get_profile(x_user_id)
    return Actor.from_profile(profile) if profile else Actor(id=x_user_id)


def get_tenant_id(x_tenant_id: str | None = Header(default=None)) -> str:
    if not x_tenant_id:
        raise HTTPException(status_code=401, detail="Missing X-Tenant-Id header")
    return x_tenant_id
