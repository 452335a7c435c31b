"""Single-record endpoints: create, edit, history, export."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from assetledger.api.deps import Services, get_actor, get_services, get_tenant_id
from assetledger.core.exceptions import PermissionDenied, RecordNotFoundError
from assetledger.models.audit import AuditRecord
from assetledger.models.membership import Actor
from assetledger.models.schema import get_schema
from assetledger.models.validation import ValidationDiagnostic

router = APIRouter(tags=["records"])


class RecordResponse(BaseModel):
    record: dict[str, Any]
    diagnostics: list[ValidationDiagnostic] = []


@router.get("/{entity}/export", response_class=PlainTextResponse)
def export(
    entity: str,
    actor: Actor = Depends(get_actor),
    tenant_id: str = Depends(get_tenant_id),
    services: Services = Depends(get_services),
) -> PlainTextResponse:
    schema = get_schema(entity)
    if not services.guard.has_permission(actor, tenant_id, schema.required_role):
        raise PermissionDenied(actor.id, tenant_id, f"export {schema.name}")
    return PlainTextResponse(
        services.imports.export(entity, tenant_id),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{entity}_export.csv"'},
    )


@router.post("/{entity}", response_model=RecordResponse, status_code=201)
def create(
    entity: str,
    values: dict[str, Any] = Body(...),
    actor: Actor = Depends(get_actor),
    tenant_id: str = Depends(get_tenant_id),
    services: Services = Depends(get_services),
) -> RecordResponse:
    record, diagnostics = services.records.create_record(
        get_schema(entity), actor, tenant_id, values
    )
    return RecordResponse(record=record, diagnostics=diagnostics)


@router.patch("/{entity}/{record_id}", response_model=RecordResponse)
def update(
    entity: str,
    record_id: str,
    patch: dict[str, Any] = Body(...),
    actor: Actor = Depends(get_actor),
    tenant_id: str = Depends(get_tenant_id),
    services: Services = Depends(get_services),
) -> RecordResponse:
    record, diagnostics = services.records.update_record(
        get_schema(entity), actor, tenant_id, record_id, patch
    )
    return RecordResponse(record=record, diagnostics=diagnostics)


@router.get("/{entity}/{record_id}/history", response_model=list[AuditRecord])
def history(
    entity: str,
    record_id: str,
    actor: Actor = Depends(get_actor),
    tenant_id: str = Depends(get_tenant_id),
    services: Services = Depends(get_services),
) -> list[AuditRecord]:
    schema = get_schema(entity)
    if services.persistence.records.get(tenant_id, schema.table, record_id) is None:
        raise RecordNotFoundError(schema.table, record_id)
    if not services.guard.effective_role(actor, tenant_id).is_member:
        raise PermissionDenied(actor.id, tenant_id, f"view {schema.name} history")
    return services.records.history(record_id)
