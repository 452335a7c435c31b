"""Tabular import endpoints: template, preview, confirm, discard."""

from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from assetledger.api.deps import Services, get_actor, get_services, get_tenant_id
from assetledger.core.exceptions import PermissionDenied
from assetledger.importing.preview import PreviewProjection, project
from assetledger.models.imports import ImportReport
from assetledger.models.membership import Actor
from assetledger.models.schema import get_schema

router = APIRouter(tags=["imports"])


class PreviewResponse(BaseModel):
    preview_id: str
    preview: PreviewProjection


class ConfirmResponse(BaseModel):
    summary: str
    report: ImportReport


def _file_type(filename: Optional[str], declared: Optional[str]) -> Literal["csv", "xlsx"]:
    if declared:
        return "xlsx" if declared == "xlsx" else "csv"
    if filename and filename.lower().endswith((".xlsx", ".xlsm")):
        return "xlsx"
    return "csv"


@router.get("/{entity}/template", response_class=PlainTextResponse)
def template(entity: str, services: Services = Depends(get_services)) -> PlainTextResponse:
    """Blank upload template containing only the header row."""
    content = services.imports.template(entity)
    return PlainTextResponse(
        content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{entity}_template.csv"'},
    )


@router.post("/{entity}/preview", response_model=PreviewResponse)
def upload_preview(
    entity: str,
    file: UploadFile = File(...),
    file_type: Optional[Literal["csv", "xlsx"]] = Query(default=None),
    actor: Actor = Depends(get_actor),
    tenant_id: str = Depends(get_tenant_id),
    services: Services = Depends(get_services),
) -> PreviewResponse:
    """Parse and validate an upload; nothing is persisted until confirmation."""
    schema = get_schema(entity)
    if not services.guard.effective_role(actor, tenant_id).is_member:
        raise PermissionDenied(actor.id, tenant_id, f"import {schema.name}")

    limit = services.settings.imports.max_upload_bytes
    payload = file.file.read(limit + 1)
    if len(payload) > limit:
        raise HTTPException(status_code=413, detail=f"Upload exceeds {limit} bytes")

    preview = services.imports.parse_preview(payload, entity, _file_type(file.filename, file_type))
    preview_id = services.imports.save_preview(preview, tenant_id)
    return PreviewResponse(
        preview_id=preview_id,
        preview=project(preview, limit=services.settings.imports.preview_row_limit),
    )


@router.post("/{entity}/previews/{preview_id}/confirm", response_model=ConfirmResponse)
def confirm(
    entity: str,
    preview_id: str,
    actor: Actor = Depends(get_actor),
    tenant_id: str = Depends(get_tenant_id),
    services: Services = Depends(get_services),
) -> ConfirmResponse:
    preview = services.imports.load_preview(preview_id, tenant_id)
    if preview.entity != get_schema(entity).name:
        raise HTTPException(status_code=409, detail="Preview belongs to a different entity")
    report = services.imports.confirm_import(preview, actor, tenant_id)
    services.imports.discard_preview(preview_id, tenant_id)
    return ConfirmResponse(summary=report.summary(), report=report)


@router.delete("/{entity}/previews/{preview_id}", status_code=204)
def discard(
    entity: str,
    preview_id: str,
    tenant_id: str = Depends(get_tenant_id),
    services: Services = Depends(get_services),
) -> None:
    services.imports.discard_preview(preview_id, tenant_id)
