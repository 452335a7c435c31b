"""Field-level change history entries."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class AuditRecord(BaseModel):
    """One changed field of one mutation. Append-only, never edited."""

    model_config = {"frozen": True}

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    tenant_id: Optional[str] = None
    entity_id: str
    field_name: str  # display label, e.g. "Assigned To"
    old_value: Optional[str] = None
    new_value: str
    actor_id: str
    actor_display_name: str
    timestamp: datetime
