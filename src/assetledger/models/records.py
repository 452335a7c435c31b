"""Typed inventory records: the only shapes written to the record store.

Normalized import rows and manual edits are mapped field-by-field onto these
models; arbitrary string-keyed rows never reach persistence.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class _TenantRecord(BaseModel):
    """Bookkeeping columns shared by every tenant-owned table."""

    model_config = {"extra": "forbid"}

    id: str
    tenant_id: str
    user_id: str  # owner: the actor who created the record
    created_at: str
    updated_at: str


class AssetRecord(_TenantRecord):
    """Physical asset tracked by tag."""

    tag: str
    name: str
    category: str = "General"
    status: str = "ready"  # ready, assigned, pending, archived, broken
    status_color: Optional[str] = None  # green, yellow, red
    assigned_to: Optional[str] = None  # custodian display name
    model: Optional[str] = None
    serial: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_cost: Optional[Decimal] = None
    location: Optional[str] = None
    wear: Optional[str] = None  # expected years until replacement
    notes: Optional[str] = None
    qty: int = 1


class EmployeeRecord(_TenantRecord):
    """Custodian that assets can be assigned to."""

    name: str
    email: Optional[str] = None
    role: Optional[str] = None  # job title, not a tenant permission role
    department: Optional[str] = None
    hire_date: Optional[date] = None


class WarehouseItemRecord(_TenantRecord):
    """Stocked consumable counted by quantity."""

    tag: str
    name: str
    category: str = "General"
    status: str = "available"  # available, low_stock, out_of_stock, discontinued
    description: Optional[str] = None
    quantity: int = 0
    location: Optional[str] = None
    supplier: Optional[str] = None
    reorder_level: int = 5
    cost: Decimal = Decimal("0")
