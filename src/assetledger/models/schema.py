"""Import schemas: how upload columns map onto typed inventory records."""

from __future__ import annotations

from decimal import Decimal
from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel

from assetledger.core.exceptions import UnknownEntityError
from assetledger.models.membership import Role
from assetledger.models.records import AssetRecord, EmployeeRecord, WarehouseItemRecord


class FieldType(StrEnum):
    STRING = "string"
    INTEGER = "integer"
    DECIMAL = "decimal"
    DATE = "date"
    ENUM = "enum"


class FieldSchema(BaseModel):
    """One domain field and its coercion policy."""

    model_config = {"frozen": True}

    name: str
    label: str = ""
    type: FieldType = FieldType.STRING
    choices: tuple[str, ...] = ()  # canonical lowercase values, ENUM only
    default: Any = None
    required: bool = False
    fatal: bool = False  # invalid value rejects the row instead of degrading
    strip: bool = True
    minimum: Optional[Decimal] = None
    aliases: tuple[str, ...] = ()

    @property
    def display_name(self) -> str:
        return self.label or self.name.replace("_", " ").title()

    @property
    def header_names(self) -> tuple[str, ...]:
        return (self.name, *self.aliases)


class EntitySchema(BaseModel):
    """Field set, identity rules and persistence target for one entity type."""

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    name: str
    table: str
    record_model: type[BaseModel]
    fields: tuple[FieldSchema, ...]
    identity_fields: tuple[str, ...] = ("name",)
    unique_fields: tuple[str, ...] = ()
    placeholder_name: Optional[str] = None
    tag_prefix: Optional[str] = None
    required_role: Role = Role.USER

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    @property
    def labels(self) -> dict[str, str]:
        return {f.name: f.display_name for f in self.fields}

    def field(self, name: str) -> FieldSchema:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)


ASSET_STATUSES = ("ready", "assigned", "pending", "archived", "broken")
STATUS_COLORS = ("green", "yellow", "red")
WAREHOUSE_STATUSES = ("available", "low_stock", "out_of_stock", "discontinued")

ZERO = Decimal("0")

ASSET_SCHEMA = EntitySchema(
    name="asset",
    table="assets",
    record_model=AssetRecord,
    identity_fields=("name", "tag"),
    unique_fields=("tag",),
    placeholder_name="Unnamed Asset",
    tag_prefix="ASSET",
    fields=(
        FieldSchema(name="tag", label="Tag", required=True, aliases=("in", "asset_tag")),
        FieldSchema(name="name", label="Name", required=True),
        FieldSchema(name="category", label="Category", default="General", required=True),
        FieldSchema(
            name="status", label="Status", type=FieldType.ENUM,
            choices=ASSET_STATUSES, default="ready", required=True,
        ),
        FieldSchema(name="assigned_to", label="Assigned To"),
        FieldSchema(name="model", label="Model"),
        FieldSchema(name="serial", label="Serial"),
        FieldSchema(name="purchase_date", label="Purchase Date", type=FieldType.DATE),
        FieldSchema(
            name="purchase_cost", label="Purchase Cost", type=FieldType.DECIMAL, minimum=ZERO,
        ),
        FieldSchema(name="location", label="Location"),
        FieldSchema(name="wear", label="Wear"),
        FieldSchema(name="notes", label="Notes"),
        FieldSchema(
            name="status_color", label="Status Color", type=FieldType.ENUM, choices=STATUS_COLORS,
        ),
        FieldSchema(
            name="qty", label="Quantity", type=FieldType.INTEGER, default=1,
            minimum=ZERO, aliases=("quantity",),
        ),
    ),
)

EMPLOYEE_SCHEMA = EntitySchema(
    name="employee",
    table="employees",
    record_model=EmployeeRecord,
    identity_fields=("name",),
    unique_fields=("email",),
    required_role=Role.MANAGER,
    fields=(
        FieldSchema(name="name", label="Name", required=True, aliases=("full_name",)),
        FieldSchema(name="email", label="Email"),
        FieldSchema(name="role", label="Role", aliases=("title", "position")),
        FieldSchema(name="department", label="Department"),
        FieldSchema(name="hire_date", label="Hire Date", type=FieldType.DATE),
    ),
)

WAREHOUSE_ITEM_SCHEMA = EntitySchema(
    name="warehouse_item",
    table="warehouse_items",
    record_model=WarehouseItemRecord,
    identity_fields=("name", "tag"),
    unique_fields=("tag",),
    placeholder_name="Unnamed Item",
    tag_prefix="ITEM",
    fields=(
        FieldSchema(name="tag", label="Tag", required=True, aliases=("sku",)),
        FieldSchema(name="name", label="Name", required=True),
        FieldSchema(name="category", label="Category", default="General", required=True),
        FieldSchema(
            name="status", label="Status", type=FieldType.ENUM,
            choices=WAREHOUSE_STATUSES, default="available",
        ),
        FieldSchema(name="description", label="Description"),
        FieldSchema(
            name="quantity", label="Quantity", type=FieldType.INTEGER, default=0,
            minimum=ZERO, aliases=("qty",),
        ),
        FieldSchema(name="location", label="Location"),
        FieldSchema(name="supplier", label="Supplier"),
        FieldSchema(
            name="reorder_level", label="Reorder Level", type=FieldType.INTEGER,
            default=5, minimum=ZERO,
        ),
        FieldSchema(name="cost", label="Cost", type=FieldType.DECIMAL, default=ZERO, minimum=ZERO),
    ),
)

SCHEMAS: dict[str, EntitySchema] = {
    s.name: s for s in (ASSET_SCHEMA, EMPLOYEE_SCHEMA, WAREHOUSE_ITEM_SCHEMA)
}


def get_schema(entity: str) -> EntitySchema:
    """Look up a schema by entity name (``asset``, ``employee``, ``warehouse_item``)."""
    try:
        return SCHEMAS[entity]
    except KeyError:
        raise UnknownEntityError(entity) from None


def unique_fields_by_table() -> dict[str, tuple[str, ...]]:
    """Uniqueness constraints the record stores enforce per tenant."""
    return {s.table: s.unique_fields for s in SCHEMAS.values() if s.unique_fields}
