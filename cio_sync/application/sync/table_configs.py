"""
Mapeos Airtable -> tablas locales, una config por tabla sincronizada.

Aqui se define por tabla:
- tabla origen en Airtable y que base de la empresa usar
- modelo destino y su clave natural (clave de upsert junto con la empresa)
- mapeo de campos con sus transformaciones
- si la tabla lleva barcode/artefactos y donde guardarlos en Drive
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from cio_sync.application.services.artifact_generator import LabelText
from cio_sync.infrastructure.database.models import (
    AssetItemModel,
    SwagItemModel,
    SwagInventoryItemModel,
    InboundShipmentModel,
    OutboundShipmentModel,
    SoftwareVendorModel,
    BuildingModel,
    ConferenceRoomModel,
)
from cio_sync.infrastructure.external.airtable.types import (
    FieldMapping,
    as_float,
    as_int,
    as_str,
    as_str_list,
    attachment_url,
    collaborator_email,
)


@dataclass(frozen=True)
class ArtifactSpec:
    """
    Artefactos de una tabla con barcode.

    - drive_folder: carpeta dentro del shared drive de artefactos
    - file_stem: nombre base de los archivos (png, svg, label) a partir de la fila
    - label_text: texto de la etiqueta a partir de la fila
    """

    drive_folder: str
    file_stem: Callable[[dict[str, Any]], str]
    label_text: Callable[[dict[str, Any]], LabelText]


@dataclass(frozen=True)
class RecordSyncConfig:
    """Config de una tabla Airtable -> una tabla local."""

    airtable_table: str
    base_id_attr: str
    model: type
    natural_key: str
    field_mappings: tuple[FieldMapping, ...]
    artifacts: Optional[ArtifactSpec] = None

    @property
    def table_name(self) -> str:
        return self.model.__tablename__


def _asset_file_stem(row: dict[str, Any]) -> str:
    return f"{row.get('type', '')} {row['name']}".strip()


def _asset_label(row: dict[str, Any]) -> LabelText:
    subtitle = " ".join(
        v for v in (row.get("manufacturer", ""), row.get("type", ""), row.get("model_number", "")) if v
    )
    return LabelText(title=row["name"], subtitle=subtitle)


def _swag_inventory_label(row: dict[str, Any]) -> LabelText:
    size = row.get("size", "")
    return LabelText(title=row.get("item") or row["name"], subtitle=f"Size: {size}" if size else "")


ASSET_ITEMS = RecordSyncConfig(
    airtable_table="Asset Items",
    base_id_attr="airtable_base_id_assets",
    model=AssetItemModel,
    natural_key="name",
    field_mappings=(
        FieldMapping("name", "name", as_str),
        FieldMapping("picture", "picture", attachment_url),
        FieldMapping("type", "type", as_str),
        FieldMapping("qualities", "qualities", as_str_list),
        FieldMapping("status", "status", as_str),
        FieldMapping("manufacturer", "manufacturer", as_str),
        FieldMapping("model_number", "model_number", as_str),
        FieldMapping("serial_number", "serial_number", as_str),
        FieldMapping("purchase_price", "purchase_price", as_float),
        FieldMapping("current_employee_borrowing", "current_employee_borrowing", collaborator_email),
        FieldMapping("conference_room_using", "conference_room_using", as_str_list),
        FieldMapping("notes", "notes", as_str),
    ),
    artifacts=ArtifactSpec(drive_folder="assets", file_stem=_asset_file_stem, label_text=_asset_label),
)

SWAG_ITEMS = RecordSyncConfig(
    airtable_table="Swag Items",
    base_id_attr="airtable_base_id_swag",
    model=SwagItemModel,
    natural_key="name",
    field_mappings=(
        FieldMapping("name", "name", as_str),
        FieldMapping("description", "description", as_str),
        FieldMapping("type", "type", as_str),
        FieldMapping("picture", "picture", attachment_url),
    ),
)

SWAG_INVENTORY_ITEMS = RecordSyncConfig(
    airtable_table="Swag Inventory Items",
    base_id_attr="airtable_base_id_swag",
    model=SwagInventoryItemModel,
    natural_key="name",
    field_mappings=(
        FieldMapping("name", "name", as_str),
        FieldMapping("item", "item", as_str),
        FieldMapping("size", "size", as_str),
        FieldMapping("current_stock", "current_stock", as_int),
    ),
    artifacts=ArtifactSpec(
        drive_folder="swag",
        file_stem=lambda row: row["name"],
        label_text=_swag_inventory_label,
    ),
)

INBOUND_SHIPMENTS = RecordSyncConfig(
    airtable_table="Inbound Shipments",
    base_id_attr="airtable_base_id_shipments",
    model=InboundShipmentModel,
    natural_key="tracking_number",
    field_mappings=(
        FieldMapping("tracking_number", "tracking_number", as_str),
        FieldMapping("carrier", "carrier", as_str),
        FieldMapping("tracking_status", "tracking_status", as_str),
        FieldMapping("name", "name", as_str),
        FieldMapping("order_number", "order_number", as_str),
        FieldMapping("notes", "notes", as_str),
    ),
)

OUTBOUND_SHIPMENTS = RecordSyncConfig(
    airtable_table="Outbound Shipments",
    base_id_attr="airtable_base_id_shipments",
    model=OutboundShipmentModel,
    natural_key="tracking_number",
    field_mappings=(
        FieldMapping("tracking_number", "tracking_number", as_str),
        FieldMapping("carrier", "carrier", as_str),
        FieldMapping("status", "status", as_str),
        FieldMapping("name", "name", as_str),
        FieldMapping("email", "email", as_str),
        FieldMapping("street_1", "street_1", as_str),
        FieldMapping("city", "city", as_str),
        FieldMapping("state", "state", as_str),
        FieldMapping("zipcode", "zipcode", as_str),
        FieldMapping("country", "country", as_str),
    ),
)

SOFTWARE_VENDORS = RecordSyncConfig(
    airtable_table="Software Vendors",
    base_id_attr="airtable_base_id_finance",
    model=SoftwareVendorModel,
    natural_key="name",
    field_mappings=(
        FieldMapping("name", "name", as_str),
        FieldMapping("status", "status", as_str),
        FieldMapping("category", "category", as_str),
        FieldMapping("website", "website", as_str),
        FieldMapping("users", "users", as_int),
        FieldMapping("cost_per_user_per_month", "cost_per_user_per_month", as_float),
        FieldMapping("total_cost_per_month", "total_cost_per_month", as_float),
    ),
)

BUILDINGS = RecordSyncConfig(
    airtable_table="Buildings",
    base_id_attr="airtable_base_id_misc",
    model=BuildingModel,
    natural_key="name",
    field_mappings=(
        FieldMapping("name", "name", as_str),
        FieldMapping("description", "description", as_str),
        FieldMapping("street_address", "street_address", as_str),
        FieldMapping("city", "city", as_str),
        FieldMapping("state", "state", as_str),
        FieldMapping("zipcode", "zipcode", as_str),
        FieldMapping("country", "country", as_str),
        FieldMapping("floors", "floors", as_str_list),
    ),
)

CONFERENCE_ROOMS = RecordSyncConfig(
    airtable_table="Conference Rooms",
    base_id_attr="airtable_base_id_misc",
    model=ConferenceRoomModel,
    natural_key="name",
    field_mappings=(
        FieldMapping("name", "name", as_str),
        FieldMapping("type", "type", as_str),
        FieldMapping("building", "building", as_str),
        FieldMapping("floor", "floor", as_str),
        FieldMapping("capacity", "capacity", as_int),
    ),
)
