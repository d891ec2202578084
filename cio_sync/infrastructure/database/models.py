"""
Modelos de base de datos (ORM).

Cada tabla sincronizada desde Airtable lleva:
- cio_company_id + clave natural, con UNIQUE (clave de idempotencia del upsert)
- airtable_record_id: write-back, nunca se usa para deduplicar
"""
from sqlalchemy import Column, String, Integer, Float, DateTime, Text, JSON, UniqueConstraint
from sqlalchemy.sql import func

from cio_sync.infrastructure.database.session import Base


class CompanyModel(Base):
    """
    Modelo de base de datos para empresas (tenants).
    Guarda las credenciales/endpoints que usan los colaboradores externos.
    """

    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    airtable_api_key = Column(String(255), nullable=True)
    airtable_base_id_assets = Column(String(64), nullable=True)
    airtable_base_id_swag = Column(String(64), nullable=True)
    airtable_base_id_shipments = Column(String(64), nullable=True)
    airtable_base_id_finance = Column(String(64), nullable=True)
    airtable_base_id_misc = Column(String(64), nullable=True)
    google_drive_token = Column(Text, nullable=True)
    printer_url = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Company(id={self.id}, name={self.name})>"


class SyncedRecordMixin:
    """Columnas tecnicas comunes a las tablas sincronizadas desde Airtable."""

    id = Column(Integer, primary_key=True, index=True)
    cio_company_id = Column(Integer, nullable=False, index=True)
    airtable_record_id = Column(String(64), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class AssetItemModel(SyncedRecordMixin, Base):
    """Item de inventario de activos (laptops, monitores, ...)."""

    __tablename__ = "asset_items"
    __table_args__ = (UniqueConstraint("cio_company_id", "name", name="uq_asset_items_company_name"),)

    name = Column(String(255), nullable=False)
    picture = Column(String(1024), nullable=False, default="")
    type = Column(String(255), nullable=False, default="")
    qualities = Column(JSON, nullable=False, default=list)
    status = Column(String(255), nullable=False, default="")
    manufacturer = Column(String(255), nullable=False, default="")
    model_number = Column(String(255), nullable=False, default="")
    serial_number = Column(String(255), nullable=False, default="")
    purchase_price = Column(Float, nullable=False, default=0.0)
    current_employee_borrowing = Column(String(255), nullable=False, default="")
    conference_room_using = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=False, default="")
    barcode = Column(String(255), nullable=False, default="")
    barcode_png = Column(String(1024), nullable=False, default="")
    barcode_svg = Column(String(1024), nullable=False, default="")
    barcode_pdf_label = Column(String(1024), nullable=False, default="")

    def __repr__(self):
        return f"<AssetItem(id={self.id}, name={self.name}, barcode={self.barcode})>"


class SwagItemModel(SyncedRecordMixin, Base):
    """Tipo de swag (remera, sticker, ...)."""

    __tablename__ = "swag_items"
    __table_args__ = (UniqueConstraint("cio_company_id", "name", name="uq_swag_items_company_name"),)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    type = Column(String(255), nullable=False, default="")
    picture = Column(String(1024), nullable=False, default="")


class SwagInventoryItemModel(SyncedRecordMixin, Base):
    """Stock de un swag en un talle concreto; lleva barcode y etiqueta."""

    __tablename__ = "swag_inventory_items"
    __table_args__ = (UniqueConstraint("cio_company_id", "name", name="uq_swag_inventory_items_company_name"),)

    name = Column(String(255), nullable=False)
    item = Column(String(255), nullable=False, default="")
    size = Column(String(64), nullable=False, default="")
    current_stock = Column(Integer, nullable=False, default=0)
    barcode = Column(String(255), nullable=False, default="")
    barcode_png = Column(String(1024), nullable=False, default="")
    barcode_svg = Column(String(1024), nullable=False, default="")
    barcode_pdf_label = Column(String(1024), nullable=False, default="")


class InboundShipmentModel(SyncedRecordMixin, Base):
    """Envio entrante."""

    __tablename__ = "inbound_shipments"
    __table_args__ = (
        UniqueConstraint("cio_company_id", "tracking_number", name="uq_inbound_shipments_company_tracking"),
    )

    tracking_number = Column(String(255), nullable=False)
    carrier = Column(String(255), nullable=False, default="")
    tracking_status = Column(String(255), nullable=False, default="")
    name = Column(String(255), nullable=False, default="")
    order_number = Column(String(255), nullable=False, default="")
    notes = Column(Text, nullable=False, default="")


class OutboundShipmentModel(SyncedRecordMixin, Base):
    """Envio saliente."""

    __tablename__ = "outbound_shipments"
    __table_args__ = (
        UniqueConstraint("cio_company_id", "tracking_number", name="uq_outbound_shipments_company_tracking"),
    )

    tracking_number = Column(String(255), nullable=False)
    carrier = Column(String(255), nullable=False, default="")
    status = Column(String(255), nullable=False, default="")
    name = Column(String(255), nullable=False, default="")
    email = Column(String(255), nullable=False, default="")
    street_1 = Column(String(255), nullable=False, default="")
    city = Column(String(255), nullable=False, default="")
    state = Column(String(255), nullable=False, default="")
    zipcode = Column(String(32), nullable=False, default="")
    country = Column(String(64), nullable=False, default="")


class SoftwareVendorModel(SyncedRecordMixin, Base):
    """Proveedor de software y su costo mensual."""

    __tablename__ = "software_vendors"
    __table_args__ = (UniqueConstraint("cio_company_id", "name", name="uq_software_vendors_company_name"),)

    name = Column(String(255), nullable=False)
    status = Column(String(255), nullable=False, default="")
    category = Column(String(255), nullable=False, default="")
    website = Column(String(1024), nullable=False, default="")
    users = Column(Integer, nullable=False, default=0)
    cost_per_user_per_month = Column(Float, nullable=False, default=0.0)
    total_cost_per_month = Column(Float, nullable=False, default=0.0)


class BuildingModel(SyncedRecordMixin, Base):
    """Edificio/oficina."""

    __tablename__ = "buildings"
    __table_args__ = (UniqueConstraint("cio_company_id", "name", name="uq_buildings_company_name"),)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    street_address = Column(String(255), nullable=False, default="")
    city = Column(String(255), nullable=False, default="")
    state = Column(String(255), nullable=False, default="")
    zipcode = Column(String(32), nullable=False, default="")
    country = Column(String(64), nullable=False, default="")
    floors = Column(JSON, nullable=False, default=list)


class ConferenceRoomModel(SyncedRecordMixin, Base):
    """Sala de reuniones."""

    __tablename__ = "conference_rooms"
    __table_args__ = (UniqueConstraint("cio_company_id", "name", name="uq_conference_rooms_company_name"),)

    name = Column(String(255), nullable=False)
    type = Column(String(255), nullable=False, default="")
    building = Column(String(255), nullable=False, default="")
    floor = Column(String(64), nullable=False, default="")
    capacity = Column(Integer, nullable=False, default=0)
