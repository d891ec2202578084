"""
Configuración de base de datos.

Importa todos los modelos para que se registren con Base
antes de crear las tablas.
"""
from cio_sync.infrastructure.database.models import (
    CompanyModel,
    AssetItemModel,
    SwagItemModel,
    SwagInventoryItemModel,
    InboundShipmentModel,
    OutboundShipmentModel,
    SoftwareVendorModel,
    BuildingModel,
    ConferenceRoomModel,
)
