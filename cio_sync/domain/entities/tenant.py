"""
Empresa (tenant) sobre la que corre un job de sync.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Tenant:
    """
    Vista de solo lectura de una empresa durante una corrida.

    Se carga una vez por invocacion desde la tabla `companies` y no se
    modifica mientras el job corre.
    """

    id: int
    name: str
    airtable_api_key: str = ""
    airtable_base_id_assets: str = ""
    airtable_base_id_swag: str = ""
    airtable_base_id_shipments: str = ""
    airtable_base_id_finance: str = ""
    airtable_base_id_misc: str = ""
    google_drive_token: str = ""
    printer_url: str = ""

    @classmethod
    def from_model(cls, model: Any) -> "Tenant":
        """Crea el tenant a partir de un CompanyModel (None -> "")."""
        return cls(
            id=model.id,
            name=model.name,
            airtable_api_key=model.airtable_api_key or "",
            airtable_base_id_assets=model.airtable_base_id_assets or "",
            airtable_base_id_swag=model.airtable_base_id_swag or "",
            airtable_base_id_shipments=model.airtable_base_id_shipments or "",
            airtable_base_id_finance=model.airtable_base_id_finance or "",
            airtable_base_id_misc=model.airtable_base_id_misc or "",
            google_drive_token=model.google_drive_token or "",
            printer_url=model.printer_url or "",
        )

    def airtable_base_id(self, attr: str) -> str:
        """Base de Airtable configurada para el atributo dado (p.ej. 'airtable_base_id_assets')."""
        return getattr(self, attr, "") or ""
