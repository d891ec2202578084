"""
Tipos y utilidades puras para leer registros de Airtable.

Se mantienen libres de I/O para poder testearlos fácilmente.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class AirtableRecord:
    """Registro Airtable tal como lo devuelve la API (nunca se muta)."""

    record_id: str
    fields: dict[str, Any]
    created_time: str = ""


Transform = Callable[[Any], Any]


@dataclass(frozen=True)
class FieldMapping:
    """
    Define el mapeo de un campo Airtable a una columna local.

    - airtable_field: nombre del field en Airtable
    - column: nombre de la columna en la tabla local
    - transform: función para transformar el valor antes de persistir
      (recibe None si el field no viene en el registro)
    - required: si True, el valor debe existir (si falta se levanta error)
    """

    airtable_field: str
    column: str
    transform: Optional[Transform] = None
    required: bool = False


# ---------------------------------------------------------------------------
# Formatos de campo de Airtable. Airtable omite los fields vacios, por eso
# todos aceptan None y devuelven el "vacio" del tipo de columna.
# ---------------------------------------------------------------------------

def as_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value).strip()


def as_int(value: Any) -> int:
    if value in (None, ""):
        return 0
    return int(value)


def as_float(value: Any) -> float:
    if value in (None, ""):
        return 0.0
    return float(value)


def as_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def attachment_url(value: Any) -> str:
    """Campo attachment: lista de {url, filename, ...} -> url del primero."""
    if not value:
        return ""
    if isinstance(value, str):
        return value
    first = value[0]
    return str(first.get("url", "")) if isinstance(first, dict) else str(first)


def collaborator_email(value: Any) -> str:
    """Campo collaborator: {id, email, name} -> email."""
    if not value:
        return ""
    if isinstance(value, dict):
        return str(value.get("email", ""))
    return str(value)
