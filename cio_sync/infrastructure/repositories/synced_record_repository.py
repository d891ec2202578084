"""
Repositorio generico para tablas sincronizadas desde Airtable.

Upsert por (cio_company_id, clave natural):
- si no existe, inserta
- si existe, actualiza todas las columnas mutables y conserva el `id`

Se implementa con SELECT + INSERT/UPDATE via ORM (y no con ON CONFLICT)
para que funcione igual en PostgreSQL y en SQLite de tests; el UNIQUE de
la tabla sigue siendo la ultima garantia contra duplicados.
"""
from typing import Any, Optional, Type

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

_IMMUTABLE_COLUMNS = {"id", "cio_company_id", "airtable_record_id", "created_at", "updated_at"}


class SyncedRecordRepository:
    """Operaciones de persistencia para un modelo sincronizado."""

    def __init__(self, db: AsyncSession, model: Type[Any], natural_key: str):
        self.db = db
        self.model = model
        self.natural_key = natural_key

    async def get_by_natural_key(self, company_id: int, key: str) -> Optional[Any]:
        result = await self.db.execute(
            select(self.model).where(
                self.model.cio_company_id == company_id,
                getattr(self.model, self.natural_key) == key,
            )
        )
        return result.scalars().first()

    async def upsert(self, company_id: int, values: dict[str, Any]) -> Any:
        """
        Inserta o actualiza la entidad de la empresa con la clave natural de `values`.

        Returns:
            La instancia persistida (flush hecho, sin commit).
        """
        key = values[self.natural_key]
        entity = await self.get_by_natural_key(company_id, key)
        if entity is None:
            entity = self.model(cio_company_id=company_id, **values)
            self.db.add(entity)
        else:
            for column, value in values.items():
                if column in _IMMUTABLE_COLUMNS:
                    continue
                setattr(entity, column, value)
        await self.db.flush()
        return entity

    async def set_airtable_record_id(self, entity_id: int, record_id: str) -> None:
        """Write-back del id externo: solo se persiste esa columna."""
        entity = await self.db.get(self.model, entity_id)
        if entity is not None and entity.airtable_record_id != record_id:
            entity.airtable_record_id = record_id
            await self.db.flush()

    async def count_for_company(self, company_id: int) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(self.model).where(self.model.cio_company_id == company_id)
        )
        return result.scalar_one()
