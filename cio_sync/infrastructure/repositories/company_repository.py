"""
Repositorio de empresas (tenants).
"""
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cio_sync.infrastructure.database.models import CompanyModel


class CompanyRepository:
    """Repositorio para leer empresas de la base de datos."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self) -> List[CompanyModel]:
        """Obtiene todas las empresas ordenadas por id."""
        result = await self.db.execute(select(CompanyModel).order_by(CompanyModel.id))
        return result.scalars().all()

    async def get_by_name(self, name: str) -> Optional[CompanyModel]:
        result = await self.db.execute(
            select(CompanyModel).where(CompanyModel.name == name)
        )
        return result.scalars().first()
