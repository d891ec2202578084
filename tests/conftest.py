"""
Configuración de fixtures para pytest.
"""
from typing import AsyncGenerator

import pytest
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from cio_sync.infrastructure.database.session import Base, build_session_factory

# Registra todos los modelos en Base.metadata
import cio_sync.infrastructure.database  # noqa: F401


# URL de base de datos de prueba
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def db_session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """
    Session factory sobre una base SQLite en memoria, nueva para cada test.

    StaticPool hace que todas las sesiones compartan la misma conexion (y
    por lo tanto la misma base en memoria).
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield build_session_factory(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def log_records():
    """Captura los registros de loguru emitidos durante el test."""
    records: list[dict] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
