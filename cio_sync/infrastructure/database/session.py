"""
Gestión del engine y sesiones de base de datos.

El engine (y su pool de conexiones) es el unico recurso compartido entre
las tareas de cada empresa. Se crea perezosamente para que importar los
modelos no requiera una base de datos configurada.
"""
from typing import Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker
)
from sqlalchemy.orm import declarative_base

from cio_sync.core.config import settings


# Base para modelos de SQLAlchemy
Base = declarative_base()

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def _create_engine_args(url: str) -> dict:
    """
    Construye los argumentos del engine segun el tipo de base de datos.
    PostgreSQL usa pool de conexiones, SQLite no lo soporta.
    """
    args = {
        "echo": settings.DEBUG,
        "future": True,
    }

    if "postgresql" in url:
        args.update({
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_pre_ping": True,  # Verifica conexion antes de usar
        })

    return args


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory con la configuracion comun del proyecto."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )


def get_engine() -> AsyncEngine:
    """Engine global (se crea en el primer uso)."""
    global _engine
    if _engine is None:
        url = settings.effective_database_url
        _engine = create_async_engine(url, **_create_engine_args(url))
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory global ligada al engine global."""
    global _session_factory
    if _session_factory is None:
        _session_factory = build_session_factory(get_engine())
    return _session_factory


async def init_db() -> None:
    """Inicializa la base de datos creando todas las tablas."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Cierra las conexiones de la base de datos."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
