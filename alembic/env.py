"""
Configuracion de Alembic para migraciones de base de datos.

- Usa la URL de base de datos desde settings (config.py)
- Importa todos los modelos para autogenerate
- asyncpg se reemplaza por psycopg para correr las migraciones en modo sync
"""
from logging.config import fileConfig

from sqlalchemy import engine_from_config
from sqlalchemy import pool

from alembic import context

from cio_sync.core.config import settings
from cio_sync.infrastructure.database.session import Base

# Registra todos los modelos en Base.metadata
import cio_sync.infrastructure.database  # noqa: F401

config = context.config

db_url = settings.effective_database_url.replace("+asyncpg", "+psycopg")
config.set_main_option("sqlalchemy.url", db_url)
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """
    Ejecuta migraciones en modo 'offline' (solo genera SQL, sin conexion).
    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """
    Conecta a la base de datos y ejecuta las migraciones directamente.
    """
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
