"""
Configuracion central del runner de sincronizacion.
Gestiona variables de entorno y configuraciones globales.
"""
from pydantic_settings import BaseSettings
from pydantic import Field, computed_field


class Settings(BaseSettings):
    """
    Clase de configuracion del runner.
    Lee variables de entorno (y .env) y proporciona valores por defecto.

    - DATABASE_URL se puede especificar completa o por componentes
    - Las credenciales de Airtable/Drive viven por empresa en la tabla
      `companies`; AIRTABLE_TOKEN solo se usa como fallback.
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="CIO Sync Runner")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Base de datos - Componentes separados
    DATABASE_HOST: str = Field(default="localhost")
    DATABASE_PORT: int = Field(default=5432)
    DATABASE_USER: str = Field(default="cio_user")
    DATABASE_PASSWORD: str = Field(default="cio_pass")
    DATABASE_NAME: str = Field(default="cio_db")

    # Base de datos - URL completa (override de componentes si se proporciona)
    DATABASE_URL: str = Field(default="")
    DB_POOL_SIZE: int = Field(default=5)
    DB_MAX_OVERFLOW: int = Field(default=10)

    # Airtable
    AIRTABLE_API_URL: str = Field(default="https://api.airtable.com/v0")
    AIRTABLE_TOKEN: str = Field(default="")
    AIRTABLE_VIEW: str = Field(default="Grid view")
    AIRTABLE_MAX_RETRIES: int = Field(default=6)

    # Google Drive
    GOOGLE_DRIVE_API_URL: str = Field(default="https://www.googleapis.com/drive/v3")
    GOOGLE_UPLOAD_API_URL: str = Field(default="https://www.googleapis.com/upload/drive/v3")
    DRIVE_SHARED_NAME: str = Field(default="Automated Documents")

    # Colaboradores HTTP (Airtable, Drive, impresora)
    HTTP_TIMEOUT_SECONDS: float = Field(default=30.0)

    # Pool de threads para render de barcodes/etiquetas
    ARTIFACT_MAX_WORKERS: int = Field(default=4)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_JSON: bool = Field(default=False)
    LOG_FILE: str = Field(default="")

    @computed_field
    @property
    def effective_database_url(self) -> str:
        """
        Retorna la URL de base de datos efectiva.
        Si DATABASE_URL esta definida, la usa directamente.
        Si no, construye la URL desde los componentes individuales.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


# Instancia global de configuracion
settings = Settings()
