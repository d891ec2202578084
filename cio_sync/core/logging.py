"""
Configuracion de loguru para el runner.

Se llama una sola vez desde la CLI. El resto del codigo no toca el estado
global del logger: el contexto por empresa/job se pasa con `logger.bind`
dentro de `RunContext`.
"""
import sys

from loguru import logger

from cio_sync.core.config import settings

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "{extra[job]} {extra[company]} | <level>{message}</level>"
)


def configure_logging(*, debug: bool = False, json: bool = False) -> None:
    """
    Reemplaza el sink por defecto de loguru.

    Args:
        debug: Fuerza nivel DEBUG (si no, usa LOG_LEVEL)
        json: Emite cada linea serializada como JSON (util en cron/cloud)
    """
    level = "DEBUG" if debug or settings.DEBUG else settings.LOG_LEVEL

    logger.remove()
    logger.configure(extra={"job": "-", "company": "-"})
    if json or settings.LOG_JSON:
        logger.add(sys.stderr, level=level, serialize=True)
    else:
        logger.add(sys.stderr, level=level, format=_CONSOLE_FORMAT)

    if settings.LOG_FILE:
        logger.add(
            settings.LOG_FILE,
            rotation="500 MB",
            retention="10 days",
            level=level,
            serialize=json or settings.LOG_JSON,
        )
