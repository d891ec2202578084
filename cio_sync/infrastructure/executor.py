"""
Ejecutor de operaciones bloqueantes (render de barcodes/PDF) en threads.

Generar PNG/SVG/PDF con reportlab es CPU y bloquea; se corre en un
ThreadPoolExecutor dedicado para que el event loop siga atendiendo el I/O
de las demas empresas. El tamaño del pool es independiente de la cantidad
de empresas.

Uso:
    from cio_sync.infrastructure.executor import run_blocking

    png = await run_blocking(generator.render_png, barcode)
"""
import asyncio
import atexit
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar, Callable, Any
from functools import partial

from loguru import logger

from cio_sync.core.config import settings


T = TypeVar("T")

ARTIFACT_MAX_WORKERS = settings.ARTIFACT_MAX_WORKERS

_artifact_executor = ThreadPoolExecutor(
    max_workers=ARTIFACT_MAX_WORKERS,
    thread_name_prefix="artifacts-"
)


def _shutdown_executor() -> None:
    """Cierra el executor al terminar el proceso."""
    logger.debug("Cerrando ThreadPoolExecutor de artefactos...")
    _artifact_executor.shutdown(wait=True)


atexit.register(_shutdown_executor)


async def run_blocking(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """
    Ejecuta una funcion sincrona en el ThreadPoolExecutor de artefactos.

    Args:
        func: Funcion o metodo sincrono a ejecutar
        *args: Argumentos posicionales para la funcion
        **kwargs: Argumentos con nombre para la funcion

    Returns:
        El resultado de la funcion ejecutada

    Raises:
        Cualquier excepcion que la funcion original lance
    """
    if kwargs:
        func = partial(func, **kwargs)

    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_artifact_executor, func, *args)

