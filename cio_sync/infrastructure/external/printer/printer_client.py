"""
Cliente para el servicio de impresion de etiquetas (Zebra).
"""
from typing import Optional

import httpx
from loguru import logger

from cio_sync.core.config import settings
from cio_sync.shared.exceptions.sync import DispatchFailure


class PrinterClient:
    """
    Envia etiquetas PDF a la impresora de la empresa.

    La impresora responde 202 Accepted cuando encola el trabajo; cualquier
    otro status es un error fatal para ese envio.
    """

    def __init__(self, *, client: Optional[httpx.AsyncClient] = None, timeout_s: Optional[float] = None):
        self._client = client or httpx.AsyncClient(
            timeout=timeout_s or settings.HTTP_TIMEOUT_SECONDS
        )
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def print_label(self, printer_url: str, label_url: str, quantity: int = 1) -> None:
        """
        Pide imprimir `quantity` copias de la etiqueta en `label_url`.

        Raises:
            DispatchFailure: si la impresora no responde 202 o no se pudo contactar
                (status_code 0)
        """
        url = f"{printer_url.rstrip('/')}/zebra"
        try:
            resp = await self._client.post(url, json={"url": label_url, "quantity": quantity})
        except httpx.HTTPError as e:
            raise DispatchFailure(0, f"{type(e).__name__}: {e}", printer_url=url) from e
        if resp.status_code != httpx.codes.ACCEPTED:
            raise DispatchFailure(resp.status_code, resp.text, printer_url=url)
        logger.info(f"Etiqueta enviada a {url} (x{quantity})")
