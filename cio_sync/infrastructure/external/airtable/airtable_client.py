"""
Cliente mínimo de Airtable REST API (sin SDKs externos).

Requisitos cubiertos:
- httpx async
- paginación por offset (el caller recibe el listado completo)
- rate-limit/backoff (429, 5xx)
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Optional

import httpx
from loguru import logger

from cio_sync.core.config import settings
from cio_sync.shared.exceptions.sync import FetchFailure

from .types import AirtableRecord


@dataclass(frozen=True)
class AirtableCredentials:
    token: str
    base_id: str


class AirtableApiError(FetchFailure):
    """Error de integración con Airtable."""


class AirtableClient:
    """
    Cliente HTTP de Airtable.

    Importante:
    - No hace cast de tipos de campos: eso se decide en los FieldMapping.
    - Un timeout o error de red se reporta como AirtableApiError.
    """

    def __init__(
        self,
        credentials: AirtableCredentials,
        *,
        client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
        timeout_s: Optional[float] = None,
        max_retries: Optional[int] = None,
        min_backoff_s: float = 0.8,
        max_backoff_s: float = 20.0,
    ) -> None:
        self._creds = credentials
        self._base_url = (base_url or settings.AIRTABLE_API_URL).rstrip("/")
        self._max_retries = settings.AIRTABLE_MAX_RETRIES if max_retries is None else max_retries
        self._min_backoff_s = min_backoff_s
        self._max_backoff_s = max_backoff_s
        self._client = client or httpx.AsyncClient(
            timeout=timeout_s or settings.HTTP_TIMEOUT_SECONDS
        )
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def list_records(
        self,
        table_name: str,
        *,
        view: Optional[str] = None,
        page_size: int = 100,
    ) -> list[AirtableRecord]:
        """
        Trae todos los registros actuales de la tabla (una sola llamada logica).

        Maneja paginación por 'offset' internamente.
        """
        url = f"{self._base_url}/{self._creds.base_id}/{table_name}"
        offset: Optional[str] = None
        records: list[AirtableRecord] = []

        while True:
            query: list[tuple[str, Any]] = [
                ("pageSize", page_size),
                ("view", view or settings.AIRTABLE_VIEW),
            ]
            if offset:
                query.append(("offset", offset))

            payload = await self._request_json("GET", url, query=query)

            for rec in payload.get("records") or []:
                rec_id = rec.get("id")
                if not rec_id:
                    # Caso raro; preferimos fallar temprano y visible.
                    raise AirtableApiError("Airtable devolvió un record sin 'id'")
                records.append(
                    AirtableRecord(
                        record_id=rec_id,
                        fields=rec.get("fields") or {},
                        created_time=rec.get("createdTime") or "",
                    )
                )

            offset = payload.get("offset")
            if not offset:
                break

        logger.debug(f"Airtable '{table_name}': {len(records)} registros")
        return records

    async def _request_json(
        self, method: str, url: str, *, query: list[tuple[str, Any]]
    ) -> dict[str, Any]:
        """
        Request HTTP con backoff para 429/5xx.

        Estrategia:
        - 429: respeta Retry-After si existe, si no exponencial con jitter simple.
        - 5xx: exponencial con jitter.
        - 4xx (no 429): error inmediato (config/auth mal).
        """
        headers = {
            "Authorization": f"Bearer {self._creds.token}",
            "Content-Type": "application/json",
        }

        for attempt in range(self._max_retries + 1):
            try:
                resp = await self._client.request(method, url, params=query, headers=headers)
            except httpx.HTTPError as e:
                raise AirtableApiError(
                    f"Airtable request falló ({type(e).__name__}): {e}",
                    details={"url": url},
                ) from e

            if 200 <= resp.status_code < 300:
                return resp.json()

            # Errores recuperables
            if resp.status_code == 429 or 500 <= resp.status_code < 600:
                if attempt >= self._max_retries:
                    raise AirtableApiError(
                        f"Airtable error {resp.status_code} tras {attempt} reintentos: {resp.text}",
                        details={"url": url, "status_code": resp.status_code},
                    )

                retry_after = resp.headers.get("Retry-After")
                if retry_after:
                    try:
                        sleep_s = float(retry_after)
                    except ValueError:
                        sleep_s = self._min_backoff_s
                else:
                    # Exponencial simple + jitter proporcional
                    base = min(self._max_backoff_s, self._min_backoff_s * (2**attempt))
                    sleep_s = base + (0.15 * base)

                await asyncio.sleep(sleep_s)
                continue

            # Errores no recuperables
            raise AirtableApiError(
                f"Airtable request falló {resp.status_code}: {resp.text}",
                details={"url": url, "status_code": resp.status_code},
            )

        raise AirtableApiError(f"Airtable sin respuesta valida: {url}")
