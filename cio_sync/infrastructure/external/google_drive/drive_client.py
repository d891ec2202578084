"""
Cliente mínimo de Google Drive v3 (REST, httpx async).

Solo cubre lo que necesita el pipeline de artefactos:
- resolver un shared drive y una carpeta por nombre (una vez por corrida)
- crear-o-reemplazar un archivo por nombre dentro de una carpeta

El contrato "crear o reemplazar por nombre" hace que volver a subir un
artefacto con el mismo nombre conserve el id del archivo y por lo tanto la
URL de descarga guardada en la entidad.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

import httpx
from loguru import logger

from cio_sync.core.config import settings
from cio_sync.shared.exceptions.sync import FetchFailure

_MULTIPART_BOUNDARY = "cio_sync_drive_upload_boundary"


class GoogleDriveApiError(FetchFailure):
    """Error de integración con Google Drive."""


@dataclass(frozen=True)
class DriveFile:
    id: str
    name: str
    mime_type: str = ""


@dataclass(frozen=True)
class DriveLocation:
    """Carpeta destino de los artefactos de una tabla."""

    drive_id: str
    parent_id: str


def download_url(file_id: str) -> str:
    """URL de descarga directa de un archivo de Drive."""
    return f"https://drive.google.com/uc?export=download&id={file_id}"


def _quote(value: str) -> str:
    """Escapa comillas simples para el parametro `q` de Drive."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


class GoogleDriveClient:
    """Cliente HTTP de Google Drive autenticado con un access token de la empresa."""

    def __init__(
        self,
        token: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        api_url: Optional[str] = None,
        upload_url: Optional[str] = None,
        timeout_s: Optional[float] = None,
    ) -> None:
        self._token = token
        self._api_url = (api_url or settings.GOOGLE_DRIVE_API_URL).rstrip("/")
        self._upload_url = (upload_url or settings.GOOGLE_UPLOAD_API_URL).rstrip("/")
        self._client = client or httpx.AsyncClient(
            timeout=timeout_s or settings.HTTP_TIMEOUT_SECONDS
        )
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def get_drive_by_name(self, name: str) -> DriveFile:
        """Busca un shared drive por nombre."""
        payload = await self._request(
            "GET",
            f"{self._api_url}/drives",
            params={"q": f"name = '{_quote(name)}'", "pageSize": 10},
        )
        drives = payload.get("drives") or []
        if not drives:
            raise GoogleDriveApiError(f"Shared drive '{name}' no encontrado", details={"drive": name})
        return DriveFile(id=drives[0]["id"], name=drives[0].get("name", name))

    async def get_file_by_name(
        self, drive_id: str, name: str, *, parent_id: Optional[str] = None
    ) -> list[DriveFile]:
        """Lista archivos (no borrados) con ese nombre en el drive, opcionalmente bajo un padre."""
        q = f"name = '{_quote(name)}' and trashed = false"
        if parent_id:
            q += f" and '{_quote(parent_id)}' in parents"
        payload = await self._request(
            "GET",
            f"{self._api_url}/files",
            params={
                "q": q,
                "corpora": "drive",
                "driveId": drive_id,
                "includeItemsFromAllDrives": "true",
                "supportsAllDrives": "true",
                "fields": "files(id,name,mimeType)",
            },
        )
        return [
            DriveFile(id=f["id"], name=f.get("name", name), mime_type=f.get("mimeType", ""))
            for f in payload.get("files") or []
        ]

    async def resolve_folder(self, shared_drive_name: str, folder_name: str) -> DriveLocation:
        """Resuelve (shared drive, carpeta) a ids. Se usa una vez por sweep, no por registro."""
        drive = await self.get_drive_by_name(shared_drive_name)
        folders = await self.get_file_by_name(drive.id, folder_name)
        if not folders:
            raise GoogleDriveApiError(
                f"Carpeta '{folder_name}' no encontrada en '{shared_drive_name}'",
                details={"drive": shared_drive_name, "folder": folder_name},
            )
        return DriveLocation(drive_id=drive.id, parent_id=folders[0].id)

    async def create_or_update_file(
        self,
        location: DriveLocation,
        name: str,
        mime_type: str,
        content: bytes,
    ) -> DriveFile:
        """
        Crea el archivo `name` bajo la carpeta, o reemplaza su contenido si ya existe.

        Nunca agrega un segundo archivo con el mismo nombre.
        """
        existing = await self.get_file_by_name(location.drive_id, name, parent_id=location.parent_id)
        if existing:
            file_id = existing[0].id
            payload = await self._request(
                "PATCH",
                f"{self._upload_url}/files/{file_id}",
                params={"uploadType": "media", "supportsAllDrives": "true"},
                content=content,
                headers={"Content-Type": mime_type},
            )
            logger.debug(f"Drive: reemplazado '{name}' ({file_id})")
        else:
            metadata = {"name": name, "mimeType": mime_type, "parents": [location.parent_id]}
            payload = await self._request(
                "POST",
                f"{self._upload_url}/files",
                params={"uploadType": "multipart", "supportsAllDrives": "true"},
                content=_multipart_related(metadata, mime_type, content),
                headers={"Content-Type": f"multipart/related; boundary={_MULTIPART_BOUNDARY}"},
            )
            logger.debug(f"Drive: creado '{name}' ({payload.get('id')})")

        file_id = payload.get("id")
        if not file_id:
            raise GoogleDriveApiError(f"Drive no devolvio id para '{name}'", details={"file": name})
        return DriveFile(id=file_id, name=payload.get("name", name), mime_type=mime_type)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any],
        content: Optional[bytes] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> dict[str, Any]:
        all_headers = {"Authorization": f"Bearer {self._token}"}
        if headers:
            all_headers.update(headers)
        try:
            resp = await self._client.request(
                method, url, params=params, content=content, headers=all_headers
            )
        except httpx.HTTPError as e:
            raise GoogleDriveApiError(
                f"Drive request falló ({type(e).__name__}): {e}", details={"url": url}
            ) from e

        if not 200 <= resp.status_code < 300:
            raise GoogleDriveApiError(
                f"Drive request falló {resp.status_code}: {resp.text}",
                details={"url": url, "status_code": resp.status_code},
            )
        try:
            return resp.json()
        except ValueError as e:
            raise GoogleDriveApiError(
                f"Drive respondio {resp.status_code} sin JSON valido: {resp.text[:200]}",
                details={"url": url, "status_code": resp.status_code},
            ) from e


def _multipart_related(metadata: dict[str, Any], mime_type: str, content: bytes) -> bytes:
    """Cuerpo multipart/related (metadata JSON + media) para uploadType=multipart."""
    head = (
        f"--{_MULTIPART_BOUNDARY}\r\n"
        "Content-Type: application/json; charset=UTF-8\r\n\r\n"
        f"{json.dumps(metadata)}\r\n"
        f"--{_MULTIPART_BOUNDARY}\r\n"
        f"Content-Type: {mime_type}\r\n\r\n"
    ).encode("utf-8")
    tail = f"\r\n--{_MULTIPART_BOUNDARY}--".encode("utf-8")
    return head + content + tail
