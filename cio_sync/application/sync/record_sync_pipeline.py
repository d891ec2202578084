"""
Pipeline de sincronizacion de una tabla Airtable para una empresa.

Por registro, en orden estricto:
1. Normalize: fields de Airtable -> columnas locales (clave vacia -> nombre de reemplazo)
2. Derive: barcode a partir de la clave natural (solo tablas con artefactos)
3. Artifacts: PNG, SVG y etiqueta PDF subidos a Drive (crear-o-reemplazar)
4. Upsert por (cio_company_id, clave natural)
5. Write-back del airtable_record_id

El fetch es un unico listado por tabla, antes del loop. Un fallo de un
registro se loguea con empresa y clave y el sweep sigue con el siguiente;
un fallo del fetch corta el sweep (lo captura el TenantTaskRunner).

Ninguna sesion de base de datos queda abierta durante llamadas a Airtable
o Drive.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Collection, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cio_sync.application.services.artifact_generator import ArtifactGenerator
from cio_sync.application.services.barcode import (
    BARCODE_LENGTH,
    derive_barcode,
    is_over_length,
    placeholder_name,
)
from cio_sync.application.sync.context import RunContext
from cio_sync.application.sync.table_configs import RecordSyncConfig
from cio_sync.core.config import settings
from cio_sync.domain.entities.sync_result import PipelineReport, RecordFailure
from cio_sync.infrastructure.executor import run_blocking
from cio_sync.infrastructure.external.airtable.types import AirtableRecord
from cio_sync.infrastructure.external.google_drive.drive_client import (
    DriveLocation,
    download_url,
)
from cio_sync.infrastructure.repositories.synced_record_repository import SyncedRecordRepository
from cio_sync.shared.exceptions.sync import (
    ArtifactFailure,
    FetchFailure,
    NormalizeFailure,
    PersistFailure,
    SyncException,
)


@dataclass(frozen=True)
class NormalizedRecord:
    """Registro listo para persistir; `values` usa nombres de columna locales."""

    external_id: str
    natural_key: str
    values: dict[str, Any]


def normalize_record(
    record: AirtableRecord,
    config: RecordSyncConfig,
    taken: Collection[str] = (),
) -> NormalizedRecord:
    """
    Mapea un AirtableRecord a columnas locales.

    Si la clave natural queda vacia se reemplaza por un nombre derivado del
    id del registro (ver placeholder_name), distinto de las claves en `taken`.

    Raises:
        NormalizeFailure: falta un field requerido o un transform no pudo convertir el valor
    """
    values: dict[str, Any] = {}
    for m in config.field_mappings:
        raw = record.fields.get(m.airtable_field)
        if raw is None and m.required:
            raise NormalizeFailure(
                f"Record {record.record_id} no contiene field requerido '{m.airtable_field}'",
                record_id=record.record_id,
                field=m.airtable_field,
            )
        try:
            values[m.column] = m.transform(raw) if m.transform else raw
        except (TypeError, ValueError, KeyError, AttributeError) as e:
            raise NormalizeFailure(
                f"Record {record.record_id}: no se pudo convertir '{m.airtable_field}'={raw!r}: {e}",
                record_id=record.record_id,
                field=m.airtable_field,
            ) from e

    key = str(values.get(config.natural_key) or "").strip()
    if not key:
        key = placeholder_name(record.record_id, taken)
    values[config.natural_key] = key
    return NormalizedRecord(external_id=record.record_id, natural_key=key, values=values)


class RecordSyncPipeline:
    """
    Sweep completo de una tabla (RecordSyncConfig) para la empresa del contexto.

    Colaboradores:
        airtable: objeto con `list_records(table)` (AirtableClient)
        drive: GoogleDriveClient, o None si la empresa no tiene Drive configurado
        generator: ArtifactGenerator
    """

    def __init__(
        self,
        config: RecordSyncConfig,
        *,
        session_factory: async_sessionmaker[AsyncSession],
        airtable: Any,
        drive: Optional[Any] = None,
        generator: Optional[ArtifactGenerator] = None,
        shared_drive_name: Optional[str] = None,
        render: Callable[..., Any] = run_blocking,
    ) -> None:
        self.config = config
        self._session_factory = session_factory
        self._airtable = airtable
        self._drive = drive
        self._generator = generator or ArtifactGenerator()
        self._shared_drive_name = shared_drive_name or settings.DRIVE_SHARED_NAME
        self._render = render

    async def run(self, ctx: RunContext) -> PipelineReport:
        table = self.config.table_name
        report = PipelineReport(table=table)

        records = await self._airtable.list_records(self.config.airtable_table)
        report.fetched = len(records)
        ctx.logger.info(f"[{table}] {len(records)} registros de Airtable '{self.config.airtable_table}'")

        location = await self._resolve_artifact_location(ctx)

        taken: set[str] = set()
        for record in records:
            key = ""
            try:
                normalized = normalize_record(record, self.config, taken)
                key = normalized.natural_key
                taken.add(key)
                await self._sync_record(ctx, record, normalized, location)
                report.synced += 1
            except SyncException as e:
                ctx.logger.error(
                    f"[{table}] registro {record.record_id} (empresa={ctx.tenant.id}, clave='{key}') "
                    f"fallo: {e.error_code}: {e.message}"
                )
                report.failures.append(
                    RecordFailure(table=table, external_id=record.record_id, natural_key=key, error=e)
                )

        ctx.logger.info(
            f"[{table}] sync completado: {report.synced}/{report.fetched} ok, "
            f"{len(report.failures)} con error"
        )
        return report

    async def _resolve_artifact_location(self, ctx: RunContext) -> Optional[DriveLocation]:
        """Carpeta de Drive para los artefactos; se resuelve una vez por sweep."""
        if self.config.artifacts is None:
            return None
        if self._drive is None:
            ctx.logger.warning(
                f"[{self.config.table_name}] empresa sin Google Drive configurado: "
                f"se omiten artefactos (se conservan las referencias existentes)"
            )
            return None
        return await self._drive.resolve_folder(self._shared_drive_name, self.config.artifacts.drive_folder)

    async def _sync_record(
        self,
        ctx: RunContext,
        record: AirtableRecord,
        normalized: NormalizedRecord,
        location: Optional[DriveLocation],
    ) -> None:
        values = dict(normalized.values)
        key = normalized.natural_key

        if self.config.artifacts is not None:
            barcode = derive_barcode(key)
            if is_over_length(barcode):
                ctx.logger.warning(
                    f"[{self.config.table_name}] barcode demasiado largo {barcode} "
                    f"({len(barcode)}), debe ser {BARCODE_LENGTH} o menos (clave='{key}')"
                )
            values["barcode"] = barcode

            if location is not None and key.strip():
                values.update(await self._generate_artifacts(barcode, values, location, key))

        entity_id = await self._upsert(ctx, values, key)
        await self._write_back(entity_id, record.record_id, key)

    async def _generate_artifacts(
        self,
        barcode: str,
        values: dict[str, Any],
        location: DriveLocation,
        key: str,
    ) -> dict[str, str]:
        """
        PNG -> SVG -> etiqueta, cada uno subido apenas se genera.

        Las URLs solo se devuelven si los tres pasos salieron bien; si uno
        falla la entidad conserva sus referencias anteriores.
        """
        spec = self.config.artifacts
        stem = spec.file_stem(values).replace("/", "")
        label_text = spec.label_text(values)
        urls: dict[str, str] = {}

        png = await self._render_step("png", key, self._generator.render_png, barcode)
        urls["barcode_png"] = await self._upload_step(
            "png", key, location, f"{stem}.png", "image/png", png
        )

        svg = await self._render_step("svg", key, self._generator.render_svg, barcode)
        urls["barcode_svg"] = await self._upload_step(
            "svg", key, location, f"{stem}.svg", "image/svg+xml", svg
        )

        label = await self._render_step(
            "label", key, self._generator.render_label, png, barcode, label_text
        )
        urls["barcode_pdf_label"] = await self._upload_step(
            "label", key, location, f"{stem} - Barcode Label.pdf", "application/pdf", label
        )
        return urls

    async def _render_step(self, step: str, key: str, func: Callable[..., bytes], *args: Any) -> bytes:
        try:
            return await self._render(func, *args)
        except Exception as e:
            # reportlab no tiene una jerarquia de errores comun; se tipa aca.
            raise ArtifactFailure(
                f"render {step} fallo: {type(e).__name__}: {e}", step=step, natural_key=key
            ) from e

    async def _upload_step(
        self,
        step: str,
        key: str,
        location: DriveLocation,
        file_name: str,
        mime_type: str,
        content: bytes,
    ) -> str:
        try:
            drive_file = await self._drive.create_or_update_file(location, file_name, mime_type, content)
        except FetchFailure as e:
            raise ArtifactFailure(
                f"upload {step} '{file_name}' fallo: {e.message}", step=step, natural_key=key
            ) from e
        return download_url(drive_file.id)

    async def _upsert(self, ctx: RunContext, values: dict[str, Any], key: str) -> int:
        try:
            async with self._session_factory() as session:
                repo = SyncedRecordRepository(session, self.config.model, self.config.natural_key)
                entity = await repo.upsert(ctx.tenant.id, values)
                await session.commit()
                return entity.id
        except SQLAlchemyError as e:
            raise PersistFailure(
                f"upsert fallo: {type(e).__name__}: {e}", table=self.config.table_name, natural_key=key
            ) from e

    async def _write_back(self, entity_id: int, record_id: str, key: str) -> None:
        try:
            async with self._session_factory() as session:
                repo = SyncedRecordRepository(session, self.config.model, self.config.natural_key)
                await repo.set_airtable_record_id(entity_id, record_id)
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistFailure(
                f"write-back de airtable_record_id fallo: {type(e).__name__}: {e}",
                table=self.config.table_name,
                natural_key=key,
            ) from e
