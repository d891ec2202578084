"""
Definicion de cada job: que tablas sincroniza y como las recorre dentro
de una empresa.

`build_job_body` arma la funcion que corre el TenantTaskRunner: crea los
clientes de Airtable/Drive con las credenciales de la empresa y ejecuta
un RecordSyncPipeline por tabla.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cio_sync.application.services.artifact_generator import ArtifactGenerator
from cio_sync.application.sync import table_configs
from cio_sync.application.sync.context import RunContext
from cio_sync.application.sync.record_sync_pipeline import RecordSyncPipeline
from cio_sync.application.sync.table_configs import RecordSyncConfig
from cio_sync.core.config import settings
from cio_sync.domain.entities.sync_job import SyncJobSpec
from cio_sync.domain.entities.sync_result import PipelineReport
from cio_sync.infrastructure.external.airtable.airtable_client import (
    AirtableClient,
    AirtableCredentials,
)
from cio_sync.infrastructure.external.google_drive.drive_client import GoogleDriveClient

JobBody = Callable[[RunContext], Awaitable[Sequence[PipelineReport]]]


@dataclass(frozen=True)
class JobDefinition:
    """
    Tablas de un job.

    parallel_tables: si True, las tablas de una misma empresa se
    sincronizan a la vez (p.ej. envios entrantes y salientes).
    """

    job: SyncJobSpec
    tables: tuple[RecordSyncConfig, ...]
    parallel_tables: bool = False


JOB_DEFINITIONS: dict[SyncJobSpec, JobDefinition] = {
    SyncJobSpec.ASSET_INVENTORY: JobDefinition(
        SyncJobSpec.ASSET_INVENTORY, (table_configs.ASSET_ITEMS,)
    ),
    SyncJobSpec.SWAG_INVENTORY: JobDefinition(
        SyncJobSpec.SWAG_INVENTORY,
        (table_configs.SWAG_ITEMS, table_configs.SWAG_INVENTORY_ITEMS),
    ),
    SyncJobSpec.SHIPMENTS: JobDefinition(
        SyncJobSpec.SHIPMENTS,
        (table_configs.INBOUND_SHIPMENTS, table_configs.OUTBOUND_SHIPMENTS),
        parallel_tables=True,
    ),
    SyncJobSpec.FINANCE: JobDefinition(SyncJobSpec.FINANCE, (table_configs.SOFTWARE_VENDORS,)),
    SyncJobSpec.CONFIGS: JobDefinition(
        SyncJobSpec.CONFIGS, (table_configs.BUILDINGS, table_configs.CONFERENCE_ROOMS)
    ),
}


async def run_tables(
    coros: Sequence[Awaitable[PipelineReport]], *, parallel: bool
) -> list[PipelineReport]:
    """
    Corre los sweeps de una empresa.

    En paralelo se espera a todos antes de propagar el primer error, asi
    ningun sweep queda corriendo sin que nadie lo espere.
    """
    if not parallel:
        return [await coro for coro in coros]

    outcomes = await asyncio.gather(*coros, return_exceptions=True)
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    return list(outcomes)


def build_job_body(
    job: SyncJobSpec,
    *,
    session_factory: async_sessionmaker[AsyncSession],
    generator: Optional[ArtifactGenerator] = None,
) -> JobBody:
    """Funcion (empresa -> reportes) para el job dado."""
    definition = JOB_DEFINITIONS[job]
    generator = generator or ArtifactGenerator()

    async def body(ctx: RunContext) -> list[PipelineReport]:
        tenant = ctx.tenant
        token = tenant.airtable_api_key or settings.AIRTABLE_TOKEN
        drive = GoogleDriveClient(tenant.google_drive_token) if tenant.google_drive_token else None
        airtable_clients: list[AirtableClient] = []

        async def sweep(config: RecordSyncConfig) -> PipelineReport:
            base_id = tenant.airtable_base_id(config.base_id_attr)
            if not base_id:
                ctx.logger.info(f"[{config.table_name}] sin {config.base_id_attr} configurada, se omite")
                return PipelineReport(table=config.table_name)
            airtable = AirtableClient(AirtableCredentials(token=token, base_id=base_id))
            airtable_clients.append(airtable)
            pipeline = RecordSyncPipeline(
                config,
                session_factory=session_factory,
                airtable=airtable,
                drive=drive,
                generator=generator,
            )
            return await pipeline.run(ctx)

        try:
            return await run_tables(
                [sweep(config) for config in definition.tables],
                parallel=definition.parallel_tables,
            )
        finally:
            for client in airtable_clients:
                await client.aclose()
            if drive is not None:
                await drive.aclose()

    return body
