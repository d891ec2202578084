"""
Ejecucion de un (empresa, job) como unidad de trabajo concurrente.
"""
from __future__ import annotations

import time
from typing import Optional

from cio_sync.application.sync.context import RunContext
from cio_sync.application.sync.jobs import JobBody
from cio_sync.domain.entities.sync_job import SyncJobSpec
from cio_sync.domain.entities.sync_result import SyncResult
from cio_sync.domain.entities.tenant import Tenant


class TenantTaskRunner:
    """
    Corre el job completo para una empresa y siempre devuelve un SyncResult.

    Cualquier Exception del job queda capturada en el resultado; no se
    propaga ni afecta a las demas empresas. La cancelacion (CancelledError)
    no se captura.
    """

    def __init__(
        self,
        tenant: Tenant,
        job: SyncJobSpec,
        body: JobBody,
        *,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.tenant = tenant
        self.job = job
        self._body = body
        self._correlation_id = correlation_id

    async def run(self) -> SyncResult:
        ctx = RunContext.create(self.tenant, self.job, self._correlation_id)
        ctx.logger.info(f"Iniciando {self.job.value} para {self.tenant.name}")
        started = time.perf_counter()

        try:
            reports = tuple(await self._body(ctx))
        except Exception as e:
            result = SyncResult(
                tenant=self.tenant,
                job=self.job,
                error=e,
                duration_s=time.perf_counter() - started,
            )
            ctx.logger.opt(exception=e).error(result.describe())
            return result

        result = SyncResult(
            tenant=self.tenant,
            job=self.job,
            reports=reports,
            duration_s=time.perf_counter() - started,
        )
        ctx.logger.info(result.describe())
        return result
