"""
Contexto explicito de una corrida (empresa, job, correlation id).

Se pasa a cada TenantTaskRunner y de ahi a los pipelines; el logger ya
viene con el contexto bindeado, asi ningun componente del core depende de
estado global del logger.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Optional

from loguru import logger

from cio_sync.domain.entities.sync_job import SyncJobSpec
from cio_sync.domain.entities.tenant import Tenant


@dataclass(frozen=True)
class RunContext:
    tenant: Tenant
    job: SyncJobSpec
    correlation_id: str
    logger: Any

    @classmethod
    def create(
        cls, tenant: Tenant, job: SyncJobSpec, correlation_id: Optional[str] = None
    ) -> "RunContext":
        correlation_id = correlation_id or uuid.uuid4().hex[:12]
        bound = logger.bind(
            company_id=tenant.id,
            company=tenant.name,
            job=job.value,
            correlation_id=correlation_id,
        )
        return cls(tenant=tenant, job=job, correlation_id=correlation_id, logger=bound)
