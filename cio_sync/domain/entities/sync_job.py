"""
Catalogo cerrado de jobs de sync y su politica de ejecucion.

La politica de cada job (concurrencia entre empresas y que hacer cuando una
empresa falla) se declara en una unica tabla, JOB_POLICIES, que el
CommandDispatcher recorre sin ramas por job.
"""
from dataclasses import dataclass
from enum import Enum


class Concurrency(str, Enum):
    """Como se reparten las empresas de un job."""
    PARALLEL = "parallel"
    SEQUENTIAL = "sequential"


class OnTenantFailure(str, Enum):
    """Que hace la invocacion cuando una empresa falla."""
    ABORT = "abort"
    CONTINUE = "continue"


@dataclass(frozen=True)
class JobPolicy:
    concurrency: Concurrency
    on_tenant_failure: OnTenantFailure


class SyncJobSpec(str, Enum):
    """Jobs invocables. El valor es el nombre del sub-comando de la CLI."""
    ASSET_INVENTORY = "sync-asset-inventory"
    SWAG_INVENTORY = "sync-swag-inventory"
    SHIPMENTS = "sync-shipments"
    FINANCE = "sync-finance"
    CONFIGS = "sync-configs"


JOB_POLICIES: dict[SyncJobSpec, JobPolicy] = {
    SyncJobSpec.ASSET_INVENTORY: JobPolicy(Concurrency.SEQUENTIAL, OnTenantFailure.ABORT),
    SyncJobSpec.SWAG_INVENTORY: JobPolicy(Concurrency.SEQUENTIAL, OnTenantFailure.ABORT),
    SyncJobSpec.SHIPMENTS: JobPolicy(Concurrency.PARALLEL, OnTenantFailure.ABORT),
    SyncJobSpec.FINANCE: JobPolicy(Concurrency.PARALLEL, OnTenantFailure.CONTINUE),
    SyncJobSpec.CONFIGS: JobPolicy(Concurrency.PARALLEL, OnTenantFailure.CONTINUE),
}
