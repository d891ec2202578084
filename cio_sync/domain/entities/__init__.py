"""
Entidades del dominio.
"""
from cio_sync.domain.entities.tenant import Tenant
from cio_sync.domain.entities.sync_job import (
    Concurrency,
    OnTenantFailure,
    JobPolicy,
    SyncJobSpec,
    JOB_POLICIES,
)
from cio_sync.domain.entities.sync_result import RecordFailure, PipelineReport, SyncResult

__all__ = [
    "Tenant",
    "Concurrency",
    "OnTenantFailure",
    "JobPolicy",
    "SyncJobSpec",
    "JOB_POLICIES",
    "RecordFailure",
    "PipelineReport",
    "SyncResult",
]
