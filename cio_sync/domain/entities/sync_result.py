"""
Resultados de una corrida: por registro, por tabla y por empresa.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from cio_sync.domain.entities.sync_job import SyncJobSpec
from cio_sync.domain.entities.tenant import Tenant


@dataclass(frozen=True)
class RecordFailure:
    """Fallo de un registro individual; el sweep de la tabla siguio."""

    table: str
    external_id: str
    natural_key: str
    error: Exception


@dataclass
class PipelineReport:
    """Resumen del sweep de una tabla Airtable para una empresa."""

    table: str
    fetched: int = 0
    synced: int = 0
    failures: list[RecordFailure] = field(default_factory=list)


@dataclass(frozen=True)
class SyncResult:
    """
    Resultado de un (empresa, job).

    `error` es None si el job termino; los fallos por registro quedan en
    `reports` aun cuando el resultado es exitoso.
    """

    tenant: Tenant
    job: SyncJobSpec
    error: Optional[BaseException] = None
    reports: tuple[PipelineReport, ...] = ()
    duration_s: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def record_failures(self) -> int:
        return sum(len(r.failures) for r in self.reports)

    def describe(self) -> str:
        if self.ok:
            synced = sum(r.synced for r in self.reports)
            return (
                f"{self.job.value} OK para {self.tenant.name}: {synced} registros, "
                f"{self.record_failures} con error ({self.duration_s:.1f}s)"
            )
        return f"{self.job.value} fallo para {self.tenant.name}: {type(self.error).__name__}: {self.error}"
