"""
CommandDispatcher: un job -> todas sus empresas -> un resultado de invocacion.

Resolve -> Fan-out -> Fan-in -> Decide, guiado por la politica declarada
del job (JOB_POLICIES):

- parallel: una tarea por empresa, todas creadas de entrada y esperadas
  juntas; ninguna queda sin esperar.
- sequential: una empresa por vez; con politica abort se deja de iniciar
  empresas nuevas tras el primer fallo.
- abort: cualquier empresa fallida hace fallar la invocacion.
- continue: cada fallo se loguea; la invocacion falla solo si fallaron todas.
"""
from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Mapping, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cio_sync.application.sync.jobs import JobBody
from cio_sync.application.sync.tenant_task_runner import TenantTaskRunner
from cio_sync.domain.entities.sync_job import (
    JOB_POLICIES,
    Concurrency,
    JobPolicy,
    OnTenantFailure,
    SyncJobSpec,
)
from cio_sync.domain.entities.sync_result import SyncResult
from cio_sync.domain.entities.tenant import Tenant
from cio_sync.infrastructure.repositories.company_repository import CompanyRepository
from cio_sync.shared.exceptions.domain import EntityNotFoundException
from cio_sync.shared.exceptions.sync import PolicyAbort

TenantLoader = Callable[[Optional[str]], Awaitable[list[Tenant]]]
JobBodyFactory = Callable[[SyncJobSpec], JobBody]


def tenants_from_db(session_factory: async_sessionmaker[AsyncSession]) -> TenantLoader:
    """Loader de empresas desde la tabla `companies` (todas, o una por nombre)."""

    async def load(company: Optional[str] = None) -> list[Tenant]:
        async with session_factory() as session:
            repo = CompanyRepository(session)
            if company:
                model = await repo.get_by_name(company)
                if model is None:
                    raise EntityNotFoundException("Company", company)
                return [Tenant.from_model(model)]
            return [Tenant.from_model(m) for m in await repo.get_all()]

    return load


@dataclass
class DispatchOutcome:
    """Resultado de una invocacion completa."""

    job: SyncJobSpec
    results: list[SyncResult] = field(default_factory=list)
    skipped: list[Tenant] = field(default_factory=list)
    failure: Optional[PolicyAbort] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    @property
    def failed(self) -> list[SyncResult]:
        return [r for r in self.results if not r.ok]

    def raise_for_failure(self) -> None:
        if self.failure is not None:
            raise self.failure


class CommandDispatcher:
    """Recorre la tabla de politicas; no hay ramas por job."""

    def __init__(
        self,
        *,
        load_tenants: TenantLoader,
        job_bodies: JobBodyFactory,
        policies: Mapping[SyncJobSpec, JobPolicy] = JOB_POLICIES,
    ) -> None:
        self._load_tenants = load_tenants
        self._job_bodies = job_bodies
        self._policies = policies

    async def dispatch(self, job: SyncJobSpec, company: Optional[str] = None) -> DispatchOutcome:
        policy = self._policies[job]
        invocation_id = uuid.uuid4().hex[:8]
        log = logger.bind(job=job.value, company="*", correlation_id=invocation_id)

        # Resolve
        tenants = await self._load_tenants(company)
        log.info(
            f"{job.value}: {len(tenants)} empresa(s), "
            f"{policy.concurrency.value}/{policy.on_tenant_failure.value}"
        )

        # Fan-out / fan-in
        body = self._job_bodies(job)
        runners = [
            TenantTaskRunner(tenant, job, body, correlation_id=f"{invocation_id}-{tenant.id}")
            for tenant in tenants
        ]
        if policy.concurrency is Concurrency.PARALLEL:
            results = await self._run_parallel(runners)
            skipped: list[Tenant] = []
        else:
            results, skipped = await self._run_sequential(
                runners, stop_on_failure=policy.on_tenant_failure is OnTenantFailure.ABORT
            )

        # Decide
        outcome = self._decide(job, policy, results, skipped, log)
        if outcome.ok:
            log.info(f"{job.value} OK: {len(results)} empresa(s), {len(outcome.failed)} con error")
        else:
            log.error(outcome.failure.message)
        return outcome

    async def _run_parallel(self, runners: list[TenantTaskRunner]) -> list[SyncResult]:
        tasks = [
            asyncio.create_task(runner.run(), name=f"{runner.job.value}:{runner.tenant.name}")
            for runner in runners
        ]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        results: list[SyncResult] = []
        for runner, outcome in zip(runners, outcomes):
            if isinstance(outcome, Exception):
                # El runner ya captura los errores del job; esto cubre fallos del propio runner.
                results.append(SyncResult(tenant=runner.tenant, job=runner.job, error=outcome))
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results.append(outcome)
        return results

    async def _run_sequential(
        self, runners: list[TenantTaskRunner], *, stop_on_failure: bool
    ) -> tuple[list[SyncResult], list[Tenant]]:
        results: list[SyncResult] = []
        for index, runner in enumerate(runners):
            result = await runner.run()
            results.append(result)
            if stop_on_failure and not result.ok:
                return results, [r.tenant for r in runners[index + 1:]]
        return results, []

    def _decide(
        self,
        job: SyncJobSpec,
        policy: JobPolicy,
        results: list[SyncResult],
        skipped: list[Tenant],
        log,
    ) -> DispatchOutcome:
        outcome = DispatchOutcome(job=job, results=results, skipped=skipped)
        failed = outcome.failed

        for tenant in skipped:
            log.warning(f"{job.value}: {tenant.name} no se ejecuto (job abortado por un fallo previo)")

        if policy.on_tenant_failure is OnTenantFailure.ABORT:
            if failed:
                outcome.failure = PolicyAbort(job.value, failed, reason="politica abort")
            return outcome

        for result in failed:
            log.warning(result.describe())
        if results and len(failed) == len(results):
            outcome.failure = PolicyAbort(job.value, failed, reason="fallaron todas las empresas")
        return outcome
