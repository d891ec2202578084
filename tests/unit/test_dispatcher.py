"""
Tests unitarios para CommandDispatcher (fan-out por empresa y politicas).
"""
from __future__ import annotations

import asyncio

import pytest

from cio_sync.application.sync.dispatcher import CommandDispatcher, tenants_from_db
from cio_sync.domain.entities.sync_job import (
    JOB_POLICIES,
    Concurrency,
    JobPolicy,
    OnTenantFailure,
    SyncJobSpec,
)
from cio_sync.domain.entities.sync_result import PipelineReport
from cio_sync.domain.entities.tenant import Tenant
from cio_sync.infrastructure.database.models import CompanyModel
from cio_sync.shared.exceptions.domain import EntityNotFoundException
from cio_sync.shared.exceptions.sync import FetchFailure, PolicyAbort

TENANTS = [Tenant(id=i, name=f"Company{i}") for i in range(1, 5)]


def _loader(tenants):
    async def load(company=None):
        return [t for t in tenants if company in (None, t.name)]

    return load


class _Bodies:
    """Job body falso: falla para las empresas indicadas y registra lo que corrio."""

    def __init__(self, failing=(), delays=None) -> None:
        self.failing = set(failing)
        self.delays = delays or {}
        self.started: list[int] = []
        self.finished: list[int] = []

    def __call__(self, job):
        async def body(ctx):
            self.started.append(ctx.tenant.id)
            await asyncio.sleep(self.delays.get(ctx.tenant.id, 0))
            self.finished.append(ctx.tenant.id)
            if ctx.tenant.id in self.failing:
                raise FetchFailure(f"Airtable caido para {ctx.tenant.name}")
            return [PipelineReport(table="t", fetched=1, synced=1)]

        return body


def _dispatcher(bodies, tenants=TENANTS):
    return CommandDispatcher(load_tenants=_loader(tenants), job_bodies=bodies)


class TestJobPolicies:
    """La tabla de politicas refleja el comportamiento de cada job."""

    def test_policy_table(self) -> None:
        assert JOB_POLICIES[SyncJobSpec.ASSET_INVENTORY] == JobPolicy(Concurrency.SEQUENTIAL, OnTenantFailure.ABORT)
        assert JOB_POLICIES[SyncJobSpec.SWAG_INVENTORY] == JobPolicy(Concurrency.SEQUENTIAL, OnTenantFailure.ABORT)
        assert JOB_POLICIES[SyncJobSpec.SHIPMENTS] == JobPolicy(Concurrency.PARALLEL, OnTenantFailure.ABORT)
        assert JOB_POLICIES[SyncJobSpec.FINANCE] == JobPolicy(Concurrency.PARALLEL, OnTenantFailure.CONTINUE)
        assert JOB_POLICIES[SyncJobSpec.CONFIGS] == JobPolicy(Concurrency.PARALLEL, OnTenantFailure.CONTINUE)
        assert set(JOB_POLICIES) == set(SyncJobSpec)


class TestParallelContinue:
    """Jobs parallel + continue (p.ej. sync-finance)."""

    @pytest.mark.asyncio
    async def test_all_ok(self) -> None:
        bodies = _Bodies()

        outcome = await _dispatcher(bodies).dispatch(SyncJobSpec.FINANCE)

        assert outcome.exit_code == 0
        assert sorted(r.tenant.id for r in outcome.results) == [1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_some_failures_still_succeed(self, log_records) -> None:
        """K < N empresas fallidas: exito, con un warning por cada fallo."""
        bodies = _Bodies(failing={2, 4})

        outcome = await _dispatcher(bodies).dispatch(SyncJobSpec.FINANCE)

        assert outcome.ok
        assert outcome.exit_code == 0
        assert sorted(r.tenant.id for r in outcome.failed) == [2, 4]
        warnings = [r["message"] for r in log_records if r["level"].name == "WARNING"]
        assert len(warnings) == 2
        assert any("Company2" in w for w in warnings)
        assert any("Company4" in w for w in warnings)

    @pytest.mark.asyncio
    async def test_all_failed_fails_invocation(self) -> None:
        bodies = _Bodies(failing={1, 2, 3, 4})

        outcome = await _dispatcher(bodies).dispatch(SyncJobSpec.CONFIGS)

        assert outcome.exit_code != 0
        assert isinstance(outcome.failure, PolicyAbort)
        assert "sync-configs" in outcome.failure.message
        with pytest.raises(PolicyAbort):
            outcome.raise_for_failure()

    @pytest.mark.asyncio
    async def test_no_tenants_is_success(self) -> None:
        outcome = await _dispatcher(_Bodies(), tenants=[]).dispatch(SyncJobSpec.FINANCE)

        assert outcome.ok
        assert outcome.results == []

    @pytest.mark.asyncio
    async def test_tenants_run_concurrently(self) -> None:
        """Todas las empresas arrancan antes de que termine cualquiera."""
        all_started = asyncio.Event()
        started: list[int] = []

        def bodies(job):
            async def body(ctx):
                started.append(ctx.tenant.id)
                if len(started) == len(TENANTS):
                    all_started.set()
                await asyncio.wait_for(all_started.wait(), timeout=1)
                return []

            return body

        outcome = await _dispatcher(bodies).dispatch(SyncJobSpec.FINANCE)

        assert outcome.ok
        assert sorted(started) == [1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_company_filter(self) -> None:
        bodies = _Bodies()

        outcome = await _dispatcher(bodies).dispatch(SyncJobSpec.FINANCE, company="Company3")

        assert [r.tenant.id for r in outcome.results] == [3]


class TestParallelAbort:
    """Jobs parallel + abort (sync-shipments)."""

    @pytest.mark.asyncio
    async def test_failure_fails_invocation_naming_tenant(self) -> None:
        bodies = _Bodies(failing={3})

        outcome = await _dispatcher(bodies).dispatch(SyncJobSpec.SHIPMENTS)

        assert outcome.exit_code == 1
        assert "Company3" in outcome.failure.message
        assert "sync-shipments" in outcome.failure.message

    @pytest.mark.asyncio
    async def test_all_tasks_are_drained(self) -> None:
        """Un fallo rapido no deja tareas sin esperar: todas terminan antes del resultado."""
        bodies = _Bodies(failing={1}, delays={2: 0.02, 3: 0.05, 4: 0.08})

        outcome = await _dispatcher(bodies).dispatch(SyncJobSpec.SHIPMENTS)

        assert not outcome.ok
        assert sorted(bodies.finished) == [1, 2, 3, 4]
        assert len(outcome.results) == 4


class TestSequentialAbort:
    """Jobs sequential + abort (inventarios)."""

    @pytest.mark.asyncio
    async def test_runs_in_order(self) -> None:
        bodies = _Bodies(delays={1: 0.02})

        outcome = await _dispatcher(bodies).dispatch(SyncJobSpec.ASSET_INVENTORY)

        assert outcome.ok
        assert bodies.started == [1, 2, 3, 4]
        assert bodies.finished == [1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_stops_after_first_failure(self) -> None:
        bodies = _Bodies(failing={2})

        outcome = await _dispatcher(bodies).dispatch(SyncJobSpec.SWAG_INVENTORY)

        assert outcome.exit_code == 1
        assert bodies.started == [1, 2]
        assert [t.id for t in outcome.skipped] == [3, 4]
        assert "Company2" in outcome.failure.message


class TestTenantsFromDb:
    """Tests para el loader de empresas desde la base."""

    @pytest.mark.asyncio
    async def test_loads_all_and_by_name(self, db_session_factory) -> None:
        async with db_session_factory() as session:
            session.add_all([
                CompanyModel(name="Oxide", printer_url="http://printer"),
                CompanyModel(name="Acme"),
            ])
            await session.commit()
        load = tenants_from_db(db_session_factory)

        everyone = await load(None)
        acme = await load("Acme")

        assert [t.name for t in everyone] == ["Oxide", "Acme"]
        assert everyone[0].printer_url == "http://printer"
        assert acme[0].name == "Acme"
        assert acme[0].printer_url == ""

    @pytest.mark.asyncio
    async def test_unknown_company_raises(self, db_session_factory) -> None:
        with pytest.raises(EntityNotFoundException):
            await tenants_from_db(db_session_factory)("Nope")
