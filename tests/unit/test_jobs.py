"""
Tests unitarios para las definiciones de jobs y el cuerpo por empresa.
"""
from __future__ import annotations

import asyncio

import pytest

from cio_sync.application.sync.context import RunContext
from cio_sync.application.sync.jobs import JOB_DEFINITIONS, build_job_body, run_tables
from cio_sync.domain.entities.sync_job import SyncJobSpec
from cio_sync.domain.entities.sync_result import PipelineReport
from cio_sync.domain.entities.tenant import Tenant


class TestJobDefinitions:
    """Que tablas sincroniza cada job."""

    def test_every_job_is_defined(self) -> None:
        assert set(JOB_DEFINITIONS) == set(SyncJobSpec)

    def test_tables_per_job(self) -> None:
        tables = {job: [c.table_name for c in d.tables] for job, d in JOB_DEFINITIONS.items()}

        assert tables[SyncJobSpec.ASSET_INVENTORY] == ["asset_items"]
        assert tables[SyncJobSpec.SWAG_INVENTORY] == ["swag_items", "swag_inventory_items"]
        assert tables[SyncJobSpec.SHIPMENTS] == ["inbound_shipments", "outbound_shipments"]
        assert tables[SyncJobSpec.FINANCE] == ["software_vendors"]
        assert tables[SyncJobSpec.CONFIGS] == ["buildings", "conference_rooms"]

    def test_only_shipments_run_tables_in_parallel(self) -> None:
        parallel = [job for job, d in JOB_DEFINITIONS.items() if d.parallel_tables]

        assert parallel == [SyncJobSpec.SHIPMENTS]


class TestRunTables:
    """Tests para run_tables()."""

    @pytest.mark.asyncio
    async def test_parallel_waits_for_all_before_raising(self) -> None:
        finished: list[str] = []

        async def ok(name: str, delay: float) -> PipelineReport:
            await asyncio.sleep(delay)
            finished.append(name)
            return PipelineReport(table=name)

        async def fail() -> PipelineReport:
            raise RuntimeError("inbound caido")

        with pytest.raises(RuntimeError):
            await run_tables([fail(), ok("outbound", 0.02)], parallel=True)

        assert finished == ["outbound"]

    @pytest.mark.asyncio
    async def test_sequential_keeps_order(self) -> None:
        async def report(name: str) -> PipelineReport:
            return PipelineReport(table=name)

        reports = await run_tables([report("a"), report("b")], parallel=False)

        assert [r.table for r in reports] == ["a", "b"]


class TestBuildJobBody:
    """Tests para build_job_body()."""

    @pytest.mark.asyncio
    async def test_tables_without_base_are_skipped(self, db_session_factory) -> None:
        """Una empresa sin base configurada no llama a Airtable."""
        tenant = Tenant(id=1, name="Oxide")
        body = build_job_body(SyncJobSpec.CONFIGS, session_factory=db_session_factory)

        reports = await body(RunContext.create(tenant, SyncJobSpec.CONFIGS))

        assert [(r.table, r.fetched, r.synced) for r in reports] == [
            ("buildings", 0, 0),
            ("conference_rooms", 0, 0),
        ]
