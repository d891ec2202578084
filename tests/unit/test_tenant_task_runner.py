"""
Tests unitarios para TenantTaskRunner.
"""
from __future__ import annotations

import asyncio

import pytest

from cio_sync.application.sync.tenant_task_runner import TenantTaskRunner
from cio_sync.domain.entities.sync_job import SyncJobSpec
from cio_sync.domain.entities.sync_result import PipelineReport
from cio_sync.domain.entities.tenant import Tenant
from cio_sync.shared.exceptions.sync import FetchFailure

TENANT = Tenant(id=7, name="Oxide")


class TestTenantTaskRunner:
    """Tests para TenantTaskRunner.run()."""

    @pytest.mark.asyncio
    async def test_success_returns_reports(self) -> None:
        seen = {}

        async def body(ctx):
            seen["ctx"] = ctx
            return [PipelineReport(table="buildings", fetched=2, synced=2)]

        result = await TenantTaskRunner(TENANT, SyncJobSpec.CONFIGS, body, correlation_id="abc").run()

        assert result.ok
        assert result.tenant == TENANT
        assert result.reports[0].synced == 2
        assert seen["ctx"].tenant == TENANT
        assert seen["ctx"].job is SyncJobSpec.CONFIGS
        assert seen["ctx"].correlation_id == "abc"

    @pytest.mark.asyncio
    async def test_failure_is_captured(self, log_records) -> None:
        """Un error del job queda en el resultado y se loguea con la empresa."""
        async def body(ctx):
            raise FetchFailure("Airtable error 401")

        result = await TenantTaskRunner(TENANT, SyncJobSpec.FINANCE, body).run()

        assert not result.ok
        assert isinstance(result.error, FetchFailure)
        assert "Oxide" in result.describe()
        errors = [r for r in log_records if r["level"].name == "ERROR"]
        assert errors[0]["extra"]["company_id"] == 7
        assert errors[0]["extra"]["job"] == "sync-finance"

    @pytest.mark.asyncio
    async def test_unexpected_error_is_captured(self) -> None:
        async def body(ctx):
            raise RuntimeError("boom")

        result = await TenantTaskRunner(TENANT, SyncJobSpec.FINANCE, body).run()

        assert isinstance(result.error, RuntimeError)

    @pytest.mark.asyncio
    async def test_cancellation_is_not_swallowed(self) -> None:
        async def body(ctx):
            raise asyncio.CancelledError()

        with pytest.raises(asyncio.CancelledError):
            await TenantTaskRunner(TENANT, SyncJobSpec.FINANCE, body).run()
