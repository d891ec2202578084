"""
Tests unitarios para la CLI.
"""
from __future__ import annotations

import pytest

from cio_sync import cli
from cio_sync.domain.entities.sync_job import SyncJobSpec
from cio_sync.shared.exceptions.domain import EntityNotFoundException


class TestParser:
    """Tests para build_parser()."""

    def test_one_subcommand_per_job(self) -> None:
        parser = cli.build_parser()

        for job in SyncJobSpec:
            args = parser.parse_args([job.value])
            assert args.command == job.value
            assert args.company is None

    def test_global_flags_and_company(self) -> None:
        args = cli.build_parser().parse_args(["--debug", "--json", "sync-finance", "--company", "Oxide"])

        assert args.debug and args.json
        assert args.company == "Oxide"

    def test_print_asset_label_requires_name(self) -> None:
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["print-asset-label", "--company", "Oxide"])

    def test_unknown_job_is_rejected(self) -> None:
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["sync-everything"])


class TestMain:
    """Tests para main(): codigo de salida segun el resultado."""

    def test_exit_code_from_dispatch(self, monkeypatch) -> None:
        calls = []

        async def fake_run_job(job, company):
            calls.append((job, company))
            return 1

        monkeypatch.setattr(cli, "_run_job", fake_run_job)

        assert cli.main(["sync-shipments", "--company", "Oxide"]) == 1
        assert calls == [(SyncJobSpec.SHIPMENTS, "Oxide")]

    def test_app_exception_exits_1(self, monkeypatch) -> None:
        async def fake_run_job(job, company):
            raise EntityNotFoundException("Company", company)

        monkeypatch.setattr(cli, "_run_job", fake_run_job)

        assert cli.main(["sync-finance", "--company", "Nope"]) == 1
