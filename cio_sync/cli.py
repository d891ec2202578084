"""
CLI: un sub-comando por job de sync.

Ejecucion:
  cio-sync sync-asset-inventory
  cio-sync sync-finance --company Oxide
  cio-sync --json sync-shipments
  cio-sync print-asset-label --company Oxide --name "MacBook Pro"

Codigo de salida 0 si la invocacion se considera exitosa segun la politica
del job, 1 en caso contrario.
"""
from __future__ import annotations

import argparse
import asyncio
from typing import Optional, Sequence

from loguru import logger

from cio_sync.application.sync.dispatcher import CommandDispatcher, tenants_from_db
from cio_sync.application.sync.jobs import build_job_body
from cio_sync.application.use_cases.label_use_cases import LabelUseCases
from cio_sync.core.config import settings
from cio_sync.core.logging import configure_logging
from cio_sync.domain.entities.sync_job import SyncJobSpec
from cio_sync.infrastructure.database.session import close_db, get_session_factory
from cio_sync.infrastructure.external.printer.printer_client import PrinterClient
from cio_sync.shared.exceptions import AppException

PRINT_ASSET_LABEL = "print-asset-label"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cio-sync", description=settings.APP_NAME)
    parser.add_argument("--version", action="version", version=f"%(prog)s {settings.APP_VERSION}")
    parser.add_argument("--debug", action="store_true", help="Logs en nivel DEBUG.")
    parser.add_argument("--json", action="store_true", help="Logs serializados como JSON.")

    sub = parser.add_subparsers(dest="command", required=True)
    for job in SyncJobSpec:
        job_parser = sub.add_parser(job.value, help=f"Ejecuta {job.value} para las empresas.")
        job_parser.add_argument(
            "--company",
            default=None,
            help="Solo esta empresa (por nombre). Por defecto, todas.",
        )

    label_parser = sub.add_parser(PRINT_ASSET_LABEL, help="Imprime la etiqueta de un asset.")
    label_parser.add_argument("--company", required=True, help="Nombre de la empresa.")
    label_parser.add_argument("--name", required=True, help="Nombre del asset.")
    label_parser.add_argument("--quantity", type=int, default=1, help="Copias a imprimir.")
    return parser


async def _run_job(job: SyncJobSpec, company: Optional[str]) -> int:
    session_factory = get_session_factory()
    dispatcher = CommandDispatcher(
        load_tenants=tenants_from_db(session_factory),
        job_bodies=lambda j: build_job_body(j, session_factory=session_factory),
    )
    outcome = await dispatcher.dispatch(job, company)
    return outcome.exit_code


async def _print_asset_label(company: str, name: str, quantity: int) -> int:
    printer = PrinterClient()
    try:
        use_cases = LabelUseCases(get_session_factory(), printer)
        await use_cases.print_asset_label(company, name, quantity=quantity)
    finally:
        await printer.aclose()
    return 0


async def _main(args: argparse.Namespace) -> int:
    try:
        if args.command == PRINT_ASSET_LABEL:
            return await _print_asset_label(args.company, args.name, args.quantity)
        return await _run_job(SyncJobSpec(args.command), args.company)
    except AppException as e:
        logger.error(f"{e.error_code}: {e.message}")
        return 1
    finally:
        await close_db()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(debug=args.debug, json=args.json)
    return asyncio.run(_main(args))


if __name__ == "__main__":
    raise SystemExit(main())
