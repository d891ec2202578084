"""
Tests unitarios para el envio de etiquetas a la impresora.
"""
from __future__ import annotations

import json

import httpx
import pytest

from cio_sync.application.use_cases.label_use_cases import LabelUseCases, dispatch_label
from cio_sync.domain.entities.tenant import Tenant
from cio_sync.infrastructure.database.models import AssetItemModel, CompanyModel
from cio_sync.infrastructure.external.printer.printer_client import PrinterClient
from cio_sync.shared.exceptions.domain import EntityNotFoundException
from cio_sync.shared.exceptions.sync import DispatchFailure

LABEL_URL = "https://drive.google.com/uc?export=download&id=file3"


class _Printer:
    """Impresora falsa sobre httpx.MockTransport."""

    def __init__(self, status_code: int = 202, text: str = "") -> None:
        self.status_code = status_code
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.text)

    def client(self) -> PrinterClient:
        return PrinterClient(client=httpx.AsyncClient(transport=httpx.MockTransport(self)))


class TestDispatchLabel:
    """Tests para dispatch_label()."""

    @pytest.mark.asyncio
    async def test_accepted(self) -> None:
        printer = _Printer(202)
        tenant = Tenant(id=1, name="Oxide", printer_url="http://printer.local/")

        printed = await dispatch_label(LABEL_URL, tenant, printer.client())

        assert printed
        request = printer.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "http://printer.local/zebra"
        assert json.loads(request.content) == {"url": LABEL_URL, "quantity": 1}

    @pytest.mark.asyncio
    async def test_blank_label_is_noop(self) -> None:
        printer = _Printer(202)
        tenant = Tenant(id=1, name="Oxide", printer_url="http://printer.local")

        printed = await dispatch_label("  ", tenant, printer.client())

        assert not printed
        assert printer.requests == []

    @pytest.mark.asyncio
    async def test_blank_printer_is_noop(self) -> None:
        printer = _Printer(202)

        printed = await dispatch_label(LABEL_URL, Tenant(id=1, name="Oxide"), printer.client())

        assert not printed
        assert printer.requests == []

    @pytest.mark.asyncio
    async def test_other_status_raises_with_body(self) -> None:
        printer = _Printer(500, "paper jam")
        tenant = Tenant(id=1, name="Oxide", printer_url="http://printer.local")

        with pytest.raises(DispatchFailure) as exc_info:
            await dispatch_label(LABEL_URL, tenant, printer.client())

        assert exc_info.value.status_code == 500
        assert exc_info.value.body == "paper jam"
        assert "paper jam" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_unreachable_printer_is_dispatch_failure(self) -> None:
        """Un timeout o error de red de la impresora es un DispatchFailure, no un error de httpx."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        printer = PrinterClient(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        tenant = Tenant(id=1, name="Oxide", printer_url="http://printer.local")

        with pytest.raises(DispatchFailure) as exc_info:
            await dispatch_label(LABEL_URL, tenant, printer)

        assert exc_info.value.status_code == 0
        assert "ConnectTimeout" in exc_info.value.body

    @pytest.mark.asyncio
    async def test_200_is_not_accepted(self) -> None:
        """Solo 202 cuenta como encolado."""
        tenant = Tenant(id=1, name="Oxide", printer_url="http://printer.local")

        with pytest.raises(DispatchFailure):
            await dispatch_label(LABEL_URL, tenant, _Printer(200).client())


class TestPrintAssetLabel:
    """Tests para LabelUseCases.print_asset_label()."""

    @pytest.mark.asyncio
    async def test_prints_synced_asset(self, db_session_factory) -> None:
        async with db_session_factory() as session:
            company = CompanyModel(name="Oxide", printer_url="http://printer.local")
            session.add(company)
            await session.flush()
            session.add(AssetItemModel(cio_company_id=company.id, name="Yubikey", barcode_pdf_label=LABEL_URL))
            await session.commit()
        printer = _Printer(202)

        printed = await LabelUseCases(db_session_factory, printer.client()).print_asset_label(
            "Oxide", "Yubikey", quantity=2
        )

        assert printed
        assert json.loads(printer.requests[0].content) == {"url": LABEL_URL, "quantity": 2}

    @pytest.mark.asyncio
    async def test_unknown_asset_raises(self, db_session_factory) -> None:
        async with db_session_factory() as session:
            session.add(CompanyModel(name="Oxide"))
            await session.commit()

        with pytest.raises(EntityNotFoundException):
            await LabelUseCases(db_session_factory, _Printer().client()).print_asset_label("Oxide", "Nope")
