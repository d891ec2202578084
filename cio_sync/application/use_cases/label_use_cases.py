"""
Casos de uso para imprimir etiquetas de barcode.
"""
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from loguru import logger

from cio_sync.domain.entities.tenant import Tenant
from cio_sync.infrastructure.database.models import AssetItemModel
from cio_sync.infrastructure.external.printer.printer_client import PrinterClient
from cio_sync.infrastructure.repositories.company_repository import CompanyRepository
from cio_sync.infrastructure.repositories.synced_record_repository import SyncedRecordRepository
from cio_sync.shared.exceptions.domain import EntityNotFoundException


async def dispatch_label(label_url: str, tenant: Tenant, printer: PrinterClient, quantity: int = 1) -> bool:
    """
    Envia la etiqueta a la impresora de la empresa.

    Sin etiqueta o sin impresora configurada no hace nada (ni llamada HTTP).
    Retorna True si la impresora acepto el trabajo.

    Raises:
        DispatchFailure: la impresora respondio algo distinto de 202
    """
    if not label_url.strip() or not tenant.printer_url.strip():
        logger.debug(f"[{tenant.name}] sin etiqueta o sin impresora, no se imprime")
        return False

    await printer.print_label(tenant.printer_url, label_url, quantity=quantity)
    return True


class LabelUseCases:
    """
    Impresion de la etiqueta de un asset ya sincronizado.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], printer: PrinterClient):
        self._session_factory = session_factory
        self._printer = printer

    async def print_asset_label(self, company_name: str, item_name: str, quantity: int = 1) -> bool:
        """
        Busca el asset por nombre dentro de la empresa e imprime su etiqueta.

        Raises:
            EntityNotFoundException: empresa o asset inexistente
            DispatchFailure: la impresora rechazo el trabajo
        """
        async with self._session_factory() as session:
            company = await CompanyRepository(session).get_by_name(company_name)
            if company is None:
                raise EntityNotFoundException("Company", company_name)
            tenant = Tenant.from_model(company)

            repo = SyncedRecordRepository(session, AssetItemModel, "name")
            item = await repo.get_by_natural_key(tenant.id, item_name)
            if item is None:
                raise EntityNotFoundException("AssetItem", item_name)
            label_url = item.barcode_pdf_label or ""

        printed = await dispatch_label(label_url, tenant, self._printer, quantity=quantity)
        if printed:
            logger.info(f"[{tenant.name}] etiqueta de '{item_name}' enviada a imprimir")
        else:
            logger.warning(f"[{tenant.name}] '{item_name}' sin etiqueta o empresa sin impresora")
        return printed
