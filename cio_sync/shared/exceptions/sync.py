"""
Errores del pipeline de sincronizacion.

Donde se recuperan:
- Normalize/Artifact/Persist: en el borde de cada registro (el sweep sigue).
- Fetch: en el borde de la empresa (TenantTaskRunner -> SyncResult fallido).
- Dispatch: siempre fatal para esa llamada a la impresora.
- PolicyAbort: solo lo produce el CommandDispatcher.
"""
from typing import Any, Optional

from cio_sync.shared.exceptions.base import AppException


class SyncException(AppException):
    """Excepción base para errores de sincronizacion."""

    def __init__(self, message: str, error_code: str = "SYNC_ERROR", details=None):
        super().__init__(message=message, error_code=error_code, details=details)


class FetchFailure(SyncException):
    """El colaborador externo no respondio o respondio no-2xx."""

    def __init__(self, message: str, details=None):
        super().__init__(message, error_code="FETCH_FAILURE", details=details)


class NormalizeFailure(SyncException):
    """Registro externo mal formado (falta un campo requerido, tipo invalido)."""

    def __init__(self, message: str, record_id: Optional[str] = None, field: Optional[str] = None):
        super().__init__(
            message,
            error_code="NORMALIZE_FAILURE",
            details={"record_id": record_id, "field": field},
        )


class ArtifactFailure(SyncException):
    """Fallo algun paso de generacion/subida de artefactos (png, svg, label)."""

    def __init__(self, message: str, step: str, natural_key: Optional[str] = None):
        self.step = step
        super().__init__(
            message,
            error_code="ARTIFACT_FAILURE",
            details={"step": step, "natural_key": natural_key},
        )


class PersistFailure(SyncException):
    """El almacenamiento local rechazo la escritura."""

    def __init__(self, message: str, table: str, natural_key: Optional[str] = None):
        super().__init__(
            message,
            error_code="PERSIST_FAILURE",
            details={"table": table, "natural_key": natural_key},
        )


class DispatchFailure(SyncException):
    """La impresora respondio algo distinto de 202 Accepted."""

    def __init__(self, status_code: int, body: str, printer_url: str):
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"[print]: status_code: {status_code}, body: {body}",
            error_code="DISPATCH_FAILURE",
            details={"status_code": status_code, "body": body, "printer_url": printer_url},
        )


class PolicyAbort(SyncException):
    """Un job termino en fallo segun su politica (abort o todas las empresas fallidas)."""

    def __init__(self, job: str, failures: list[Any], reason: str):
        self.job = job
        self.failures = failures
        companies = ", ".join(f"{f.tenant.name} (id={f.tenant.id})" for f in failures)
        super().__init__(
            f"job `{job}` fallo ({reason}): {companies}",
            error_code="POLICY_ABORT",
            details={"job": job, "reason": reason, "companies": [f.tenant.id for f in failures]},
        )
