"""
Excepciones de la aplicacion.
"""
from cio_sync.shared.exceptions.base import AppException
from cio_sync.shared.exceptions.domain import DomainException, EntityNotFoundException
from cio_sync.shared.exceptions.sync import (
    SyncException,
    FetchFailure,
    NormalizeFailure,
    ArtifactFailure,
    PersistFailure,
    DispatchFailure,
    PolicyAbort,
)

__all__ = [
    "AppException",
    "DomainException",
    "EntityNotFoundException",
    "SyncException",
    "FetchFailure",
    "NormalizeFailure",
    "ArtifactFailure",
    "PersistFailure",
    "DispatchFailure",
    "PolicyAbort",
]
