"""
Servicios puros de la capa de aplicacion (sin I/O de red ni base de datos).
"""
from .barcode import BARCODE_LENGTH, derive_barcode, is_over_length, placeholder_name
from .artifact_generator import ArtifactGenerator, LabelText

__all__ = [
    "BARCODE_LENGTH",
    "derive_barcode",
    "is_over_length",
    "placeholder_name",
    "ArtifactGenerator",
    "LabelText",
]
