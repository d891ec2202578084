"""
Casos de uso de la aplicacion.
"""
from .label_use_cases import LabelUseCases, dispatch_label

__all__ = ["LabelUseCases", "dispatch_label"]
