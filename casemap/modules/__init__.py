"""
casemap.modules - Compute module signatures
"""

from .signatures import (
    ModuleRegistry,
    StaticModuleRegistry,
    ModuleSignatureTable,
)

__all__ = [
    "ModuleRegistry",
    "StaticModuleRegistry",
    "ModuleSignatureTable",
]
