"""
errors/ - Resolution error taxonomy

Typed errors raised while loading declarations and resolving configurations.
"""

from .taxonomy import (
    ErrorCode,
    ResolutionError,
    UnknownConfigError,
    UnknownVariableError,
    UnknownModuleError,
    SchemaConflictError,
    DuplicateProducerError,
    CyclicDependencyError,
    SpecDocumentError,
)

__all__ = [
    "ErrorCode",
    "ResolutionError",
    "UnknownConfigError",
    "UnknownVariableError",
    "UnknownModuleError",
    "SchemaConflictError",
    "DuplicateProducerError",
    "CyclicDependencyError",
    "SpecDocumentError",
]
