"""
casemap.core - Enumerations and frozen declaration types.
"""

from .enums import (
    ValueTag,
    VariableRole,
    ProducerKind,
    ConsumerKind,
    ResolutionStatus,
)
from .dataclasses import (
    Variable,
    FormulaSpec,
    SecondaryModuleSpec,
    UIForm,
    PageInfo,
    ConfigSpec,
    ModuleSignature,
    PRIMARY_CONSUMER_PREFIX,
    primary_consumer_id,
    is_primary_consumer,
)

__all__ = [
    # Enums
    "ValueTag",
    "VariableRole",
    "ProducerKind",
    "ConsumerKind",
    "ResolutionStatus",
    # Declarations
    "Variable",
    "FormulaSpec",
    "SecondaryModuleSpec",
    "UIForm",
    "PageInfo",
    "ConfigSpec",
    "ModuleSignature",
    "PRIMARY_CONSUMER_PREFIX",
    "primary_consumer_id",
    "is_primary_consumer",
]
