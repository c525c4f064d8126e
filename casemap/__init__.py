"""
casemap - Variable classification and evaluation planning

For each technology/financial configuration, decides which UI variables feed
the primary compute module directly, which feed secondary modules, and which
are produced by formulas or secondary modules, and orders those producers so
nothing runs before its inputs exist.
"""

__version__ = "1.0.0"

from .core import (
    ValueTag,
    VariableRole,
    ProducerKind,
    ResolutionStatus,
    Variable,
    FormulaSpec,
    SecondaryModuleSpec,
    UIForm,
    PageInfo,
    ConfigSpec,
    ModuleSignature,
)
from .errors import (
    ResolutionError,
    UnknownConfigError,
    UnknownVariableError,
    UnknownModuleError,
    SchemaConflictError,
    DuplicateProducerError,
    CyclicDependencyError,
    SpecDocumentError,
)
from .catalog import (
    ConfigSpecStore,
    ConfigSpecView,
    VariableCatalog,
    parse_document,
    load_spec_file,
)
from .modules import (
    ModuleRegistry,
    StaticModuleRegistry,
    ModuleSignatureTable,
)
from .dependencies import (
    CaseVariableInfo,
    DependencyClassifier,
    EvaluationPlanner,
    classify_specs,
)
from .resolver import (
    ResolvedCase,
    ResolutionOutcome,
    CaseResolver,
    format_resolved_case,
    format_form_formulas,
    format_case_variables,
)

__all__ = [
    "__version__",
    # Core
    "ValueTag",
    "VariableRole",
    "ProducerKind",
    "ResolutionStatus",
    "Variable",
    "FormulaSpec",
    "SecondaryModuleSpec",
    "UIForm",
    "PageInfo",
    "ConfigSpec",
    "ModuleSignature",
    # Errors
    "ResolutionError",
    "UnknownConfigError",
    "UnknownVariableError",
    "UnknownModuleError",
    "SchemaConflictError",
    "DuplicateProducerError",
    "CyclicDependencyError",
    "SpecDocumentError",
    # Catalog
    "ConfigSpecStore",
    "ConfigSpecView",
    "VariableCatalog",
    "parse_document",
    "load_spec_file",
    # Modules
    "ModuleRegistry",
    "StaticModuleRegistry",
    "ModuleSignatureTable",
    # Dependencies
    "CaseVariableInfo",
    "DependencyClassifier",
    "EvaluationPlanner",
    "classify_specs",
    # Resolver
    "ResolvedCase",
    "ResolutionOutcome",
    "CaseResolver",
    "format_resolved_case",
    "format_form_formulas",
    "format_case_variables",
]
