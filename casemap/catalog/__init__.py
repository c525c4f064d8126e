"""
casemap.catalog - Declaration store and variable catalog

Provides:
- ConfigSpecStore: owner of form and configuration declarations
- ConfigSpecView: immutable per-configuration snapshot
- VariableCatalog: deduplicated variables per configuration
- parse_document / load_spec_file: declaration document loading
"""

from .store import (
    ConfigSpecStore,
    ConfigSpecView,
)
from .variables import (
    VariableCatalog,
    index_variables,
)
from .parser import (
    SpecDocument,
    ParsedSpec,
    FormParseState,
    parse_document,
    load_spec_file,
)

__all__ = [
    # Store
    "ConfigSpecStore",
    "ConfigSpecView",
    # Variables
    "VariableCatalog",
    "index_variables",
    # Parser
    "SpecDocument",
    "ParsedSpec",
    "FormParseState",
    "parse_document",
    "load_spec_file",
]
