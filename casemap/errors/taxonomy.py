"""
errors/taxonomy.py - Resolution error classification

Every failure while resolving a configuration is raised as a subclass of
ResolutionError carrying the configuration name and the identifiers that
caused it. Nothing here is recoverable automatically: the declarations have
to be fixed and the configuration resolved again.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class ErrorCode(Enum):
    """Specific error codes."""

    # Catalog (1xxx)
    CAT_UNKNOWN_VARIABLE = 1001
    CAT_SCHEMA_CONFLICT = 1002
    CAT_DOCUMENT = 1003
    CAT_UNKNOWN_CONFIG = 1004

    # Module registry (2xxx)
    MOD_UNKNOWN = 2001

    # Dependency graph (5xxx)
    DEP_DUPLICATE_PRODUCER = 5001
    DEP_CYCLE = 5003


class ResolutionError(Exception):
    """Base exception for all resolution failures."""

    code: ErrorCode = ErrorCode.CAT_DOCUMENT

    def __init__(
        self,
        message: str,
        config_name: Optional[str] = None,
        **context: Any,
    ):
        self.message = message
        self.config_name = config_name
        self.context: Dict[str, Any] = context
        prefix = f"[{config_name}] " if config_name else ""
        super().__init__(f"{prefix}{message}")

    def with_config(self, config_name: str) -> "ResolutionError":
        """Attach the configuration name if the raiser did not know it."""
        if self.config_name is None:
            self.config_name = config_name
            self.args = (f"[{config_name}] {self.message}",)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "error": type(self).__name__,
            "message": self.message,
            "config_name": self.config_name,
            "context": dict(self.context),
        }


class UnknownConfigError(ResolutionError):
    """Raised when no configuration is registered under a name."""

    code = ErrorCode.CAT_UNKNOWN_CONFIG

    def __init__(self, config_name: str):
        super().__init__("Unknown configuration", config_name=config_name)


class UnknownVariableError(ResolutionError):
    """Raised when a variable is not declared where it is required."""

    code = ErrorCode.CAT_UNKNOWN_VARIABLE

    def __init__(
        self,
        variable: str,
        config_name: Optional[str] = None,
        module_id: Optional[str] = None,
        reason: str = "not declared on any UI form",
    ):
        self.variable = variable
        self.module_id = module_id
        where = f" (module {module_id})" if module_id else ""
        super().__init__(
            f"Unknown variable '{variable}'{where}: {reason}",
            config_name=config_name,
            variable=variable,
            module_id=module_id,
        )


class UnknownModuleError(ResolutionError):
    """Raised when the module registry has no such identifier."""

    code = ErrorCode.MOD_UNKNOWN

    def __init__(self, module_id: str, config_name: Optional[str] = None):
        self.module_id = module_id
        super().__init__(
            f"Unknown compute module '{module_id}'",
            config_name=config_name,
            module_id=module_id,
        )


class SchemaConflictError(ResolutionError):
    """Raised when one variable name is declared with different value tags."""

    code = ErrorCode.CAT_SCHEMA_CONFLICT

    def __init__(
        self,
        variable: str,
        declarations: Sequence[Sequence[str]],
        config_name: Optional[str] = None,
    ):
        self.variable = variable
        # (form, value_tag) pairs in declaration order
        self.declarations = [tuple(d) for d in declarations]
        listing = ", ".join(f"{form}:{tag}" for form, tag in self.declarations)
        super().__init__(
            f"Conflicting value tags for '{variable}': {listing}",
            config_name=config_name,
            variable=variable,
            declarations=self.declarations,
        )


class DuplicateProducerError(ResolutionError):
    """Raised when two producers claim the same output variable."""

    code = ErrorCode.DEP_DUPLICATE_PRODUCER

    def __init__(
        self,
        variable: str,
        producers: Sequence[str],
        config_name: Optional[str] = None,
    ):
        self.variable = variable
        self.producers = list(producers)
        super().__init__(
            f"Variable '{variable}' has more than one producer: "
            f"{', '.join(self.producers)}",
            config_name=config_name,
            variable=variable,
            producers=self.producers,
        )


class CyclicDependencyError(ResolutionError):
    """Raised when producers depend on each other in a cycle."""

    code = ErrorCode.DEP_CYCLE

    def __init__(self, cycle: List[str], config_name: Optional[str] = None):
        self.cycle = cycle
        super().__init__(
            f"Cyclic dependency detected: {' -> '.join(cycle)}",
            config_name=config_name,
            cycle=cycle,
        )

    @property
    def producers(self) -> List[str]:
        """Producers on the cycle, without the closing repeat."""
        return self.cycle[:-1] if len(self.cycle) > 1 else list(self.cycle)


class SpecDocumentError(ResolutionError):
    """Raised when a declaration document cannot be parsed."""

    code = ErrorCode.CAT_DOCUMENT

    def __init__(self, message: str, source: Optional[str] = None, **context: Any):
        self.source = source
        where = f"{source}: " if source else ""
        super().__init__(f"{where}{message}", source=source, **context)
