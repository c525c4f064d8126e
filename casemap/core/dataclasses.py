"""
casemap Core Data Structures

Static declarations read from the UI form layer and the module registry.
All of them are frozen: they are built once per load and shared between
threads without copying.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Tuple

from .enums import ValueTag


PRIMARY_CONSUMER_PREFIX = "primary:"


def primary_consumer_id(module_id: str) -> str:
    """Consumer id used for a primary module in consumer edges."""
    return f"{PRIMARY_CONSUMER_PREFIX}{module_id}"


def is_primary_consumer(consumer_id: str) -> bool:
    return consumer_id.startswith(PRIMARY_CONSUMER_PREFIX)


# =============================================================================
# VARIABLES AND FORMS
# =============================================================================

@dataclass(frozen=True)
class Variable:
    """
    A UI variable.

    Identity is (name, value_tag): the same variable declared on several
    forms compares equal, so a set of variables deduplicates across forms.
    """
    name: str
    value_tag: ValueTag = ValueTag.NUMBER

    # Not part of identity
    form: str = field(default="", compare=False)
    default: Any = field(default=None, compare=False, hash=False)
    present: bool = field(default=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value_tag": self.value_tag.value,
            "form": self.form,
            "default": self.default,
            "present": self.present,
        }


@dataclass(frozen=True)
class FormulaSpec:
    """A formula declared on a UI form: ordered inputs -> outputs."""
    formula_id: str
    form: str
    inputs: Tuple[str, ...] = ()
    outputs: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SecondaryModuleSpec:
    """
    A secondary compute module run before the primary module.

    inputs:  signature inputs that are not calculated elsewhere
    outputs: signature outputs the configuration consumes later
    """
    module_id: str
    form: str = ""
    inputs: Tuple[str, ...] = ()
    outputs: Tuple[str, ...] = ()


@dataclass(frozen=True)
class UIForm:
    """A named group of variables plus the formulas and modules it drives."""
    name: str
    variables: Tuple[Variable, ...] = ()
    formulas: Tuple[FormulaSpec, ...] = ()
    secondary_modules: Tuple[SecondaryModuleSpec, ...] = ()

    def variable_names(self) -> Tuple[str, ...]:
        return tuple(v.name for v in self.variables)


@dataclass(frozen=True)
class PageInfo:
    """
    An input page: forms always shown, plus exclusive forms of which only
    one is visible at a time depending on exclusive_var.
    """
    sidebar_title: str
    common_forms: Tuple[str, ...] = ()
    exclusive_var: str = ""
    exclusive_forms: Tuple[str, ...] = ()

    @property
    def all_forms(self) -> Tuple[str, ...]:
        return self.common_forms + self.exclusive_forms


@dataclass(frozen=True)
class ConfigSpec:
    """A technology-financial configuration, e.g. 'PVWatts-None'."""
    name: str
    pages: Tuple[PageInfo, ...] = ()
    primary_modules: Tuple[str, ...] = ()

    def ui_forms(self) -> Tuple[str, ...]:
        """All forms of all pages, common before exclusive, page by page."""
        forms = []
        for page in self.pages:
            forms.extend(page.all_forms)
        return tuple(forms)


# =============================================================================
# MODULE SIGNATURES
# =============================================================================

@dataclass(frozen=True)
class ModuleSignature:
    """Input and output names of one compute module."""
    module_id: str
    inputs: FrozenSet[str] = frozenset()
    outputs: FrozenSet[str] = frozenset()
