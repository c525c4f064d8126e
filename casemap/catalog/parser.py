"""
catalog/parser.py - Declaration document parsing

Reads form, configuration and module declarations from a dict, a JSON file
or a YAML file. Documents are validated with pydantic, then converted to the
frozen declaration types.

Document shape:

    forms:
      <form name>:
        variables: [{name, type, default}]
        formulas: [{id, inputs, outputs}]
        secondary_modules: [{module, inputs, outputs}]
    configurations:
      <config name>:
        primary_modules: [<module id>, ...]
        pages: [{sidebar_title, common, exclusive_var, exclusive}]
    modules:
      <module id>: {inputs: [...], outputs: [...]}

The form currently being parsed is tracked in a FormParseState passed down
through the parse calls, so concurrent loads never share it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json
import logging

import yaml
from pydantic import BaseModel, Field, ValidationError

from casemap.core import (
    ConfigSpec,
    FormulaSpec,
    ModuleSignature,
    PageInfo,
    SecondaryModuleSpec,
    UIForm,
    ValueTag,
    Variable,
)
from casemap.errors import SpecDocumentError

from .store import ConfigSpecStore

logger = logging.getLogger(__name__)


# =============================================================================
# DOCUMENT SCHEMAS
# =============================================================================

class VariableDoc(BaseModel):
    """A variable declared on a form."""

    name: str = Field(..., min_length=1, description="Variable name")
    type: ValueTag = Field(default=ValueTag.NUMBER, description="Value tag")
    default: Any = Field(None, description="Default value shown on the form")


class FormulaDoc(BaseModel):
    """A formula attached to a form."""

    id: Optional[str] = Field(None, description="Formula id, generated if omitted")
    inputs: List[str] = Field(default_factory=list)
    outputs: List[str] = Field(default_factory=list)


class SecondaryModuleDoc(BaseModel):
    """A secondary compute module attached to a form."""

    module: str = Field(..., min_length=1, description="Compute module id")
    inputs: List[str] = Field(default_factory=list, description="Non-calculated inputs")
    outputs: List[str] = Field(default_factory=list, description="Consumed outputs")


class FormDoc(BaseModel):
    variables: List[VariableDoc] = Field(default_factory=list)
    formulas: List[FormulaDoc] = Field(default_factory=list)
    secondary_modules: List[SecondaryModuleDoc] = Field(default_factory=list)


class PageDoc(BaseModel):
    sidebar_title: str
    common: List[str] = Field(default_factory=list)
    exclusive_var: str = ""
    exclusive: List[str] = Field(default_factory=list)


class ConfigDoc(BaseModel):
    primary_modules: List[str] = Field(..., min_length=1)
    pages: List[PageDoc] = Field(default_factory=list)


class ModuleDoc(BaseModel):
    inputs: List[str] = Field(default_factory=list)
    outputs: List[str] = Field(default_factory=list)


class SpecDocument(BaseModel):
    """Top-level declaration document."""

    forms: Dict[str, FormDoc] = Field(default_factory=dict)
    configurations: Dict[str, ConfigDoc] = Field(default_factory=dict)
    modules: Dict[str, ModuleDoc] = Field(default_factory=dict)


# =============================================================================
# PARSED RESULT
# =============================================================================

@dataclass
class ParsedSpec:
    """Declarations converted from one document."""
    forms: List[UIForm] = field(default_factory=list)
    configs: List[ConfigSpec] = field(default_factory=list)
    modules: Dict[str, ModuleSignature] = field(default_factory=dict)

    def apply_to(self, store: ConfigSpecStore) -> None:
        """Register forms before configurations."""
        store.add_forms(self.forms)
        store.add_configs(self.configs)


@dataclass
class FormParseState:
    """Parser-local bookkeeping for the form being parsed."""
    active_form: str
    formula_count: int = 0

    def next_formula_id(self) -> str:
        formula_id = f"{self.active_form}#{self.formula_count}"
        self.formula_count += 1
        return formula_id


# =============================================================================
# CONVERSION
# =============================================================================

def _parse_variable(doc: VariableDoc, state: FormParseState) -> Variable:
    return Variable(
        name=doc.name,
        value_tag=doc.type,
        form=state.active_form,
        default=doc.default,
        present="default" in doc.model_fields_set,
    )


def _parse_formula(doc: FormulaDoc, state: FormParseState) -> FormulaSpec:
    formula_id = state.next_formula_id()
    return FormulaSpec(
        formula_id=doc.id or formula_id,
        form=state.active_form,
        inputs=tuple(doc.inputs),
        outputs=tuple(doc.outputs),
    )


def _parse_secondary(doc: SecondaryModuleDoc, state: FormParseState) -> SecondaryModuleSpec:
    return SecondaryModuleSpec(
        module_id=doc.module,
        form=state.active_form,
        inputs=tuple(doc.inputs),
        outputs=tuple(doc.outputs),
    )


def _parse_form(name: str, doc: FormDoc) -> UIForm:
    state = FormParseState(active_form=name)
    return UIForm(
        name=name,
        variables=tuple(_parse_variable(v, state) for v in doc.variables),
        formulas=tuple(_parse_formula(f, state) for f in doc.formulas),
        secondary_modules=tuple(_parse_secondary(m, state) for m in doc.secondary_modules),
    )


def _parse_config(name: str, doc: ConfigDoc) -> ConfigSpec:
    pages = tuple(
        PageInfo(
            sidebar_title=p.sidebar_title,
            common_forms=tuple(p.common),
            exclusive_var=p.exclusive_var,
            exclusive_forms=tuple(p.exclusive),
        )
        for p in doc.pages
    )
    return ConfigSpec(
        name=name,
        pages=pages,
        primary_modules=tuple(doc.primary_modules),
    )


def parse_document(data: Dict[str, Any], source: Optional[str] = None) -> ParsedSpec:
    """
    Parse a declaration document.

    Raises:
        SpecDocumentError: the document does not match the schema
    """
    try:
        document = SpecDocument.model_validate(data)
    except ValidationError as e:
        raise SpecDocumentError(
            f"Invalid declaration document: {e.error_count()} error(s)",
            source=source,
            errors=e.errors(include_url=False),
        ) from e

    parsed = ParsedSpec(
        forms=[_parse_form(name, doc) for name, doc in document.forms.items()],
        configs=[_parse_config(name, doc) for name, doc in document.configurations.items()],
        modules={
            module_id: ModuleSignature(
                module_id=module_id,
                inputs=frozenset(doc.inputs),
                outputs=frozenset(doc.outputs),
            )
            for module_id, doc in document.modules.items()
        },
    )

    logger.info(
        f"Parsed declarations{' from ' + source if source else ''}: "
        f"{len(parsed.forms)} forms, {len(parsed.configs)} configurations, "
        f"{len(parsed.modules)} modules"
    )
    return parsed


def load_spec_file(filepath: Union[str, Path]) -> ParsedSpec:
    """Load declarations from a .json, .yaml or .yml file."""
    path = Path(filepath)
    if not path.exists():
        raise SpecDocumentError("Declaration file not found", source=str(path))

    with open(path, encoding="utf-8") as f:
        try:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise SpecDocumentError(f"Unreadable declaration file: {e}", source=str(path)) from e

    if not isinstance(data, dict):
        raise SpecDocumentError("Declaration file must contain a mapping", source=str(path))

    return parse_document(data, source=str(path))
