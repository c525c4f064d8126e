"""
catalog/variables.py - Variable catalog

Per configuration, the UI variables declared on the forms of its input
pages, deduplicated across forms.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Any, Dict, FrozenSet, List, Tuple
import logging

from casemap.core import Variable
from casemap.errors import SchemaConflictError, UnknownVariableError

from .store import ConfigSpecStore, ConfigSpecView

logger = logging.getLogger(__name__)


def index_variables(view: ConfigSpecView) -> Dict[str, Variable]:
    """
    Map variable name to its first declaration, in declaration order.

    Raises:
        SchemaConflictError: a name is declared with different value tags
    """
    index: Dict[str, Variable] = {}
    declarations: Dict[str, List[Tuple[str, str]]] = {}

    for form in view.forms:
        for var in form.variables:
            if not var.form:
                var = replace(var, form=form.name)
            declarations.setdefault(var.name, []).append((form.name, var.value_tag.value))
            first = index.get(var.name)
            if first is None:
                index[var.name] = var
            elif first.value_tag != var.value_tag:
                raise SchemaConflictError(
                    var.name,
                    declarations[var.name],
                    config_name=view.name,
                )
            else:
                logger.debug(f"{view.name}: '{var.name}' also declared on {form.name}")

    return index


class VariableCatalog:
    """Read access to the variables of each configuration."""

    def __init__(self, store: ConfigSpecStore):
        self._store = store

    def ui_forms_for(self, config_name: str) -> Tuple[str, ...]:
        """Form names shown by a configuration, in declaration order."""
        return self._store.view(config_name).form_names()

    def variables_for(self, config_name: str) -> FrozenSet[Variable]:
        return frozenset(index_variables(self._store.view(config_name)).values())

    def form_of(self, config_name: str, variable_name: str) -> str:
        """Form that first declares a variable within a configuration."""
        index = index_variables(self._store.view(config_name))
        var = index.get(variable_name)
        if var is None:
            raise UnknownVariableError(variable_name, config_name=config_name)
        return var.form

    def defaults_for(self, config_name: str) -> Dict[str, Any]:
        """Default values of variables that carry one."""
        index = index_variables(self._store.view(config_name))
        return {name: var.default for name, var in index.items() if var.present}
