"""
catalog/store.py - Owned store of configuration declarations

ConfigSpecStore holds every UI form and configuration known to the process
and hands out immutable ConfigSpecView objects, one per configuration. Each
change bumps the store revision; a view remembers the revision it was taken
at so cached resolutions can tell when their declarations went stale.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple
import logging
import threading

from casemap.core import ConfigSpec, FormulaSpec, SecondaryModuleSpec, UIForm
from casemap.errors import SpecDocumentError, UnknownConfigError

logger = logging.getLogger(__name__)


# =============================================================================
# VIEW
# =============================================================================

@dataclass(frozen=True)
class ConfigSpecView:
    """Read-only snapshot of one configuration and the forms it shows."""
    config: ConfigSpec
    forms: Tuple[UIForm, ...]
    revision: int

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def primary_modules(self) -> Tuple[str, ...]:
        return self.config.primary_modules

    def form_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.forms)

    def get_form(self, name: str) -> Optional[UIForm]:
        for form in self.forms:
            if form.name == name:
                return form
        return None

    def formulas(self) -> Tuple[FormulaSpec, ...]:
        """All formulas in declaration order."""
        return tuple(f for form in self.forms for f in form.formulas)

    def secondary_modules(self) -> Tuple[SecondaryModuleSpec, ...]:
        """All secondary modules in declaration order."""
        return tuple(m for form in self.forms for m in form.secondary_modules)


# =============================================================================
# STORE
# =============================================================================

class ConfigSpecStore:
    """
    Single owner of form and configuration declarations.

    Forms are shared between configurations: a configuration references
    forms by name through its input pages.
    """

    def __init__(self):
        self._forms: Dict[str, UIForm] = {}
        self._configs: Dict[str, ConfigSpec] = {}
        self._revision: int = 0
        self._lock = threading.RLock()

    @property
    def revision(self) -> int:
        return self._revision

    def add_form(self, form: UIForm) -> None:
        """Add or replace a UI form."""
        with self._lock:
            self._forms[form.name] = form
            self._revision += 1
        logger.debug(f"Form registered: {form.name} (revision {self._revision})")

    def add_forms(self, forms: Iterable[UIForm]) -> None:
        for form in forms:
            self.add_form(form)

    def add_config(self, config: ConfigSpec) -> None:
        """Add or replace a configuration."""
        with self._lock:
            self._configs[config.name] = config
            self._revision += 1
        logger.debug(f"Configuration registered: {config.name} (revision {self._revision})")

    def add_configs(self, configs: Iterable[ConfigSpec]) -> None:
        for config in configs:
            self.add_config(config)

    def remove_config(self, name: str) -> None:
        with self._lock:
            if name not in self._configs:
                raise UnknownConfigError(name)
            del self._configs[name]
            self._revision += 1

    def has_config(self, name: str) -> bool:
        return name in self._configs

    def config_names(self) -> List[str]:
        """Configuration names in registration order."""
        with self._lock:
            return list(self._configs)

    def form_names(self) -> List[str]:
        with self._lock:
            return list(self._forms)

    def get_form(self, name: str) -> Optional[UIForm]:
        return self._forms.get(name)

    def view(self, config_name: str) -> ConfigSpecView:
        """
        Snapshot one configuration.

        Raises:
            UnknownConfigError: no such configuration
            SpecDocumentError: a page references a form that is not registered
        """
        with self._lock:
            config = self._configs.get(config_name)
            if config is None:
                raise UnknownConfigError(config_name)

            forms: List[UIForm] = []
            seen = set()
            for form_name in config.ui_forms():
                # A form listed on two pages is shown once
                if form_name in seen:
                    continue
                seen.add(form_name)
                form = self._forms.get(form_name)
                if form is None:
                    raise SpecDocumentError(
                        f"UI form '{form_name}' is referenced but not registered",
                        config_name=config_name,
                        form=form_name,
                    )
                forms.append(form)

            return ConfigSpecView(
                config=config,
                forms=tuple(forms),
                revision=self._revision,
            )
