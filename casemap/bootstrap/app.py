"""
bootstrap/app.py - Application builder

Wires the declaration store, module registry, signature table and case
resolver from a CaseMapConfig.
"""

from __future__ import annotations
from typing import Optional
from enum import Enum
import logging

from casemap.catalog import ConfigSpecStore, VariableCatalog, load_spec_file
from casemap.modules import ModuleRegistry, ModuleSignatureTable, StaticModuleRegistry
from casemap.resolver import CaseResolver

from .config import CaseMapConfig, load_config

logger = logging.getLogger(__name__)


class AppState(Enum):
    """Application lifecycle states."""
    CREATED = "created"
    READY = "ready"
    FAILED = "failed"


class CaseMapApp:
    """
    Owns one store/registry/resolver set.

    A module registry may be injected (the real module runtime); otherwise
    signatures come from the "modules" section of the declaration file.
    """

    def __init__(
        self,
        config: Optional[CaseMapConfig] = None,
        registry: Optional[ModuleRegistry] = None,
    ):
        self._config = config
        self._registry = registry
        self._store: Optional[ConfigSpecStore] = None
        self._catalog: Optional[VariableCatalog] = None
        self._signatures: Optional[ModuleSignatureTable] = None
        self._resolver: Optional[CaseResolver] = None
        self.state = AppState.CREATED

    @property
    def config(self) -> CaseMapConfig:
        return self._config

    @property
    def store(self) -> ConfigSpecStore:
        return self._store

    @property
    def catalog(self) -> VariableCatalog:
        return self._catalog

    @property
    def signatures(self) -> ModuleSignatureTable:
        return self._signatures

    @property
    def resolver(self) -> CaseResolver:
        return self._resolver

    def build(self) -> "CaseMapApp":
        """Build the application; loads the declaration file if configured."""
        if self._config is None:
            self._config = load_config()

        self._store = ConfigSpecStore()
        injected = self._registry is not None
        registry = self._registry if injected else StaticModuleRegistry()

        try:
            if self._config.spec_path:
                parsed = load_spec_file(self._config.spec_path)
                parsed.apply_to(self._store)
                if not injected:
                    for signature in parsed.modules.values():
                        registry.register(signature)
        except Exception:
            self.state = AppState.FAILED
            raise

        self._registry = registry
        self._catalog = VariableCatalog(self._store)
        self._signatures = ModuleSignatureTable(registry)
        self._resolver = CaseResolver(
            self._store,
            self._signatures,
            strict_catalog=self._config.resolver.strict_catalog,
            cache_enabled=self._config.resolver.cache_enabled,
        )
        self.state = AppState.READY

        logger.info(
            f"casemap ready: {len(self._store.config_names())} configurations, "
            f"{len(registry.module_ids())} registered modules"
        )
        return self
