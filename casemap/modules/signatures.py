"""
modules/signatures.py - Compute module signature table

Looks up the input and output names of compute modules from an external
registry and caches them for the lifetime of the process.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Mapping, Optional
import logging
import threading

from casemap.core import ModuleSignature
from casemap.errors import UnknownModuleError

logger = logging.getLogger(__name__)


class ModuleRegistry(ABC):
    """Source of module signatures (the module runtime's own listing)."""

    @abstractmethod
    def lookup_signature(self, module_id: str) -> ModuleSignature:
        """
        Return the signature of a module.

        Raises:
            UnknownModuleError: the registry has no such module
        """

    def module_ids(self) -> List[str]:
        return []


class StaticModuleRegistry(ModuleRegistry):
    """Registry backed by an in-memory mapping of signatures."""

    def __init__(self, signatures: Optional[Mapping[str, ModuleSignature]] = None):
        self._signatures: Dict[str, ModuleSignature] = dict(signatures or {})

    @classmethod
    def from_lists(
        cls,
        modules: Mapping[str, Mapping[str, Iterable[str]]],
    ) -> "StaticModuleRegistry":
        """Build from {module_id: {"inputs": [...], "outputs": [...]}}."""
        return cls({
            module_id: ModuleSignature(
                module_id=module_id,
                inputs=frozenset(io.get("inputs", ())),
                outputs=frozenset(io.get("outputs", ())),
            )
            for module_id, io in modules.items()
        })

    def register(self, signature: ModuleSignature) -> None:
        self._signatures[signature.module_id] = signature

    def lookup_signature(self, module_id: str) -> ModuleSignature:
        signature = self._signatures.get(module_id)
        if signature is None:
            raise UnknownModuleError(module_id)
        return signature

    def module_ids(self) -> List[str]:
        return list(self._signatures)


class ModuleSignatureTable:
    """
    Process-lifetime cache over a ModuleRegistry.

    Lookups run outside the lock; the first result stored for an id wins and
    a concurrent duplicate lookup is discarded. Unknown modules are not cached.
    """

    def __init__(self, registry: ModuleRegistry):
        self._registry = registry
        self._cache: Dict[str, ModuleSignature] = {}
        self._lock = threading.Lock()

    def signature_of(self, module_id: str) -> ModuleSignature:
        cached = self._cache.get(module_id)
        if cached is not None:
            return cached

        signature = self._registry.lookup_signature(module_id)

        with self._lock:
            stored = self._cache.setdefault(module_id, signature)

        if stored is signature:
            logger.debug(
                f"Signature cached: {module_id} "
                f"({len(signature.inputs)} inputs, {len(signature.outputs)} outputs)"
            )
        return stored

    def inputs_of(self, module_id: str):
        return self.signature_of(module_id).inputs

    def outputs_of(self, module_id: str):
        return self.signature_of(module_id).outputs

    def is_cached(self, module_id: str) -> bool:
        return module_id in self._cache

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    @property
    def cached_count(self) -> int:
        return len(self._cache)
