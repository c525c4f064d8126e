"""
resolver/case_resolver.py - Case resolution

Composes the variable catalog, the module signature table, the classifier
and the planner into one ResolvedCase per configuration. Successful results
are cached per configuration until the store's declarations change;
failures are never cached.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Tuple
import logging
import threading

from casemap.catalog import ConfigSpecStore, index_variables
from casemap.core import ResolutionStatus
from casemap.dependencies import (
    CaseVariableInfo,
    DependencyClassifier,
    EvaluationPlanner,
    ProducerNode,
)
from casemap.errors import ResolutionError
from casemap.modules import ModuleSignatureTable

logger = logging.getLogger(__name__)


# =============================================================================
# RESULTS
# =============================================================================

@dataclass(frozen=True)
class ResolvedCase:
    """Variable partition plus evaluation order for one configuration."""
    info: CaseVariableInfo
    evaluation_plan: Tuple[str, ...] = ()
    plan_steps: Tuple[ProducerNode, ...] = ()
    evaluation_stages: Tuple[Tuple[str, ...], ...] = ()
    revision: int = field(default=0, compare=False)

    @property
    def config_name(self) -> str:
        return self.info.config_name

    @property
    def primary_inputs(self) -> FrozenSet[str]:
        return self.info.primary_inputs

    @property
    def secondary_inputs(self) -> FrozenSet[str]:
        return self.info.secondary_inputs

    @property
    def evaluated_inputs(self) -> FrozenSet[str]:
        return self.info.evaluated_inputs

    @property
    def producer_edges(self) -> FrozenSet[Tuple[str, str]]:
        return self.info.producer_edges

    @property
    def consumer_edges(self) -> FrozenSet[Tuple[str, str]]:
        return self.info.consumer_edges

    @property
    def primary_modules(self) -> Tuple[str, ...]:
        return self.info.primary_modules

    def to_dict(self) -> Dict[str, Any]:
        return {
            "config_name": self.config_name,
            "primary_modules": list(self.primary_modules),
            "primary_inputs": sorted(self.primary_inputs),
            "secondary_inputs": sorted(self.secondary_inputs),
            "evaluated_inputs": sorted(self.evaluated_inputs),
            "producer_edges": sorted(self.producer_edges),
            "consumer_edges": sorted(self.consumer_edges),
            "unconsumed_outputs": sorted(self.info.unconsumed_outputs),
            "evaluation_plan": [
                {"producer": step.producer_id, "kind": step.kind.value}
                for step in self.plan_steps
            ],
            "evaluation_stages": [list(stage) for stage in self.evaluation_stages],
        }


@dataclass(frozen=True)
class ResolutionOutcome:
    """Planned or rejected result of resolving one configuration."""
    config_name: str
    status: ResolutionStatus
    case: Optional[ResolvedCase] = None
    error: Optional[ResolutionError] = None

    @property
    def is_planned(self) -> bool:
        return self.status == ResolutionStatus.PLANNED

    def unwrap(self) -> ResolvedCase:
        """Return the case or raise the rejection error."""
        if self.error is not None:
            raise self.error
        return self.case


# =============================================================================
# RESOLVER
# =============================================================================

class CaseResolver:
    """
    Public entry point: resolve(config_name) -> ResolvedCase.

    Safe to call from several threads. The cache uses insert-if-absent: a
    thread that loses the race discards its own result and returns the one
    already stored.
    """

    def __init__(
        self,
        store: ConfigSpecStore,
        signature_table: ModuleSignatureTable,
        strict_catalog: bool = True,
        cache_enabled: bool = True,
    ):
        self._store = store
        self._signatures = signature_table
        self._classifier = DependencyClassifier(signature_table, strict_catalog=strict_catalog)
        self._planner = EvaluationPlanner()
        self._cache_enabled = cache_enabled
        self._cache: Dict[str, ResolvedCase] = {}
        self._lock = threading.Lock()

    @property
    def store(self) -> ConfigSpecStore:
        return self._store

    def resolve(self, config_name: str) -> ResolvedCase:
        """
        Resolve one configuration.

        Raises:
            ResolutionError subclasses; no partial case is ever returned
        """
        view = self._store.view(config_name)

        cached = self._cache.get(config_name)
        if cached is not None and cached.revision == view.revision:
            logger.debug(f"Cache hit: {config_name}")
            return cached

        try:
            variables = index_variables(view)
            info = self._classifier.classify(
                config_name,
                view.formulas(),
                view.secondary_modules(),
                view.primary_modules,
                variables=variables,
            )
            graph = self._planner.build_graph(info)
            plan = self._planner.plan_graph(graph, config_name)
        except ResolutionError as e:
            e.with_config(config_name)
            logger.error(f"Resolution rejected: {e}")
            raise

        case = ResolvedCase(
            info=info,
            evaluation_plan=plan,
            plan_steps=self._planner.plan_steps(info, plan),
            evaluation_stages=self._planner.stages(graph),
            revision=view.revision,
        )

        logger.info(
            f"Resolved {config_name}: {len(info.primary_inputs)} primary, "
            f"{len(info.secondary_inputs)} secondary, {len(info.evaluated_inputs)} evaluated, "
            f"{len(plan)} plan steps"
        )

        if not self._cache_enabled:
            return case
        return self._insert_case(case)

    def _insert_case(self, case: ResolvedCase) -> ResolvedCase:
        """Store a case unless an equal or newer revision is already cached."""
        with self._lock:
            stored = self._cache.get(case.config_name)
            if stored is None or stored.revision < case.revision:
                self._cache[case.config_name] = case
                stored = case
        return stored

    def resolve_outcome(self, config_name: str) -> ResolutionOutcome:
        """Resolve without raising: PLANNED with the case or REJECTED with the error."""
        try:
            case = self.resolve(config_name)
        except ResolutionError as e:
            return ResolutionOutcome(
                config_name=config_name,
                status=ResolutionStatus.REJECTED,
                error=e,
            )
        return ResolutionOutcome(
            config_name=config_name,
            status=ResolutionStatus.PLANNED,
            case=case,
        )

    def resolve_all(self) -> List[ResolutionOutcome]:
        """Outcomes for every configuration in the store, in registration order."""
        return [self.resolve_outcome(name) for name in self._store.config_names()]

    def invalidate(self, config_name: Optional[str] = None) -> None:
        """Drop one cached case, or all of them."""
        with self._lock:
            if config_name is None:
                self._cache.clear()
            else:
                self._cache.pop(config_name, None)

    def is_cached(self, config_name: str) -> bool:
        return config_name in self._cache

    # Read accessors for the execution driver

    def primary_inputs(self, config_name: str) -> FrozenSet[str]:
        return self.resolve(config_name).primary_inputs

    def secondary_inputs(self, config_name: str) -> FrozenSet[str]:
        return self.resolve(config_name).secondary_inputs

    def evaluated_inputs(self, config_name: str) -> FrozenSet[str]:
        return self.resolve(config_name).evaluated_inputs

    def producer_edges(self, config_name: str) -> FrozenSet[Tuple[str, str]]:
        return self.resolve(config_name).producer_edges

    def consumer_edges(self, config_name: str) -> FrozenSet[Tuple[str, str]]:
        return self.resolve(config_name).consumer_edges

    def evaluation_plan(self, config_name: str) -> Tuple[str, ...]:
        return self.resolve(config_name).evaluation_plan
