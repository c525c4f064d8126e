"""
dependencies/classifier.py - Variable role classification

Partitions the variables of one configuration by role and records which
producer yields each variable and which consumers read it.

Producers are formulas and secondary modules. Consumers are formulas,
secondary modules and the primary module chain. A consumed variable is:

- evaluated:  it has a producer
- secondary:  no producer, read by at least one secondary module
- primary:    no producer, read only by formulas and/or the primary modules
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence, Set, Tuple
import logging

from casemap.core import (
    ConsumerKind,
    FormulaSpec,
    ModuleSignature,
    ProducerKind,
    SecondaryModuleSpec,
    Variable,
    VariableRole,
    primary_consumer_id,
)
from casemap.errors import (
    DuplicateProducerError,
    ResolutionError,
    SpecDocumentError,
    UnknownVariableError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass(frozen=True)
class ProducerNode:
    """A formula or secondary module, with the variables it reads and yields."""
    producer_id: str
    kind: ProducerKind
    order: int
    form: str = ""
    inputs: Tuple[str, ...] = ()
    outputs: Tuple[str, ...] = ()

    @property
    def is_formula(self) -> bool:
        return self.kind == ProducerKind.FORMULA


@dataclass(frozen=True)
class CaseVariableInfo:
    """Resolved variable partition of one configuration."""
    config_name: str
    primary_inputs: FrozenSet[str] = frozenset()
    secondary_inputs: FrozenSet[str] = frozenset()
    evaluated_inputs: FrozenSet[str] = frozenset()

    # (producer_id, variable) and (variable, consumer_id)
    producer_edges: FrozenSet[Tuple[str, str]] = frozenset()
    consumer_edges: FrozenSet[Tuple[str, str]] = frozenset()

    producers: Tuple[ProducerNode, ...] = ()
    primary_modules: Tuple[str, ...] = ()
    unconsumed_outputs: FrozenSet[str] = frozenset()

    def role_of(self, variable: str) -> Optional[VariableRole]:
        if variable in self.evaluated_inputs:
            return VariableRole.EVALUATED
        if variable in self.secondary_inputs:
            return VariableRole.SECONDARY
        if variable in self.primary_inputs:
            return VariableRole.PRIMARY
        return None

    def producer_of(self, variable: str) -> Optional[str]:
        for producer_id, var in self.producer_edges:
            if var == variable:
                return producer_id
        return None

    def consumers_of(self, variable: str) -> Set[str]:
        return {consumer for var, consumer in self.consumer_edges if var == variable}

    def inputs_of(self, consumer_id: str) -> Set[str]:
        """Variables read by a producer or primary consumer."""
        return {var for var, consumer in self.consumer_edges if consumer == consumer_id}

    def get_producer(self, producer_id: str) -> Optional[ProducerNode]:
        for node in self.producers:
            if node.producer_id == producer_id:
                return node
        return None

    @property
    def all_inputs(self) -> FrozenSet[str]:
        return self.primary_inputs | self.secondary_inputs | self.evaluated_inputs


# =============================================================================
# CLASSIFIER
# =============================================================================

@dataclass
class _ClassifyState:
    """Working maps for one classification run."""
    config_name: str
    producer_of: Dict[str, str] = field(default_factory=dict)
    producers: Dict[str, ProducerNode] = field(default_factory=dict)
    # variable -> consumer ids, in first-seen order
    consumers: Dict[str, List[str]] = field(default_factory=dict)
    consumer_kinds: Dict[str, ConsumerKind] = field(default_factory=dict)

    def add_producer(self, node: ProducerNode) -> None:
        """
        Register a producer and claim its outputs.

        A producer id seen twice (e.g. one secondary module attached to two
        forms of the configuration) is a malformed declaration and raises
        SpecDocumentError. An output listed twice by the same producer is
        claimed once.
        """
        if node.producer_id in self.producers:
            raise SpecDocumentError(
                f"Producer id '{node.producer_id}' is declared more than once",
                config_name=self.config_name,
                producer=node.producer_id,
            )
        self.producers[node.producer_id] = node
        for var in node.outputs:
            existing = self.producer_of.get(var)
            if existing == node.producer_id:
                continue
            if existing is not None:
                raise DuplicateProducerError(
                    var,
                    [existing, node.producer_id],
                    config_name=self.config_name,
                )
            self.producer_of[var] = node.producer_id

    def add_consumer(self, variable: str, consumer_id: str, kind: ConsumerKind) -> None:
        readers = self.consumers.setdefault(variable, [])
        if consumer_id not in readers:
            readers.append(consumer_id)
        self.consumer_kinds[consumer_id] = kind


def classify_specs(
    config_name: str,
    formulas: Sequence[FormulaSpec],
    secondary_modules: Sequence[SecondaryModuleSpec],
    secondary_signatures: Mapping[str, ModuleSignature],
    primary_signatures: Sequence[ModuleSignature],
    variables: Optional[Mapping[str, Variable]] = None,
    strict_catalog: bool = True,
) -> CaseVariableInfo:
    """
    Classify the variables of one configuration.

    Args:
        config_name: configuration being classified
        formulas: formulas in declaration order
        secondary_modules: secondary modules in declaration order
        secondary_signatures: signature per secondary module id
        primary_signatures: primary module chain, in run order
        variables: catalog of UI variables by name (None skips the check)
        strict_catalog: raise for undeclared non-produced variables instead
            of logging a warning

    Raises:
        DuplicateProducerError, UnknownVariableError, SpecDocumentError
    """
    state = _ClassifyState(config_name=config_name)

    # Step 1: producers
    order = 0
    for formula in formulas:
        state.add_producer(ProducerNode(
            producer_id=formula.formula_id,
            kind=ProducerKind.FORMULA,
            order=order,
            form=formula.form,
            inputs=formula.inputs,
            outputs=formula.outputs,
        ))
        order += 1

    for spec in secondary_modules:
        signature = secondary_signatures[spec.module_id]
        for var in spec.inputs:
            if var not in signature.inputs:
                raise UnknownVariableError(
                    var, config_name=config_name, module_id=spec.module_id,
                    reason="not an input of the module signature",
                )
        for var in spec.outputs:
            if var not in signature.outputs:
                raise UnknownVariableError(
                    var, config_name=config_name, module_id=spec.module_id,
                    reason="not an output of the module signature",
                )
        state.add_producer(ProducerNode(
            producer_id=spec.module_id,
            kind=ProducerKind.SECONDARY_MODULE,
            order=order,
            form=spec.form,
            inputs=spec.inputs,
            outputs=spec.outputs,
        ))
        order += 1

    # Step 2: consumers
    for formula in formulas:
        for var in formula.inputs:
            state.add_consumer(var, formula.formula_id, ConsumerKind.FORMULA)

    for spec in secondary_modules:
        signature = secondary_signatures[spec.module_id]
        for var in spec.inputs:
            state.add_consumer(var, spec.module_id, ConsumerKind.SECONDARY_MODULE)
        # Signature inputs calculated by other producers
        for var in sorted(signature.inputs):
            producer = state.producer_of.get(var)
            if producer is not None and producer != spec.module_id:
                state.add_consumer(var, spec.module_id, ConsumerKind.SECONDARY_MODULE)

    chained: Set[str] = set()
    primary_ids = []
    for signature in primary_signatures:
        consumer_id = primary_consumer_id(signature.module_id)
        primary_ids.append(signature.module_id)
        for var in sorted(signature.inputs):
            # Outputs of an earlier primary module are passed along by the driver
            if var not in chained:
                state.add_consumer(var, consumer_id, ConsumerKind.PRIMARY_MODULE)
        chained |= signature.outputs

    # Step 3: partition
    primary: Set[str] = set()
    secondary: Set[str] = set()
    evaluated: Set[str] = set()

    for var, readers in state.consumers.items():
        if var in state.producer_of:
            evaluated.add(var)
            continue

        if variables is not None and var not in variables:
            error = UnknownVariableError(
                var,
                config_name=config_name,
                reason=f"required by {', '.join(readers)} but not declared on any UI form",
            )
            if strict_catalog:
                raise error
            logger.warning(str(error))

        if any(state.consumer_kinds[c] == ConsumerKind.SECONDARY_MODULE for c in readers):
            secondary.add(var)
        else:
            primary.add(var)

    producer_edges = frozenset(
        (producer_id, var) for var, producer_id in state.producer_of.items()
    )
    consumer_edges = frozenset(
        (var, consumer) for var, readers in state.consumers.items() for consumer in readers
    )
    unconsumed = frozenset(v for v in state.producer_of if v not in state.consumers)

    info = CaseVariableInfo(
        config_name=config_name,
        primary_inputs=frozenset(primary),
        secondary_inputs=frozenset(secondary),
        evaluated_inputs=frozenset(evaluated),
        producer_edges=producer_edges,
        consumer_edges=consumer_edges,
        producers=tuple(sorted(state.producers.values(), key=lambda n: n.order)),
        primary_modules=tuple(primary_ids),
        unconsumed_outputs=unconsumed,
    )

    logger.debug(
        f"Classified {config_name}: {len(primary)} primary, {len(secondary)} secondary, "
        f"{len(evaluated)} evaluated, {len(producer_edges)} producer edges, "
        f"{len(consumer_edges)} consumer edges"
    )
    return info


class DependencyClassifier:
    """Classifies configurations using a signature table for module lookups."""

    def __init__(self, signature_table, strict_catalog: bool = True):
        self._signatures = signature_table
        self._strict_catalog = strict_catalog

    def classify(
        self,
        config_name: str,
        formulas: Sequence[FormulaSpec],
        secondary_modules: Sequence[SecondaryModuleSpec],
        primary_modules: Sequence[str],
        variables: Optional[Mapping[str, Variable]] = None,
    ) -> CaseVariableInfo:
        """
        Look up module signatures and classify.

        Raises:
            UnknownModuleError plus everything classify_specs raises, all
            tagged with config_name
        """
        try:
            secondary_signatures = {
                spec.module_id: self._signatures.signature_of(spec.module_id)
                for spec in secondary_modules
            }
            primary_signatures = [
                self._signatures.signature_of(module_id) for module_id in primary_modules
            ]
            return classify_specs(
                config_name,
                formulas,
                secondary_modules,
                secondary_signatures,
                primary_signatures,
                variables=variables,
                strict_catalog=self._strict_catalog,
            )
        except ResolutionError as e:
            raise e.with_config(config_name)
