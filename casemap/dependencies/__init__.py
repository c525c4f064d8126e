"""
casemap Dependency Classification & Planning

Provides:
- classify_specs / DependencyClassifier: variable roles and producer/consumer edges
- CaseVariableInfo: resolved partition of one configuration
- EvaluationPlanner: producer graph, cycle detection, ordered plan
"""

from .classifier import (
    CaseVariableInfo,
    ProducerNode,
    DependencyClassifier,
    classify_specs,
)
from .planner import (
    EvaluationPlanner,
)

__all__ = [
    # Classifier
    "CaseVariableInfo",
    "ProducerNode",
    "DependencyClassifier",
    "classify_specs",
    # Planner
    "EvaluationPlanner",
]
