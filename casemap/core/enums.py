"""
casemap Core Enumerations

Enumeration types shared by the catalog, classifier, planner and resolver.
"""

from enum import Enum


class ValueTag(str, Enum):
    """
    Value type of a UI variable as reported by the form layer.
    """
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    MATRIX = "matrix"
    TABLE = "table"


class VariableRole(str, Enum):
    """
    Role of a consumed variable within one configuration.

    PRIMARY:   no producer, consumed by formulas and/or the primary module
    SECONDARY: no producer, consumed by at least one secondary module
    EVALUATED: produced by a formula or secondary module
    """
    PRIMARY = "primary"
    SECONDARY = "secondary"
    EVALUATED = "evaluated"


class ProducerKind(str, Enum):
    """Kind of node that yields variables."""
    FORMULA = "formula"
    SECONDARY_MODULE = "secondary_module"


class ConsumerKind(str, Enum):
    """Kind of node that reads variables."""
    FORMULA = "formula"
    SECONDARY_MODULE = "secondary_module"
    PRIMARY_MODULE = "primary_module"


class ResolutionStatus(str, Enum):
    """Terminal state of resolving one configuration."""
    PLANNED = "planned"
    REJECTED = "rejected"
