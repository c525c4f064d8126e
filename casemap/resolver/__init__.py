"""
casemap.resolver - Case resolution and diagnostics
"""

from .case_resolver import (
    ResolvedCase,
    ResolutionOutcome,
    CaseResolver,
)
from .diagnostics import (
    format_resolved_case,
    format_form_formulas,
    format_case_variables,
)

__all__ = [
    # Resolution
    "ResolvedCase",
    "ResolutionOutcome",
    "CaseResolver",
    # Diagnostics
    "format_resolved_case",
    "format_form_formulas",
    "format_case_variables",
]
