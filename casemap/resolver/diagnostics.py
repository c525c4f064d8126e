"""
resolver/diagnostics.py - Text rendering of resolved declarations

Pure formatting functions: each returns a string and writes nothing. The
output is sorted wherever the underlying data is unordered so that it can
be diffed against stored fixtures.
"""

from __future__ import annotations
from typing import Iterable, List, Sequence

from casemap.catalog import ConfigSpecView

from .case_resolver import ResolvedCase


def _quoted(names: Iterable[str]) -> str:
    """('a', 'b') rendering of a name list."""
    return "(" + ", ".join(f"'{n}'" for n in names) + ")"


def format_resolved_case(case: ResolvedCase) -> str:
    """Configuration name, partitions and ordered plan of one case."""
    info = case.info
    lines: List[str] = [f"config: '{case.config_name}'"]
    lines.append(f"\tprimary_modules: {_quoted(info.primary_modules)}")
    lines.append(f"\tprimary_inputs: {_quoted(sorted(info.primary_inputs))}")
    lines.append(f"\tsecondary_inputs: {_quoted(sorted(info.secondary_inputs))}")
    lines.append(f"\tevaluated_inputs: {_quoted(sorted(info.evaluated_inputs))}")

    if info.unconsumed_outputs:
        lines.append(f"\tunconsumed_outputs: {_quoted(sorted(info.unconsumed_outputs))}")

    lines.append("\tproducer_edges:")
    for producer, var in sorted(info.producer_edges):
        lines.append(f"\t\t{producer} -> {var}")

    lines.append("\tconsumer_edges:")
    for var, consumer in sorted(info.consumer_edges):
        lines.append(f"\t\t{var} -> {consumer}")

    lines.append("\tevaluation_plan:")
    for index, step in enumerate(case.plan_steps):
        lines.append(
            f"\t\t{index}: {step.kind.value} '{step.producer_id}' "
            f"{_quoted(step.inputs)} -> {_quoted(step.outputs)}"
        )

    return "\n".join(lines) + "\n"


def format_form_formulas(view: ConfigSpecView) -> str:
    """Per form, each formula's inputs and outputs."""
    lines: List[str] = ["ui_form_to_formulas = {"]
    for form in sorted(view.forms, key=lambda f: f.name):
        if not form.formulas:
            continue
        lines.append(f"\t'{form.name}': {{")
        for formula in form.formulas:
            lines.append(f"\t\t'{formula.formula_id}': {_quoted(formula.inputs)}:")
            lines.append(f"\t\t\t{_quoted(formula.outputs)}")
        lines.append("\t}")
    lines.append("}")
    return "\n".join(lines) + "\n"


def format_case_variables(cases: Sequence[ResolvedCase]) -> str:
    """Formulas and secondary modules of several configurations."""
    lines: List[str] = ["case_variables = {"]
    for case in sorted(cases, key=lambda c: c.config_name):
        lines.append(f"'{case.config_name}': {{")
        formulas = [s for s in case.info.producers if s.is_formula]
        modules = [s for s in case.info.producers if not s.is_formula]

        lines.append("\t'formulas': {")
        for step in formulas:
            lines.append(
                f"\t\t{_quoted(step.inputs)}: ({_quoted(step.outputs)}, '{step.form}')"
            )
        lines.append("\t}")

        if modules:
            lines.append("\t'secondary_modules':")
            for step in modules:
                lines.append(f"\t\t{step.producer_id}")
        lines.append("}")
    lines.append("}")
    return "\n".join(lines) + "\n"
