"""
casemap Test Configuration and Fixtures

Builders for small stores/registries plus the reference configurations used
across unit and integration tests.
"""

import pytest
from typing import Dict, Iterable, Sequence

from casemap.catalog import ConfigSpecStore
from casemap.core import (
    ConfigSpec,
    FormulaSpec,
    ModuleSignature,
    PageInfo,
    SecondaryModuleSpec,
    UIForm,
    ValueTag,
    Variable,
)
from casemap.modules import ModuleSignatureTable, StaticModuleRegistry
from casemap.resolver import CaseResolver


def make_variables(form: str, names: Iterable[str], tag: ValueTag = ValueTag.NUMBER):
    return tuple(Variable(name=n, value_tag=tag, form=form) for n in names)


def make_form(
    name: str,
    variables: Sequence[str] = (),
    formulas: Sequence[FormulaSpec] = (),
    secondary_modules: Sequence[SecondaryModuleSpec] = (),
) -> UIForm:
    return UIForm(
        name=name,
        variables=make_variables(name, variables),
        formulas=tuple(formulas),
        secondary_modules=tuple(secondary_modules),
    )


def make_config(name: str, forms: Sequence[str], primary_modules: Sequence[str]) -> ConfigSpec:
    return ConfigSpec(
        name=name,
        pages=(PageInfo(sidebar_title="Inputs", common_forms=tuple(forms)),),
        primary_modules=tuple(primary_modules),
    )


def make_registry(modules: Dict[str, Dict[str, Iterable[str]]]) -> StaticModuleRegistry:
    return StaticModuleRegistry.from_lists(modules)


def make_resolver(forms, configs, modules, **kwargs) -> CaseResolver:
    store = ConfigSpecStore()
    store.add_forms(forms)
    store.add_configs(configs)
    table = ModuleSignatureTable(make_registry(modules))
    return CaseResolver(store, table, **kwargs)


# =============================================================================
# REFERENCE CONFIGURATIONS
# =============================================================================

PVWATTS_MODULES = {
    "pvwattsv8": {"inputs": ["dc_capacity", "losses"], "outputs": ["ac_annual"]},
}

TILT_MODULES = {
    "pvwattsv8": {"inputs": ["tilt"], "outputs": ["ac_annual"]},
}

WIND_MODULES = {
    "windpower": {"inputs": ["rotor_diameter"], "outputs": ["annual_energy"]},
    "M1": {"inputs": ["blade_length"], "outputs": ["rotor_diameter"]},
}


@pytest.fixture
def pvwatts_resolver():
    """'PVWatts-None': two directly supplied primary inputs, nothing else."""
    forms = [make_form("PVWatts System Design", ["dc_capacity", "losses"])]
    configs = [make_config("PVWatts-None", ["PVWatts System Design"], ["pvwattsv8"])]
    return make_resolver(forms, configs, PVWATTS_MODULES)


@pytest.fixture
def tilt_resolver():
    """Formula F1 turns tilt_raw into the primary input tilt."""
    f1 = FormulaSpec(formula_id="F1", form="Array", inputs=("tilt_raw",), outputs=("tilt",))
    forms = [make_form("Array", ["tilt_raw"], formulas=[f1])]
    configs = [make_config("PV-Tilt", ["Array"], ["pvwattsv8"])]
    return make_resolver(forms, configs, TILT_MODULES)


@pytest.fixture
def wind_resolver():
    """Secondary module M1 turns blade_length into rotor_diameter."""
    m1 = SecondaryModuleSpec(
        module_id="M1", form="Turbine", inputs=("blade_length",), outputs=("rotor_diameter",)
    )
    forms = [make_form("Turbine", ["blade_length"], secondary_modules=[m1])]
    configs = [make_config("Wind-None", ["Turbine"], ["windpower"])]
    return make_resolver(forms, configs, WIND_MODULES)


@pytest.fixture
def signature_table():
    return ModuleSignatureTable(make_registry({**PVWATTS_MODULES, "M1": WIND_MODULES["M1"]}))
