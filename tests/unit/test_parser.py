"""
Unit tests for catalog/parser.py

Tests declaration document validation, conversion and file loading.
"""

import json

import pytest

from casemap.catalog import ConfigSpecStore, FormParseState, load_spec_file, parse_document
from casemap.core import ValueTag
from casemap.errors import SpecDocumentError


DOCUMENT = {
    "forms": {
        "Turbine": {
            "variables": [
                {"name": "blade_length", "default": 45.0},
                {"name": "power_curve", "type": "array"},
            ],
            "formulas": [
                {"inputs": ["blade_length"], "outputs": ["blade_area"]},
                {"id": "hub", "inputs": ["tower_height"], "outputs": ["hub_height"]},
            ],
            "secondary_modules": [
                {"module": "wind_obos", "inputs": ["blade_length"], "outputs": ["rotor_d"]},
            ],
        },
    },
    "configurations": {
        "Wind Power-Residential": {
            "primary_modules": ["windpower", "cashloan"],
            "pages": [
                {"sidebar_title": "Turbine", "common": ["Turbine"]},
            ],
        },
    },
    "modules": {
        "windpower": {"inputs": ["rotor_d", "hub_height"], "outputs": ["gen"]},
    },
}


class TestFormParseState:
    """Test parser-local form bookkeeping."""

    def test_generated_ids_count_per_form(self):
        state = FormParseState(active_form="Losses")
        assert state.next_formula_id() == "Losses#0"
        assert state.next_formula_id() == "Losses#1"

    def test_states_are_independent(self):
        a = FormParseState(active_form="A")
        b = FormParseState(active_form="B")
        a.next_formula_id()
        assert b.next_formula_id() == "B#0"


class TestParseDocument:
    """Test parse_document."""

    def test_forms_converted(self):
        parsed = parse_document(DOCUMENT)
        assert len(parsed.forms) == 1
        form = parsed.forms[0]
        assert form.name == "Turbine"
        assert form.variable_names() == ("blade_length", "power_curve")

    def test_variable_tags_and_presence(self):
        form = parse_document(DOCUMENT).forms[0]
        blade, curve = form.variables
        assert blade.value_tag == ValueTag.NUMBER
        assert blade.present is True
        assert blade.default == 45.0
        assert blade.form == "Turbine"
        assert curve.value_tag == ValueTag.ARRAY
        assert curve.present is False

    def test_explicit_null_default_is_present(self):
        parsed = parse_document({
            "forms": {"F": {"variables": [{"name": "x", "default": None}]}},
        })
        assert parsed.forms[0].variables[0].present is True

    def test_formula_ids(self):
        """Missing ids are generated from the form and the formula index."""
        formulas = parse_document(DOCUMENT).forms[0].formulas
        assert [f.formula_id for f in formulas] == ["Turbine#0", "hub"]
        assert formulas[0].inputs == ("blade_length",)
        assert formulas[0].form == "Turbine"

    def test_secondary_modules(self):
        spec = parse_document(DOCUMENT).forms[0].secondary_modules[0]
        assert spec.module_id == "wind_obos"
        assert spec.form == "Turbine"
        assert spec.outputs == ("rotor_d",)

    def test_configurations(self):
        config = parse_document(DOCUMENT).configs[0]
        assert config.name == "Wind Power-Residential"
        assert config.primary_modules == ("windpower", "cashloan")
        assert config.ui_forms() == ("Turbine",)

    def test_modules(self):
        signature = parse_document(DOCUMENT).modules["windpower"]
        assert signature.inputs == frozenset({"rotor_d", "hub_height"})
        assert signature.outputs == frozenset({"gen"})

    def test_apply_to_store(self):
        store = ConfigSpecStore()
        parse_document(DOCUMENT).apply_to(store)
        assert store.config_names() == ["Wind Power-Residential"]
        assert store.view("Wind Power-Residential").form_names() == ("Turbine",)

    def test_invalid_value_tag(self):
        with pytest.raises(SpecDocumentError) as exc_info:
            parse_document(
                {"forms": {"F": {"variables": [{"name": "x", "type": "blob"}]}}},
                source="bad.json",
            )
        assert exc_info.value.source == "bad.json"
        assert exc_info.value.context["errors"]

    def test_config_requires_primary_module(self):
        with pytest.raises(SpecDocumentError):
            parse_document({"configurations": {"C": {"primary_modules": []}}})

    def test_empty_document(self):
        parsed = parse_document({})
        assert parsed.forms == []
        assert parsed.configs == []
        assert parsed.modules == {}


class TestLoadSpecFile:
    """Test load_spec_file."""

    def test_load_json(self, tmp_path):
        path = tmp_path / "spec.json"
        path.write_text(json.dumps(DOCUMENT))
        parsed = load_spec_file(path)
        assert parsed.configs[0].name == "Wind Power-Residential"

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "spec.yaml"
        path.write_text(
            "forms:\n"
            "  Losses:\n"
            "    variables:\n"
            "      - name: losses\n"
            "        default: 14.08\n"
            "configurations:\n"
            "  PVWatts-None:\n"
            "    primary_modules: [pvwattsv8]\n"
            "    pages:\n"
            "      - sidebar_title: Losses\n"
            "        common: [Losses]\n"
        )
        parsed = load_spec_file(str(path))
        assert parsed.forms[0].variables[0].default == 14.08
        assert parsed.configs[0].primary_modules == ("pvwattsv8",)

    def test_missing_file(self, tmp_path):
        with pytest.raises(SpecDocumentError):
            load_spec_file(tmp_path / "missing.json")

    def test_unreadable_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(SpecDocumentError):
            load_spec_file(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(SpecDocumentError):
            load_spec_file(path)
