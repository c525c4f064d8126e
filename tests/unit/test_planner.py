"""
Unit tests for dependencies/planner.py

Tests producer graph construction, cycle detection and plan ordering.
"""

import pytest

from casemap.core import FormulaSpec, ModuleSignature, SecondaryModuleSpec
from casemap.dependencies import EvaluationPlanner, classify_specs
from casemap.errors import CyclicDependencyError


def sig(module_id, inputs=(), outputs=()):
    return ModuleSignature(module_id=module_id, inputs=frozenset(inputs), outputs=frozenset(outputs))


def formula(fid, inputs, outputs):
    return FormulaSpec(formula_id=fid, form="F", inputs=tuple(inputs), outputs=tuple(outputs))


def classify(formulas, primary_inputs, secondaries=(), signatures=None):
    return classify_specs(
        "C",
        formulas,
        list(secondaries),
        signatures or {},
        [sig("P", primary_inputs)],
    )


def assert_topological(info, plan):
    """Every producer appears after the producers of its inputs."""
    position = {pid: i for i, pid in enumerate(plan)}
    producer_of = {var: pid for pid, var in info.producer_edges}
    for var, consumer in info.consumer_edges:
        if consumer in position and var in producer_of:
            assert position[producer_of[var]] < position[consumer], (var, consumer)


@pytest.fixture
def planner():
    return EvaluationPlanner()


class TestBuildGraph:
    """Test producer graph construction."""

    def test_nodes_and_edges(self, planner):
        info = classify(
            [formula("F1", ["a"], ["b"]), formula("F2", ["b", "a"], ["c"])],
            ["c"],
        )
        graph = planner.build_graph(info)
        assert set(graph.nodes) == {"F1", "F2"}
        assert list(graph.edges) == [("F1", "F2")]
        assert graph.edges["F1", "F2"]["variables"] == ["b"]
        assert graph.nodes["F2"]["order"] == 1

    def test_edge_collects_all_variables(self, planner):
        info = classify(
            [formula("F1", ["a"], ["b", "c"]), formula("F2", ["b", "c"], ["d"])],
            ["d"],
        )
        graph = planner.build_graph(info)
        assert graph.edges["F1", "F2"]["variables"] == ["b", "c"]

    def test_primary_module_not_a_node(self, planner):
        info = classify([formula("F1", ["a"], ["b"])], ["b"])
        graph = planner.build_graph(info)
        assert list(graph.nodes) == ["F1"]
        assert graph.number_of_edges() == 0


class TestPlan:
    """Test plan ordering."""

    def test_empty(self, planner):
        info = classify([], ["a"])
        assert planner.plan(info) == ()

    def test_chain_reordered(self, planner):
        """A consumer declared before its producer still runs after it."""
        info = classify(
            [formula("F2", ["b"], ["c"]), formula("F1", ["a"], ["b"])],
            ["c"],
        )
        plan = planner.plan(info)
        assert plan == ("F1", "F2")
        assert_topological(info, plan)

    def test_ties_follow_declaration_order(self, planner):
        """Independent producers keep declaration order."""
        info = classify(
            [
                formula("Z", ["a"], ["z"]),
                formula("A", ["a"], ["y"]),
                formula("M", ["a"], ["x"]),
            ],
            ["x", "y", "z"],
        )
        assert planner.plan(info) == ("Z", "A", "M")

    def test_diamond(self, planner):
        info = classify(
            [
                formula("join", ["l", "r"], ["out"]),
                formula("right", ["root_out"], ["r"]),
                formula("left", ["root_out"], ["l"]),
                formula("root", ["a"], ["root_out"]),
            ],
            ["out"],
        )
        plan = planner.plan(info)
        assert plan == ("root", "right", "left", "join")
        assert_topological(info, plan)

    def test_secondary_module_after_formula(self, planner):
        info = classify(
            [formula("F1", ["raw"], ["blade"])],
            ["rotor"],
            secondaries=[SecondaryModuleSpec(module_id="M1", outputs=("rotor",))],
            signatures={"M1": sig("M1", ["blade"], ["rotor"])},
        )
        assert planner.plan(info) == ("F1", "M1")

    def test_plan_is_reproducible(self, planner):
        formulas = [formula(f"F{i}", ["a"], [f"v{i}"]) for i in range(20)]
        info = classify(formulas, [f"v{i}" for i in range(20)])
        assert planner.plan(info) == planner.plan(info)

    def test_plan_steps(self, planner):
        info = classify(
            [formula("F2", ["b"], ["c"]), formula("F1", ["a"], ["b"])],
            ["c"],
        )
        steps = planner.plan_steps(info, planner.plan(info))
        assert [s.producer_id for s in steps] == ["F1", "F2"]
        assert steps[0].outputs == ("b",)

    def test_stages(self, planner):
        info = classify(
            [
                formula("F1", ["a"], ["b"]),
                formula("F2", ["a"], ["c"]),
                formula("F3", ["b", "c"], ["d"]),
            ],
            ["d"],
        )
        graph = planner.build_graph(info)
        assert planner.stages(graph) == (("F1", "F2"), ("F3",))


class TestCycles:
    """Test cycle detection."""

    def test_two_formula_cycle(self, planner):
        """A reads B's output and B reads A's output."""
        info = classify(
            [formula("A", ["b_out"], ["a_out"]), formula("B", ["a_out"], ["b_out"])],
            ["a_out"],
        )
        with pytest.raises(CyclicDependencyError) as exc_info:
            planner.plan(info)

        error = exc_info.value
        assert error.cycle == ["A", "B", "A"]
        assert set(error.producers) == {"A", "B"}
        assert error.config_name == "C"
        assert "A -> B -> A" in str(error)

    def test_self_loop(self, planner):
        info = classify([formula("F", ["x"], ["x"])], ["x"])
        with pytest.raises(CyclicDependencyError) as exc_info:
            planner.plan(info)
        assert exc_info.value.cycle == ["F", "F"]

    def test_cycle_behind_acyclic_prefix(self, planner):
        """The reported cycle holds only the producers on it."""
        info = classify(
            [
                formula("start", ["a"], ["s"]),
                formula("X", ["s", "z"], ["x"]),
                formula("Y", ["x"], ["y"]),
                formula("Z", ["y"], ["z"]),
            ],
            ["z"],
        )
        with pytest.raises(CyclicDependencyError) as exc_info:
            planner.plan(info)
        assert exc_info.value.cycle == ["X", "Y", "Z", "X"]

    def test_find_cycle_none(self, planner):
        info = classify([formula("F1", ["a"], ["b"])], ["b"])
        assert planner.find_cycle(planner.build_graph(info)) is None

    def test_cycle_detection_is_deterministic(self, planner):
        info = classify(
            [formula("A", ["b_out"], ["a_out"]), formula("B", ["a_out"], ["b_out"])],
            ["a_out"],
        )
        graph = planner.build_graph(info)
        assert planner.find_cycle(graph) == planner.find_cycle(graph)
