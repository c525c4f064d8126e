"""
dependencies/planner.py - Evaluation planning

Orders the producers of a configuration so that every formula or secondary
module runs after the producers of its inputs.

The producer graph has one node per producer; an edge A -> B means some
output of A is read by B. Ties are broken by declaration order so the same
declarations always give the same plan.
"""

from __future__ import annotations
from typing import Dict, Iterator, List, Optional, Tuple
import logging

import networkx as nx

from casemap.core import is_primary_consumer
from casemap.errors import CyclicDependencyError

from .classifier import CaseVariableInfo, ProducerNode

logger = logging.getLogger(__name__)


# DFS colors
_WHITE, _GRAY, _BLACK = 0, 1, 2


class EvaluationPlanner:
    """Builds producer graphs and orders them."""

    def build_graph(self, info: CaseVariableInfo) -> nx.DiGraph:
        """Producer graph of one classified configuration."""
        graph = nx.DiGraph(config_name=info.config_name)

        for node in info.producers:
            graph.add_node(node.producer_id, order=node.order, kind=node.kind, node=node)

        producer_of: Dict[str, str] = {var: pid for pid, var in info.producer_edges}

        for var, consumer in sorted(info.consumer_edges):
            if is_primary_consumer(consumer):
                continue
            producer = producer_of.get(var)
            if producer is None:
                continue
            if graph.has_edge(producer, consumer):
                graph.edges[producer, consumer]["variables"].append(var)
            else:
                graph.add_edge(producer, consumer, variables=[var])
                logger.debug(f"Edge: {producer} -> {consumer} (via {var})")

        return graph

    def _successors(self, graph: nx.DiGraph, node: str) -> Iterator[str]:
        return iter(sorted(graph.successors(node), key=lambda n: graph.nodes[n]["order"]))

    def _ordered_nodes(self, graph: nx.DiGraph) -> List[str]:
        return sorted(graph.nodes, key=lambda n: graph.nodes[n]["order"])

    def find_cycle(self, graph: nx.DiGraph) -> Optional[List[str]]:
        """
        Depth-first search with visiting/visited coloring.

        Returns the first cycle found as a list of producer ids that starts
        and ends on the same producer, or None if the graph is acyclic.
        """
        color = {n: _WHITE for n in graph.nodes}

        for root in self._ordered_nodes(graph):
            if color[root] != _WHITE:
                continue

            color[root] = _GRAY
            path = [root]
            stack = [(root, self._successors(graph, root))]

            while stack:
                node, children = stack[-1]
                descended = False

                for child in children:
                    if color[child] == _GRAY:
                        start = path.index(child)
                        return path[start:] + [child]
                    if color[child] == _WHITE:
                        color[child] = _GRAY
                        path.append(child)
                        stack.append((child, self._successors(graph, child)))
                        descended = True
                        break

                if not descended:
                    color[node] = _BLACK
                    path.pop()
                    stack.pop()

        return None

    def plan(self, info: CaseVariableInfo) -> Tuple[str, ...]:
        """
        Ordered producer ids.

        Raises:
            CyclicDependencyError: the producers cannot be ordered
        """
        graph = self.build_graph(info)
        return self.plan_graph(graph, info.config_name)

    def plan_graph(self, graph: nx.DiGraph, config_name: str = None) -> Tuple[str, ...]:
        cycle = self.find_cycle(graph)
        if cycle:
            raise CyclicDependencyError(cycle, config_name=config_name)

        order = tuple(nx.lexicographical_topological_sort(
            graph, key=lambda n: graph.nodes[n]["order"]
        ))

        logger.debug(f"Plan for {config_name}: {list(order)}")
        return order

    def stages(self, graph: nx.DiGraph) -> Tuple[Tuple[str, ...], ...]:
        """
        Group an acyclic producer graph into stages.

        Producers in one stage only depend on earlier stages, so a driver
        may run a stage's producers concurrently.
        """
        return tuple(
            tuple(sorted(generation, key=lambda n: graph.nodes[n]["order"]))
            for generation in nx.topological_generations(graph)
        )

    def plan_steps(self, info: CaseVariableInfo, order: Tuple[str, ...]) -> Tuple[ProducerNode, ...]:
        """Producer nodes in plan order."""
        nodes = {n.producer_id: n for n in info.producers}
        return tuple(nodes[pid] for pid in order)
