# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Directed graph over named nodes with cycle detection and stable ordering.

Each node declares the nodes it depends on (its predecessors). The graph is
used by aggregate facts to order chunk evaluation:

- cycles() reports every cyclic group of nodes, for diagnostics
- topological_order() lists nodes so that every node follows its
  dependencies; unconstrained nodes keep their registration order
- levels() groups nodes into waves that have no dependencies on each other
"""

import heapq
from typing import Iterable, Iterator


class DependencyGraph:
    """Graph of named nodes and their declared predecessors."""

    def __init__(self):
        self._edges: dict[str, list[str]] = {}

    def set_dependencies(self, node: str, predecessors: Iterable[str]) -> None:
        """Declare the predecessors of a node.

        Re-declaring a node replaces its predecessors but keeps its
        original registration position.
        """
        self._edges[node] = list(predecessors)

    def __setitem__(self, node: str, predecessors: Iterable[str]) -> None:
        self.set_dependencies(node, predecessors)

    def __getitem__(self, node: str) -> list[str]:
        return list(self._edges[node])

    def __contains__(self, node: str) -> bool:
        return node in self._edges

    def __iter__(self) -> Iterator[str]:
        return iter(self._edges)

    def __len__(self) -> int:
        return len(self._edges)

    @property
    def nodes(self) -> list[str]:
        """Nodes in registration order."""
        return list(self._edges)

    def missing_dependencies(self) -> dict[str, list[str]]:
        """Map each node to the predecessors it names that were never registered."""
        missing = {}
        for node, deps in self._edges.items():
            unknown = [dep for dep in deps if dep not in self._edges]
            if unknown:
                missing[node] = unknown
        return missing

    def cycles(self) -> list[list[str]]:
        """Find every dependency cycle.

        Each cycle is a strongly connected component with more than one node,
        or a single node depending on itself. Members are listed in
        registration order; cycles are ordered by their earliest member.

        Returns:
            List of cycles, empty if the graph is acyclic
        """
        position = {node: i for i, node in enumerate(self._edges)}
        index: dict[str, int] = {}
        lowlink: dict[str, int] = {}
        stack: list[str] = []
        on_stack: set[str] = set()
        components: list[list[str]] = []
        counter = 0

        def strongconnect(node: str) -> None:
            nonlocal counter
            index[node] = lowlink[node] = counter
            counter += 1
            stack.append(node)
            on_stack.add(node)

            for dep in self._edges[node]:
                if dep not in self._edges:
                    continue
                if dep not in index:
                    strongconnect(dep)
                    lowlink[node] = min(lowlink[node], lowlink[dep])
                elif dep in on_stack:
                    lowlink[node] = min(lowlink[node], index[dep])

            if lowlink[node] == index[node]:
                component = []
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component.append(member)
                    if member == node:
                        break
                components.append(component)

        for node in self._edges:
            if node not in index:
                strongconnect(node)

        cycles = [
            sorted(component, key=position.__getitem__)
            for component in components
            if len(component) > 1 or component[0] in self._edges[component[0]]
        ]
        cycles.sort(key=lambda cycle: position[cycle[0]])
        return cycles

    def is_acyclic(self) -> bool:
        """True if no dependency cycle exists."""
        return not self.cycles()

    def topological_order(self) -> list[str]:
        """Order nodes so each one follows all of its predecessors.

        Whenever several nodes are ready, the earliest registered one is taken
        first, so the order is reproducible across runs. Predecessors that
        were never registered are ignored.

        Raises:
            ValueError: If the graph contains cycles
        """
        cycles = self.cycles()
        if cycles:
            raise ValueError(f"Cannot order nodes; found dependency cycles: {cycles}")

        position = {node: i for i, node in enumerate(self._edges)}
        pending = {
            node: {dep for dep in deps if dep in self._edges}
            for node, deps in self._edges.items()
        }
        dependents: dict[str, list[str]] = {node: [] for node in self._edges}
        for node, deps in pending.items():
            for dep in deps:
                dependents[dep].append(node)

        ready = [position[node] for node, deps in pending.items() if not deps]
        heapq.heapify(ready)
        nodes = list(self._edges)
        order = []
        while ready:
            node = nodes[heapq.heappop(ready)]
            order.append(node)
            for dependent in dependents[node]:
                pending[dependent].discard(node)
                if not pending[dependent]:
                    heapq.heappush(ready, position[dependent])
        return order

    def levels(self) -> list[list[str]]:
        """Group nodes into waves; nodes in one wave never depend on each other.

        Raises:
            ValueError: If the graph contains cycles
        """
        depth: dict[str, int] = {}
        for node in self.topological_order():
            deps = [dep for dep in self._edges[node] if dep in self._edges]
            depth[node] = 1 + max((depth[dep] for dep in deps), default=-1)

        levels: list[list[str]] = []
        for node in self._edges:
            while len(levels) <= depth[node]:
                levels.append([])
            levels[depth[node]].append(node)
        return levels
