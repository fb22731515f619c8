"""Dependency graph builder.

Nodes live in an arena addressed by their input position; edges are
adjacency lists of those indices. Ordering uses Kahn's algorithm with a
min-heap on the index, so independent nodes keep their input order.
"""
from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import Sequence

from forecaster.models.work_package import WorkPackage
from forecaster.simulation.errors import CycleDetected, DuplicateWorkPackage, UnknownDependency


@dataclass(frozen=True)
class DependencyGraph:
    """Validated DAG over work packages."""
    ids: tuple[str, ...]
    predecessors: tuple[tuple[int, ...], ...]
    successors: tuple[tuple[int, ...], ...]
    order: tuple[int, ...]

    def __len__(self) -> int:
        return len(self.ids)

    @property
    def terminals(self) -> tuple[int, ...]:
        """Nodes nothing else depends on."""
        return tuple(i for i, succ in enumerate(self.successors) if not succ)

    @property
    def ordered_ids(self) -> list[str]:
        return [self.ids[i] for i in self.order]


def build_graph(work_packages: Sequence[WorkPackage]) -> DependencyGraph:
    """Validate dependencies and topologically order the packages.

    Raises DuplicateWorkPackage, UnknownDependency or CycleDetected.
    """
    index: dict[str, int] = {}
    for i, wp in enumerate(work_packages):
        if wp.id in index:
            raise DuplicateWorkPackage(wp.id)
        index[wp.id] = i

    n = len(work_packages)
    predecessors: list[list[int]] = [[] for _ in range(n)]
    successors: list[list[int]] = [[] for _ in range(n)]
    for i, wp in enumerate(work_packages):
        for dep in wp.dependencies:
            j = index.get(dep)
            if j is None:
                raise UnknownDependency(wp.id, dep)
            if j in predecessors[i]:
                continue
            predecessors[i].append(j)
            successors[j].append(i)

    order = _kahn(predecessors, successors)
    if len(order) < n:
        resolved = set(order)
        raise CycleDetected(work_packages[i].id for i in range(n) if i not in resolved)

    return DependencyGraph(
        ids=tuple(wp.id for wp in work_packages),
        predecessors=tuple(tuple(p) for p in predecessors),
        successors=tuple(tuple(s) for s in successors),
        order=tuple(order),
    )


def topological_order(work_packages: Sequence[WorkPackage]) -> list[str]:
    """Return package ids with every dependency before its dependents."""
    return build_graph(work_packages).ordered_ids


def _kahn(predecessors: list[list[int]], successors: list[list[int]]) -> list[int]:
    in_degree = [len(p) for p in predecessors]
    ready = [i for i, d in enumerate(in_degree) if d == 0]
    heapq.heapify(ready)

    order: list[int] = []
    while ready:
        current = heapq.heappop(ready)
        order.append(current)
        for nxt in successors[current]:
            in_degree[nxt] -= 1
            if in_degree[nxt] == 0:
                heapq.heappush(ready, nxt)
    return order
