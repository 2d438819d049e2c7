"""Dependency graph validation.

Project references must form a DAG: ``tsc --build`` cannot order a cycle and
the synchronizer would keep re-adding both edges. Validation runs once,
before any manifest is touched.
"""

from typing import Optional

from refsync_common import DependencyCycleError, UnknownDependencyError
from refsync_contracts import DependencyGraph, WorkspacePackage

# DFS colors
_UNVISITED, _IN_PROGRESS, _DONE = 0, 1, 2


def get_dependency(graph: DependencyGraph, package: WorkspacePackage, name: str) -> WorkspacePackage:
    """Look up a direct dependency of ``package``.

    Raises:
        UnknownDependencyError: ``name`` is not a workspace of the graph
    """
    try:
        return graph.packages[name]
    except KeyError:
        raise UnknownDependencyError(package.name, name) from None


def find_cycle(graph: DependencyGraph) -> Optional[list[str]]:
    """Return one dependency cycle, or None if the graph is acyclic.

    The cycle starts and ends with the same package name. Packages are
    visited in sorted order so the reported cycle is stable.
    """
    state = {name: _UNVISITED for name in graph.packages}
    stack: list[str] = []

    def visit(name: str) -> Optional[list[str]]:
        state[name] = _IN_PROGRESS
        stack.append(name)
        for dependency in sorted(graph.packages[name].dependencies):
            if dependency not in state:
                continue
            if state[dependency] == _IN_PROGRESS:
                return stack[stack.index(dependency):] + [dependency]
            if state[dependency] == _UNVISITED:
                cycle = visit(dependency)
                if cycle:
                    return cycle
        stack.pop()
        state[name] = _DONE
        return None

    for name in sorted(graph.packages):
        if state[name] == _UNVISITED:
            cycle = visit(name)
            if cycle:
                return cycle
    return None


def validate_graph(graph: DependencyGraph) -> None:
    """Check that every dependency is known and the graph is acyclic.

    Raises:
        UnknownDependencyError: A package depends on a name outside the graph
        DependencyCycleError: Workspaces depend on each other in a cycle
    """
    for package in [*graph.packages.values(), graph.root_package]:
        for dependency in package.dependencies:
            get_dependency(graph, package, dependency)

    cycle = find_cycle(graph)
    if cycle:
        raise DependencyCycleError(cycle)
