"""refsync workspace - yarn workspace discovery and dependency graph checks."""

from refsync_workspace.discovery import (
    build_graph,
    load_workspaces_file,
    query_yarn_workspaces,
    resolve_root_package_name,
)
from refsync_workspace.graph import find_cycle, get_dependency, validate_graph

__all__ = [
    "build_graph",
    "find_cycle",
    "get_dependency",
    "load_workspaces_file",
    "query_yarn_workspaces",
    "resolve_root_package_name",
    "validate_graph",
]
