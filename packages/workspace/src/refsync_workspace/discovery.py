"""Workspace discovery - load the yarn workspace graph.

Provides:
- ``query_yarn_workspaces``: run ``yarn --silent workspaces info`` in the repository
- ``load_workspaces_file``: read the same JSON from a file (offline / CI use)
- ``build_graph``: turn that JSON into a DependencyGraph with the synthetic root package
- ``resolve_root_package_name``: pick the name of the whole-repository package

Example:
    >>> workspaces = query_yarn_workspaces(root)
    >>> graph = build_graph(root, workspaces, resolve_root_package_name(root))
"""

import json
import subprocess
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from refsync_common import GraphLoadError, get_logger
from refsync_contracts import DependencyGraph, PackageKind, WorkspacePackage, YarnWorkspaceInfo

logger = get_logger(__name__)

YARN_WORKSPACES_INFO_ARGS = ["--silent", "workspaces", "info"]


def query_yarn_workspaces(root: Path, yarn_command: str = "yarn") -> dict[str, Any]:
    """Run the yarn workspace query and return its parsed JSON.

    Args:
        root: Repository root (working directory of the query)
        yarn_command: yarn executable to run

    Returns:
        Mapping of package name to raw workspace info

    Raises:
        GraphLoadError: yarn is missing, exits non-zero, or prints invalid JSON
    """
    command = [yarn_command, *YARN_WORKSPACES_INFO_ARGS]
    logger.debug("yarn_workspaces_query", command=" ".join(command), cwd=str(root))

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            cwd=str(root),
        )
    except OSError as e:
        raise GraphLoadError(f"Cannot run {' '.join(command)}: {e}") from e

    if result.returncode != 0:
        stderr = result.stderr.strip()
        raise GraphLoadError(
            f"{' '.join(command)} exited with code {result.returncode}" + (f": {stderr}" if stderr else "")
        )

    return _parse_workspaces_json(result.stdout, source=" ".join(command))


def load_workspaces_file(path: Path) -> dict[str, Any]:
    """Read a saved ``yarn workspaces info`` dump.

    Raises:
        GraphLoadError: File is unreadable or not a JSON object
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise GraphLoadError(f"Cannot read workspaces file {path}: {e}") from e
    return _parse_workspaces_json(content, source=str(path))


def _parse_workspaces_json(content: str, source: str) -> dict[str, Any]:
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise GraphLoadError(f"Invalid JSON from {source}: {e}") from e
    if not isinstance(data, dict):
        raise GraphLoadError(f"Expected a JSON object from {source}, got {type(data).__name__}")
    return data


def resolve_root_package_name(root: Path, configured: Optional[str] = None) -> str:
    """Name of the whole-repository pseudo-package.

    Uses ``configured`` when given, then the ``name`` field of the root
    ``package.json``, then the directory name.
    """
    if configured:
        return configured

    package_json = root / "package.json"
    if package_json.is_file():
        try:
            name = json.loads(package_json.read_text(encoding="utf-8")).get("name")
        except (OSError, json.JSONDecodeError, AttributeError):
            name = None
        if isinstance(name, str) and name:
            return name

    return root.name


def build_graph(
    root: Path,
    workspaces: Mapping[str, Any],
    root_package_name: str,
) -> DependencyGraph:
    """Build the dependency graph from ``yarn workspaces info`` data.

    Locations are resolved against ``root``. The synthetic root package
    depends on every workspace, in discovery order.

    Raises:
        GraphLoadError: An entry does not have the expected shape
    """
    root = root.resolve()
    packages: dict[str, WorkspacePackage] = {}

    for name, raw in workspaces.items():
        try:
            info = YarnWorkspaceInfo.model_validate(raw)
        except ValidationError as e:
            raise GraphLoadError(f"Invalid workspace entry for {name}: {e}") from e

        if info.mismatched_workspace_dependencies:
            logger.warning(
                "mismatched_workspace_dependencies",
                package=name,
                dependencies=info.mismatched_workspace_dependencies,
            )

        packages[name] = WorkspacePackage(
            name=name,
            location=(root / info.location).resolve(),
            dependencies=tuple(info.workspace_dependencies),
        )

    root_package = WorkspacePackage(
        name=root_package_name,
        location=root,
        dependencies=tuple(packages),
        kind=PackageKind.REPOSITORY_ROOT,
    )

    logger.debug("workspace_graph_loaded", packages=len(packages), root_package=root_package_name)
    return DependencyGraph(root=root, packages=packages, root_package=root_package)
