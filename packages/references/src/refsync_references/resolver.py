"""Compute the project references a package's build manifest must carry."""

from pathlib import Path
from typing import Optional

from refsync_contracts import DependencyGraph, WorkspaceLayout, WorkspacePackage
from refsync_workspace import get_dependency

from refsync_references.manifest_io import relative_posix


def resolve_references(
    package: WorkspacePackage,
    graph: DependencyGraph,
    layout: WorkspaceLayout,
    override_location: Optional[Path] = None,
) -> list[str]:
    """Relative paths to the build manifests of ``package``'s direct dependencies.

    Dependencies without a build manifest are skipped. Transitive
    dependencies are not expanded: each dependency's own references carry
    the rest of the build order.

    Args:
        package: Requesting package
        graph: Workspace dependency graph
        layout: Manifest file names
        override_location: Directory the paths are relative to, instead of
            the package location (used for the root build manifest)

    Returns:
        Sorted POSIX paths, e.g. ``["../core/compile.tsconfig.json"]``

    Raises:
        UnknownDependencyError: A dependency is not part of the graph
    """
    base = override_location or package.location
    references = []
    for name in package.dependencies:
        dependency = get_dependency(graph, package, name)
        manifest = dependency.location / layout.build_manifest_name
        if not manifest.is_file():
            continue
        references.append(relative_posix(manifest, base))
    return sorted(set(references))
