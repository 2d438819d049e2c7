"""Run a full synchronization pass over a workspace.

Order:
1. Validate the dependency graph (before any file is touched)
2. Every workspace's ``compile.tsconfig.json``
3. The whole-repository build manifest (``configs/root-compilation.tsconfig.json``)
4. The root navigation ``tsconfig.json``

The report's exit code tells automation whether anything drifted, also in
dry-run mode where nothing is written.
"""

from dataclasses import dataclass, field
from typing import Optional

from refsync_common import get_logger
from refsync_contracts import DependencyGraph, WorkspaceLayout
from refsync_workspace import validate_graph

from refsync_references.compilation import ManifestSyncResult, ManifestSynchronizer
from refsync_references.navigation import NavigationMapper, NavigationSyncResult
from refsync_references.resolver import resolve_references

logger = get_logger(__name__)

EXIT_IN_SYNC = 0
EXIT_DRIFT = 1


@dataclass
class SyncReport:
    """Outcome of a synchronization pass.

    Attributes:
        manifests: One result per build manifest, root manifest last
        navigation: Navigation manifest result
        dry_run: Nothing was written
        force_rewrite: Manifests were rewritten even without drift
    """

    manifests: list[ManifestSyncResult] = field(default_factory=list)
    navigation: Optional[NavigationSyncResult] = None
    dry_run: bool = False
    force_rewrite: bool = False

    @property
    def changed(self) -> bool:
        """True if any manifest needed a rewrite."""
        navigation_changed = self.navigation.changed if self.navigation else False
        return any(result.changed for result in self.manifests) or navigation_changed

    @property
    def exit_code(self) -> int:
        return EXIT_DRIFT if self.changed else EXIT_IN_SYNC

    @property
    def drifted(self) -> list[ManifestSyncResult]:
        return [result for result in self.manifests if result.changed]

    @property
    def written(self) -> list[ManifestSyncResult]:
        return [result for result in self.manifests if result.written]


def sync_workspace(
    graph: DependencyGraph,
    layout: WorkspaceLayout,
    dry_run: bool = False,
    force_rewrite: bool = False,
) -> SyncReport:
    """Synchronize every manifest of the workspace with ``graph``.

    Args:
        graph: Workspace dependency graph, including the root pseudo-package
        layout: Manifest locations
        dry_run: Compute and report drift without writing
        force_rewrite: Rewrite every manifest, even without drift

    Returns:
        SyncReport with per-manifest results

    Raises:
        GraphLoadError: The graph references unknown packages or has a cycle
        ConfigParseError: A manifest is malformed (aborts the run)
        ManifestNotFoundError: The navigation manifest is missing
    """
    validate_graph(graph)

    report = SyncReport(dry_run=dry_run, force_rewrite=force_rewrite)
    synchronizer = ManifestSynchronizer(layout, dry_run=dry_run, force_rewrite=force_rewrite)

    for package in graph.packages.values():
        references = resolve_references(package, graph, layout)
        report.manifests.append(
            synchronizer.sync(package, layout.build_manifest(package), references)
        )

    # The root manifest lives in configs/, so its paths are relative to that directory.
    root_package = graph.root_package
    root_manifest = layout.build_manifest(root_package)
    references = resolve_references(root_package, graph, layout, override_location=root_manifest.parent)
    report.manifests.append(synchronizer.sync(root_package, root_manifest, references))

    mapper = NavigationMapper(layout, dry_run=dry_run, force_rewrite=force_rewrite)
    report.navigation = mapper.sync(graph)

    logger.debug(
        "sync_complete",
        manifests=len(report.manifests),
        drifted=len(report.drifted),
        written=len(report.written),
        navigation_changed=report.navigation.changed,
        dry_run=dry_run,
    )
    return report
