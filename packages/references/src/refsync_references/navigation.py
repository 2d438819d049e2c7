"""Map package imports to live sources in the root ``tsconfig.json``.

This is a shim for the TypeScript language server: compiled-output imports
such as ``@scope/core/lib/common`` resolve to ``packages/core/src/common`` so
cross-package navigation works without building first. Compilation itself
goes through the ``compile.tsconfig.json`` files.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from refsync_common import get_logger
from refsync_contracts import (
    BuildManifest,
    CompilerOptions,
    DependencyGraph,
    NavigationManifest,
    WorkspaceLayout,
    WorkspacePackage,
)
from refsync_workspace import get_dependency

from refsync_references.manifest_io import read_manifest, relative_posix, write_manifest

logger = get_logger(__name__)


@dataclass
class NavigationSyncResult:
    """Result of synchronizing the navigation manifest.

    Attributes:
        manifest_path: Navigation manifest file
        changed: A rewrite was needed (reported even in dry-run mode)
        written: The file was rewritten
        updated_aliases: Import patterns whose first target was added or replaced
        removed_aliases: Stale patterns of known packages that were removed
        aliases: Every computed pattern and its target, in package order
    """

    manifest_path: Path
    changed: bool = False
    written: bool = False
    updated_aliases: list[str] = field(default_factory=list)
    removed_aliases: list[str] = field(default_factory=list)
    aliases: dict[str, str] = field(default_factory=dict)


def ensure_paths(options: Optional[CompilerOptions]) -> tuple[CompilerOptions, bool]:
    """Return options holding a ``paths`` map and whether they had to change."""
    if options is None:
        return CompilerOptions(base_url=".", paths={}), True
    if options.paths is None:
        return options.model_copy(update={"paths": {}}), True
    return options, False


def update_alias(
    paths: dict[str, list[str]],
    pattern: str,
    target: str,
) -> tuple[dict[str, list[str]], bool]:
    """Make ``target`` the first entry for ``pattern``.

    Only the first slot is synchronized; any further targets listed for the
    pattern are left as they are.
    """
    current = paths.get(pattern)
    if current and current[0] == target:
        return paths, False
    updated = dict(paths)
    updated[pattern] = [target, *(current or [])[1:]]
    return updated, True


def find_stale_aliases(
    paths: dict[str, list[str]],
    package_name: str,
    pattern: str,
    generated_targets: set[str],
) -> list[str]:
    """Patterns of ``package_name`` left over from an earlier layout.

    A pattern is stale when it has the shape refsync generates
    (``<name>/*`` or ``<name>/<dir>/*``), differs from the current
    ``pattern`` and still points at one of ``generated_targets``.
    Hand-written aliases pointing elsewhere are never touched.
    """
    stale = []
    prefix = f"{package_name}/"
    for candidate, targets in paths.items():
        if candidate == pattern or not targets or targets[0] not in generated_targets:
            continue
        if not (candidate.startswith(prefix) and candidate.endswith("*")):
            continue
        # "<name>/*" or "<name>/<dir>/*" with a single literal segment
        rest = candidate[len(prefix):]
        if rest == "*":
            stale.append(candidate)
        elif rest.endswith("/*") and rest[:-2] and "/" not in rest[:-2] and "*" not in rest[:-2]:
            stale.append(candidate)
    return stale


class NavigationMapper:
    """Rebuilds the import alias table of the root navigation manifest.

    Example:
        >>> mapper = NavigationMapper(layout)
        >>> result = mapper.sync(graph)
        >>> result.aliases["@scope/core/lib/*"]
        'packages/core/src/*'
    """

    def __init__(
        self,
        layout: WorkspaceLayout,
        dry_run: bool = False,
        force_rewrite: bool = False,
    ) -> None:
        self.layout = layout
        self.dry_run = dry_run
        self.force_rewrite = force_rewrite

    def compute_alias(self, package: WorkspacePackage, base: Path) -> tuple[str, str]:
        """Import pattern and filesystem target for ``package``.

        Buildable packages (build manifest and source directory) map their
        output directory to sources; others fall back to the package root.

        Raises:
            ConfigParseError: The package's build manifest is malformed
        """
        manifest_path = package.location / self.layout.build_manifest_name
        source_dir = package.location / self.layout.source_dir_name

        if manifest_path.is_file() and source_dir.exists():
            manifest = read_manifest(manifest_path, BuildManifest, package.name)
            options = manifest.compiler_options
            out_dir = (options.out_dir if options else None) or self.layout.default_out_dir
            return (
                f"{package.name}/{out_dir}/*",
                relative_posix(source_dir / "*", base),
            )

        return f"{package.name}/*", relative_posix(package.location / "*", base)

    def sync(self, graph: DependencyGraph) -> NavigationSyncResult:
        """Synchronize the navigation manifest with every package of ``graph``.

        Raises:
            ManifestNotFoundError: The navigation manifest does not exist
            ConfigParseError: A manifest is malformed
        """
        root_package = graph.root_package
        manifest_path = self.layout.navigation_manifest
        result = NavigationSyncResult(manifest_path=manifest_path)

        manifest = read_manifest(manifest_path, NavigationManifest, root_package.name)
        options, result.changed = ensure_paths(manifest.compiler_options)

        paths = dict(options.paths or {})
        for name in root_package.dependencies:
            dependency = get_dependency(graph, root_package, name)
            pattern, target = self.compute_alias(dependency, root_package.location)
            result.aliases[pattern] = target
            paths, updated = update_alias(paths, pattern, target)
            if updated:
                result.updated_aliases.append(pattern)

            generated_targets = {
                relative_posix(dependency.location / self.layout.source_dir_name / "*", root_package.location),
                relative_posix(dependency.location / "*", root_package.location),
            }
            for stale in find_stale_aliases(paths, dependency.name, pattern, generated_targets):
                paths = {key: value for key, value in paths.items() if key != stale}
                result.removed_aliases.append(stale)

        result.changed = (
            result.changed or bool(result.updated_aliases) or bool(result.removed_aliases)
        )

        if (result.changed or self.force_rewrite) and not self.dry_run:
            options = options.model_copy(update={"paths": paths})
            write_manifest(
                manifest_path,
                manifest.model_copy(update={"compiler_options": options}),
                root_package.name,
            )
            result.written = True
            logger.info(
                "navigation_manifest_updated",
                package=root_package.name,
                path=str(manifest_path),
                updated_aliases=len(result.updated_aliases),
                removed_aliases=len(result.removed_aliases),
            )

        return result
