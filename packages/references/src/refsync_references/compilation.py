"""Synchronize per-package build manifests with the dependency graph.

A build manifest (``compile.tsconfig.json``) lets ``tsc --build`` rebuild only
out-of-date dependencies, but only if its ``references`` list names them.
``tsc`` cannot infer workspaces on its own, so the list is derived from the
yarn workspace graph here.

Drift is computed by small pure helpers that return the new value together
with what changed; ``ManifestSynchronizer.sync`` folds them and decides
whether the file must be rewritten.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence

from refsync_common import get_logger
from refsync_contracts import (
    BuildManifest,
    CompilerOptions,
    ProjectReference,
    WorkspaceLayout,
    WorkspacePackage,
)

from refsync_references.manifest_io import read_manifest, write_manifest

logger = get_logger(__name__)

DEFAULT_ROOT_DIR = "src"
DEFAULT_OUT_DIR = "lib"


class SyncStatus(str, Enum):
    """Outcome of synchronizing one manifest."""

    SKIPPED = "skipped"  # no manifest, package opted out
    IN_SYNC = "in_sync"
    DRIFTED = "drifted"


@dataclass
class DroppedReference:
    """An existing reference removed because it has no valid target.

    Attributes:
        package_name: Package owning the manifest
        path: Reference as written in the manifest (None if it had no path)
        target: Resolved filesystem target (None if it had no path)
        reason: Why the target was rejected
    """

    package_name: str
    path: Optional[str]
    target: Optional[Path]
    reason: str


@dataclass
class ManifestSyncResult:
    """Result of synchronizing one build manifest.

    Attributes:
        package_name: Package owning the manifest
        manifest_path: Manifest file
        status: SKIPPED, IN_SYNC or DRIFTED
        changed: A rewrite was needed (reported even in dry-run mode)
        written: The file was rewritten
        composite_fixed: ``compilerOptions.composite`` had to be set
        added: References added from the dependency graph
        dropped: Invalid references removed
        duplicates_removed: Repeated reference paths collapsed
        references: Reference paths after synchronization
    """

    package_name: str
    manifest_path: Path
    status: SyncStatus = SyncStatus.SKIPPED
    changed: bool = False
    written: bool = False
    composite_fixed: bool = False
    added: list[str] = field(default_factory=list)
    dropped: list[DroppedReference] = field(default_factory=list)
    duplicates_removed: int = 0
    references: list[str] = field(default_factory=list)


def ensure_composite(
    options: Optional[CompilerOptions],
    root_dir: str = DEFAULT_ROOT_DIR,
    out_dir: str = DEFAULT_OUT_DIR,
) -> tuple[CompilerOptions, bool]:
    """Return options with ``composite: true`` and whether they had to change.

    A missing block is synthesized as ``{composite, rootDir, outDir}``.
    Every other existing option is kept.
    """
    if options is None:
        return CompilerOptions(composite=True, root_dir=root_dir, out_dir=out_dir), True
    if options.composite is True:
        return options, False
    return options.model_copy(update={"composite": True}), True


def check_reference_target(target: Path, directory_manifest_name: str) -> Optional[str]:
    """Return why ``target`` is not a valid reference, or None if it is.

    Valid targets are existing files, or directories holding
    ``directory_manifest_name`` (what ``tsc`` resolves a directory reference to).
    """
    try:
        if target.is_file():
            return None
        if target.is_dir():
            if (target / directory_manifest_name).is_file():
                return None
            return f"directory has no {directory_manifest_name}"
        return "no such file or directory"
    except OSError as e:
        return f"cannot inspect target: {e}"


def prune_references(
    references: Sequence[ProjectReference],
    manifest_dir: Path,
    package_name: str,
    directory_manifest_name: str = "tsconfig.json",
) -> tuple[list[ProjectReference], list[DroppedReference], int]:
    """Drop invalid and duplicate references.

    Entries without a ``path`` are dropped as invalid.

    Returns:
        Tuple of (kept references in original order, dropped references,
        number of duplicates collapsed)
    """
    kept: list[ProjectReference] = []
    seen: set[str] = set()
    dropped: list[DroppedReference] = []
    duplicates = 0

    for reference in references:
        if reference.path is None:
            dropped.append(
                DroppedReference(
                    package_name=package_name,
                    path=None,
                    target=None,
                    reason="reference has no path",
                )
            )
            continue
        if reference.path in seen:
            duplicates += 1
            continue
        target = manifest_dir / reference.path
        reason = check_reference_target(target, directory_manifest_name)
        if reason is not None:
            dropped.append(
                DroppedReference(
                    package_name=package_name,
                    path=reference.path,
                    target=target,
                    reason=reason,
                )
            )
            continue
        seen.add(reference.path)
        kept.append(reference)

    return kept, dropped, duplicates


def merge_references(
    existing: Sequence[ProjectReference],
    required: Sequence[str],
) -> tuple[list[ProjectReference], list[str]]:
    """Append every required path missing from ``existing``.

    Returns:
        Tuple of (merged references, paths that were added)
    """
    merged = list(existing)
    present = {reference.path for reference in existing}
    added = []
    for path in required:
        if path not in present:
            merged.append(ProjectReference(path=path))
            present.add(path)
            added.append(path)
    return merged, added


class ManifestSynchronizer:
    """Keeps one package's build manifest in line with its computed references.

    Example:
        >>> synchronizer = ManifestSynchronizer(layout, dry_run=True)
        >>> result = synchronizer.sync(package, manifest_path, ["../core/compile.tsconfig.json"])
        >>> result.changed
        True
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

    def sync(
        self,
        package: WorkspacePackage,
        manifest_path: Path,
        references: Sequence[str],
    ) -> ManifestSyncResult:
        """Synchronize ``manifest_path`` with ``references``.

        A missing manifest means the package opted out and is skipped.

        Raises:
            ConfigParseError: The manifest is not valid JSON / tsconfig
            ManifestWriteError: The rewritten manifest cannot be saved
        """
        result = ManifestSyncResult(package_name=package.name, manifest_path=manifest_path)
        if not manifest_path.is_file():
            logger.debug("manifest_absent", package=package.name, path=str(manifest_path))
            return result

        manifest = read_manifest(manifest_path, BuildManifest, package.name)

        options, result.composite_fixed = ensure_composite(
            manifest.compiler_options,
            root_dir=self.layout.source_dir_name,
            out_dir=self.layout.default_out_dir,
        )

        kept, result.dropped, result.duplicates_removed = prune_references(
            manifest.references or [],
            manifest_path.parent,
            package.name,
            self.layout.directory_manifest_name,
        )
        for dropped in result.dropped:
            logger.warning(
                "invalid_reference_dropped",
                package=package.name,
                reference=dropped.path,
                target=str(dropped.target) if dropped.target else None,
                reason=dropped.reason,
            )

        merged, result.added = merge_references(kept, references)
        result.references = [reference.path for reference in merged]

        result.changed = (
            result.composite_fixed
            or bool(result.dropped)
            or result.duplicates_removed > 0
            or bool(result.added)
        )
        result.status = SyncStatus.DRIFTED if result.changed else SyncStatus.IN_SYNC

        if (result.changed or self.force_rewrite) and not self.dry_run:
            updated = manifest.model_copy(update={"compiler_options": options, "references": merged})
            write_manifest(manifest_path, updated, package.name)
            result.written = True
            logger.info(
                "manifest_rewritten",
                package=package.name,
                path=str(manifest_path),
                added=len(result.added),
                dropped=len(result.dropped),
                forced=not result.changed,
            )

        return result
