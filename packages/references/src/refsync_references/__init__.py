"""refsync references - TypeScript project reference synchronization.

This package provides:
- resolve_references (dependency graph -> relative build manifest paths)
- ManifestSynchronizer (per-package compile.tsconfig.json maintenance)
- NavigationMapper (root tsconfig.json import aliases for editors)
- sync_workspace (full pass with drift report and exit code)
"""

from refsync_references.compilation import (
    DroppedReference,
    ManifestSyncResult,
    ManifestSynchronizer,
    SyncStatus,
    check_reference_target,
    ensure_composite,
    merge_references,
    prune_references,
)
from refsync_references.manifest_io import (
    read_manifest,
    relative_posix,
    render_manifest,
    write_manifest,
)
from refsync_references.navigation import (
    NavigationMapper,
    NavigationSyncResult,
    ensure_paths,
    find_stale_aliases,
    update_alias,
)
from refsync_references.orchestrator import (
    EXIT_DRIFT,
    EXIT_IN_SYNC,
    SyncReport,
    sync_workspace,
)
from refsync_references.resolver import resolve_references

__all__ = [
    "DroppedReference",
    "EXIT_DRIFT",
    "EXIT_IN_SYNC",
    "ManifestSyncResult",
    "ManifestSynchronizer",
    "NavigationMapper",
    "NavigationSyncResult",
    "SyncReport",
    "SyncStatus",
    "check_reference_target",
    "ensure_composite",
    "ensure_paths",
    "find_stale_aliases",
    "merge_references",
    "prune_references",
    "read_manifest",
    "relative_posix",
    "render_manifest",
    "resolve_references",
    "sync_workspace",
    "update_alias",
    "write_manifest",
]
