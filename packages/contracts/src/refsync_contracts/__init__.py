"""refsync contracts - pure Pydantic schemas.

Dependencies: pydantic only (no logging, no filesystem access).
"""

from refsync_contracts.models import (
    # Workspaces
    DependencyGraph,
    PackageKind,
    WorkspaceLayout,
    WorkspacePackage,
    YarnWorkspaceInfo,
    # Manifests
    BuildManifest,
    CompilerOptions,
    NavigationManifest,
    ManifestModel,
    ProjectReference,
    TsConfig,
    to_document,
)

__version__ = "1.0.0"

__all__ = [
    # Workspaces
    "DependencyGraph",
    "PackageKind",
    "WorkspaceLayout",
    "WorkspacePackage",
    "YarnWorkspaceInfo",
    # Manifests
    "BuildManifest",
    "CompilerOptions",
    "NavigationManifest",
    "ManifestModel",
    "ProjectReference",
    "TsConfig",
    "to_document",
]
