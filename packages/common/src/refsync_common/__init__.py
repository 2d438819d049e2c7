"""refsync common - errors, settings and logging shared by all packages."""

from refsync_common.errors import (
    ConfigParseError,
    DependencyCycleError,
    GraphLoadError,
    ManifestError,
    ManifestNotFoundError,
    ManifestWriteError,
    RefSyncError,
    UnknownDependencyError,
)
from refsync_common.logging_config import configure_logging, get_logger

__all__ = [
    "ConfigParseError",
    "DependencyCycleError",
    "GraphLoadError",
    "ManifestError",
    "ManifestNotFoundError",
    "ManifestWriteError",
    "RefSyncError",
    "UnknownDependencyError",
    "configure_logging",
    "get_logger",
]
