"""Custom error types for refsync.

All errors follow the "fail fast" principle with explicit messages.
"""

from pathlib import Path
from typing import Optional, Sequence


class RefSyncError(Exception):
    """Base exception for all refsync errors."""

    pass


class GraphLoadError(RefSyncError):
    """Error loading the workspace dependency graph.

    Raised before any manifest is read or written.
    """

    pass


class UnknownDependencyError(GraphLoadError):
    """A package depends on a name that is not a known workspace."""

    def __init__(self, package_name: str, dependency_name: str) -> None:
        self.package_name = package_name
        self.dependency_name = dependency_name
        super().__init__(f"{package_name} depends on unknown workspace '{dependency_name}'")


class DependencyCycleError(GraphLoadError):
    """The workspace dependency graph contains a cycle.

    Attributes:
        cycle: Package names along the cycle, first name repeated at the end
    """

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = list(cycle)
        super().__init__("Dependency cycle detected: " + " -> ".join(self.cycle))


class ManifestError(RefSyncError):
    """Error reading or writing a tsconfig manifest."""

    def __init__(self, message: str, path: Path, package_name: Optional[str] = None) -> None:
        self.path = path
        self.package_name = package_name
        super().__init__(message)


class ConfigParseError(ManifestError):
    """Manifest content is not valid JSON or does not match the tsconfig schema.

    This indicates a broken repository, not recoverable drift. The whole run
    is aborted.
    """

    def __init__(self, path: Path, package_name: Optional[str] = None, detail: str = "") -> None:
        owner = f"{package_name}: " if package_name else ""
        message = f"{owner}cannot parse {path}"
        if detail:
            message += f" ({detail})"
        super().__init__(message, path, package_name)


class ManifestNotFoundError(ManifestError):
    """A manifest that must exist is missing."""

    def __init__(self, path: Path, package_name: Optional[str] = None) -> None:
        owner = f"{package_name}: " if package_name else ""
        super().__init__(f"{owner}manifest not found: {path}", path, package_name)


class ManifestWriteError(ManifestError):
    """A manifest could not be written (permissions, read-only filesystem)."""

    def __init__(self, path: Path, package_name: Optional[str] = None, detail: str = "") -> None:
        owner = f"{package_name}: " if package_name else ""
        message = f"{owner}cannot write {path}"
        if detail:
            message += f" ({detail})"
        super().__init__(message, path, package_name)
