"""Pydantic schemas for workspaces, the dependency graph and tsconfig manifests.

Manifest models declare the keys refsync reads or writes and keep every
other key in the pydantic extra bag, so a rewrite never drops options it
does not understand. Only keys present in the source file (or explicitly
set) are serialized back.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator


# =============================================================================
# Workspaces
# =============================================================================


class PackageKind(str, Enum):
    """Whether a package is a real workspace or the whole-repository pseudo-package."""

    WORKSPACE = "workspace"
    REPOSITORY_ROOT = "repository_root"


class WorkspacePackage(BaseModel):
    """One unit of the monorepo with its directory and direct workspace dependencies."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Package name, e.g. @scope/core")
    location: Path = Field(description="Absolute package directory")
    dependencies: tuple[str, ...] = Field(default=(), description="Direct workspace dependencies")
    kind: PackageKind = Field(default=PackageKind.WORKSPACE)


class DependencyGraph(BaseModel):
    """All workspaces of a repository plus the synthetic whole-repository package."""

    model_config = ConfigDict(frozen=True)

    root: Path = Field(description="Absolute repository root")
    packages: dict[str, WorkspacePackage] = Field(default_factory=dict)
    root_package: WorkspacePackage


class YarnWorkspaceInfo(BaseModel):
    """One entry of ``yarn --silent workspaces info``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    location: str
    workspace_dependencies: list[str] = Field(default_factory=list, alias="workspaceDependencies")
    mismatched_workspace_dependencies: list[str] = Field(
        default_factory=list, alias="mismatchedWorkspaceDependencies"
    )


class WorkspaceLayout(BaseModel):
    """Where manifests live for a run."""

    model_config = ConfigDict(frozen=True)

    root: Path
    build_manifest_name: str = "compile.tsconfig.json"
    root_manifest_path: str = "configs/root-compilation.tsconfig.json"
    navigation_manifest_name: str = "tsconfig.json"
    directory_manifest_name: str = "tsconfig.json"
    source_dir_name: str = "src"
    default_out_dir: str = "lib"

    @property
    def root_manifest(self) -> Path:
        return self.root / self.root_manifest_path

    @property
    def navigation_manifest(self) -> Path:
        return self.root / self.navigation_manifest_name

    def build_manifest(self, package: WorkspacePackage) -> Path:
        """Build manifest of a workspace (the root manifest for the pseudo-package)."""
        if package.kind == PackageKind.REPOSITORY_ROOT:
            return self.root_manifest
        return package.location / self.build_manifest_name


# =============================================================================
# tsconfig manifests
# =============================================================================


class ManifestModel(BaseModel):
    """Base for tsconfig objects; remembers the key order of the parsed JSON."""

    _key_order: list[str] = PrivateAttr(default_factory=list)

    @model_validator(mode="wrap")
    @classmethod
    def remember_key_order(cls, data: Any, handler):
        model = handler(data)
        if isinstance(data, dict):
            model._key_order = list(data)
        return model


class ProjectReference(ManifestModel):
    """Entry of a tsconfig ``references`` list.

    ``path`` is optional here so an entry without one can be reported and
    dropped instead of rejecting the whole manifest.
    """

    model_config = ConfigDict(extra="allow")

    path: Optional[str] = None


class CompilerOptions(ManifestModel):
    """``compilerOptions`` block; unrecognized options pass through untouched."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    # Kept as written: anything but a JSON ``true`` is drift
    composite: Any = None
    root_dir: Optional[str] = Field(default=None, alias="rootDir")
    out_dir: Optional[str] = Field(default=None, alias="outDir")
    base_url: Optional[str] = Field(default=None, alias="baseUrl")
    paths: Optional[dict[str, list[str]]] = None


class TsConfig(ManifestModel):
    """A tsconfig file."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    extends: Optional[Union[str, list[str]]] = None
    compiler_options: Optional[CompilerOptions] = Field(default=None, alias="compilerOptions")
    files: Optional[list[str]] = None
    include: Optional[list[str]] = None
    exclude: Optional[list[str]] = None
    references: Optional[list[ProjectReference]] = None


class BuildManifest(TsConfig):
    """Per-package ``compile.tsconfig.json`` used by ``tsc --build``."""


class NavigationManifest(TsConfig):
    """Root ``tsconfig.json`` mapping package imports to sources for editors."""


def to_document(model: BaseModel) -> dict[str, Any]:
    """Convert a manifest model back to plain JSON data.

    Declared keys that were never set are omitted. Keys read from the
    source file keep their original position; keys added since then follow
    (declared fields first, then extras).
    """
    aliases = {name: field.alias or name for name, field in type(model).model_fields.items()}
    entries: dict[str, Any] = {}
    for name in aliases:
        if name in model.model_fields_set:
            entries[aliases[name]] = _plain(getattr(model, name))
    for key, value in (model.model_extra or {}).items():
        entries[key] = _plain(value)

    key_order = model._key_order if isinstance(model, ManifestModel) else []
    ordered_keys = [aliases.get(key, key) for key in key_order]
    document = {key: entries[key] for key in ordered_keys if key in entries}
    document.update(entries)
    return document


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return to_document(value)
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value
