"""Shared pytest fixtures for refsync tests."""

import json
from pathlib import Path
from typing import Any, Optional, Sequence

import pytest
from typer.testing import CliRunner

from refsync_contracts import DependencyGraph, WorkspaceLayout
from refsync_workspace import build_graph

ROOT_PACKAGE_NAME = "@test/monorepo"

DEFAULT_OPTIONS = {"composite": True, "rootDir": "src", "outDir": "lib"}


class Workspace:
    """Builds a yarn-style monorepo under a temporary directory.

    Packages live in ``packages/<short name>``; the graph is produced by the
    same ``build_graph`` the CLI uses, from ``yarn workspaces info`` shaped data.
    """

    def __init__(self, root: Path) -> None:
        self.root = root
        self.info: dict[str, dict[str, Any]] = {}
        self.layout = WorkspaceLayout(root=root)

    def add_package(
        self,
        name: str,
        dependencies: Sequence[str] = (),
        *,
        manifest: Optional[dict] = None,
        with_manifest: bool = True,
        with_source: bool = True,
    ) -> Path:
        """Create a package directory, optionally with sources and a build manifest."""
        location = Path("packages") / name.split("/")[-1]
        directory = self.root / location
        directory.mkdir(parents=True, exist_ok=True)
        if with_source:
            (directory / "src").mkdir(exist_ok=True)
        if with_manifest:
            content = manifest if manifest is not None else {
                "compilerOptions": dict(DEFAULT_OPTIONS),
                "references": [],
            }
            self.write_json(directory / self.layout.build_manifest_name, content)
        self.info[name] = {
            "location": location.as_posix(),
            "workspaceDependencies": list(dependencies),
            "mismatchedWorkspaceDependencies": [],
        }
        return directory

    def add_root_manifests(
        self,
        root_manifest: Optional[dict] = None,
        navigation: Optional[dict] = None,
    ) -> None:
        """Create the whole-repository build manifest and the navigation tsconfig."""
        self.write_json(
            self.layout.root_manifest,
            root_manifest if root_manifest is not None else {
                "compilerOptions": dict(DEFAULT_OPTIONS),
                "references": [],
            },
        )
        self.write_json(
            self.layout.navigation_manifest,
            navigation if navigation is not None else {
                "compilerOptions": {"baseUrl": ".", "paths": {}},
            },
        )

    def graph(self) -> DependencyGraph:
        return build_graph(self.root, self.info, ROOT_PACKAGE_NAME)

    def manifest_path(self, name: str) -> Path:
        return self.root / self.info[name]["location"] / self.layout.build_manifest_name

    def read_json(self, path: Path) -> Any:
        return json.loads(path.read_text(encoding="utf-8"))

    def write_json(self, path: Path, data: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")

    def references(self, name: str) -> list[str]:
        data = self.read_json(self.manifest_path(name))
        return [reference["path"] for reference in data.get("references", [])]

    def snapshot(self) -> dict[str, str]:
        """Content of every JSON file in the workspace, keyed by relative path."""
        return {
            path.relative_to(self.root).as_posix(): path.read_text(encoding="utf-8")
            for path in sorted(self.root.rglob("*.json"))
        }

    def write_workspaces_file(self) -> Path:
        path = self.root / "workspaces.json"
        path.write_text(json.dumps(self.info, indent=2), encoding="utf-8")
        return path


@pytest.fixture
def workspace(tmp_path):
    """Empty monorepo rooted at ``tmp_path``."""
    return Workspace(tmp_path.resolve())


@pytest.fixture
def abc_workspace(workspace):
    """Packages A (no deps), B -> A, C -> A, B, all with empty reference lists."""
    workspace.add_package("@test/a")
    workspace.add_package("@test/b", ["@test/a"])
    workspace.add_package("@test/c", ["@test/a", "@test/b"])
    workspace.add_root_manifests()
    return workspace


@pytest.fixture
def cli_runner():
    """Typer CLI runner."""
    return CliRunner()
