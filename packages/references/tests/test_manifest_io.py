"""Tests for manifest reading and writing."""

from pathlib import Path

import pytest
from structlog.testing import capture_logs

from refsync_common import ConfigParseError, ManifestNotFoundError, ManifestWriteError
from refsync_contracts import BuildManifest, NavigationManifest
from refsync_references import read_manifest, relative_posix, render_manifest, write_manifest

pytestmark = pytest.mark.unit


class TestReadManifest:
    def test_reads_valid_manifest(self, tmp_path):
        path = tmp_path / "compile.tsconfig.json"
        path.write_text('{"compilerOptions": {"composite": true}, "references": []}')

        manifest = read_manifest(path, BuildManifest, "@test/a")

        assert manifest.compiler_options.composite is True
        assert manifest.references == []

    def test_invalid_json_names_package(self, tmp_path):
        path = tmp_path / "compile.tsconfig.json"
        path.write_text('{"compilerOptions": {,}')

        with capture_logs() as logs:
            with pytest.raises(ConfigParseError) as exc_info:
                read_manifest(path, BuildManifest, "@test/a")

        assert exc_info.value.package_name == "@test/a"
        assert exc_info.value.path == path
        assert logs[0]["event"] == "manifest_parse_error"
        assert logs[0]["package"] == "@test/a"
        assert logs[0]["path"] == str(path)

    def test_comments_are_not_accepted(self, tmp_path):
        path = tmp_path / "tsconfig.json"
        path.write_text('{\n  // editor setup\n  "compilerOptions": {}\n}')

        with pytest.raises(ConfigParseError):
            read_manifest(path, NavigationManifest)

    def test_non_object_rejected(self, tmp_path):
        path = tmp_path / "tsconfig.json"
        path.write_text("[]")

        with pytest.raises(ConfigParseError, match="expected a JSON object"):
            read_manifest(path, NavigationManifest)

    def test_schema_error(self, tmp_path):
        path = tmp_path / "compile.tsconfig.json"
        path.write_text('{"references": "../core"}')

        with pytest.raises(ConfigParseError, match="schema error"):
            read_manifest(path, BuildManifest, "@test/a")

    def test_missing_file(self, tmp_path):
        with pytest.raises(ManifestNotFoundError):
            read_manifest(tmp_path / "tsconfig.json", NavigationManifest)


class TestRenderManifest:
    def test_two_space_indent_and_trailing_newline(self):
        manifest = BuildManifest.model_validate(
            {"compilerOptions": {"composite": True}, "references": [{"path": "../a"}]}
        )

        assert render_manifest(manifest) == (
            "{\n"
            '  "compilerOptions": {\n'
            '    "composite": true\n'
            "  },\n"
            '  "references": [\n'
            "    {\n"
            '      "path": "../a"\n'
            "    }\n"
            "  ]\n"
            "}\n"
        )

    def test_empty_list_inline(self):
        manifest = BuildManifest.model_validate({"references": []})

        assert render_manifest(manifest) == '{\n  "references": []\n}\n'

    def test_non_ascii_kept(self):
        manifest = BuildManifest.model_validate({"description": "café"})

        assert "café" in render_manifest(manifest)

    def test_write_overwrites_whole_file(self, tmp_path):
        path = tmp_path / "compile.tsconfig.json"
        path.write_text("x" * 500)
        manifest = BuildManifest.model_validate({"references": []})

        write_manifest(path, manifest)

        assert path.read_text() == render_manifest(manifest)

    def test_unwritable_path_raises_write_error(self, tmp_path):
        path = tmp_path / "missing-dir" / "compile.tsconfig.json"
        manifest = BuildManifest.model_validate({"references": []})

        with capture_logs() as logs:
            with pytest.raises(ManifestWriteError) as exc_info:
                write_manifest(path, manifest, "@test/a")

        assert exc_info.value.path == path
        assert exc_info.value.package_name == "@test/a"
        assert str(exc_info.value).startswith(f"@test/a: cannot write {path}")
        assert logs[0]["event"] == "manifest_write_error"


class TestRelativePosix:
    def test_sibling(self):
        assert relative_posix(Path("/repo/packages/a/x.json"), Path("/repo/packages/b")) == "../a/x.json"

    def test_glob_suffix(self):
        assert relative_posix(Path("/repo/packages/a/src/*"), Path("/repo")) == "packages/a/src/*"
