"""Read and write tsconfig manifests.

Manifests are strict JSON. They are always rewritten whole: 2-space indent,
non-ASCII characters kept as-is, trailing newline.
"""

import json
import os
from pathlib import Path
from typing import Optional, TypeVar

from pydantic import ValidationError

from refsync_common import ConfigParseError, ManifestNotFoundError, ManifestWriteError, get_logger
from refsync_contracts import TsConfig, to_document

logger = get_logger(__name__)

T = TypeVar("T", bound=TsConfig)


def read_manifest(path: Path, model: type[T], package_name: Optional[str] = None) -> T:
    """Load a manifest into ``model``.

    Args:
        path: Manifest file
        model: TsConfig subclass to validate into
        package_name: Owning package, used in diagnostics

    Raises:
        ManifestNotFoundError: The file does not exist
        ConfigParseError: The file is unreadable, not JSON, or not a tsconfig object
    """
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ManifestNotFoundError(path, package_name) from None
    except OSError as e:
        _log_parse_error(path, package_name, str(e))
        raise ConfigParseError(path, package_name, str(e)) from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        _log_parse_error(path, package_name, str(e))
        raise ConfigParseError(path, package_name, str(e)) from e

    if not isinstance(data, dict):
        detail = f"expected a JSON object, got {type(data).__name__}"
        _log_parse_error(path, package_name, detail)
        raise ConfigParseError(path, package_name, detail)

    try:
        return model.model_validate(data)
    except ValidationError as e:
        detail = f"{e.error_count()} schema error(s): {e.errors()[0]['msg']}"
        _log_parse_error(path, package_name, detail)
        raise ConfigParseError(path, package_name, detail) from e


def _log_parse_error(path: Path, package_name: Optional[str], error: str) -> None:
    logger.error("manifest_parse_error", package=package_name, path=str(path), error=error)


def render_manifest(manifest: TsConfig) -> str:
    """Serialize a manifest exactly as it is written to disk."""
    return json.dumps(to_document(manifest), indent=2, ensure_ascii=False) + "\n"


def write_manifest(path: Path, manifest: TsConfig, package_name: Optional[str] = None) -> None:
    """Overwrite ``path`` with the full serialized manifest.

    Raises:
        ManifestWriteError: The file cannot be written
    """
    try:
        path.write_text(render_manifest(manifest), encoding="utf-8")
    except OSError as e:
        logger.error("manifest_write_error", package=package_name, path=str(path), error=str(e))
        raise ManifestWriteError(path, package_name, str(e)) from e


def relative_posix(target: Path, start: Path) -> str:
    """Relative path from ``start`` to ``target`` with forward slashes."""
    return Path(os.path.relpath(target, start)).as_posix()
