"""Configuration management for refsync.

Settings are read from ``REFSYNC_*`` environment variables or a ``.env``
file in the working directory. Defaults match the conventional monorepo
layout: one ``compile.tsconfig.json`` per workspace, the whole-repository
build manifest under ``configs/`` and the editor ``tsconfig.json`` at the root.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from refsync_contracts import WorkspaceLayout

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
VALID_LOG_FORMATS = {"console", "json"}


class Settings(BaseSettings):
    """Runtime settings for a synchronization run."""

    model_config = SettingsConfigDict(
        env_prefix="REFSYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Workspace layout
    workspace_root: Optional[str] = None
    build_manifest_name: str = "compile.tsconfig.json"
    root_manifest_path: str = "configs/root-compilation.tsconfig.json"
    navigation_manifest_name: str = "tsconfig.json"
    directory_manifest_name: str = "tsconfig.json"
    source_dir_name: str = "src"
    default_out_dir: str = "lib"

    # Workspace discovery
    yarn_command: str = "yarn"
    root_package_name: Optional[str] = None

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(VALID_LOG_LEVELS)}, got {v!r}")
        return upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        lower = v.lower()
        if lower not in VALID_LOG_FORMATS:
            raise ValueError(f"log_format must be one of {sorted(VALID_LOG_FORMATS)}, got {v!r}")
        return lower

    def resolve_root(self, override: Optional[Path] = None) -> Path:
        """Return the absolute repository root for this run.

        Precedence: explicit override, then ``workspace_root``, then the
        current directory.
        """
        if override is not None:
            return override.resolve()
        if self.workspace_root:
            return Path(self.workspace_root).expanduser().resolve()
        return Path.cwd().resolve()

    def layout(self, root: Path) -> WorkspaceLayout:
        """Build the file layout of a run rooted at ``root``."""
        return WorkspaceLayout(
            root=root,
            build_manifest_name=self.build_manifest_name,
            root_manifest_path=self.root_manifest_path,
            navigation_manifest_name=self.navigation_manifest_name,
            directory_manifest_name=self.directory_manifest_name,
            source_dir_name=self.source_dir_name,
            default_out_dir=self.default_out_dir,
        )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide Settings instance."""
    return Settings()
