"""refsync CLI - Main entry point.

Provides the ``refsync`` command-line interface. It generates the
TypeScript project references between yarn workspaces (``tsc --build``
needs them explicitly) and the root ``tsconfig.json`` import aliases used
for cross-package navigation.

Usage:
    refsync                    # fix drifted manifests
    refsync --dry-run          # report drift only, exit 1 if anything is out of sync
    refsync --force-rewrite    # rewrite every manifest to normalize formatting

Exit codes:
    0 - Manifests are in sync
    1 - Drift was found (and fixed, unless --dry-run)
    2 - Fatal error (invalid settings, workspace query failed, dependency cycle,
        malformed or unwritable manifest)
"""

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from refsync_common import RefSyncError, configure_logging, get_logger
from refsync_common.config import get_settings
from refsync_references import SyncReport, sync_workspace
from refsync_workspace import (
    build_graph,
    load_workspaces_file,
    query_yarn_workspaces,
    resolve_root_package_name,
)

logger = get_logger(__name__)

EXIT_FATAL = 2

app = typer.Typer(
    name="refsync",
    help="Synchronize TypeScript project references with the yarn workspace graph.",
    add_completion=False,
)


def _print_summary(report: SyncReport) -> None:
    for result in report.drifted:
        action = "updated" if result.written else "out of sync"
        details = []
        if result.added:
            details.append(f"+{len(result.added)} reference(s)")
        if result.dropped:
            details.append(f"-{len(result.dropped)} invalid reference(s)")
        if result.duplicates_removed:
            details.append(f"-{result.duplicates_removed} duplicate(s)")
        if result.composite_fixed:
            details.append("composite enabled")
        suffix = f" ({', '.join(details)})" if details else ""
        typer.echo(f"  {result.package_name}: {action}{suffix}", err=True)

    navigation = report.navigation
    if navigation is not None and (navigation.changed or navigation.written):
        action = "updated" if navigation.written else "out of sync"
        typer.echo(
            f"  {navigation.manifest_path.name}: {action} "
            f"({len(navigation.updated_aliases)} alias(es) updated, "
            f"{len(navigation.removed_aliases)} removed)",
            err=True,
        )


@app.command()
def sync(
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Compute and report drift without writing any file",
    ),
    force_rewrite: bool = typer.Option(
        False,
        "--force-rewrite",
        help="Rewrite every manifest even when nothing drifted",
    ),
    root: Optional[Path] = typer.Option(
        None,
        "--root",
        help="Repository root (default: REFSYNC_WORKSPACE_ROOT or the current directory)",
        file_okay=False,
        exists=True,
    ),
    workspaces_file: Optional[Path] = typer.Option(
        None,
        "--workspaces-file",
        help="Read 'yarn workspaces info' JSON from a file instead of running yarn",
        dir_okay=False,
        exists=True,
    ),
):
    """Update compile.tsconfig.json references and tsconfig.json paths.

    Examples:

        refsync --dry-run

        refsync --root ../theia --workspaces-file workspaces.json
    """
    try:
        settings = get_settings()
    except ValidationError as e:
        typer.echo(f"Error: invalid REFSYNC_* settings: {e}", err=True)
        raise typer.Exit(EXIT_FATAL)

    configure_logging(settings.log_level, settings.log_format)

    try:
        repository_root = settings.resolve_root(root)
        if workspaces_file is not None:
            workspaces = load_workspaces_file(workspaces_file)
        else:
            workspaces = query_yarn_workspaces(repository_root, settings.yarn_command)

        graph = build_graph(
            repository_root,
            workspaces,
            resolve_root_package_name(repository_root, settings.root_package_name),
        )
        report = sync_workspace(
            graph,
            settings.layout(repository_root),
            dry_run=dry_run,
            force_rewrite=force_rewrite,
        )
    except RefSyncError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(EXIT_FATAL)

    _print_summary(report)

    if report.changed and dry_run:
        typer.echo(
            'TypeScript references seem to be out of sync, run "refsync" to fix.',
            err=True,
        )

    raise typer.Exit(report.exit_code)


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
