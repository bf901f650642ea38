#!/usr/bin/env python3
"""vmscaffold CLI - Scaffold multi-machine Vagrant provisioning projects."""
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from vmscaffold import __version__
from vmscaffold.cli_support import (
    handle_cli_error,
    is_mock,
    print_info,
    print_success,
    setup_file_logging,
)
from vmscaffold.core.config import ScaffoldConfig
from vmscaffold.core.errors import ErrorKind, ScaffoldError
from vmscaffold.core.logger import get_logger
from vmscaffold.scaffold import ScaffoldManager
from vmscaffold.services.git_manager import GitManager

PROG_NAME = "vmscaffold"

# Exit codes per error kind; 0 on success.
EXIT_CODES = {
    ErrorKind.PROJECT_EXISTS: 81,
    ErrorKind.NO_MACHINES: 82,
    ErrorKind.DIRECTORY_CREATE_FAILED: 83,
    ErrorKind.GIT_INIT_FAILED: 84,
    ErrorKind.TEMPLATE_MISSING: 85,
    ErrorKind.FILE_WRITE_FAILED: 86,
    ErrorKind.INVALID_NAME: 87,
    ErrorKind.CONFIG_INVALID: 88,
    ErrorKind.TEMPLATE_INVALID: 89,
}

USAGE = f"""Usage: {PROG_NAME} <project-name> <machine-name> [<machine-name> ...]

Creates <project-name>/ with a git repository, a shared 'common'
provisioning script and one Vagrant machine per <machine-name>.

Example:
  {PROG_NAME} myproject web db
"""

app = typer.Typer(
    name=PROG_NAME,
    help="Scaffold multi-machine Vagrant provisioning projects.",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


def _version_callback(value: bool):
    if value:
        console.print(f"{PROG_NAME} v{__version__}")
        raise typer.Exit()


def _build_config(
    config_path: Optional[str],
    box: Optional[str],
    memory: Optional[int],
    cpus: Optional[int],
    git: Optional[bool],
) -> ScaffoldConfig:
    config = ScaffoldConfig.load(config_path)
    overrides = {"box": box, "memory": memory, "cpus": cpus, "init_git": git}
    return config.merged(overrides, source="command line")


@app.command()
def scaffold(
    project: Optional[str] = typer.Argument(None, help="Project name (directory to create)"),
    machines: Optional[List[str]] = typer.Argument(None, help="Machine names, in boot order"),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o", help="Parent directory (default: current directory)"
    ),
    box: Optional[str] = typer.Option(None, "--box", help="Vagrant box for every machine"),
    memory: Optional[int] = typer.Option(None, "--memory", help="Memory per machine in MB"),
    cpus: Optional[int] = typer.Option(None, "--cpus", help="CPUs per machine"),
    git: Optional[bool] = typer.Option(
        None, "--git/--no-git", help="Initialize a git repository (default: yes)"
    ),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Config file path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also log to this file"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version"
    ),
):
    """Create PROJECT with a 'common' machine plus one Vagrant machine per MACHINES.

    Exit codes: 81 project exists, 82 no machines, 83 directory creation
    failed, 84 git init failed, 85 template missing, 86 file write failed,
    87 invalid name, 88 invalid config or log file, 89 broken template.
    """
    if project is None:
        console.print(USAGE, markup=False, highlight=False)
        return

    try:
        if log_file or verbose:
            setup_file_logging(log_file=log_file, verbose=verbose)
        settings = _build_config(config, box, memory, cpus, git)
        git_manager = GitManager(
            git_command=settings.git_command, timeout=settings.git_timeout, mock=is_mock()
        )
        manager = ScaffoldManager(config=settings, output_dir=output_dir, git_manager=git_manager)
        project_path = manager.scaffold_project(project, list(machines or []))
    except ScaffoldError as e:
        handle_cli_error(e, console, verbose=verbose, exit_code=EXIT_CODES[e.kind])

    print_success(console, f"Project {project} created at {project_path}")
    print_info(console, "Suggested aliases:")
    for alias in manager.alias_suggestions(project, project_path):
        console.print(f"  {alias}", markup=False, highlight=False, soft_wrap=True)


def main():
    app(prog_name=PROG_NAME)


if __name__ == "__main__":
    main()
