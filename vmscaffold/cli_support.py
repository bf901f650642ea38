"""Shared utilities for the vmscaffold CLI: colored output and error exits."""
from __future__ import annotations

import os
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape


def is_mock() -> bool:
    """Return True when CLI runs in mock mode."""
    return os.environ.get("VMSCAFFOLD_MOCK") == "1"


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> None:
    """Set up file logging for CLI commands.

    Args:
        log_file: Path to log file (optional)
        verbose: Enable verbose logging
    """
    from vmscaffold.core.logger import setup_file_logging as _setup_file_logging
    _setup_file_logging(log_file=log_file, verbose=verbose)


def print_success(console: Console, message: str, prefix: str = "✓") -> None:
    """Print success message with consistent formatting.

    Args:
        console: Rich console for output
        message: Success message
        prefix: Prefix symbol (default: ✓)
    """
    console.print(f"[green]{prefix}[/green] {escape(message)}")


def print_error(console: Console, message: str, prefix: str = "✗") -> None:
    """Print error message with consistent formatting.

    Args:
        console: Rich console for output
        message: Error message
        prefix: Prefix symbol (default: ✗)
    """
    console.print(f"[red]{prefix}[/red] {escape(message)}")


def print_warning(console: Console, message: str, prefix: str = "⚠") -> None:
    """Print warning message with consistent formatting."""
    console.print(f"[yellow]{prefix}[/yellow] {escape(message)}")


def print_info(console: Console, message: str, prefix: str = "ℹ") -> None:
    """Print info message with consistent formatting."""
    console.print(f"[cyan]{prefix}[/cyan] {escape(message)}")


def fail(console: Console, message: str, exit_code: int = 1) -> NoReturn:
    """Print an error line and terminate with exit_code.

    Args:
        console: Rich console for output
        message: Error message
        exit_code: Process exit code
    """
    print_error(console, message)
    raise typer.Exit(exit_code)


def handle_cli_error(
    e: Exception,
    console: Console,
    verbose: bool = False,
    exit_code: int = 1
) -> NoReturn:
    """Handle CLI errors with consistent formatting.

    Args:
        e: Exception to handle
        console: Rich console for output
        verbose: Show exception traceback if True
        exit_code: Exit code to use
    """
    if verbose:
        console.print_exception()
    fail(console, str(e), exit_code)
