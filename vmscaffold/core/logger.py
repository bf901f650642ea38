"""Logging for vmscaffold: rich console output plus an optional log file.

Module loggers are children of the "vmscaffold" logger and carry no level or
handlers of their own, so the level set on "vmscaffold" decides what reaches
the console handler and the file handler.
"""
import logging
import tempfile
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from vmscaffold.core.errors import ConfigError

console = Console()

PACKAGE_LOGGER = "vmscaffold"

LOG_DIR = Path.home() / ".cache" / "vmscaffold"
LOG_FILE = LOG_DIR / "vmscaffold.log"


def _package_logger() -> logging.Logger:
    logger = logging.getLogger(PACKAGE_LOGGER)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        # console stays at INFO even when the file gets DEBUG
        handler.setLevel(logging.INFO)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def _open_file_handler(path: Path) -> logging.FileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path)


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> Path:
    """Write vmscaffold log records to a file.

    Args:
        log_file: Path to log file (defaults to ~/.cache/vmscaffold/vmscaffold.log)
        verbose: Also record DEBUG messages

    Returns:
        Path of the log file in use

    Raises:
        ConfigError: If an explicitly requested log file can't be opened.
            The default location falls back to the system temp dir instead.
    """
    package_logger = _package_logger()
    level = logging.DEBUG if verbose else logging.INFO
    target_log_file = Path(log_file) if log_file else LOG_FILE

    try:
        file_handler = _open_file_handler(target_log_file)
    except OSError as e:
        if log_file:
            raise ConfigError(
                f"Cannot open log file {target_log_file}: {e}",
                step="set up logging",
                path=target_log_file,
            )
        target_log_file = Path(tempfile.gettempdir()) / "vmscaffold.log"
        file_handler = _open_file_handler(target_log_file)

    file_handler.setLevel(level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    package_logger.addHandler(file_handler)
    package_logger.setLevel(level)

    package_logger.info(f"vmscaffold logging initialized: {target_log_file}")
    return target_log_file


def reset_file_logging() -> None:
    """Close and detach every file handler added by setup_file_logging()."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if isinstance(handler, logging.FileHandler):
            package_logger.removeHandler(handler)
            handler.close()
    package_logger.setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Get a logger that reports through the shared vmscaffold handlers.

    Args:
        name: Logger name (typically __name__, i.e. below "vmscaffold")
    """
    _package_logger()
    return logging.getLogger(name)
