"""Error kinds raised while scaffolding a project."""
from enum import Enum
from pathlib import Path
from typing import Optional


class ErrorKind(Enum):
    """Distinct failure kinds; the CLI maps each to an exit code."""

    PROJECT_EXISTS = "project-exists"
    NO_MACHINES = "no-machines"
    DIRECTORY_CREATE_FAILED = "directory-create-failed"
    GIT_INIT_FAILED = "git-init-failed"
    TEMPLATE_MISSING = "template-missing"
    TEMPLATE_INVALID = "template-invalid"
    FILE_WRITE_FAILED = "file-write-failed"
    INVALID_NAME = "invalid-name"
    CONFIG_INVALID = "config-invalid"


class ScaffoldError(Exception):
    """Base class for scaffolding failures.

    Attributes:
        kind: ErrorKind classifying the failure
        step: Short description of the step that failed
        path: Filesystem path involved, if any
    """

    kind = ErrorKind.FILE_WRITE_FAILED

    def __init__(
        self,
        message: str,
        step: Optional[str] = None,
        path: Optional[Path] = None,
        kind: Optional[ErrorKind] = None,
    ):
        super().__init__(message)
        self.step = step
        self.path = path
        if kind is not None:
            self.kind = kind


class ProjectExistsError(ScaffoldError):
    """Raised when the target project directory already exists."""

    kind = ErrorKind.PROJECT_EXISTS


class NoMachinesError(ScaffoldError):
    """Raised when a project is requested without any machines."""

    kind = ErrorKind.NO_MACHINES


class InvalidNameError(ScaffoldError):
    """Raised for project or machine names that cannot be used as a directory."""

    kind = ErrorKind.INVALID_NAME


class TemplateMissingError(ScaffoldError):
    """Raised when a template file is not found in the templates directory."""

    kind = ErrorKind.TEMPLATE_MISSING


class TemplateRenderError(ScaffoldError):
    """Raised when a template can't be read or rendered."""

    kind = ErrorKind.TEMPLATE_INVALID


class GitInitError(ScaffoldError):
    """Raised when repository initialization fails."""

    kind = ErrorKind.GIT_INIT_FAILED


class ScaffoldStepError(ScaffoldError):
    """Raised when creating a directory or writing a file fails."""


class ConfigError(ScaffoldError):
    """Raised for unreadable or malformed configuration files."""

    kind = ErrorKind.CONFIG_INVALID
