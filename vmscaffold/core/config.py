"""vmscaffold runtime configuration and settings."""
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from vmscaffold.core.errors import ConfigError

DEFAULT_TEMPLATES_DIR = Path(__file__).parent.parent / "templates"

# Default config search paths (ordered by proximity to current run)
CONFIG_PATHS = [
    "./vmscaffold.yml",
    str(Path.home() / ".config" / "vmscaffold" / "vmscaffold.yml"),
]


@dataclass
class ScaffoldConfig:
    """Runtime configuration for scaffolding.

    Attributes:
        box: Vagrant box used in generated Vagrantfiles (default: ubuntu/jammy64)
        memory: Memory in MB per machine (default: 1024)
        cpus: CPU count per machine (default: 1)
        templates_dir: Directory holding the template-* files
        git_command: Git executable (default: git)
        git_timeout: Timeout in seconds for git init (default: 30)
        init_git: Initialize a git repository in new projects (default: True)
        license_holder: Copyright holder for LICENSE (empty: project name)
    """

    box: str = "ubuntu/jammy64"
    memory: int = 1024
    cpus: int = 1
    templates_dir: Path = field(default_factory=lambda: DEFAULT_TEMPLATES_DIR)
    git_command: str = "git"
    git_timeout: int = 30
    init_git: bool = True
    license_holder: str = ""

    @classmethod
    def from_file(cls, path: Path) -> "ScaffoldConfig":
        """Create config from a YAML file.

        Raises:
            ConfigError: If the file can't be read, isn't a mapping, or has unknown keys
        """
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read config {path}: {e}", step="load config", path=path)

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"Config {path} must be a mapping", step="load config", path=path)

        return cls().merged(data, source=path)

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "ScaffoldConfig":
        """Load config from file (if any) and apply environment overrides.

        Environment variables:
            VMSCAFFOLD_CONFIG: Config file path
            VMSCAFFOLD_BOX: Vagrant box
            VMSCAFFOLD_MEMORY: Memory in MB
            VMSCAFFOLD_CPUS: CPU count
            VMSCAFFOLD_TEMPLATES_DIR: Templates directory
            VMSCAFFOLD_GIT: Git executable
        """
        path = find_config(config_path)
        config = cls.from_file(Path(path)) if path else cls()
        return config.with_env()

    def with_env(self) -> "ScaffoldConfig":
        """Return a copy with environment variable overrides applied."""
        env_map = {
            "box": "VMSCAFFOLD_BOX",
            "memory": "VMSCAFFOLD_MEMORY",
            "cpus": "VMSCAFFOLD_CPUS",
            "templates_dir": "VMSCAFFOLD_TEMPLATES_DIR",
            "git_command": "VMSCAFFOLD_GIT",
        }
        overrides = {key: os.environ[var] for key, var in env_map.items() if os.environ.get(var)}
        return self.merged(overrides, source="environment")

    def merged(self, values: Dict[str, Any], source: Any = None) -> "ScaffoldConfig":
        """Return a copy with values applied, coercing to field types."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigError(
                f"Unknown config keys in {source}: {', '.join(unknown)}",
                step="load config",
            )

        coerced: Dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            try:
                coerced[key] = _coerce(key, value)
            except (TypeError, ValueError):
                raise ConfigError(
                    f"Invalid value for '{key}' in {source}: {value!r}",
                    step="load config",
                )
        return replace(self, **coerced)


def _coerce(key: str, value: Any) -> Any:
    if key in ("memory", "cpus", "git_timeout"):
        number = int(value)
        if number < 1:
            raise ValueError(key)
        return number
    if key == "templates_dir":
        return Path(value).expanduser()
    if key == "init_git":
        if isinstance(value, bool):
            return value
        return str(value).lower() in ("1", "true", "yes", "on")
    return str(value)


def find_config(config_path: Optional[str] = None) -> Optional[str]:
    """Locate the active config file, or None when there isn't one."""
    if config_path:
        return config_path

    if env_config := os.environ.get("VMSCAFFOLD_CONFIG"):
        return env_config

    for path in CONFIG_PATHS:
        if Path(path).exists():
            return path

    return None
