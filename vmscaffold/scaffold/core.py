"""Core scaffolding functionality for multi-machine Vagrant projects."""

import shlex
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

from vmscaffold.core.config import ScaffoldConfig
from vmscaffold.core.errors import (
    ErrorKind,
    InvalidNameError,
    NoMachinesError,
    ProjectExistsError,
    ScaffoldError,
    ScaffoldStepError,
)
from vmscaffold.core.logger import get_logger
from vmscaffold.scaffold.host_scripts import HostScriptGenerator
from vmscaffold.scaffold.templates import TemplateEngine
from vmscaffold.services.git_manager import GitManager

logger = get_logger(__name__)

COMMON_MACHINE = "common"


def validate_name(name: str, what: str = "project") -> str:
    """Reject names that can't be used as a single directory component."""
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise InvalidNameError(
            f"Invalid {what} name '{name}': must be a plain directory name",
            step=f"validate {what} name",
        )
    return name


def normalize_machines(machines: List[str]) -> List[str]:
    """Validate machine names, drop 'common' and collapse duplicates.

    Order of first occurrence is preserved.
    """
    result: List[str] = []
    for machine in machines:
        validate_name(machine, "machine")
        if machine == COMMON_MACHINE:
            continue
        if machine in result:
            logger.warning(f"Machine '{machine}' listed more than once - scaffolding it once")
            continue
        result.append(machine)
    return result


def machine_dir_name(project_name: str, machine_name: str) -> str:
    if machine_name == COMMON_MACHINE:
        return COMMON_MACHINE
    return f"{project_name}-{machine_name}"


class ScaffoldManager:
    """Manages Vagrant project scaffolding.

    All paths are built from output_dir; the process working directory
    is never changed.
    """

    def __init__(
        self,
        config: Optional[ScaffoldConfig] = None,
        output_dir: Optional[Path] = None,
        git_manager: Optional[GitManager] = None,
    ):
        self.config = config or ScaffoldConfig()
        self.output_dir = Path(output_dir) if output_dir else Path.cwd()
        self.templates = TemplateEngine(self.config.templates_dir)
        self.git = git_manager or GitManager(
            git_command=self.config.git_command, timeout=self.config.git_timeout
        )

    def project_path(self, name: str) -> Path:
        return self.output_dir / name

    def check_project_dir(self, name: str) -> Path:
        """Make sure the project directory doesn't exist yet.

        Returns:
            Path the project will be created at

        Raises:
            ProjectExistsError: If anything already exists at that path
        """
        path = self.project_path(name)
        if path.exists():
            raise ProjectExistsError(
                f"Project directory {path} already exists",
                step="check project directory",
                path=path,
            )
        return path

    def scaffold_project(self, name: str, machines: List[str]) -> Path:
        """Scaffold a complete project.

        Args:
            name: Project name, used as directory name (e.g., "webstack")
            machines: Machine names in order (e.g., ["web", "db"])

        Returns:
            Path to created project

        Raises:
            ScaffoldError: On any failure. Failures after the project directory
                was created leave the partial tree in place.
        """
        validate_name(name, "project")
        # an existing project wins over any machine name problem
        repo_path = self.check_project_dir(name)
        machine_names = normalize_machines(machines)

        if not machines:
            raise NoMachinesError(
                f"No machines specified for project `{name}`", step="parse arguments"
            )

        logger.info(f"Creating project directory {repo_path}")
        self._mkdir(repo_path, exist_ok=False)
        logger.info(f"Created project directory {repo_path}")

        try:
            self._populate_project(repo_path, name, machine_names)
        except ScaffoldError:
            logger.warning(f"Scaffolding stopped; partial project left at {repo_path}")
            raise

        return repo_path

    def _populate_project(self, repo_path: Path, name: str, machine_names: List[str]) -> None:
        if self.config.init_git:
            logger.info("Initializing git repository")
            self.git.init_repo(repo_path)
        else:
            logger.warning("Skipping git repository initialization")

        images = repo_path / "images"
        self._mkdir(images)
        self._write(images / ".gitkeep", "")
        self._mkdir(repo_path / "machines")

        self.scaffold_machine(repo_path, name, COMMON_MACHINE)
        for machine in machine_names:
            self.scaffold_machine(repo_path, name, machine)

        self._generate_top_level_files(repo_path, name, machine_names)

    def scaffold_machine(self, project_path: Path, project_name: str, machine_name: str) -> Path:
        """Scaffold one machine below project_path/machines.

        The common machine only gets the shared provisioning script; other
        machines get files/, provision/ and a Vagrantfile.

        Returns:
            Path to the machine directory
        """
        machine_path = project_path / "machines" / machine_dir_name(project_name, machine_name)
        provision_dir = machine_path / "provision"
        logger.info(f"Scaffolding machine {machine_name}")

        self._mkdir(provision_dir, parents=True)
        context = self.machine_context(project_name, machine_name)

        if machine_name == COMMON_MACHINE:
            self.templates.render_to(
                "common-provision-sh",
                provision_dir / "provision-common.sh",
                context,
                executable=True,
            )
            return machine_path

        files_dir = machine_path / "files"
        self._mkdir(files_dir)
        self._write(files_dir / ".gitkeep", "")
        self.templates.render_to(
            "machine-provision-sh",
            provision_dir / f"provision-{machine_name}.sh",
            context,
            executable=True,
        )
        self.templates.render_to("Vagrantfile", machine_path / "Vagrantfile", context)
        return machine_path

    def machine_context(self, project_name: str, machine_name: str) -> Dict[str, object]:
        """Template values for a machine's files."""
        return {
            "project_name": project_name,
            "machine_name": machine_name,
            "hostname": machine_dir_name(project_name, machine_name),
            "box": self.config.box,
            "memory": self.config.memory,
            "cpus": self.config.cpus,
            "common_provision": "../common/provision/provision-common.sh",
            "machine_provision": f"provision/provision-{machine_name}.sh",
        }

    def alias_suggestions(self, project_name: str, project_path: Path) -> List[str]:
        """Shell aliases for driving the project from anywhere."""
        root = project_path.resolve()
        return [
            f"alias {project_name}-cd={shlex.quote('cd ' + str(root))}",
            f"alias {project_name}-up={shlex.quote(str(root / 'start-vms.sh'))}",
            f"alias {project_name}-down={shlex.quote(str(root / 'stop-vms.sh'))}",
        ]

    def _generate_top_level_files(
        self, repo_path: Path, name: str, machine_names: List[str]
    ) -> None:
        """Generate .gitignore, LICENSE, README.md and host scripts."""
        machine_dirs = [f"machines/{machine_dir_name(name, m)}" for m in machine_names]

        self.templates.render_to("gitignore", repo_path / ".gitignore", {})
        self.templates.render_to(
            "LICENSE",
            repo_path / "LICENSE",
            {"year": date.today().year, "license_holder": self.config.license_holder or name},
        )
        self.templates.render_to(
            "README-md",
            repo_path / "README.md",
            {
                "project_name": name,
                "machines": [
                    {"hostname": machine_dir_name(name, m), "path": d}
                    for m, d in zip(machine_names, machine_dirs)
                ],
                "aliases": self.alias_suggestions(name, repo_path),
            },
        )

        for filename, content in HostScriptGenerator(machine_dirs).scripts().items():
            self._write(repo_path / filename, content, executable=filename.endswith(".sh"))

    def _mkdir(self, path: Path, parents: bool = False, exist_ok: bool = True) -> None:
        try:
            path.mkdir(parents=parents, exist_ok=exist_ok)
        except OSError as e:
            raise ScaffoldStepError(
                f"Failed to create directory {path}: {e}",
                step="create directory",
                path=path,
                kind=ErrorKind.DIRECTORY_CREATE_FAILED,
            )

    def _write(self, path: Path, content: str, executable: bool = False) -> None:
        try:
            path.write_text(content)
            if executable:
                path.chmod(0o755)
        except OSError as e:
            raise ScaffoldStepError(
                f"Failed to write {path}: {e}", step="write file", path=path
            )
