"""Git repository management for generated projects."""
import subprocess
from pathlib import Path

from vmscaffold.core.errors import GitInitError
from vmscaffold.core.logger import get_logger

logger = get_logger(__name__)


class GitManager:
    """Manages git operations for generated projects."""

    def __init__(self, git_command: str = "git", timeout: int = 30, mock: bool = False):
        self.git_command = git_command
        self.timeout = timeout
        self.mock = mock

    def init_repo(self, path: Path) -> bool:
        """Initialize a git repository in path.

        Runs git with cwd=path; the process working directory is left alone.

        Raises:
            GitInitError: If git is missing, times out, or exits non-zero
        """
        if self.mock:
            logger.info(f"MOCK: Would initialize git repository in {path}")
            return True

        cmd = [self.git_command, "init", "--quiet"]

        try:
            subprocess.run(
                cmd,
                cwd=path,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
            )
        except subprocess.CalledProcessError as e:
            logger.error(f"Failed to initialize git repository in {path}: {e}")
            if e.stderr:
                logger.error(f"Error output: {e.stderr}")
            detail = e.stderr.strip() if e.stderr else str(e)
            raise GitInitError(
                f"git init failed in {path}: {detail}", step="initialize repository", path=path
            )
        except FileNotFoundError:
            raise GitInitError(
                f"Git not found ('{self.git_command}'). Please install git first.",
                step="initialize repository",
                path=path,
            )
        except subprocess.TimeoutExpired:
            raise GitInitError(
                f"git init timed out after {self.timeout}s in {path}",
                step="initialize repository",
                path=path,
            )

        logger.debug(f"Initialized git repository in {path}")
        return True
