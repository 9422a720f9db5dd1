"""Git repository initialization for freshly scaffolded projects."""
import subprocess
from pathlib import Path
from typing import List, Union

from rwcli.core.logger import get_logger
from rwcli.scaffold.errors import VersionControlInitFailed

logger = get_logger(__name__)


class GitInitializer:
    """Initializes a repository and creates the first commit."""

    def __init__(self, git_binary: str = "git"):
        self.git_binary = git_binary

    def _run(self, args: List[str], cwd: Path) -> subprocess.CompletedProcess:
        cmd = [self.git_binary] + args
        try:
            return subprocess.run(cmd, cwd=cwd, capture_output=True, text=True, check=True)
        except FileNotFoundError as e:
            raise VersionControlInitFailed("Git not found. Please install git first.") from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip() or (e.stdout or "").strip() or str(e)
            logger.debug(f"git {' '.join(args)} failed in {cwd}: {stderr}")
            raise VersionControlInitFailed(f"git {args[0]} failed in {cwd}: {stderr}") from e

    @staticmethod
    def repo_exists(path: Union[str, Path]) -> bool:
        """Check if a git repository already exists at the given path."""
        return (Path(path) / ".git").exists()

    def initialize(self, target_dir: Union[str, Path], commit_message: str) -> bool:
        """Initialize a repository in ``target_dir`` and commit everything in it.

        An existing repository is left alone with a warning.

        Args:
            target_dir: Project directory
            commit_message: Message for the initial commit

        Returns:
            True if a commit was created, False if a repository already existed

        Raises:
            VersionControlInitFailed: git is missing or init/add/commit failed
        """
        target_dir = Path(target_dir)

        if self.repo_exists(target_dir):
            logger.info(f"Git repository already exists in {target_dir}, skipping git init")
            return False

        self._run(["init"], cwd=target_dir)
        logger.debug(f"Initialized git repository in {target_dir}")

        self._run(["add", "."], cwd=target_dir)
        self._run(["commit", "-m", commit_message], cwd=target_dir)
        logger.debug(f"Initial commit complete: {commit_message}")
        return True

    def current_commit(self, path: Union[str, Path]) -> str:
        """Get current commit hash from repository."""
        result = self._run(["rev-parse", "HEAD"], cwd=Path(path))
        return result.stdout.strip()
