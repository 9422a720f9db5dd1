"""Node toolchain checks and dependency installation for new projects."""
import os
import shutil
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from rwcli.core.logger import get_logger
from rwcli.scaffold.errors import ToolchainMissing

logger = get_logger(__name__)

REQUIRED_TOOLS = ("node", "yarn")
DEFAULT_INSTALL_COMMAND = ("yarn", "install")


@dataclass
class ToolInfo:
    """An executable found on PATH."""
    name: str
    paths: List[str] = field(default_factory=list)
    version: Optional[str] = None

    @property
    def path(self) -> str:
        return self.paths[0]


@dataclass
class InstallResult:
    """Outcome of a dependency installation run."""
    command: Sequence[str]
    returncode: int
    duration: float

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def find_all(name: str) -> List[str]:
    """Return every match for ``name`` on PATH, in PATH order."""
    found = []
    for directory in os.environ.get("PATH", "").split(os.pathsep):
        if not directory:
            continue
        candidate = shutil.which(name, path=directory)
        if candidate and candidate not in found:
            found.append(candidate)
    return found


def check_tool(name: str, timeout: int = 10) -> ToolInfo:
    """Locate ``name`` and read its version.

    Raises:
        ToolchainMissing: The executable is not on PATH or cannot report a version
    """
    paths = find_all(name)
    if not paths:
        raise ToolchainMissing(f"{name} not found. Please install {name} first.")

    try:
        result = subprocess.run(
            [name, "-v"],
            capture_output=True,
            text=True,
            check=True,
            timeout=timeout,
        )
    except (OSError, subprocess.SubprocessError) as e:
        raise ToolchainMissing(f"Failed to get {name} version: {e}") from e

    info = ToolInfo(name=name, paths=paths, version=result.stdout.strip())
    logger.debug(f"{name} {info.version} found at {', '.join(paths)}")
    return info


def check_toolchain(tools: Sequence[str] = REQUIRED_TOOLS) -> List[ToolInfo]:
    """Check every required tool, failing on the first one missing."""
    return [check_tool(tool) for tool in tools]


def install_dependencies(
    target_dir: Union[str, Path],
    command: Sequence[str] = DEFAULT_INSTALL_COMMAND,
) -> InstallResult:
    """Run the package manager install in ``target_dir``.

    Output streams straight to the terminal. A non-zero exit is reported in
    the result, not raised.

    Raises:
        ToolchainMissing: The package manager executable is missing
    """
    logger.info(f"Installing dependencies: {' '.join(command)}")
    started = time.monotonic()
    try:
        completed = subprocess.run(list(command), cwd=target_dir, check=False)
    except FileNotFoundError as e:
        raise ToolchainMissing(f"{command[0]} not found. Please install {command[0]} first.") from e

    result = InstallResult(
        command=tuple(command),
        returncode=completed.returncode,
        duration=time.monotonic() - started,
    )
    logger.debug(f"Dependency install exited {result.returncode} after {result.duration:.1f}s")
    return result
