"""Validation of the directory a new project is written into."""
import os
from pathlib import Path
from typing import Union

from rwcli.core.logger import get_logger
from rwcli.scaffold.errors import DirectoryNotEmpty, NotADirectory

logger = get_logger(__name__)


def is_empty(path: Union[str, Path]) -> bool:
    """Return True if the directory has no entries.

    Reads at most one entry, so the cost does not depend on the tree size.
    """
    with os.scandir(path) as entries:
        return next(entries, None) is None


def validate_target_directory(path: Union[str, Path], overwrite: bool = False) -> Path:
    """Check that ``path`` is safe to scaffold into and return its absolute form.

    A missing path is valid (it is created later). An existing directory must
    be empty unless ``overwrite`` is set, in which case its contents are left
    untouched and the template is overlaid on top.

    Raises:
        NotADirectory: The path exists and is not a directory
        DirectoryNotEmpty: The directory has contents and overwrite is off
    """
    target = Path(os.path.abspath(os.path.expanduser(str(path))))

    if not target.exists():
        logger.debug(f"Target directory does not exist yet: {target}")
        return target

    if not target.is_dir():
        raise NotADirectory(target)

    if overwrite:
        logger.debug(f"Overwrite requested, accepting existing directory: {target}")
        return target

    if not is_empty(target):
        raise DirectoryNotEmpty(target)

    return target
