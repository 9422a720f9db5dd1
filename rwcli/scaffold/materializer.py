"""Safe extraction of a cached template archive into a project directory."""
import os
import re
import shutil
import stat
import zipfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import List, Optional, Sequence, Tuple, Union

from rwcli.core.logger import get_logger
from rwcli.scaffold.errors import ExtractionFailed

logger = get_logger(__name__)

# Archives cannot portably carry a dot-prefixed name, so templates ship this instead
GITIGNORE_TEMPLATE = "gitignore.template"
GITIGNORE = ".gitignore"

DEFAULT_FILE_MODE = 0o644
# Group and world write bits are never applied
MAX_FILE_MODE = 0o755

_DRIVE = re.compile(r"^[A-Za-z]:")


@dataclass(frozen=True)
class ManifestEntry:
    """One archive member to instantiate under the target directory."""
    relative_path: PurePosixPath
    is_dir: bool
    mode: int
    archive_name: str


def _entry_parts(name: str) -> Tuple[str, ...]:
    """Split an archive member name, rejecting anything that could escape the target."""
    normalized = name.replace("\\", "/")
    path = PurePosixPath(normalized)

    if path.is_absolute():
        raise ExtractionFailed(f"Archive entry has an absolute path: {name}")
    if path.parts and _DRIVE.match(path.parts[0]):
        raise ExtractionFailed(f"Archive entry has a drive prefix: {name}")
    if ".." in path.parts:
        raise ExtractionFailed(f"Archive entry escapes the target directory: {name}")

    return path.parts


def _shared_top_level(entries: Sequence[Tuple[Tuple[str, ...], bool]]) -> Optional[str]:
    """Return the folder every entry is nested under, if there is exactly one."""
    if not entries:
        return None

    top_levels = {parts[0] for parts, _ in entries}
    if len(top_levels) != 1:
        return None

    prefix = top_levels.pop()
    for parts, is_dir in entries:
        # A file sitting at the root means the prefix is not a wrapper folder
        if len(parts) == 1 and not is_dir:
            return None
    return prefix


def _entry_mode(info: zipfile.ZipInfo) -> int:
    """Permission bits for a member, refusing anything but files and directories."""
    attr = info.external_attr >> 16
    file_type = stat.S_IFMT(attr)
    if file_type and file_type not in (stat.S_IFREG, stat.S_IFDIR):
        raise ExtractionFailed(
            f"Archive entry {info.filename} is not a regular file or directory"
        )
    mode = attr & MAX_FILE_MODE
    return mode or DEFAULT_FILE_MODE


def build_manifest(archive: zipfile.ZipFile) -> List[ManifestEntry]:
    """Compute the entries to write, stripping a shared wrapper folder.

    Every entry is validated before anything is written, so a single bad
    member aborts extraction with nothing on disk.

    Raises:
        ExtractionFailed: An entry is absolute, contains a parent-directory segment
            or is neither a regular file nor a directory
    """
    members = []
    for info in archive.infolist():
        parts = _entry_parts(info.filename)
        if parts:
            members.append((info, parts))

    prefix = _shared_top_level([(parts, info.is_dir()) for info, parts in members])
    if prefix is not None:
        logger.debug(f"Stripping shared top-level folder '{prefix}' from archive entries")

    manifest = []
    for info, parts in members:
        if prefix is not None:
            parts = parts[1:]
        if not parts:
            continue
        manifest.append(ManifestEntry(
            relative_path=PurePosixPath(*parts),
            is_dir=info.is_dir(),
            mode=_entry_mode(info),
            archive_name=info.filename,
        ))
    return manifest


def _inside(root: str, candidate: Path) -> bool:
    resolved = os.path.realpath(candidate)
    return os.path.commonpath([root, resolved]) == root


class ArchiveMaterializer:
    """Expands template zip archives into project directories."""

    def extract(self, archive_path: Union[str, Path], target_dir: Union[str, Path]) -> List[Path]:
        """Extract ``archive_path`` into ``target_dir``.

        Creates ``target_dir`` if needed, strips a shared top-level folder,
        applies each file's declared mode and finally renames
        ``gitignore.template`` to ``.gitignore``. Partially written files are
        not cleaned up on failure.

        Returns:
            Absolute paths of the files written

        Raises:
            ExtractionFailed: Any I/O error, corrupt archive or unsafe entry
        """
        archive_path = Path(archive_path)
        target_dir = Path(target_dir)

        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            root = os.path.realpath(target_dir)

            with zipfile.ZipFile(archive_path) as archive:
                manifest = build_manifest(archive)
                logger.debug(f"Extracting {len(manifest)} entries from {archive_path} into {target_dir}")
                written = [
                    path for path in (
                        self._write_entry(archive, entry, target_dir, root) for entry in manifest
                    )
                    if path is not None
                ]

            renamed = self._rename_gitignore(target_dir)
        except ExtractionFailed:
            raise
        except (OSError, zipfile.BadZipFile, NotImplementedError, RuntimeError) as e:
            raise ExtractionFailed(f"Failed to extract {archive_path} into {target_dir}: {e}") from e

        if renamed is not None:
            template = target_dir / GITIGNORE_TEMPLATE
            written = [renamed if path == template else path for path in written]
        return written

    def _write_entry(
        self,
        archive: zipfile.ZipFile,
        entry: ManifestEntry,
        target_dir: Path,
        root: str,
    ) -> Optional[Path]:
        destination = target_dir.joinpath(*entry.relative_path.parts)

        # Catches symlinks already present in an overwritten directory
        if not _inside(root, destination):
            raise ExtractionFailed(
                f"Archive entry {entry.archive_name} resolves outside {target_dir}"
            )

        if entry.is_dir:
            destination.mkdir(parents=True, exist_ok=True)
            return None

        destination.parent.mkdir(parents=True, exist_ok=True)
        try:
            with archive.open(entry.archive_name) as source, open(destination, "wb") as sink:
                shutil.copyfileobj(source, sink)
            os.chmod(destination, entry.mode)
        except (OSError, zipfile.BadZipFile, NotImplementedError, RuntimeError) as e:
            raise ExtractionFailed(
                f"Failed to write {entry.archive_name} to {destination}: {e}"
            ) from e

        logger.debug(f"Template entry written: {destination}")
        return destination

    @staticmethod
    def _rename_gitignore(target_dir: Path) -> Optional[Path]:
        template = target_dir / GITIGNORE_TEMPLATE
        if not template.is_file():
            return None
        gitignore = target_dir / GITIGNORE
        os.replace(template, gitignore)
        logger.debug("gitignore template renamed")
        return gitignore
