"""On-disk cache of downloaded template archives.

Entries live at ``<rw home>/templates/<tag>_<asset>`` and are never mutated
or evicted: a new release gets a new key, so old entries simply stay behind.
"""
import os
import tempfile
import time
from pathlib import Path
from typing import Callable, Iterable, Tuple

from rwcli.core.logger import get_logger

logger = get_logger(__name__)


class TemplateCache:
    """Content-keyed store mapping cache keys to archive files."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def ensure_root(self) -> Path:
        """Create the cache root if missing."""
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key in {".", ".."}:
            raise ValueError(f"Invalid cache key: {key!r}")
        return self.root / key

    def resolve(self, key: str) -> bool:
        """Return True when an entry for ``key`` is present."""
        return self.path_for(key).is_file()

    def store(self, key: str, chunks: Iterable[bytes]) -> Path:
        """Write ``chunks`` to the entry for ``key`` atomically.

        Bytes go to a temporary file in the cache root which is renamed into
        place once complete, so readers never see a partial archive.

        Returns:
            Path of the committed entry
        """
        self.ensure_root()
        final_path = self.path_for(key)

        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{key}.", suffix=".part")
        try:
            with os.fdopen(fd, "wb") as tmp_file:
                for chunk in chunks:
                    tmp_file.write(chunk)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())
            os.replace(tmp_name, final_path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        logger.debug(f"Template cached: {final_path}")
        return final_path

    def fetch_or_get(
        self,
        key: str,
        fetch: Callable[[], Iterable[bytes]],
    ) -> Tuple[Path, bool]:
        """Return the entry for ``key``, downloading it via ``fetch`` on a miss.

        On a hit ``fetch`` is not called at all.

        Returns:
            Tuple of (entry path, whether it was already cached)
        """
        path = self.path_for(key)
        if self.resolve(key):
            logger.debug(f"Template cache hit: {path}")
            return path, True

        logger.debug(f"Template cache miss: {path}")
        started = time.monotonic()
        path = self.store(key, fetch())
        logger.debug(f"Template downloaded and saved in {time.monotonic() - started:.2f}s")
        return path, False
