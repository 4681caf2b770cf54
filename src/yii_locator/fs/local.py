import logging
import os
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)


class LocalFileSystem:
    """``FileSystem`` backed by the real disk.

    Probe failures (permissions, broken links, bad names) read as "missing".
    """

    def exists(self, path: str) -> bool:
        try:
            return Path(path).exists()
        except (OSError, ValueError):
            logger.debug("Existence probe failed for %s", path)
            return False

    def read_text(self, path: str) -> str:
        return Path(path).read_text(encoding="utf-8", errors="replace")

    def iter_files(self, directory: str, suffix: str = "") -> Iterator[str]:
        def _on_error(error: OSError) -> None:
            logger.debug("Skipping unreadable directory %s: %s", error.filename, error.strerror)

        for dirpath, dirnames, filenames in os.walk(directory, onerror=_on_error):
            dirnames.sort()
            for filename in sorted(filenames):
                if filename.endswith(suffix):
                    yield os.path.join(dirpath, filename)
