import logging
import shutil
from pathlib import Path
from typing import List

from scribe.core.errors import CleanupFailed

logger = logging.getLogger(__name__)

class ResourceJanitor:
    """
    Owns the temporary files and directories of one run.
    Release is idempotent and best-effort: a path that is already gone is
    a no-op, and a deletion error is logged and never raised.
    """

    def __init__(self):
        self._tracked: List[Path] = []

    @property
    def tracked(self) -> List[Path]:
        return list(self._tracked)

    def track(self, path: Path) -> Path:
        path = Path(path)
        if path not in self._tracked:
            self._tracked.append(path)
        return path

    def release(self, path: Path) -> bool:
        path = Path(path)
        if path in self._tracked:
            self._tracked.remove(path)
        return self._delete(path)

    def release_all(self) -> int:
        """Deletes everything tracked, newest first. Returns how many deletions succeeded."""
        released = 0
        while self._tracked:
            if self._delete(self._tracked.pop()):
                released += 1
        return released

    @staticmethod
    def _delete(path: Path) -> bool:
        try:
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink(missing_ok=True)
            return True
        except OSError as e:
            error = CleanupFailed(f"Could not delete {path}: {e}")
            logger.warning(str(error))
            return False
