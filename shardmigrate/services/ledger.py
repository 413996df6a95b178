"""Failed-key ledger, written once at the end of a run."""

import logging
import threading
from pathlib import Path
from typing import Iterator, List, Union

logger = logging.getLogger(__name__)


class FailureLedger:
    """
    Keys that failed migration or verification, in the order they failed.

    Appends come from many workers and are serialized by a single lock;
    failures are rare compared to the number of keys processed.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._keys: List[str] = []

    def add(self, key: str) -> None:
        with self._lock:
            self._keys.append(key)

    def keys(self) -> List[str]:
        """Get a copy of the failed keys."""
        with self._lock:
            return list(self._keys)

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def dump(self, path: Union[str, Path]) -> bool:
        """
        Write the failed keys, one per line, replacing any previous file.

        With no failures any stale file is removed, so a missing file always
        means the last run had no failures.

        Args:
            path: File to write

        Returns:
            True if a file was written

        Raises:
            OSError: if the file cannot be removed or written
        """
        path = Path(path)
        keys = self.keys()

        if not keys:
            if path.exists():
                path.unlink()
                logger.info(f"Removed stale failed keys file {path}")
            return False

        with open(path, "w", encoding="utf-8", errors="surrogateescape", newline="\n") as f:
            for key in keys:
                f.write(key)
                f.write("\n")

        logger.info(f"Wrote {len(keys)} failed keys to {path}")
        return True
