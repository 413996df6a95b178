"""Shared cursor-based key source for the worker pool."""

import logging
import threading
from typing import Iterator, Optional

from ..stores.base import SourceStore

logger = logging.getLogger(__name__)


class ScanSource:
    """
    Single-pass iterator over the source keys matching a pattern.

    One instance is shared by every worker of a run. The underlying SCAN
    cursor is not safe for concurrent use, so each advance happens under a
    lock; a key handed to one worker is never handed to another.

    Usage:
        scan = ScanSource(store, "numbers:*", count=1000)
        for key in scan:
            ...
        if scan.error:
            ...

    A failure of the cursor ends iteration for all workers. It is kept in
    ``error`` rather than raised into the worker that happened to hit it.
    """

    def __init__(self, store: SourceStore, pattern: str, count: int = 1000):
        """
        Initialize the scan source.

        Args:
            store: Store to scan
            pattern: Glob pattern (SCAN MATCH)
            count: Keys requested per cursor advance (SCAN COUNT)
        """
        self.store = store
        self.pattern = pattern
        self.count = count
        self.error: Optional[Exception] = None
        self.current: Optional[str] = None
        self.scanned = 0
        self._lock = threading.Lock()
        self._cursor: Optional[Iterator[str]] = None
        self._exhausted = False

    def __iter__(self) -> "ScanSource":
        return self

    def __next__(self) -> str:
        with self._lock:
            if self._exhausted:
                raise StopIteration

            if self._cursor is None:
                self._cursor = iter(self.store.scan_iter(self.pattern, self.count))

            try:
                key = next(self._cursor)
            except StopIteration:
                self._exhausted = True
                logger.debug(f"Scan of {self.pattern} exhausted after {self.scanned} keys")
                raise
            except Exception as e:
                self._exhausted = True
                self.error = e
                logger.error(f"Scan iterator returned error: {e}")
                raise StopIteration

            self.current = key
            self.scanned += 1
            return key

    def approximate_count(self) -> Optional[int]:
        """
        Count the keys matching the pattern, for sizing a progress bar.

        Returns:
            Number of matching keys, or None if the count failed
        """
        try:
            total = self.store.count_matching(self.pattern)
        except Exception as e:
            logger.warning(f"Could not count keys matching {self.pattern}: {e}")
            return None

        logger.info(f"Approximately {total} keys match {self.pattern}")
        return total
