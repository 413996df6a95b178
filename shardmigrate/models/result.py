"""Per-key outcomes and shared run counters."""

import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional
from enum import Enum


class TransferStatus(str, Enum):
    """Outcome of migrating or verifying a single key."""
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class TransferResult:
    """Result of processing one key."""
    key: str
    status: TransferStatus = TransferStatus.SUCCESS
    new_key: Optional[str] = None
    reason: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def success(self) -> bool:
        return self.status == TransferStatus.SUCCESS

    @classmethod
    def failed(cls, key: str, error: Exception) -> "TransferResult":
        return cls(key=key, status=TransferStatus.FAILURE, reason=str(error), error=error)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "key": self.key,
            "status": self.status.value,
            "new_key": self.new_key,
            "reason": self.reason,
        }


class RunCounters:
    """
    Success and failure counters shared by all workers of a run.

    Both only ever increase; increments are serialized by one lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._success = 0
        self._failure = 0

    def record(self, result: TransferResult) -> None:
        if result.success:
            self.add_success()
        else:
            self.add_failure()

    def add_success(self, n: int = 1) -> None:
        with self._lock:
            self._success += n

    def add_failure(self, n: int = 1) -> None:
        with self._lock:
            self._failure += n

    @property
    def success(self) -> int:
        with self._lock:
            return self._success

    @property
    def failure(self) -> int:
        with self._lock:
            return self._failure

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return {"success": self._success, "failure": self._failure}
