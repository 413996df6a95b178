"""Shared fixtures: in-memory stores implementing the store interfaces."""

import fnmatch
import threading
from typing import Callable, Dict, Iterator, List, Optional, Tuple

import pytest

from shardmigrate.exceptions import TransportError
from shardmigrate.models.migration import MigrationConfig
from shardmigrate.stores.base import (
    DestinationStore,
    SourceStore,
    TTL_NOT_FOUND,
    TTL_NO_EXPIRY,
)


class FakeSourceStore(SourceStore):
    """Single-node source holding key -> (payload, pttl in ms or TTL_NO_EXPIRY)."""

    def __init__(self, data: Optional[Dict[str, Tuple[bytes, int]]] = None):
        self.data: Dict[str, Tuple[bytes, int]] = dict(data or {})
        self.calls: List[Tuple[str, str]] = []
        self.scan_error_after: Optional[int] = None
        self.count_error: Optional[Exception] = None
        self.on_dump: Optional[Callable[[str], None]] = None
        self.vanished: set = set()
        self.closed = False
        self._lock = threading.Lock()

    def _record(self, op: str, key: str = "") -> None:
        with self._lock:
            self.calls.append((op, key))

    def calls_for(self, op: str) -> List[str]:
        return [key for name, key in self.calls if name == op]

    def ping(self) -> None:
        self._record("ping")

    def scan_iter(self, pattern: str, count: int) -> Iterator[str]:
        for i, key in enumerate(sorted(self.data)):
            if self.scan_error_after is not None and i >= self.scan_error_after:
                raise TransportError("SCAN", cause=ConnectionError("connection reset"))
            if fnmatch.fnmatchcase(key, pattern):
                yield key

    def pttl(self, key: str) -> int:
        self._record("pttl", key)
        if key in self.vanished or key not in self.data:
            return TTL_NOT_FOUND
        return self.data[key][1]

    def dump(self, key: str) -> Optional[bytes]:
        self._record("dump", key)
        if self.on_dump is not None:
            self.on_dump(key)
        if key in self.vanished or key not in self.data:
            return None
        return self.data[key][0]

    def count_matching(self, pattern: str) -> int:
        if self.count_error is not None:
            raise self.count_error
        return sum(1 for key in self.data if fnmatch.fnmatchcase(key, pattern))

    def close(self) -> None:
        self.closed = True


class FakeDestination(DestinationStore):
    """Cluster destination holding key -> (payload, ttl_ms)."""

    def __init__(self):
        self.data: Dict[str, Tuple[bytes, int]] = {}
        self.restores: List[Tuple[str, int, bytes]] = []
        self.exists_calls: List[str] = []
        self.fail_keys: set = set()
        self.closed = False
        self._lock = threading.Lock()

    def ping(self) -> None:
        pass

    def exists(self, key: str) -> int:
        with self._lock:
            self.exists_calls.append(key)
        if key in self.fail_keys:
            raise TransportError("EXISTS", key=key, cause=ConnectionError("timeout"))
        return 1 if key in self.data else 0

    def restore(self, key: str, ttl_ms: int, payload: bytes) -> None:
        if key in self.fail_keys:
            raise TransportError("RESTORE", key=key, cause=ConnectionError("timeout"))
        with self._lock:
            self.restores.append((key, ttl_ms, payload))
            self.data[key] = (payload, ttl_ms)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def source():
    return FakeSourceStore({
        "numbers:12345": (b"\x00numbers-payload", 60000),
        "numbers:67890": (b"\x00other-payload", TTL_NO_EXPIRY),
        "senderid:1:default:7": (b"\x00senderid-payload", TTL_NO_EXPIRY),
        "stop:5:9": (b"\x00stop-payload", 5000),
    })


@pytest.fixture
def destination():
    return FakeDestination()


@pytest.fixture
def config(tmp_path):
    return MigrationConfig(
        src="localhost:6379",
        dst="localhost:7000",
        transformer="numbers",
        pool_size=4,
        scan_count=10,
        show_progress=False,
        failed_keys_file=str(tmp_path / "failed.keys"),
    )
