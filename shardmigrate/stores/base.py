"""Capability interfaces for the source and destination stores."""

from abc import ABC, abstractmethod
from typing import Iterator, Optional

# PTTL replies that are not durations
TTL_NOT_FOUND = -2  # key does not exist
TTL_NO_EXPIRY = -1  # key exists without an expire


class SourceStore(ABC):
    """
    Base class for the store keys are migrated from.

    Implementations raise ``TransportError`` for network or server errors.
    """

    @abstractmethod
    def ping(self) -> None:
        """Check connectivity; raises on failure."""
        pass

    @abstractmethod
    def scan_iter(self, pattern: str, count: int) -> Iterator[str]:
        """
        Iterate over key names matching a glob with a cursor scan.

        Args:
            pattern: Glob pattern (SCAN MATCH)
            count: Keys requested per cursor advance (SCAN COUNT)

        Yields:
            Key names
        """
        pass

    @abstractmethod
    def pttl(self, key: str) -> int:
        """
        Remaining time to live in milliseconds.

        Returns:
            Milliseconds, TTL_NOT_FOUND or TTL_NO_EXPIRY
        """
        pass

    @abstractmethod
    def dump(self, key: str) -> Optional[bytes]:
        """
        Serialize a key's value for transfer.

        Returns:
            Opaque payload, or None if the key does not exist
        """
        pass

    @abstractmethod
    def count_matching(self, pattern: str) -> int:
        """Count keys matching a glob on the server (approximate, may block)."""
        pass

    def close(self) -> None:
        """Release connections."""


class DestinationStore(ABC):
    """
    Base class for the store keys are migrated to.

    Implementations raise ``TransportError`` for network or server errors.
    """

    @abstractmethod
    def ping(self) -> None:
        """Check connectivity; raises on failure."""
        pass

    @abstractmethod
    def exists(self, key: str) -> int:
        """Return 1 if the key exists, else 0."""
        pass

    @abstractmethod
    def restore(self, key: str, ttl_ms: int, payload: bytes) -> None:
        """
        Store a serialized value, replacing any existing key.

        Args:
            key: Destination key
            ttl_ms: Time to live in milliseconds, 0 for none
            payload: Value produced by ``SourceStore.dump``
        """
        pass

    def close(self) -> None:
        """Release connections."""
