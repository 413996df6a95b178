"""Store adapters for the migration source and destination."""

from .base import DestinationStore, SourceStore, TTL_NOT_FOUND, TTL_NO_EXPIRY
from .redis_store import RedisClusterDestination, RedisSourceStore

__all__ = [
    "DestinationStore",
    "SourceStore",
    "TTL_NOT_FOUND",
    "TTL_NO_EXPIRY",
    "RedisClusterDestination",
    "RedisSourceStore",
]
