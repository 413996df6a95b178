"""Redis adapters: a single-node source and a cluster destination."""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple, Union

import redis
from redis.cluster import ClusterNode, RedisCluster

from ..exceptions import ConfigurationError, TransportError
from .base import DestinationStore, SourceStore

logger = logging.getLogger(__name__)

DEFAULT_PORT = 6379

# KEYS blocks the server; running it inside a script at least keeps the
# reply down to a single integer.
COUNT_SCRIPT = "return #redis.call('keys', ARGV[1])"

# RedisClusterException does not derive from RedisError
REDIS_ERRORS = (redis.exceptions.RedisError, redis.exceptions.RedisClusterException)


def parse_address(address: str) -> Tuple[str, int]:
    """
    Parse "host:port" (port defaults to 6379).

    Raises:
        ConfigurationError: if the address is empty or the port is not a number
    """
    address = address.strip()
    if not address:
        raise ConfigurationError("Address cannot be empty")

    host, sep, port = address.rpartition(":")
    if not sep:
        return address, DEFAULT_PORT

    if not host:
        raise ConfigurationError(f"Missing host in address: {address}")

    try:
        return host, int(port)
    except ValueError:
        raise ConfigurationError(f"Invalid port in address: {address}")


def parse_seeds(addresses: Union[str, List[str]]) -> List[Tuple[str, int]]:
    """Parse comma-separated (or listed) cluster seed addresses."""
    if isinstance(addresses, str):
        addresses = [a for a in addresses.split(",") if a.strip()]
    if not addresses:
        raise ConfigurationError("At least one cluster seed address is required")
    return [parse_address(a) for a in addresses]


def encode_key(key: str) -> bytes:
    return key.encode("utf-8", "surrogateescape")


def decode_key(raw: Union[bytes, str]) -> str:
    if isinstance(raw, bytes):
        return raw.decode("utf-8", "surrogateescape")
    return raw


@contextmanager
def translate_errors(operation: str, key: Optional[str] = None):
    """Re-raise redis-py errors as TransportError."""
    try:
        yield
    except REDIS_ERRORS as e:
        raise TransportError(operation, key=key, cause=e) from e


class RedisSourceStore(SourceStore):
    """Source store backed by a single-node ``redis.Redis`` client."""

    def __init__(self, client: redis.Redis):
        """
        Initialize the source store.

        Args:
            client: Client created with decode_responses=False, since DUMP
                payloads are binary
        """
        self.client = client
        self._count_script = client.register_script(COUNT_SCRIPT)

    @classmethod
    def from_address(
        cls,
        address: str,
        db: int = 0,
        password: Optional[str] = None,
        socket_timeout: Optional[float] = None
    ) -> "RedisSourceStore":
        """Create a store connected to a "host:port" address."""
        host, port = parse_address(address)
        logger.debug(f"Connecting to source redis at {host}:{port} (db {db})")
        client = redis.Redis(
            host=host,
            port=port,
            db=db,
            password=password,
            socket_timeout=socket_timeout,
            decode_responses=False,
        )
        return cls(client)

    def ping(self) -> None:
        with translate_errors("PING"):
            self.client.ping()

    def scan_iter(self, pattern: str, count: int) -> Iterator[str]:
        with translate_errors("SCAN"):
            for raw in self.client.scan_iter(match=pattern, count=count):
                yield decode_key(raw)

    def pttl(self, key: str) -> int:
        with translate_errors("PTTL", key):
            return int(self.client.pttl(encode_key(key)))

    def dump(self, key: str) -> Optional[bytes]:
        with translate_errors("DUMP", key):
            return self.client.dump(encode_key(key))

    def count_matching(self, pattern: str) -> int:
        with translate_errors("EVALSHA"):
            return int(self._count_script(keys=[], args=[pattern]))

    def close(self) -> None:
        self.client.close()


class RedisClusterDestination(DestinationStore):
    """Destination store backed by a ``redis.cluster.RedisCluster`` client."""

    def __init__(self, client: RedisCluster):
        self.client = client

    @classmethod
    def from_addresses(
        cls,
        addresses: Union[str, List[str]],
        password: Optional[str] = None,
        socket_timeout: Optional[float] = None
    ) -> "RedisClusterDestination":
        """Create a store from one or more cluster seed addresses."""
        nodes = [ClusterNode(host, port) for host, port in parse_seeds(addresses)]
        logger.debug(f"Connecting to cluster via {len(nodes)} seed node(s)")
        with translate_errors("CLUSTER CONNECT"):
            client = RedisCluster(
                startup_nodes=nodes,
                password=password,
                socket_timeout=socket_timeout,
                decode_responses=False,
            )
        return cls(client)

    def ping(self) -> None:
        with translate_errors("PING"):
            self.client.ping()

    def exists(self, key: str) -> int:
        with translate_errors("EXISTS", key):
            return int(self.client.exists(encode_key(key)))

    def restore(self, key: str, ttl_ms: int, payload: bytes) -> None:
        with translate_errors("RESTORE", key):
            self.client.restore(encode_key(key), ttl_ms, payload, replace=True)

    def close(self) -> None:
        self.client.close()
