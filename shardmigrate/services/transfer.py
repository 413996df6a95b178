"""Transfer engine: moves or verifies one key at a time."""

import logging
from typing import Optional

from ..exceptions import VerificationFailedError
from ..models.migration import MigrationMode
from ..models.result import TransferResult
from ..stores.base import (
    DestinationStore,
    SourceStore,
    TTL_NOT_FOUND,
    TTL_NO_EXPIRY,
)
from ..transformers.base import BaseKeyTransformer

logger = logging.getLogger(__name__)


class TransferEngine:
    """
    Engine for migrating keys from the source to the destination cluster.

    For every key it applies the run's transformer, then either copies the
    serialized value (with its TTL) under the new name, or checks that the
    new name exists in the destination.

    Errors are raised to the caller and never retried here. Keys that vanish
    from the source between the scan and the transfer are not errors.
    """

    def __init__(
        self,
        source: SourceStore,
        destination: DestinationStore,
        transformer: BaseKeyTransformer,
        restore_ttl: bool = True,
        read_only: bool = False
    ):
        """
        Initialize the transfer engine.

        Args:
            source: Store to read from
            destination: Store to write to (or check, when verifying)
            transformer: Transformer for the key family being migrated
            restore_ttl: Carry each key's remaining TTL over
            read_only: Fetch from the source but never write
        """
        self.source = source
        self.destination = destination
        self.transformer = transformer
        self.restore_ttl = restore_ttl
        self.read_only = read_only

    def migrate(self, key: str) -> Optional[str]:
        """
        Copy one key to the destination under its transformed name.

        The destination key is replaced unconditionally, so migrating the
        same key twice is harmless.

        Args:
            key: Source key

        Returns:
            The destination key, or None if there was nothing to copy
        """
        if not key:
            return None

        new_key = self.transformer.transform(key)

        ttl = 0
        if self.restore_ttl:
            ttl = self.source.pttl(key)
            if ttl == TTL_NOT_FOUND:
                logger.debug(f"Key {key} vanished before transfer, skipping")
                return None
            if ttl == TTL_NO_EXPIRY:
                ttl = 0

        payload = self.source.dump(key)
        if payload is None:
            logger.debug(f"Key {key} vanished before transfer, skipping")
            return None

        if self.read_only:
            return new_key

        self.destination.restore(new_key, ttl, payload)
        return new_key

    def verify(self, key: str) -> Optional[str]:
        """
        Check that a key's transformed name exists in the destination.

        Args:
            key: Source key

        Returns:
            The destination key, or None for an empty key

        Raises:
            VerificationFailedError: if the destination key is missing
        """
        if not key:
            return None

        new_key = self.transformer.transform(key)

        if self.destination.exists(new_key) != 1:
            raise VerificationFailedError(new_key)

        return new_key

    def process(self, key: str, mode: MigrationMode = MigrationMode.MIGRATE) -> TransferResult:
        """Migrate or verify a key and capture the outcome instead of raising."""
        try:
            if mode == MigrationMode.VERIFY:
                new_key = self.verify(key)
            else:
                new_key = self.migrate(key)
        except Exception as e:
            return TransferResult.failed(key, e)

        return TransferResult(key=key, new_key=new_key)
