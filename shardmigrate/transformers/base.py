"""Base key transformer interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..exceptions import MalformedKeyError

SEPARATOR = ":"


def hash_tag(*fields: str) -> str:
    """Wrap fields in braces so the cluster hashes only this part of the key."""
    return "{" + SEPARATOR.join(fields) + "}"


class BaseKeyTransformer(ABC):
    """
    Base class for all key transformers.

    A transformer handles one key family: it names the glob pattern that
    selects the family in the source, and rewrites each key so that keys
    which must live together share a hash tag in the destination cluster.

    Transformers are stateless; ``transform`` must be deterministic and must
    raise ``MalformedKeyError`` rather than return a partially rebuilt key.
    """

    name: str = ""
    expected_fields: Optional[int] = None

    @abstractmethod
    def pattern(self) -> str:
        """
        Glob pattern selecting the keys this transformer handles.

        Returns:
            Pattern suitable for SCAN MATCH (e.g. "numbers:*")
        """
        pass

    @abstractmethod
    def transform(self, key: str) -> str:
        """
        Rewrite a source key into its destination key.

        Args:
            key: Source key matching ``pattern()``

        Returns:
            Destination key

        Raises:
            MalformedKeyError: if the key does not fit the family's schema
        """
        pass

    def split(self, key: str) -> List[str]:
        """
        Split a key on ':' and check it against ``expected_fields``.

        Empty fields count as missing, so "numbers:" is rejected by a
        two-field schema instead of producing "numbers:{}".
        """
        fields = key.split(SEPARATOR)
        if self.expected_fields is not None:
            if len(fields) != self.expected_fields or not all(fields):
                raise MalformedKeyError(key, self.expected_fields)
        return fields

    def __repr__(self) -> str:
        return f"{type(self).__name__}(pattern={self.pattern()!r})"
