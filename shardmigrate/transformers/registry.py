"""Registry of key transformers, selected once per run."""

import logging
from typing import Dict, List, Optional, Type

from ..exceptions import ConfigurationError
from .base import BaseKeyTransformer
from .families import (
    DndTransformer,
    NumbersTransformer,
    RateLimitPassthroughTransformer,
    RateLimitTransformer,
    SandboxTransformer,
    SenderIdTransformer,
    SmsPrefixTransformer,
)

logger = logging.getLogger(__name__)

BUILTIN_TRANSFORMERS: List[Type[BaseKeyTransformer]] = [
    SenderIdTransformer,
    RateLimitTransformer,
    RateLimitPassthroughTransformer,
    DndTransformer,
    SmsPrefixTransformer,
    NumbersTransformer,
    SandboxTransformer,
]


class TransformerRegistry:
    """
    Registry mapping transformer names to transformer classes.

    Supports:
    - Looking up a transformer by name
    - Looking up the transformers that handle a glob pattern
    - Registering custom transformers
    """

    def __init__(self, include_builtins: bool = True):
        """
        Initialize the registry.

        Args:
            include_builtins: Register the built-in key families
        """
        self._transformers: Dict[str, Type[BaseKeyTransformer]] = {}

        if include_builtins:
            for cls in BUILTIN_TRANSFORMERS:
                self.register(cls.name, cls)

    def register(
        self,
        name: str,
        transformer_cls: Type[BaseKeyTransformer],
        allow_overwrite: bool = False
    ) -> None:
        """Register a transformer class under a name."""
        if not name:
            raise ConfigurationError("Transformer name cannot be empty")
        if name in self._transformers and not allow_overwrite:
            raise ConfigurationError(f"Transformer already registered: {name}")

        self._transformers[name] = transformer_cls
        logger.debug(f"Registered transformer: {name} -> {transformer_cls.__name__}")

    def get(self, name: str) -> BaseKeyTransformer:
        """
        Create the transformer registered under a name.

        Raises:
            ConfigurationError: if no transformer has that name
        """
        transformer_cls = self._transformers.get(name)
        if transformer_cls is None:
            raise ConfigurationError(
                f"Unknown transformer: {name}. Available: {', '.join(self.names())}"
            )
        return transformer_cls()

    def for_pattern(self, pattern: str) -> List[BaseKeyTransformer]:
        """Get every transformer whose pattern equals the given glob."""
        matches = []
        for name in self.names():
            transformer = self._transformers[name]()
            if transformer.pattern() == pattern:
                matches.append(transformer)
        return matches

    def has(self, name: str) -> bool:
        return name in self._transformers

    def names(self) -> List[str]:
        """List registered transformer names."""
        return sorted(self._transformers)

    def describe(self) -> Dict[str, str]:
        """Get name -> pattern for every registered transformer."""
        return {name: self._transformers[name]().pattern() for name in self.names()}


_default_registry: Optional[TransformerRegistry] = None


def default_registry() -> TransformerRegistry:
    """Get the registry of built-in transformers."""
    global _default_registry
    if _default_registry is None:
        _default_registry = TransformerRegistry()
    return _default_registry
