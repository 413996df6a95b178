"""Key transformers for each key family."""

from .base import BaseKeyTransformer, hash_tag
from .families import (
    DndTransformer,
    NumbersTransformer,
    RateLimitPassthroughTransformer,
    RateLimitTransformer,
    SandboxTransformer,
    SenderIdTransformer,
    SmsPrefixTransformer,
)
from .registry import TransformerRegistry, default_registry

__all__ = [
    "BaseKeyTransformer",
    "hash_tag",
    "DndTransformer",
    "NumbersTransformer",
    "RateLimitPassthroughTransformer",
    "RateLimitTransformer",
    "SandboxTransformer",
    "SenderIdTransformer",
    "SmsPrefixTransformer",
    "TransformerRegistry",
    "default_registry",
]
