"""Data models for the migration engine."""

from .migration import (
    MigrationConfig,
    MigrationMode,
    MigrationRun,
    MigrationStatus,
)
from .result import (
    RunCounters,
    TransferResult,
    TransferStatus,
)

__all__ = [
    "MigrationConfig",
    "MigrationMode",
    "MigrationRun",
    "MigrationStatus",
    "RunCounters",
    "TransferResult",
    "TransferStatus",
]
