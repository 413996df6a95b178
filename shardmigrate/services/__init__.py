"""Service layer for the migration engine."""

from .ledger import FailureLedger
from .scanner import ScanSource
from .transfer import TransferEngine

__all__ = [
    "FailureLedger",
    "ScanSource",
    "TransferEngine",
]
