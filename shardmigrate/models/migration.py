"""Migration execution models."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum
from datetime import datetime
import uuid

from ..exceptions import ConfigurationError


class MigrationStatus(str, Enum):
    """Status of a migration run."""
    PENDING = "pending"
    RUNNING = "running"
    STOPPING = "stopping"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class MigrationMode(str, Enum):
    """What the workers do with each scanned key."""
    MIGRATE = "migrate"  # DUMP from source, RESTORE REPLACE at destination
    VERIFY = "verify"  # EXISTS check at destination only


@dataclass
class MigrationConfig:
    """Configuration for a migration run."""
    src: str = ""  # host:port of the single-node source
    dst: str = ""  # comma-separated host:port seeds of the cluster

    # Key family
    transformer: str = "dnd"

    # Execution options
    mode: MigrationMode = MigrationMode.MIGRATE
    pool_size: int = 50
    scan_count: int = 1000
    restore_ttl: bool = True
    read_only: bool = False

    # Connection options
    src_db: int = 0
    password: Optional[str] = None
    socket_timeout: Optional[float] = None

    # Reporting
    show_progress: bool = True
    count_keys: bool = True
    failed_keys_file: str = "failed.keys"
    report_file: Optional[str] = None

    @property
    def verify(self) -> bool:
        return self.mode == MigrationMode.VERIFY

    def validate(self) -> None:
        """
        Check the configuration before any connection is attempted.

        Raises:
            ConfigurationError: on the first invalid setting
        """
        if not self.src or not self.dst:
            raise ConfigurationError("src and dst addrs cannot be empty")
        if self.pool_size < 1:
            raise ConfigurationError(f"pool_size must be at least 1, got {self.pool_size}")
        if self.scan_count < 1:
            raise ConfigurationError(f"scan_count must be at least 1, got {self.scan_count}")
        if not self.transformer:
            raise ConfigurationError("transformer name cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "src": self.src,
            "dst": self.dst,
            "transformer": self.transformer,
            "mode": self.mode.value,
            "pool_size": self.pool_size,
            "scan_count": self.scan_count,
            "restore_ttl": self.restore_ttl,
            "read_only": self.read_only,
            "src_db": self.src_db,
            "socket_timeout": self.socket_timeout,
            "show_progress": self.show_progress,
            "count_keys": self.count_keys,
            "failed_keys_file": self.failed_keys_file,
            "report_file": self.report_file,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MigrationConfig":
        """Create from dictionary representation."""
        mode = data.get("mode")
        if mode is None:
            mode = MigrationMode.VERIFY if data.get("verify", False) else MigrationMode.MIGRATE

        try:
            mode = MigrationMode(mode)
        except ValueError:
            raise ConfigurationError(f"Unknown migration mode: {mode}")

        return cls(
            src=data.get("src", ""),
            dst=data.get("dst", ""),
            transformer=data.get("transformer", "dnd"),
            mode=mode,
            pool_size=data.get("pool_size", 50),
            scan_count=data.get("scan_count", 1000),
            restore_ttl=data.get("restore_ttl", True),
            read_only=data.get("read_only", False),
            src_db=data.get("src_db", 0),
            password=data.get("password"),
            socket_timeout=data.get("socket_timeout"),
            show_progress=data.get("show_progress", True),
            count_keys=data.get("count_keys", True),
            failed_keys_file=data.get("failed_keys_file", "failed.keys"),
            report_file=data.get("report_file"),
        )


@dataclass
class MigrationRun:
    """A complete migration run."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: MigrationStatus = MigrationStatus.PENDING
    mode: MigrationMode = MigrationMode.MIGRATE
    transformer: str = ""
    pattern: str = ""
    read_only: bool = False

    # Timing
    created_at: datetime = field(default_factory=datetime.utcnow)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    # Statistics
    approximate_total: Optional[int] = None
    success_count: int = 0
    failure_count: int = 0
    failed_keys_file: Optional[str] = None

    errors: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "status": self.status.value,
            "mode": self.mode.value,
            "transformer": self.transformer,
            "pattern": self.pattern,
            "read_only": self.read_only,
            "created_at": self.created_at.isoformat(),
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
            "approximate_total": self.approximate_total,
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "processed_count": self.processed_count,
            "failed_keys_file": self.failed_keys_file,
            "errors": self.errors,
        }

    @property
    def processed_count(self) -> int:
        return self.success_count + self.failure_count

    @property
    def duration_seconds(self) -> Optional[float]:
        """Get duration in seconds."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    @property
    def is_finished(self) -> bool:
        return self.status in (
            MigrationStatus.COMPLETED,
            MigrationStatus.CANCELLED,
            MigrationStatus.FAILED,
        )
