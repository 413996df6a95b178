"""In-memory storage for runs started through the API."""

import threading
from typing import Dict, List, Optional

from ..orchestrator import MigrationOrchestrator
from .models import MigrationResponse


class RunStorage:
    """Keeps the orchestrator of every run started by this process."""

    def __init__(self):
        self._lock = threading.Lock()
        self._runs: Dict[str, MigrationOrchestrator] = {}

    def add(self, orchestrator: MigrationOrchestrator) -> str:
        with self._lock:
            self._runs[orchestrator.run.id] = orchestrator
        return orchestrator.run.id

    def get(self, run_id: str) -> Optional[MigrationOrchestrator]:
        with self._lock:
            return self._runs.get(run_id)

    def list_all(self) -> List[MigrationOrchestrator]:
        with self._lock:
            return list(self._runs.values())

    def clear(self) -> None:
        with self._lock:
            self._runs.clear()


def to_response(orchestrator: MigrationOrchestrator) -> MigrationResponse:
    """Build a response, reading live counters while the run is in progress."""
    run = orchestrator.run
    if run.is_finished:
        success, failure = run.success_count, run.failure_count
    else:
        counts = orchestrator.counters.snapshot()
        success, failure = counts["success"], counts["failure"]

    return MigrationResponse(
        id=run.id,
        status=run.status,
        mode=run.mode,
        transformer=run.transformer,
        pattern=run.pattern,
        read_only=run.read_only,
        approximate_total=run.approximate_total,
        success_count=success,
        failure_count=failure,
        created_at=run.created_at,
        started_at=run.started_at,
        completed_at=run.completed_at,
        failed_keys_file=run.failed_keys_file,
        errors=run.errors,
    )


run_storage = RunStorage()
