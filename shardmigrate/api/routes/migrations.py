"""Migration run endpoints."""

import logging
from pathlib import Path

from fastapi import APIRouter, HTTPException, BackgroundTasks

from ...exceptions import ConfigurationError
from ...models.migration import MigrationConfig, MigrationMode
from ...orchestrator import MigrationOrchestrator
from ..models import (
    MigrationCreate,
    MigrationResponse,
    MigrationListResponse,
)
from ..storage import run_storage, to_response

logger = logging.getLogger(__name__)

router = APIRouter()

# Failed keys of API runs, one file per run
FAILED_KEYS_DIR = Path("./data/failed_keys")


def build_orchestrator(config: MigrationConfig) -> MigrationOrchestrator:
    """Connect to both stores for a new run."""
    return MigrationOrchestrator.from_config(config)


def failed_keys_path(run_id: str) -> Path:
    return FAILED_KEYS_DIR / f"failed-{run_id}.keys"


@router.post("", response_model=MigrationResponse)
def create_migration(data: MigrationCreate, background_tasks: BackgroundTasks):
    """
    Validate the configuration, connect, and start a run in the background.

    Connecting pings both stores, so this handler runs in the threadpool.
    """
    config = MigrationConfig(
        src=data.src,
        dst=data.dst,
        transformer=data.transformer,
        mode=MigrationMode.VERIFY if data.verify else MigrationMode.MIGRATE,
        pool_size=data.pool_size,
        scan_count=data.scan_count,
        restore_ttl=data.restore_ttl,
        read_only=data.read_only,
        count_keys=data.count_keys,
        show_progress=False,
    )

    try:
        orchestrator = build_orchestrator(config)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    orchestrator.config.failed_keys_file = str(failed_keys_path(orchestrator.run.id))
    run_storage.add(orchestrator)
    background_tasks.add_task(run_migration_task, orchestrator)

    return to_response(orchestrator)


@router.get("", response_model=MigrationListResponse)
async def list_migrations():
    """List all runs started by this process."""
    migrations = [to_response(o) for o in run_storage.list_all()]
    return MigrationListResponse(migrations=migrations, total=len(migrations))


@router.get("/{migration_id}", response_model=MigrationResponse)
async def get_migration(migration_id: str):
    """Get a specific run."""
    orchestrator = run_storage.get(migration_id)
    if not orchestrator:
        raise HTTPException(status_code=404, detail="Migration not found")
    return to_response(orchestrator)


@router.post("/{migration_id}/cancel")
async def cancel_migration(migration_id: str):
    """Ask a running migration to stop after its in-flight keys."""
    orchestrator = run_storage.get(migration_id)
    if not orchestrator:
        raise HTTPException(status_code=404, detail="Migration not found")

    if orchestrator.run.is_finished:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot cancel migration in status: {orchestrator.run.status.value}"
        )

    if not orchestrator.stop():
        return {"status": "already_stopping"}
    return {"status": "stopping"}


def run_migration_task(orchestrator: MigrationOrchestrator) -> None:
    """Background task: run to completion, then persist failed keys."""
    try:
        orchestrator.run_migration()
        FAILED_KEYS_DIR.mkdir(parents=True, exist_ok=True)
        orchestrator.finalize()
    except OSError as e:
        logger.error(f"Failed to write failed keys to file: {e}")
        orchestrator.run.errors.append({"error": f"Failed to write failed keys: {e}"})
    finally:
        orchestrator.close()
