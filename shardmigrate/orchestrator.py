"""Migration orchestrator - runs the worker pool over the scanned keys."""

import json
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from tqdm import tqdm

from .exceptions import ConfigurationError, MigrationError
from .models.migration import (
    MigrationConfig,
    MigrationRun,
    MigrationStatus,
)
from .models.result import RunCounters
from .services.ledger import FailureLedger
from .services.scanner import ScanSource
from .services.transfer import TransferEngine
from .stores.base import DestinationStore, SourceStore
from .stores.redis_store import RedisClusterDestination, RedisSourceStore
from .transformers.base import BaseKeyTransformer
from .transformers.registry import TransformerRegistry, default_registry

logger = logging.getLogger(__name__)


class MigrationOrchestrator:
    """
    Orchestrates a complete migration or verification run.

    Handles:
    - Scanning the source for the transformer's key pattern
    - A fixed-size pool of workers sharing the scan
    - Success/failure counting and the failed-key ledger
    - Cooperative cancellation
    - Progress display and run reporting
    """

    def __init__(
        self,
        config: MigrationConfig,
        source: SourceStore,
        destination: DestinationStore,
        transformer: BaseKeyTransformer
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Migration configuration
            source: Store to scan and read from
            destination: Cluster to write to (or verify against)
            transformer: Transformer for the key family being migrated
        """
        self.config = config
        self.source = source
        self.destination = destination
        self.transformer = transformer
        self.engine = TransferEngine(
            source,
            destination,
            transformer,
            restore_ttl=config.restore_ttl,
            read_only=config.read_only,
        )

        # Run state, shared by all workers
        self.counters = RunCounters()
        self.ledger = FailureLedger()
        self.scan: Optional[ScanSource] = None
        self.run = MigrationRun(
            mode=config.mode,
            transformer=config.transformer,
            pattern=transformer.pattern(),
            read_only=config.read_only,
        )
        self._stop_event = threading.Event()
        self._stop_lock = threading.Lock()
        self._progress: Optional[tqdm] = None
        self._progress_lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: MigrationConfig,
        registry: Optional[TransformerRegistry] = None
    ) -> "MigrationOrchestrator":
        """
        Connect to both stores and build an orchestrator.

        Raises:
            ConfigurationError: if the configuration is invalid or either
                store cannot be reached
        """
        config.validate()
        registry = registry or default_registry()
        transformer = registry.get(config.transformer)

        try:
            source = RedisSourceStore.from_address(
                config.src,
                db=config.src_db,
                password=config.password,
                socket_timeout=config.socket_timeout,
            )
            source.ping()
        except MigrationError as e:
            raise ConfigurationError(f"Cannot connect to source {config.src}: {e}") from e

        try:
            destination = RedisClusterDestination.from_addresses(
                config.dst,
                password=config.password,
                socket_timeout=config.socket_timeout,
            )
            destination.ping()
        except MigrationError as e:
            source.close()
            raise ConfigurationError(f"Cannot connect to destination {config.dst}: {e}") from e

        logger.info(f"Connected to source {config.src} and destination {config.dst}")
        return cls(config, source, destination, transformer)

    def run_migration(self) -> MigrationRun:
        """
        Run the worker pool until the scan is exhausted or a stop is requested.

        Blocks until every worker has returned.

        Returns:
            MigrationRun with final counts and status
        """
        self.run.started_at = datetime.utcnow()
        with self._stop_lock:
            if not self.stopped:
                self.run.status = MigrationStatus.RUNNING
        self.scan = ScanSource(self.source, self.transformer.pattern(), self.config.scan_count)

        if self.config.count_keys:
            self.run.approximate_total = self.scan.approximate_count()

        self._progress = tqdm(
            total=self.run.approximate_total,
            unit="keys",
            disable=not self.config.show_progress,
        )

        logger.info(
            f"Starting {self.config.mode.value} of {self.run.pattern} "
            f"with {self.config.pool_size} workers"
        )

        try:
            with ThreadPoolExecutor(
                max_workers=self.config.pool_size,
                thread_name_prefix="migrate-worker",
            ) as executor:
                futures = [
                    executor.submit(self._worker, worker_id)
                    for worker_id in range(self.config.pool_size)
                ]
                for future in as_completed(futures):
                    future.result()

        except Exception as e:
            logger.error(f"Migration failed: {e}")
            self.run.errors.append({
                "error": str(e),
                "timestamp": datetime.utcnow().isoformat(),
            })

        finally:
            self._progress.close()
            self._finish()

        return self.run

    def _worker(self, worker_id: int) -> int:
        """Process keys until stopped or the scan runs dry; returns keys processed."""
        processed = 0

        while True:
            if self._stop_event.is_set():
                logger.debug(f"Worker {worker_id} stopping after {processed} keys")
                return processed

            try:
                key = next(self.scan)
            except StopIteration:
                return processed

            result = self.engine.process(key, self.config.mode)
            processed += 1

            with self._progress_lock:
                self._progress.update(1)

            self.counters.record(result)
            if not result.success:
                self.ledger.add(key)
                logger.error(f"Migration failed for key {key}: {result.reason}")

    def _finish(self) -> None:
        """Settle status and totals once all workers have returned."""
        self.run.completed_at = datetime.utcnow()
        self.run.success_count = self.counters.success
        self.run.failure_count = self.counters.failure

        if self.scan is not None and self.scan.error is not None:
            self.run.errors.append({
                "error": f"Scan iterator returned error: {self.scan.error}",
                "timestamp": datetime.utcnow().isoformat(),
            })

        # stop() reads is_finished under the same lock
        with self._stop_lock:
            if self.run.errors:
                self.run.status = MigrationStatus.FAILED
            elif self.stopped:
                self.run.status = MigrationStatus.CANCELLED
            else:
                self.run.status = MigrationStatus.COMPLETED

        logger.info(
            f"Run {self.run.status.value}: {self.run.success_count} succeeded, "
            f"{self.run.failure_count} failed"
        )

    def stop(self) -> bool:
        """
        Ask every worker to stop after its current key.

        Returns:
            False if a stop had already been requested
        """
        with self._stop_lock:
            if self._stop_event.is_set():
                logger.debug("Stop already requested")
                return False

            self._stop_event.set()
            if not self.run.is_finished:
                self.run.status = MigrationStatus.STOPPING
            logger.info("Stop requested; waiting for in-flight keys")
            return True

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def dump_failed(self, path: Optional[Union[str, Path]] = None) -> bool:
        """
        Write the failed-key ledger.

        Returns:
            True if a file was written
        """
        path = path or self.config.failed_keys_file
        written = self.ledger.dump(path)
        self.run.failed_keys_file = str(path) if written else None
        return written

    def finalize(self) -> bool:
        """
        Persist the run outputs: the failed-key ledger, then the report.

        Returns:
            True if a failed keys file was written
        """
        written = self.dump_failed()
        if self.config.report_file:
            self._save_report(self.config.report_file)
        return written

    def _save_report(self, path: Union[str, Path]) -> None:
        """Save the run report as JSON."""
        with open(path, "w") as f:
            json.dump(self.run.to_dict(), f, indent=2, default=str)
        logger.info(f"Saved migration report to {path}")

    def close(self) -> None:
        """Close both store connections."""
        self.source.close()
        self.destination.close()
