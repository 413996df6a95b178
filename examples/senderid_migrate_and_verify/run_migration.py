#!/usr/bin/env python3
"""
Example: migrate the senderid key family, then verify it

This script shows how to drive the orchestrator from Python instead of the
shard-migrate command: one migration run followed by a verification run over
the same keys.

Usage:
    # Dry run (reads the source, writes nothing)
    python run_migration.py --dry-run

    # Full migration and verification
    SOURCE_REDIS=localhost:6379 CLUSTER_SEEDS=localhost:7000 python run_migration.py

    # Show how sample keys would be renamed (no redis needed)
    python run_migration.py --demo

    # The same migration through the command line tool
    shard-migrate --config config.json
"""

import argparse
import logging
import os
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from shardmigrate.exceptions import ConfigurationError, MalformedKeyError
from shardmigrate.models.migration import MigrationConfig, MigrationMode
from shardmigrate.orchestrator import MigrationOrchestrator
from shardmigrate.transformers.registry import default_registry

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
        logging.FileHandler('migration.log')
    ]
)
logger = logging.getLogger(__name__)


def create_config(mode: MigrationMode, dry_run: bool = False) -> MigrationConfig:
    """Create migration configuration programmatically."""
    return MigrationConfig(
        src=os.environ.get("SOURCE_REDIS", "localhost:6379"),
        dst=os.environ.get("CLUSTER_SEEDS", "localhost:7000"),
        transformer="senderid",
        mode=mode,
        pool_size=20,
        read_only=dry_run,
        failed_keys_file=f"senderid.{mode.value}.failed.keys",
    )


def run(config: MigrationConfig) -> bool:
    """Run one pass; returns True if every key succeeded."""
    logger.info("=" * 60)
    logger.info(f"STARTING {config.mode.value.upper()}")
    logger.info("=" * 60)

    orchestrator = MigrationOrchestrator.from_config(config)
    try:
        result = orchestrator.run_migration()
    finally:
        orchestrator.close()

    written = orchestrator.finalize()

    logger.info(f"Status: {result.status.value}")
    logger.info(f"Succeeded: {result.success_count}")
    logger.info(f"Failed: {result.failure_count}")
    if result.duration_seconds:
        logger.info(f"Duration: {result.duration_seconds:.2f} seconds")
    if written:
        logger.warning(f"Failed keys written to {config.failed_keys_file}")

    return result.failure_count == 0


def demo_with_sample_keys():
    """Print the destination name of a few sample senderid keys."""
    transformer = default_registry().get("senderid")

    sample_keys = [
        "senderid:1:default:7",
        "senderid:91:MAXXXXXXXXXXXXXXXXXX:12",
        "senderid:44:broken",
    ]

    logger.info("\n=== Key Preview ===")
    for key in sample_keys:
        try:
            logger.info(f"{key} -> {transformer.transform(key)}")
        except MalformedKeyError as e:
            logger.warning(f"{key} -> {e}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Migrate and verify senderid keys"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Read from the source without writing to the cluster"
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Preview key renames with sample keys (no redis needed)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.demo:
        demo_with_sample_keys()
        return

    try:
        migrated = run(create_config(MigrationMode.MIGRATE, dry_run=args.dry_run))
        if args.dry_run:
            return
        verified = run(create_config(MigrationMode.VERIFY))
    except ConfigurationError as e:
        logger.error(f"Cannot start migration: {e}")
        sys.exit(1)

    if not (migrated and verified):
        sys.exit(1)


if __name__ == "__main__":
    main()
