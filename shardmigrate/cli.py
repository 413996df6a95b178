"""Command line entry point for the shard migration tool."""

import argparse
import json
import logging
import signal
import sys
from typing import List, Optional

from .exceptions import ConfigurationError, MalformedKeyError
from .models.migration import MigrationConfig, MigrationMode, MigrationStatus
from .orchestrator import MigrationOrchestrator
from .transformers.registry import default_registry

logger = logging.getLogger(__name__)


def parse_bool(value: str) -> bool:
    """Parse a boolean flag value such as "true", "0" or "yes"."""
    lowered = value.strip().lower()
    if lowered in ("1", "t", "true", "y", "yes"):
        return True
    if lowered in ("0", "f", "false", "n", "no"):
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {value}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shard-migrate",
        description="Migrate keys from a single-node redis to a redis cluster"
    )

    parser.add_argument(
        "-src", "--src",
        help="Address of source redis (non-clustered): Example: redis-nonclusterdev.example.com:6379"
    )
    parser.add_argument(
        "-dst", "--dst",
        help="Address of destination redis (clustered): Example: redis-clusterdev.example.com:6379"
    )
    parser.add_argument(
        "-verify", "--verify",
        nargs="?", const=True, default=None, type=parse_bool,
        help="Verify keys after migration"
    )
    parser.add_argument("--config", help="Path to a JSON migration config file")
    parser.add_argument("--transformer", help="Key family to migrate (see --list-transformers)")
    parser.add_argument("--pool-size", type=int, help="Number of concurrent workers (default: 50)")
    parser.add_argument("--scan-count", type=int, help="Keys requested per SCAN call (default: 1000)")
    parser.add_argument("--read-only", action="store_true",
                        help="Fetch values from the source without writing to the destination")
    parser.add_argument("--no-ttl", action="store_true", help="Do not carry TTLs over")
    parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar")
    parser.add_argument("--no-count", action="store_true",
                        help="Skip the blocking key count used to size the progress bar")
    parser.add_argument("--failed-keys-file", help="Where to write failed keys (default: failed.keys)")
    parser.add_argument("--report", help="Write a JSON run report to this path")
    parser.add_argument("--list-transformers", action="store_true",
                        help="List available transformers and exit")
    parser.add_argument("--preview", nargs="+", metavar="KEY",
                        help="Print the destination name of each key and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    return parser


def build_config(args: argparse.Namespace) -> MigrationConfig:
    """Merge the config file (if any) with command line flags."""
    if args.config:
        with open(args.config) as f:
            config = MigrationConfig.from_dict(json.load(f))
    else:
        config = MigrationConfig()

    if args.src is not None:
        config.src = args.src
    if args.dst is not None:
        config.dst = args.dst
    if args.verify is not None:
        config.mode = MigrationMode.VERIFY if args.verify else MigrationMode.MIGRATE
    if args.transformer:
        config.transformer = args.transformer
    if args.pool_size is not None:
        config.pool_size = args.pool_size
    if args.scan_count is not None:
        config.scan_count = args.scan_count
    if args.read_only:
        config.read_only = True
    if args.no_ttl:
        config.restore_ttl = False
    if args.no_progress:
        config.show_progress = False
    if args.no_count:
        config.count_keys = False
    if args.failed_keys_file:
        config.failed_keys_file = args.failed_keys_file
    if args.report:
        config.report_file = args.report

    return config


def list_transformers() -> None:
    print("\n=== Available Transformers ===")
    for name, pattern in default_registry().describe().items():
        print(f"  {name:<24} {pattern}")


def preview_keys(transformer_name: str, keys: List[str]) -> int:
    """Print each key's destination name; returns the number of malformed keys."""
    transformer = default_registry().get(transformer_name)
    malformed = 0
    for key in keys:
        try:
            print(f"{key} -> {transformer.transform(key)}")
        except MalformedKeyError as e:
            print(f"{key} -> ERROR: {e}")
            malformed += 1
    return malformed


def install_interrupt_handler(orchestrator: MigrationOrchestrator) -> None:
    """Turn SIGINT into a cooperative stop; workers finish their current key."""

    def handle_interrupt(signum, frame):
        if orchestrator.stop():
            print("Received interrupt. Shutting down...")

    signal.signal(signal.SIGINT, handle_interrupt)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Set up logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if args.list_transformers:
        list_transformers()
        return 0

    try:
        config = build_config(args)

        if args.preview:
            return 1 if preview_keys(config.transformer, args.preview) else 0

        orchestrator = MigrationOrchestrator.from_config(config)

    except (ConfigurationError, OSError, ValueError) as e:
        logger.critical(f"Cannot start migration: {e}")
        return 1

    install_interrupt_handler(orchestrator)

    try:
        run = orchestrator.run_migration()
    finally:
        orchestrator.close()

    print(f"\nDone; successCount = {run.success_count}; failureCount = {run.failure_count};")

    try:
        written = orchestrator.finalize()
    except OSError as e:
        logger.critical(f"Failed to write failed keys to file: {e}")
        return 1

    if written:
        print(f"Failed keys written to {config.failed_keys_file} file")

    return 1 if run.status == MigrationStatus.FAILED else 0


if __name__ == "__main__":
    sys.exit(main())
