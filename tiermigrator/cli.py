"""
Command line entry point for the blob tier migrator.

Usage:
    blob-tier-migrator [--container NAME] [--source-tier TIER] [--target-tier TIER] [--batch-size N]

Examples:
    AZURE_STORAGE_ACCOUNT_KEY=... blob-tier-migrator --account-name myacct --container logs
    blob-tier-migrator --source-tier Cool --target-tier Archive --batch-size 256
    blob-tier-migrator --prefix 2020/ --dry-run

Settings not given on the command line come from TIER_MIGRATOR_* environment
variables or a .env file. The account key is only read from the environment.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from loguru import logger

from .config import ACCOUNT_KEY_ENV, MAX_BATCH_SIZE, load_config, load_logging_config
from .core import MigrationResult
from .exceptions import ConfigurationException
from .migrator import TierMigrator
from .utils import log_exceptions, log_manager

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_PARTIAL_FAILURE = 3
# 2 is left to argparse usage errors
EXIT_OPERATION_ERROR = 4


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blob-tier-migrator",
        description=f"Move Azure blobs between access tiers in batches. The account key is read from {ACCOUNT_KEY_ENV}.",
    )
    parser.add_argument("--account-name", help="Storage account name")
    parser.add_argument("--account-url", help="Blob service endpoint (default: https://<account>.blob.core.windows.net)")
    parser.add_argument("--container", dest="container_name", help="Container to migrate")
    parser.add_argument("--source-tier", help="Tier blobs are moved from (Hot, Cool, Cold, Archive)")
    parser.add_argument("--target-tier", help="Tier blobs are moved to (Hot, Cool, Cold, Archive)")
    parser.add_argument("--batch-size", type=int, help=f"Blobs per batch request, at most {MAX_BATCH_SIZE}")
    parser.add_argument("--sas-expiry-hours", type=int, help="Lifetime of the account SAS in hours")
    parser.add_argument("--max-concurrent-batches", type=int, help="Cap on in-flight batch requests (0 = no cap)")
    parser.add_argument("--prefix", dest="name_prefix", help="Only consider blobs whose names start with this prefix")
    parser.add_argument("--dry-run", action="store_true", default=None, help="List and count without changing tiers")
    parser.add_argument("--log-level", help="Console log level (default: INFO)")
    return parser


def exit_code_for(result: MigrationResult) -> int:
    if isinstance(result.error, ConfigurationException):
        return EXIT_CONFIG_ERROR
    if result.error is not None:
        return EXIT_OPERATION_ERROR
    if result.failed:
        return EXIT_PARTIAL_FAILURE
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        log_manager.configure(load_logging_config(level=args.log_level))
        config = load_config(
            account_name=args.account_name,
            account_url=args.account_url,
            container_name=args.container_name,
            source_tier=args.source_tier,
            target_tier=args.target_tier,
            batch_size=args.batch_size,
            sas_expiry_hours=args.sas_expiry_hours,
            max_concurrent_batches=args.max_concurrent_batches,
            name_prefix=args.name_prefix,
            dry_run=args.dry_run,
        )
    except ConfigurationException as e:
        log_manager.enable_console()
        logger.error(str(e))
        return EXIT_CONFIG_ERROR

    try:
        result = _execute(config)
    except Exception:
        return EXIT_OPERATION_ERROR
    return exit_code_for(result)


@log_exceptions(custom_message="Unexpected failure during migration")
def _execute(config) -> MigrationResult:
    return asyncio.run(TierMigrator(config).run())


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
