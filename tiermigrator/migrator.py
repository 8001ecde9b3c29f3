"""
Batched access-tier migration for a single blob container.
"""

import asyncio
from typing import List, Optional

from loguru import logger

from .auth import authenticate
from .config import ACCOUNT_KEY_ENV, MAX_BATCH_SIZE, MigrationConfig
from .core import AccessTier, BatchResult, BlobRecord, MigrationResult
from .exceptions import ConfigurationException
from .providers import AzureTierStorageProvider, TierStorageProvider
from .utils import ExecutionTimer, to_operation_error

SEPARATOR = "-" * 25
SUMMARY_SEPARATOR = "-" * 36


class TierMigrator:
    """
    Moves every blob found at the source tier to the target tier.

    Blobs are enumerated once; matching names are grouped into batches of
    ``batch_size`` and each full batch is sent as a single batch request
    without waiting for the previous ones. All pending requests are joined
    once enumeration ends.
    """

    def __init__(self, config: MigrationConfig, provider: Optional[TierStorageProvider] = None):
        """
        Args:
            config: Settings for this run
            provider: Storage backend to use instead of authenticating against Azure.
                An injected provider is not closed by the migrator.
        """
        self.config = config
        self._provider = provider

    @staticmethod
    def validate_config(source_tier: AccessTier, target_tier: AccessTier) -> None:
        if source_tier == target_tier:
            raise ConfigurationException(
                "Source and Target Access Tiers cannot be the same!",
                error_code="SAME_TIER",
                details={"tier": str(source_tier)},
            )

    def _check_account_key(self) -> None:
        if not self.config.get_account_key():
            raise ConfigurationException(
                f"The environment variable: {ACCOUNT_KEY_ENV}, is not set!",
                error_code="MISSING_ACCOUNT_KEY",
            )

    def _create_provider(self) -> TierStorageProvider:
        service_client = authenticate(
            self.config.account_name,
            self.config.get_account_key(),
            self.config.sas_expiry_hours,
            account_url=self.config.account_url,
        )
        return AzureTierStorageProvider(
            service_client,
            self.config.container_name,
            name_prefix=self.config.name_prefix,
        )

    async def run(self) -> MigrationResult:
        """
        Validate, authenticate, migrate and report.

        Never raises for setup or runtime errors: the returned result carries the
        exception in ``error`` so callers can map it to an exit status.
        """
        config = self.config
        result = MigrationResult(config.source_tier, config.target_tier, dry_run=config.dry_run)
        logger.info("Starting Blob operations")

        # Runtime covers client setup as well as enumeration and the final join.
        with ExecutionTimer() as timer:
            try:
                if self._provider is None:
                    self._check_account_key()
                self.validate_config(config.source_tier, config.target_tier)
                provider = self._provider or self._create_provider()
            except Exception as e:
                result.error = to_operation_error(e, "Failed to initialize Azure Blob Storage client")
                logger.error(str(result.error))
                return result

            try:
                result = await self.enumerate_and_dispatch(
                    provider,
                    config.source_tier,
                    config.target_tier,
                    config.batch_size,
                    max_concurrent_batches=config.max_concurrent_batches,
                    dry_run=config.dry_run,
                )
            finally:
                if self._provider is None:
                    await self._close(provider)

        result.elapsed = timer.execution_time
        self.report(result)
        return result

    async def _close(self, provider: TierStorageProvider) -> None:
        try:
            await provider.close()
        except Exception as e:
            logger.warning(f"Error closing storage provider: {e}")

    async def enumerate_and_dispatch(
        self,
        provider: TierStorageProvider,
        source_tier: AccessTier,
        target_tier: AccessTier,
        batch_size: int,
        max_concurrent_batches: int = 0,
        dry_run: bool = False,
    ) -> MigrationResult:
        """
        Enumerate the container and submit batch tier requests.

        Args:
            provider: Storage backend to enumerate and update
            source_tier: Only blobs currently at this tier are moved
            target_tier: Tier the matching blobs are moved to
            batch_size: Blobs per batch request, 1..256
            max_concurrent_batches: Cap on in-flight batch requests, 0 for no cap
            dry_run: Count and report batches without submitting them

        Returns:
            MigrationResult with ``total_processed`` and ``elapsed`` set. Runtime
            failures are stored in ``error`` instead of being raised.
        """
        self.validate_config(source_tier, target_tier)
        if not 1 <= batch_size <= MAX_BATCH_SIZE:
            raise ConfigurationException(f"Batch size must be between 1 and {MAX_BATCH_SIZE}, got {batch_size}")

        result = MigrationResult(source_tier, target_tier, dry_run=dry_run)
        semaphore = asyncio.Semaphore(max_concurrent_batches) if max_concurrent_batches > 0 else None
        tasks: List[asyncio.Task] = []
        batch: List[str] = []

        def flush() -> None:
            result.batch_count += 1
            batch_result = BatchResult(batch_number=result.batch_count, blob_names=list(batch))
            result.batches.append(batch_result)
            result.total_processed += batch_result.size
            if not dry_run:
                tasks.append(asyncio.create_task(self._submit(provider, batch_result, target_tier, semaphore)))
            batch.clear()

        with ExecutionTimer() as timer:
            try:
                logger.info("Enumerating blobs ...")
                async for record in provider.list_blobs():
                    self._report_blob(record)
                    if record.tier == source_tier:
                        batch.append(record.name)

                    if len(batch) == batch_size:
                        flush()
                        logger.info(SEPARATOR)
                        verb = "to move" if dry_run else "moved"
                        logger.info(f"No. of Blobs {verb} to {target_tier} tier: {result.total_processed}")

                if batch:
                    flush()
            except Exception as e:
                result.error = to_operation_error(e, "Blob enumeration failed")

            # Batches already sent are still joined when enumeration failed part way.
            if tasks:
                outcomes = await asyncio.gather(*tasks, return_exceptions=True)
                errors = [o for o in outcomes if isinstance(o, BaseException)]
                if errors and result.error is None:
                    result.error = to_operation_error(errors[0], "Batch tier request failed")
                if len(errors) > 1:
                    logger.error(f"{len(errors)} of {len(tasks)} batch requests failed")

        result.elapsed = timer.execution_time
        return result

    async def _submit(
        self,
        provider: TierStorageProvider,
        batch: BatchResult,
        target_tier: AccessTier,
        semaphore: Optional[asyncio.Semaphore],
    ) -> BatchResult:
        if semaphore is None:
            batch.failures = await provider.set_tier(batch.blob_names, target_tier)
        else:
            async with semaphore:
                batch.failures = await provider.set_tier(batch.blob_names, target_tier)
        logger.debug(
            f"Batch {batch.batch_number} finished: {batch.size - len(batch.failures)}/{batch.size} accepted"
        )
        return batch

    @staticmethod
    def _report_blob(record: BlobRecord) -> None:
        logger.info(SEPARATOR)
        logger.info(f"\tName: {record.name}")
        logger.info(f"\tUri: {record.url}")
        logger.info(f"\tAccess Tier: {record.raw_tier or record.tier or 'Unknown'}")
        if record.metadata:
            for key, value in record.metadata.items():
                logger.info(f"Key: {key}, Value: {value}")
        else:
            logger.info("\tNo metadata for this blob item")

    @staticmethod
    def report(result: MigrationResult) -> None:
        if result.error is not None:
            logger.error(f"Encountered exception: {result.error}")
            return

        logger.info(SUMMARY_SEPARATOR)
        if result.dry_run:
            logger.info(
                f"Dry run: {result.total_processed} Blobs would be moved from {result.source_tier} "
                f"to {result.target_tier} tier in {result.batch_count} batches."
            )
        else:
            logger.info(f"Moved {result.total_processed} Blobs from {result.source_tier} to {result.target_tier} tier.")
        failed = result.failed
        if failed:
            logger.warning(f"{len(failed)} Blobs were rejected by the service:")
            for name, status in failed.items():
                logger.warning(f"\t{name} (status {status})")
        logger.info(f"Total Runtime: {result.elapsed_text}")
        logger.info(SUMMARY_SEPARATOR)
