"""
Shared fixtures for tier migrator tests.
"""

import asyncio
from typing import Dict, List, Optional

import pytest
from loguru import logger

from tiermigrator.core import AccessTier, BlobRecord
from tiermigrator.providers import TierStorageProvider


class AsyncIter:
    """Async iterator over a list, optionally raising once the items run out."""

    def __init__(self, items, error: Optional[Exception] = None):
        self._items = list(items)
        self._error = error

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self._items:
            return self._items.pop(0)
        if self._error is not None:
            error, self._error = self._error, None
            raise error
        raise StopAsyncIteration


class FakeTierStorageProvider(TierStorageProvider):
    """In-memory container: set_tier really changes the tiers list_blobs reports."""

    def __init__(
        self,
        tiers: Dict[str, Optional[AccessTier]],
        metadata: Optional[Dict[str, Dict[str, str]]] = None,
        rejected: Optional[Dict[str, int]] = None,
        list_error: Optional[Exception] = None,
        set_tier_error: Optional[Exception] = None,
        delay: float = 0.0,
        raw_tiers: Optional[Dict[str, str]] = None,
    ):
        self.tiers = dict(tiers)
        self.metadata = metadata or {}
        self.rejected = rejected or {}
        self.list_error = list_error
        self.set_tier_error = set_tier_error
        self.delay = delay
        self.raw_tiers = raw_tiers or {}
        self.calls: List[tuple] = []
        self.list_calls = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def list_blobs(self):
        self.list_calls += 1
        for name, tier in list(self.tiers.items()):
            yield BlobRecord(
                name=name,
                url=f"https://acct.blob.core.windows.net/case-01/{name}",
                tier=tier,
                metadata=self.metadata.get(name, {}),
                raw_tier=self.raw_tiers.get(name, tier.value if tier else None),
            )
        if self.list_error is not None:
            raise self.list_error

    async def set_tier(self, blob_names, tier):
        self.calls.append((list(blob_names), tier))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if self.set_tier_error is not None:
                raise self.set_tier_error
            failures = {name: self.rejected[name] for name in blob_names if name in self.rejected}
            for name in blob_names:
                if name not in failures:
                    self.tiers[name] = tier
            return failures
        finally:
            self.in_flight -= 1

    async def close(self):
        self.closed = True

    @property
    def batch_sizes(self) -> List[int]:
        return [len(names) for names, _ in self.calls]

    @property
    def submitted(self) -> List[str]:
        return [name for names, _ in self.calls for name in names]


def make_tiers(at_source: int, others: int = 0, source=AccessTier.HOT, other=AccessTier.COOL):
    """Interleave ``at_source`` blobs at ``source`` with ``others`` blobs at ``other``."""
    tiers: Dict[str, Optional[AccessTier]] = {}
    total = at_source + others
    src_left, other_left = at_source, others
    for i in range(total):
        if src_left and (i % 2 == 0 or not other_left):
            tiers[f"src-{i:04d}.bin"] = source
            src_left -= 1
        else:
            tiers[f"other-{i:04d}.bin"] = other
            other_left -= 1
    return tiers


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep real credentials and .env files out of the tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("AZURE_STORAGE_ACCOUNT_KEY", raising=False)
    for name in [
        "TIER_MIGRATOR_ACCOUNT_NAME",
        "TIER_MIGRATOR_ACCOUNT_URL",
        "TIER_MIGRATOR_CONTAINER_NAME",
        "TIER_MIGRATOR_SOURCE_TIER",
        "TIER_MIGRATOR_TARGET_TIER",
        "TIER_MIGRATOR_BATCH_SIZE",
        "TIER_MIGRATOR_SAS_EXPIRY_HOURS",
        "TIER_MIGRATOR_MAX_CONCURRENT_BATCHES",
        "TIER_MIGRATOR_NAME_PREFIX",
        "TIER_MIGRATOR_DRY_RUN",
        "LOG_LEVEL",
        "LOG_LOG_FILE",
        "LOG_ENABLE_FILE_LOGGING",
    ]:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def log_lines():
    """Capture loguru messages emitted during the test."""
    lines: List[str] = []
    sink_id = logger.add(lambda message: lines.append(message.record["message"]), level="DEBUG")
    yield lines
    logger.remove(sink_id)


@pytest.fixture
def account_key():
    # Any base64 string signs a SAS locally.
    return "c2VjcmV0LWFjY291bnQta2V5LWZvci10ZXN0cw=="
