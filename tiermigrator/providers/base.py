from abc import ABC, abstractmethod
from typing import AsyncIterator, Dict, List

from ..core.models import AccessTier, BlobRecord


class TierStorageProvider(ABC):
    """Abstract base class for storage backends that can change blob tiers."""

    @abstractmethod
    def list_blobs(self) -> AsyncIterator[BlobRecord]:
        """Lazily enumerate the container, metadata included."""
        pass

    @abstractmethod
    async def set_tier(self, blob_names: List[str], tier: AccessTier) -> Dict[str, int]:
        """Submit one batch tier request. Returns failed blob names mapped to HTTP status."""
        pass

    @abstractmethod
    async def close(self):
        """Close the underlying client and cleanup."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_value, traceback):
        await self.close()
