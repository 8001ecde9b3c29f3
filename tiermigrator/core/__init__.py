"""Core models for the tier migrator."""

from .models import AccessTier, BlobRecord, BatchResult, MigrationResult

__all__ = [
    "AccessTier",
    "BlobRecord",
    "BatchResult",
    "MigrationResult",
]
