"""
Blob Tier Migrator

Moves the blobs of an Azure Storage container from one access tier to
another using batched set-tier requests.
"""

from .config import MigrationConfig, LoggingConfig, load_config
from .core import AccessTier, BlobRecord, BatchResult, MigrationResult
from .exceptions import (
    TierMigratorException,
    ConfigurationException,
    AuthenticationException,
    OperationException,
)
from .migrator import TierMigrator
from .providers import TierStorageProvider, AzureTierStorageProvider
from .auth import authenticate

__version__ = "1.0.0"

__all__ = [
    "TierMigrator",
    "authenticate",
    "MigrationConfig",
    "LoggingConfig",
    "load_config",
    "AccessTier",
    "BlobRecord",
    "BatchResult",
    "MigrationResult",
    "TierStorageProvider",
    "AzureTierStorageProvider",
    "TierMigratorException",
    "ConfigurationException",
    "AuthenticationException",
    "OperationException",
]
