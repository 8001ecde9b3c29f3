from .base import TierStorageProvider
from .azure_provider import AzureTierStorageProvider

__all__ = [
    "TierStorageProvider",
    "AzureTierStorageProvider",
]
