from typing import Dict, Optional


class TierMigratorException(Exception):
    """Base exception for the tier migrator."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict] = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class ConfigurationException(TierMigratorException):
    """Raised when configuration is invalid. Always raised before any network call."""
    pass


class AuthenticationException(TierMigratorException):
    """Raised when the SAS credential cannot be built."""
    pass


class OperationException(TierMigratorException):
    """Raised when listing blobs or submitting a batch fails."""
    pass
