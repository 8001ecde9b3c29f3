from .settings import (
    MigrationConfig,
    LoggingConfig,
    load_config,
    load_logging_config,
    ACCOUNT_KEY_ENV,
    MAX_BATCH_SIZE,
)

__all__ = [
    "MigrationConfig",
    "LoggingConfig",
    "load_config",
    "load_logging_config",
    "ACCOUNT_KEY_ENV",
    "MAX_BATCH_SIZE",
]
