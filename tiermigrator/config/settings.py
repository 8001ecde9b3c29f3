from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, SecretStr, ValidationError, field_validator
from typing import Optional
from dotenv import load_dotenv, find_dotenv

from ..core.models import AccessTier
from ..exceptions import ConfigurationException

ACCOUNT_KEY_ENV = "AZURE_STORAGE_ACCOUNT_KEY"
MAX_BATCH_SIZE = 256


class MigrationConfig(BaseSettings):
    """Immutable settings for one migration run."""

    account_name: str = Field(default="sourcecms")
    account_key: Optional[SecretStr] = Field(default=None, validation_alias=ACCOUNT_KEY_ENV)
    account_url: Optional[str] = Field(default=None)
    container_name: str = Field(default="case-01")
    source_tier: AccessTier = Field(default=AccessTier.HOT)
    target_tier: AccessTier = Field(default=AccessTier.COOL)
    batch_size: int = Field(default=50, ge=1, le=MAX_BATCH_SIZE)
    sas_expiry_hours: int = Field(default=1, ge=1)
    max_concurrent_batches: int = Field(default=0, ge=0)
    name_prefix: Optional[str] = Field(default=None)
    dry_run: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="TIER_MIGRATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        frozen=True,
    )

    def __init__(self, **kwargs):
        # Force load environment variables before validation
        load_dotenv(find_dotenv(usecwd=True))
        super().__init__(**kwargs)

    @field_validator("source_tier", "target_tier", mode="before")
    @classmethod
    def _parse_tier(cls, v):
        return AccessTier.parse(v)

    def get_account_key(self) -> Optional[str]:
        if self.account_key is None:
            return None
        return self.account_key.get_secret_value()


LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)
    enable_file_logging: bool = Field(default=False)
    max_file_size: str = Field(default="10 MB")
    retention_days: int = Field(default=7, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    def __init__(self, **kwargs):
        load_dotenv(find_dotenv(usecwd=True))
        super().__init__(**kwargs)

    @field_validator("level", mode="before")
    @classmethod
    def _check_level(cls, v):
        level = str(v).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v!r}. Valid levels: {list(LOG_LEVELS)}")
        return level


def _describe(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "config"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def load_config(**overrides) -> MigrationConfig:
    """
    Build a MigrationConfig from the environment, applying non-None overrides.

    Raises:
        ConfigurationException: If any setting fails validation
    """
    kwargs = {k: v for k, v in overrides.items() if v is not None}
    try:
        return MigrationConfig(**kwargs)
    except ValidationError as e:
        raise ConfigurationException(
            f"Invalid configuration: {_describe(e)}",
            error_code="INVALID_CONFIG",
            details={"errors": e.errors()},
        ) from e


def load_logging_config(**overrides) -> LoggingConfig:
    kwargs = {k: v for k, v in overrides.items() if v is not None}
    try:
        return LoggingConfig(**kwargs)
    except ValidationError as e:
        raise ConfigurationException(f"Invalid logging configuration: {_describe(e)}") from e
