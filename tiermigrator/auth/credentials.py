"""
Account SAS authentication for Azure Blob Storage.

The master account key never leaves this module: it only signs a
time-limited account SAS, and the returned service client carries the SAS.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from azure.storage.blob import AccountSasPermissions, ResourceTypes, generate_account_sas
from azure.storage.blob.aio import BlobServiceClient
from loguru import logger

from ..exceptions import AuthenticationException, ConfigurationException


def _account_url(account_name: str, account_url: Optional[str] = None) -> str:
    if account_url:
        return account_url.rstrip("/")
    return f"https://{account_name}.blob.core.windows.net"


def build_account_sas(account_name: str, account_key: Optional[str], expiry_hours: int) -> str:
    """
    Generate an account SAS for the blob service.

    The token covers service, container and object resources with read,
    list and write permissions, expiring ``expiry_hours`` from now.

    Raises:
        ConfigurationException: If the account name or key is missing, or expiry is not positive
        AuthenticationException: If the key cannot be used to sign the token
    """
    if not account_key:
        raise ConfigurationException(
            "Storage account key is not set",
            error_code="MISSING_ACCOUNT_KEY",
        )
    if not account_name:
        raise ConfigurationException("Storage account name is not set", error_code="MISSING_ACCOUNT_NAME")
    if expiry_hours < 1:
        raise ConfigurationException(f"SAS expiry must be at least 1 hour, got {expiry_hours}")

    expiry = datetime.now(timezone.utc) + timedelta(hours=expiry_hours)
    try:
        sas_token = generate_account_sas(
            account_name=account_name,
            account_key=account_key,
            resource_types=ResourceTypes(service=True, container=True, object=True),
            permission=AccountSasPermissions(read=True, write=True, list=True),
            expiry=expiry,
        )
    except Exception as e:
        logger.error(f"Failed to generate account SAS for {account_name}: {e}")
        raise AuthenticationException(
            f"Failed to generate account SAS: {e}",
            error_code="SAS_GENERATION_FAILED",
            details={"original_exception": type(e).__name__},
        ) from e

    logger.debug(f"Generated account SAS for {account_name}, expires {expiry.isoformat()}")
    return sas_token


def authenticate(
    account_name: str,
    account_key: Optional[str],
    expiry_hours: int = 1,
    account_url: Optional[str] = None,
) -> BlobServiceClient:
    """
    Return an async BlobServiceClient bound to a fresh account SAS.

    No request is sent here; the key is checked before anything else.
    """
    sas_token = build_account_sas(account_name, account_key, expiry_hours)
    url = _account_url(account_name, account_url)
    logger.info(f"Authenticating to {url} with an account SAS valid for {expiry_hours}h")
    return BlobServiceClient(account_url=url, credential=sas_token)
