from typing import AsyncIterator, Dict, List, Optional
from urllib.parse import quote, urlsplit, urlunsplit

from azure.storage.blob.aio import BlobServiceClient
from loguru import logger

from .base import TierStorageProvider
from ..core.models import AccessTier, BlobRecord
from ..exceptions import OperationException
from ..utils.error_handler import convert_exceptions

SUCCESS_STATUS_CODES = (200, 202)


def _strip_query(url: str) -> str:
    """Drop the query string so SAS tokens never reach the logs."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path.rstrip("/"), "", ""))


async def _collect(responses) -> list:
    if responses is None:
        return []
    if hasattr(responses, "__aiter__"):
        return [r async for r in responses]
    return list(responses)


class AzureTierStorageProvider(TierStorageProvider):
    """Azure Blob Storage implementation backed by an async ContainerClient."""

    def __init__(
        self,
        service_client: BlobServiceClient,
        container_name: str,
        name_prefix: Optional[str] = None,
    ):
        """
        Args:
            service_client: Authenticated async BlobServiceClient
            container_name: Container to enumerate and update
            name_prefix: Only enumerate blobs whose names start with this prefix
        """
        self.service_client = service_client
        self.container_name = container_name
        self.name_prefix = name_prefix
        self.container_client = service_client.get_container_client(container_name)
        self._base_url = _strip_query(self.container_client.url)

    def blob_url(self, blob_name: str) -> str:
        return f"{self._base_url}/{quote(blob_name, safe='/~')}"

    @convert_exceptions({Exception: OperationException})
    async def list_blobs(self) -> AsyncIterator[BlobRecord]:
        logger.debug(f"Listing blobs in container {self.container_name} (prefix={self.name_prefix!r})")
        async for props in self.container_client.list_blobs(
            name_starts_with=self.name_prefix,
            include=["metadata"],
        ):
            yield BlobRecord(
                name=props.name,
                url=self.blob_url(props.name),
                tier=AccessTier.from_sdk(props.blob_tier),
                metadata=dict(props.metadata or {}),
                raw_tier=AccessTier.sdk_name(props.blob_tier),
            )

    @convert_exceptions({Exception: OperationException})
    async def set_tier(self, blob_names: List[str], tier: AccessTier) -> Dict[str, int]:
        if not blob_names:
            return {}
        responses = await self.container_client.set_standard_blob_tier_blobs(
            tier.value,
            *blob_names,
            raise_on_any_failure=False,
        )
        failures: Dict[str, int] = {}
        for name, response in zip(blob_names, await _collect(responses)):
            status = getattr(response, "status_code", None)
            if status not in SUCCESS_STATUS_CODES:
                failures[name] = status
                logger.warning(f"Tier change to {tier} rejected for {name} (status {status})")
        return failures

    async def close(self):
        logger.info("Closing Azure Blob Storage client")
        await self.container_client.close()
        await self.service_client.close()
