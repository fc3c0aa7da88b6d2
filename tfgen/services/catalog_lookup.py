"""
Async catalog lookups with fallback values.

Blocking boto3 calls run in a worker thread; every failure path (error,
timeout, open breaker) degrades to a configured default.
"""
from typing import Dict, List, Optional
import asyncio
import logging

from tfgen.aws.catalog_client import AWSCatalogClient
from tfgen.core.account_context import AccountContext
from tfgen.core.config import config
from tfgen.resilience.fallback import call_with_fallback


logger = logging.getLogger(__name__)


class CatalogLookup:
    """Region list, default image and identity, each with a fallback."""

    def __init__(self, client: Optional[AWSCatalogClient] = None, timeout: Optional[float] = None):
        self._client = client
        self.timeout = timeout or config.AWS_LOOKUP_TIMEOUT

    @property
    def client(self) -> AWSCatalogClient:
        # Created lazily so importing the app never touches AWS configuration
        if self._client is None:
            self._client = AWSCatalogClient()
        return self._client

    async def list_regions(self) -> List[str]:
        """Region catalog, or the hardcoded fallback list."""
        return await call_with_fallback(
            "aws_regions",
            lambda: asyncio.to_thread(self.client.describe_regions),
            list(config.FALLBACK_REGIONS),
            timeout=self.timeout,
        )

    async def latest_image(self, region: str) -> Dict[str, str]:
        """Newest Amazon Linux 2 image, or the hardcoded default image."""
        return await call_with_fallback(
            "aws_images",
            lambda: asyncio.to_thread(self.client.latest_image, region),
            {"ami": config.DEFAULT_AMI_ID, "name": config.DEFAULT_AMI_NAME},
            timeout=self.timeout,
        )

    async def account_identity(self) -> AccountContext:
        """Identity of the configured credentials; disconnected on failure."""
        identity = await call_with_fallback(
            "aws_identity",
            lambda: asyncio.to_thread(self.client.caller_identity),
            None,
            timeout=self.timeout,
        )
        if identity is None:
            return AccountContext(connected=False)
        return AccountContext(
            account=identity["account"],
            region=identity["region"],
            connected=True,
        )
