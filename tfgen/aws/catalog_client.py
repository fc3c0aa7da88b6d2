"""
AWS catalog client.
Uses boto3 to read the region catalog, the latest Amazon Linux image and the
caller identity.
"""
from typing import Any, Dict, List, Optional
import logging

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from tfgen.core.config import config


logger = logging.getLogger(__name__)

AMAZON_LINUX_2_FILTERS = [
    {"Name": "name", "Values": ["amzn2-ami-hvm-*"]},
    {"Name": "architecture", "Values": ["x86_64"]},
    {"Name": "state", "Values": ["available"]},
]


class AWSCatalogError(Exception):
    """Raised when an AWS catalog lookup fails."""
    pass


class AWSCatalogClient:
    """Thin blocking wrapper over the STS and EC2 APIs."""

    def __init__(self, default_region: Optional[str] = None, session: Optional[Any] = None):
        self.default_region = default_region or config.AWS_DEFAULT_REGION
        self.session = session or boto3.session.Session()
        # No botocore retries; the circuit breaker handles repeated failures
        self.boto_config = Config(
            connect_timeout=config.AWS_LOOKUP_TIMEOUT,
            read_timeout=config.AWS_LOOKUP_TIMEOUT,
            retries={"max_attempts": 0},
        )

    def _client(self, service: str, region: Optional[str] = None):
        return self.session.client(
            service,
            region_name=region or self.default_region,
            config=self.boto_config,
        )

    def describe_regions(self) -> List[str]:
        """
        List region names enabled for the account, sorted by name.

        Raises:
            AWSCatalogError: If the EC2 call fails
        """
        try:
            response = self._client("ec2").describe_regions()
        except (BotoCoreError, ClientError) as error:
            raise AWSCatalogError(f"Failed to describe regions: {error}") from error
        regions = sorted(item["RegionName"] for item in response.get("Regions", []))
        if not regions:
            raise AWSCatalogError("EC2 returned no regions")
        return regions

    def latest_image(self, region: str) -> Dict[str, str]:
        """
        Newest available Amazon Linux 2 x86_64 image in a region.

        Returns:
            {"ami": image id, "name": image name}

        Raises:
            AWSCatalogError: If the call fails or no image matches
        """
        try:
            response = self._client("ec2", region).describe_images(
                Owners=["amazon"],
                Filters=AMAZON_LINUX_2_FILTERS,
            )
        except (BotoCoreError, ClientError) as error:
            raise AWSCatalogError(f"Failed to describe images in {region}: {error}") from error

        images = response.get("Images", [])
        if not images:
            raise AWSCatalogError(f"No Amazon Linux 2 image found in {region}")
        # CreationDate is ISO 8601, so string order is chronological
        newest = max(images, key=lambda image: image.get("CreationDate", ""))
        return {"ami": newest["ImageId"], "name": newest.get("Name", "Amazon Linux 2")}

    def caller_identity(self) -> Dict[str, str]:
        """
        Account of the configured credentials.

        Raises:
            AWSCatalogError: If credentials are missing or invalid
        """
        try:
            response = self._client("sts").get_caller_identity()
        except (BotoCoreError, ClientError) as error:
            raise AWSCatalogError(f"AWS identity check failed: {error}") from error
        return {"account": response["Account"], "region": self.default_region}
