"""
AWS region code to pricing location mapping.
Pricing documentation uses human-readable location names, not region codes.
"""
from typing import Dict, Optional


AWS_REGION_TO_LOCATION: Dict[str, str] = {
    # US East
    "us-east-1": "US East (N. Virginia)",
    "us-east-2": "US East (Ohio)",

    # US West
    "us-west-1": "US West (N. California)",
    "us-west-2": "US West (Oregon)",

    # Asia Pacific
    "ap-south-1": "Asia Pacific (Mumbai)",
    "ap-southeast-1": "Asia Pacific (Singapore)",
    "ap-southeast-2": "Asia Pacific (Sydney)",
    "ap-northeast-1": "Asia Pacific (Tokyo)",
    "ap-northeast-2": "Asia Pacific (Seoul)",
    "ap-east-1": "Asia Pacific (Hong Kong)",

    # Europe
    "eu-west-1": "Europe (Ireland)",
    "eu-west-2": "Europe (London)",
    "eu-west-3": "Europe (Paris)",
    "eu-central-1": "Europe (Frankfurt)",
    "eu-north-1": "Europe (Stockholm)",
    "eu-south-1": "Europe (Milan)",

    # Middle East, Africa, Americas
    "me-south-1": "Middle East (Bahrain)",
    "af-south-1": "Africa (Cape Town)",
    "sa-east-1": "South America (Sao Paulo)",
    "ca-central-1": "Canada (Central)",
}


def get_region_location(region_code: str) -> Optional[str]:
    """
    Get the pricing location name for a region code.

    Args:
        region_code: AWS region code (e.g., 'eu-central-1')

    Returns:
        Location name (e.g., 'Europe (Frankfurt)'), or None if unknown
    """
    return AWS_REGION_TO_LOCATION.get(region_code)
