"""
Resource composer.

Assembles matched fragments into one document: one provider preamble, one
shared network fragment, then the fragments in pattern order. Fragments are
concatenated verbatim.
"""
from typing import Sequence
import logging

from tfgen.domain.pattern_models import Fragment, GeneratedDocument


logger = logging.getLogger(__name__)


AWS_PROVIDER_VERSION = "~> 5.0"

NETWORK_EXPLANATION = (
    "Sets up a complete VPC with public and private subnets across two "
    "availability zones, an internet gateway, and public routing."
)

DEFAULT_NETWORK_EXPLANATION = (
    "I couldn't identify specific AWS resources from your description. "
    "Here's a basic VPC setup as a starting point. Try describing specific services "
    'like "web server", "database", "S3 bucket", "load balancer", '
    '"lambda function", "CloudFront CDN" or "static website".'
)

NETWORK_FRAGMENT = '''# VPC and networking setup
resource "aws_vpc" "main" {
  cidr_block           = "10.0.0.0/16"
  enable_dns_hostnames = true
  enable_dns_support   = true

  tags = {
    Name = "Main VPC"
  }
}

resource "aws_internet_gateway" "main" {
  vpc_id = aws_vpc.main.id

  tags = {
    Name = "Main Internet Gateway"
  }
}

resource "aws_subnet" "public" {
  vpc_id                  = aws_vpc.main.id
  cidr_block              = "10.0.1.0/24"
  availability_zone       = data.aws_availability_zones.available.names[0]
  map_public_ip_on_launch = true

  tags = {
    Name = "Public Subnet A"
  }
}

resource "aws_subnet" "private_a" {
  vpc_id            = aws_vpc.main.id
  cidr_block        = "10.0.2.0/24"
  availability_zone = data.aws_availability_zones.available.names[0]

  tags = {
    Name = "Private Subnet A"
  }
}

resource "aws_subnet" "public_b" {
  vpc_id                  = aws_vpc.main.id
  cidr_block              = "10.0.3.0/24"
  availability_zone       = data.aws_availability_zones.available.names[1]
  map_public_ip_on_launch = true

  tags = {
    Name = "Public Subnet B"
  }
}

resource "aws_subnet" "private_b" {
  vpc_id            = aws_vpc.main.id
  cidr_block        = "10.0.4.0/24"
  availability_zone = data.aws_availability_zones.available.names[1]

  tags = {
    Name = "Private Subnet B"
  }
}

resource "aws_route_table" "public" {
  vpc_id = aws_vpc.main.id

  route {
    cidr_block = "0.0.0.0/0"
    gateway_id = aws_internet_gateway.main.id
  }

  tags = {
    Name = "Public Route Table"
  }
}

resource "aws_route_table_association" "public" {
  subnet_id      = aws_subnet.public.id
  route_table_id = aws_route_table.public.id
}

resource "aws_route_table_association" "public_b" {
  subnet_id      = aws_subnet.public_b.id
  route_table_id = aws_route_table.public.id
}

data "aws_availability_zones" "available" {
  state = "available"
}'''

DEFAULT_NETWORK_FRAGMENT = '''# Basic VPC setup
resource "aws_vpc" "main" {
  cidr_block           = "10.0.0.0/16"
  enable_dns_hostnames = true
  enable_dns_support   = true

  tags = {
    Name = "Main VPC"
  }
}

resource "aws_subnet" "public" {
  vpc_id                  = aws_vpc.main.id
  cidr_block              = "10.0.1.0/24"
  availability_zone       = data.aws_availability_zones.available.names[0]
  map_public_ip_on_launch = true

  tags = {
    Name = "Public Subnet"
  }
}

data "aws_availability_zones" "available" {
  state = "available"
}'''


def render_preamble(region: str) -> str:
    """Provider requirements and the region-bound provider block."""
    return f'''terraform {{
  required_providers {{
    aws = {{
      source  = "hashicorp/aws"
      version = "{AWS_PROVIDER_VERSION}"
    }}
  }}
}}

provider "aws" {{
  region = "{region}"
}}

'''


def compose(fragments: Sequence[Fragment], region: str) -> GeneratedDocument:
    """
    Compose fragments into a single document.

    Args:
        fragments: Fragments in pattern evaluation order
        region: Region bound in the provider block

    Returns:
        GeneratedDocument with exactly one preamble and one network fragment.
        With no fragments the document is the network-only default.
    """
    if not fragments:
        logger.info("No patterns matched, composing network-only default for %s", region)
        network = Fragment(code=DEFAULT_NETWORK_FRAGMENT, explanation=DEFAULT_NETWORK_EXPLANATION)
        return GeneratedDocument(
            region=region,
            code=render_preamble(region) + network.code,
            fragments=(network,),
            network_only=True,
        )

    network = Fragment(code=NETWORK_FRAGMENT, explanation=NETWORK_EXPLANATION)
    ordered = (network,) + tuple(fragments)
    code = render_preamble(region) + "\n\n".join(fragment.code for fragment in ordered)
    logger.info(
        "Composed document region=%s fragments=%s",
        region,
        [fragment.pattern_id for fragment in fragments],
    )
    return GeneratedDocument(region=region, code=code, fragments=ordered)


def compose_explanation(document: GeneratedDocument) -> str:
    """Plain-text explanation assembled from the document's fragments."""
    parts = [f"Region: {document.region}"]
    detected = document.pattern_ids
    if detected:
        parts.append("Detected resources: " + ", ".join(detected))
    parts.extend(fragment.explanation for fragment in document.fragments)
    parts.append(
        "Next steps: Save as main.tf, run `terraform init`, then `terraform plan` "
        "to review changes."
    )
    return "\n\n".join(parts)
