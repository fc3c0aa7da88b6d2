"""
Pattern catalog and matcher.

The catalog is a fixed, ordered table of infrastructure intents. Every
pattern is tested against the description independently; each one that
triggers contributes its own fragment, in catalog order.
"""
from typing import List, Optional, Sequence, Tuple
from dataclasses import dataclass, replace
import hashlib
import logging

from tfgen.core.config import config
from tfgen.domain.pattern_models import Fragment, Params, Pattern


logger = logging.getLogger(__name__)


HARDCODED_DEFAULT_REGION = "eu-central-1"

# First match wins, regardless of where the word sits in the text
SIZE_PRECEDENCE: Tuple[str, ...] = ("large", "medium", "small")
DEFAULT_SIZE = "micro"

# engine -> (engine_version, port)
ENGINE_DEFAULTS = {
    "postgres": ("15.4", 5432),
    "mariadb": ("10.11", 3306),
    "mysql": ("8.0", 3306),
}
ENGINE_PRECEDENCE: Tuple[str, ...] = ("postgres", "mariadb")
DEFAULT_ENGINE = "mysql"


@dataclass(frozen=True)
class MatchResult:
    """Patterns that triggered, in catalog order, and the resolved region."""
    patterns: Tuple[Pattern, ...]
    region: str

    @property
    def is_miss(self) -> bool:
        return not self.patterns


# -- parameter extraction ---------------------------------------------------

def resolve_region(
    text: str,
    known_regions: Sequence[str],
    default_region: Optional[str] = None
) -> str:
    """
    Resolve the target region for a description.

    The first entry of `known_regions` that appears literally in the text
    wins. Otherwise the caller's default, otherwise the hardcoded default.
    """
    lowered = text.lower()
    for region in known_regions:
        if region and region.lower() in lowered:
            return region
    return default_region or HARDCODED_DEFAULT_REGION


def resolve_size(text: str) -> str:
    """Resolve the size class: large > medium > small > micro."""
    lowered = text.lower()
    for size in SIZE_PRECEDENCE:
        if size in lowered:
            return size
    return DEFAULT_SIZE


def resolve_engine(text: str) -> Tuple[str, str, int]:
    """Resolve (engine, engine_version, port) for a data-store intent."""
    lowered = text.lower()
    engine = DEFAULT_ENGINE
    for candidate in ENGINE_PRECEDENCE:
        if candidate in lowered:
            engine = candidate
            break
    version, port = ENGINE_DEFAULTS[engine]
    return engine, version, port


def name_suffix(text: str) -> str:
    """Stable 8-character suffix for globally unique names (bucket names)."""
    normalized = " ".join(text.lower().split())
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:8]


def base_params(text: str, region: str, image_id: Optional[str] = None) -> Params:
    """Parameters shared by every pattern before pattern-specific extraction."""
    return Params(region=region, name_suffix=name_suffix(text), image_id=image_id)


def _keep_params(text: str, params: Params) -> Params:
    return params


def _compute_params(text: str, params: Params) -> Params:
    size = resolve_size(text)
    return replace(params, size=size, instance_type=f"t3.{size}")


def _database_params(text: str, params: Params) -> Params:
    engine, version, port = resolve_engine(text)
    return replace(params, engine=engine, engine_version=version, engine_port=port)


# -- fragment generators ----------------------------------------------------

def _static_website_fragment(params: Params) -> Fragment:
    bucket_name = f"my-web-app-{params.name_suffix}"
    code = f'''# S3 bucket for static website hosting
resource "aws_s3_bucket" "website" {{
  bucket = "{bucket_name}"

  tags = {{
    Name    = "Website Bucket"
    Purpose = "Static Website Hosting"
  }}
}}

resource "aws_s3_bucket_website_configuration" "website" {{
  bucket = aws_s3_bucket.website.id

  index_document {{
    suffix = "index.html"
  }}

  error_document {{
    key = "error.html"
  }}
}}

resource "aws_s3_bucket_public_access_block" "website" {{
  bucket = aws_s3_bucket.website.id

  block_public_acls       = false
  block_public_policy     = false
  ignore_public_acls      = false
  restrict_public_buckets = false
}}

resource "aws_s3_bucket_policy" "website" {{
  bucket     = aws_s3_bucket.website.id
  depends_on = [aws_s3_bucket_public_access_block.website]

  policy = jsonencode({{
    Version = "2012-10-17"
    Statement = [
      {{
        Sid       = "PublicReadGetObject"
        Effect    = "Allow"
        Principal = "*"
        Action    = "s3:GetObject"
        Resource  = "${{aws_s3_bucket.website.arn}}/*"
      }}
    ]
  }})
}}'''
    return Fragment(
        code=code,
        explanation=(
            "Creates a complete static website hosting setup with S3 bucket, "
            "public access configuration, and website hosting enabled."
        ),
        pattern_id="static_website",
    )


def _object_storage_fragment(params: Params) -> Fragment:
    bucket_name = f"app-storage-{params.name_suffix}"
    code = f'''# S3 bucket for file storage
resource "aws_s3_bucket" "storage" {{
  bucket = "{bucket_name}"

  tags = {{
    Name = "Storage Bucket"
  }}
}}

resource "aws_s3_bucket_versioning" "storage_versioning" {{
  bucket = aws_s3_bucket.storage.id
  versioning_configuration {{
    status = "Enabled"
  }}
}}

resource "aws_s3_bucket_server_side_encryption_configuration" "storage" {{
  bucket = aws_s3_bucket.storage.id

  rule {{
    apply_server_side_encryption_by_default {{
      sse_algorithm = "AES256"
    }}
  }}
}}'''
    return Fragment(
        code=code,
        explanation=(
            "Creates an S3 bucket with versioning and server-side encryption "
            "enabled for file storage and backup."
        ),
        pattern_id="object_storage",
    )


def _database_fragment(params: Params) -> Fragment:
    port = params.engine_port
    code = f'''# RDS Database instance
resource "aws_db_subnet_group" "database" {{
  name       = "database-subnet-group"
  subnet_ids = [aws_subnet.private_a.id, aws_subnet.private_b.id]

  tags = {{
    Name = "Database subnet group"
  }}
}}

resource "aws_security_group" "database" {{
  name_prefix = "database-sg"
  vpc_id      = aws_vpc.main.id

  ingress {{
    from_port   = {port}
    to_port     = {port}
    protocol    = "tcp"
    cidr_blocks = [aws_vpc.main.cidr_block]
  }}

  egress {{
    from_port   = 0
    to_port     = 0
    protocol    = "-1"
    cidr_blocks = ["0.0.0.0/0"]
  }}

  tags = {{
    Name = "Database Security Group"
  }}
}}

resource "aws_db_instance" "database" {{
  identifier     = "app-database"
  engine         = "{params.engine}"
  engine_version = "{params.engine_version}"
  instance_class = "db.t3.micro"

  allocated_storage     = 20
  max_allocated_storage = 100
  storage_type          = "gp2"
  storage_encrypted     = true

  db_name                     = "appdb"
  username                    = "dbadmin"
  manage_master_user_password = true # Password kept in AWS Secrets Manager

  vpc_security_group_ids = [aws_security_group.database.id]
  db_subnet_group_name   = aws_db_subnet_group.database.name

  backup_retention_period = 7
  backup_window           = "03:00-04:00"
  maintenance_window      = "sun:04:00-sun:05:00"

  skip_final_snapshot = true
  deletion_protection = false

  tags = {{
    Name = "Application Database"
  }}
}}'''
    return Fragment(
        code=code,
        explanation=(
            f"Creates a secure {params.engine.upper()} {params.engine_version} database "
            f"listening on port {port} with private subnets, security groups, "
            "automated backups, and encryption enabled."
        ),
        pattern_id="database",
    )


def _compute_fragment(params: Params) -> Fragment:
    image_id = params.image_id or config.DEFAULT_AMI_ID
    code = f'''# EC2 instance with security group
resource "aws_security_group" "web_server" {{
  name_prefix = "web-server-sg"
  vpc_id      = aws_vpc.main.id

  ingress {{
    from_port   = 22
    to_port     = 22
    protocol    = "tcp"
    cidr_blocks = ["0.0.0.0/0"] # Restrict this in production
  }}

  ingress {{
    from_port   = 80
    to_port     = 80
    protocol    = "tcp"
    cidr_blocks = ["0.0.0.0/0"]
  }}

  ingress {{
    from_port   = 443
    to_port     = 443
    protocol    = "tcp"
    cidr_blocks = ["0.0.0.0/0"]
  }}

  egress {{
    from_port   = 0
    to_port     = 0
    protocol    = "-1"
    cidr_blocks = ["0.0.0.0/0"]
  }}

  tags = {{
    Name = "Web Server Security Group"
  }}
}}

resource "aws_instance" "web_server" {{
  ami           = "{image_id}" # Latest Amazon Linux 2
  instance_type = "{params.instance_type}"

  vpc_security_group_ids = [aws_security_group.web_server.id]
  subnet_id              = aws_subnet.public.id

  associate_public_ip_address = true

  user_data = <<-EOF
    #!/bin/bash
    yum update -y
    yum install -y httpd
    systemctl start httpd
    systemctl enable httpd
    echo "<h1>Hello from Terraform!</h1>" > /var/www/html/index.html
  EOF

  tags = {{
    Name = "Web Server"
    Type = "Application Server"
  }}
}}'''
    return Fragment(
        code=code,
        explanation=(
            f"Creates an EC2 {params.instance_type} instance with security groups "
            "allowing HTTP/HTTPS traffic, includes basic web server setup, and uses "
            "the latest Amazon Linux AMI."
        ),
        pattern_id="compute",
    )


def _load_balancer_fragment(params: Params) -> Fragment:
    code = '''# Application Load Balancer
resource "aws_security_group" "alb" {
  name_prefix = "alb-sg"
  vpc_id      = aws_vpc.main.id

  ingress {
    from_port   = 80
    to_port     = 80
    protocol    = "tcp"
    cidr_blocks = ["0.0.0.0/0"]
  }

  ingress {
    from_port   = 443
    to_port     = 443
    protocol    = "tcp"
    cidr_blocks = ["0.0.0.0/0"]
  }

  egress {
    from_port   = 0
    to_port     = 0
    protocol    = "-1"
    cidr_blocks = [aws_vpc.main.cidr_block]
  }

  tags = {
    Name = "ALB Security Group"
  }
}

resource "aws_lb" "app" {
  name               = "app-alb"
  internal           = false
  load_balancer_type = "application"
  security_groups    = [aws_security_group.alb.id]
  subnets            = [aws_subnet.public.id, aws_subnet.public_b.id]

  tags = {
    Name = "Application Load Balancer"
  }
}

resource "aws_lb_target_group" "app" {
  name     = "app-targets"
  port     = 80
  protocol = "HTTP"
  vpc_id   = aws_vpc.main.id

  health_check {
    path                = "/"
    interval            = 30
    healthy_threshold   = 2
    unhealthy_threshold = 2
    matcher             = "200"
  }
}

resource "aws_lb_listener" "http" {
  load_balancer_arn = aws_lb.app.arn
  port              = 80
  protocol          = "HTTP"

  default_action {
    type             = "forward"
    target_group_arn = aws_lb_target_group.app.arn
  }
}'''
    return Fragment(
        code=code,
        explanation=(
            "Creates an Application Load Balancer across two availability zones "
            "with an HTTP listener, a target group and health checks."
        ),
        pattern_id="load_balancer",
    )


def _serverless_fragment(params: Params) -> Fragment:
    code = '''# Lambda function with execution role
resource "aws_iam_role" "lambda_exec" {
  name = "lambda-exec-role"

  assume_role_policy = jsonencode({
    Version = "2012-10-17"
    Statement = [
      {
        Effect = "Allow"
        Action = "sts:AssumeRole"
        Principal = {
          Service = "lambda.amazonaws.com"
        }
      }
    ]
  })
}

resource "aws_iam_role_policy_attachment" "lambda_logs" {
  role       = aws_iam_role.lambda_exec.name
  policy_arn = "arn:aws:iam::aws:policy/service-role/AWSLambdaBasicExecutionRole"
}

resource "aws_cloudwatch_log_group" "lambda" {
  name              = "/aws/lambda/app-function"
  retention_in_days = 14
}

resource "aws_lambda_function" "app" {
  function_name = "app-function"
  role          = aws_iam_role.lambda_exec.arn
  handler       = "lambda_function.lambda_handler"
  runtime       = "python3.12"
  filename      = "lambda_function.zip"
  memory_size   = 512
  timeout       = 30

  depends_on = [aws_cloudwatch_log_group.lambda]

  tags = {
    Name = "Application Function"
  }
}'''
    return Fragment(
        code=code,
        explanation=(
            "Creates a Lambda function with an IAM execution role and a "
            "CloudWatch log group for event-driven, serverless workloads."
        ),
        pattern_id="serverless",
    )


def _cdn_fragment(params: Params) -> Fragment:
    bucket_name = f"cdn-origin-{params.name_suffix}"
    code = f'''# CloudFront distribution with a private S3 origin
resource "aws_s3_bucket" "cdn_origin" {{
  bucket = "{bucket_name}"

  tags = {{
    Name = "CDN Origin Bucket"
  }}
}}

resource "aws_cloudfront_origin_access_identity" "oai" {{
  comment = "Access identity for {bucket_name}"
}}

resource "aws_s3_bucket_policy" "cdn_origin" {{
  bucket = aws_s3_bucket.cdn_origin.id

  policy = jsonencode({{
    Version = "2012-10-17"
    Statement = [
      {{
        Effect = "Allow"
        Principal = {{
          AWS = aws_cloudfront_origin_access_identity.oai.iam_arn
        }}
        Action   = "s3:GetObject"
        Resource = "${{aws_s3_bucket.cdn_origin.arn}}/*"
      }}
    ]
  }})
}}

resource "aws_cloudfront_distribution" "cdn" {{
  origin {{
    domain_name = aws_s3_bucket.cdn_origin.bucket_regional_domain_name
    origin_id   = "S3-{bucket_name}"

    s3_origin_config {{
      origin_access_identity = aws_cloudfront_origin_access_identity.oai.cloudfront_access_identity_path
    }}
  }}

  enabled             = true
  default_root_object = "index.html"

  default_cache_behavior {{
    allowed_methods        = ["GET", "HEAD", "OPTIONS"]
    cached_methods         = ["GET", "HEAD"]
    target_origin_id       = "S3-{bucket_name}"
    compress               = true
    viewer_protocol_policy = "redirect-to-https"

    forwarded_values {{
      query_string = false
      cookies {{
        forward = "none"
      }}
    }}
  }}

  restrictions {{
    geo_restriction {{
      restriction_type = "none"
    }}
  }}

  viewer_certificate {{
    cloudfront_default_certificate = true
  }}
}}'''
    return Fragment(
        code=code,
        explanation=(
            "Creates a CloudFront CDN distribution backed by a private S3 origin "
            "for fast global content delivery over HTTPS."
        ),
        pattern_id="cdn",
    )


# -- catalog ----------------------------------------------------------------

PATTERN_CATALOG: Tuple[Pattern, ...] = (
    Pattern(
        id="static_website",
        keywords=("web app", "website", "web application", "frontend", "static site"),
        extract_params=_keep_params,
        generate=_static_website_fragment,
    ),
    Pattern(
        id="object_storage",
        keywords=("s3", "bucket", "storage"),
        extract_params=_keep_params,
        generate=_object_storage_fragment,
    ),
    Pattern(
        id="database",
        keywords=("database", "db", "mysql", "postgres", "mariadb", "rds"),
        extract_params=_database_params,
        generate=_database_fragment,
    ),
    Pattern(
        id="compute",
        keywords=("server", "ec2", "instance", "virtual machine", "vm", "compute"),
        extract_params=_compute_params,
        generate=_compute_fragment,
        needs_image=True,
    ),
    Pattern(
        id="load_balancer",
        keywords=("load balancer", "load-balancer", "load balancing"),
        extract_params=_keep_params,
        generate=_load_balancer_fragment,
    ),
    Pattern(
        id="serverless",
        keywords=("lambda", "serverless", "function"),
        extract_params=_keep_params,
        generate=_serverless_fragment,
    ),
    Pattern(
        id="cdn",
        keywords=("cloudfront", "cdn", "distribution"),
        extract_params=_keep_params,
        generate=_cdn_fragment,
    ),
)


def match_patterns(
    text: str,
    known_regions: Sequence[str],
    default_region: Optional[str] = None,
    catalog: Sequence[Pattern] = PATTERN_CATALOG
) -> MatchResult:
    """
    Match a description against the catalog.

    Args:
        text: Free-text infrastructure description
        known_regions: Region identifiers to look for, in priority order
        default_region: Caller's last-known default region
        catalog: Pattern table (defaults to the built-in catalog)

    Returns:
        MatchResult with triggered patterns (catalog order) and the region
    """
    matched = tuple(pattern for pattern in catalog if pattern.matches(text))
    region = resolve_region(text, known_regions, default_region)
    logger.debug(
        "Matched patterns=%s region=%s",
        [pattern.id for pattern in matched],
        region,
    )
    return MatchResult(patterns=matched, region=region)


def build_fragments(text: str, patterns: Sequence[Pattern], params: Params) -> List[Fragment]:
    """Run each pattern's extractor and generator, preserving pattern order."""
    return [pattern.generate(pattern.extract_params(text, params)) for pattern in patterns]
