"""
Cost estimator service.
Converts a re-derived resource model into a tiered monthly cost estimate.
"""
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from tfgen.aws.regions import get_region_location
from tfgen.core.config import config
from tfgen.domain.cost_models import (
    CostCategory,
    CostEntry,
    Recommendation,
    TieredCostEstimate,
)
from tfgen.domain.resource_models import DetectedResource, ResourceKind


logger = logging.getLogger(__name__)


# On-demand hourly baseline prices (USD, Linux, us-east-1 reference)
EC2_HOURLY_PRICES: Dict[str, float] = {
    "t3.nano": 0.0052,
    "t3.micro": 0.0104,
    "t3.small": 0.0208,
    "t3.medium": 0.0416,
    "t3.large": 0.0832,
    "t3.xlarge": 0.1664,
}
RDS_HOURLY_PRICES: Dict[str, float] = {
    "db.t3.micro": 0.017,
    "db.t3.small": 0.034,
    "db.t3.medium": 0.068,
    "db.t3.large": 0.136,
}
DEFAULT_EC2_TYPE = "t3.micro"
DEFAULT_RDS_CLASS = "db.t3.micro"

# Tier multipliers applied to the instance baseline
COMPUTE_SCALING = (1.0, 2.5, 5.0)
DATABASE_SCALING = (1.0, 2.0, 4.0)

ENGINE_LABELS = {"postgres": "PostgreSQL", "mysql": "MySQL", "mariadb": "MariaDB"}

# category key -> (display name, icon), in output order
COST_CATEGORIES: Tuple[Tuple[str, str, str], ...] = (
    ("compute", "Compute Services", "💻"),
    ("storage", "Storage Services", "💾"),
    ("networking", "Networking & CDN", "🌐"),
    ("database", "Database Services", "🗄️"),
    ("monitoring", "Monitoring & Operations", "📊"),
    ("dataTransfer", "Data Transfer", "📡"),
)

RECOMMENDATIONS: Tuple[Recommendation, ...] = (
    Recommendation(
        title="Reserved Instances",
        icon="💰",
        description="Save up to 75% on EC2 and RDS with 1-3 year commitments",
        savings="Potential savings: $200-500/month",
    ),
    Recommendation(
        title="Right-sizing",
        icon="📊",
        description="Monitor utilization and downsize underused instances",
        savings="Potential savings: 20-40%",
    ),
    Recommendation(
        title="Scheduled Scaling",
        icon="🕒",
        description="Scale down non-production environments during off-hours",
        savings="Potential savings: 50-70% on dev/test",
    ),
    Recommendation(
        title="Storage Optimization",
        icon="💾",
        description="Use S3 Intelligent Tiering and lifecycle policies",
        savings="Potential savings: 30-60% on storage",
    ),
)

COST_FACTORS = (
    "Usage Patterns: Traffic volume, compute utilization, storage access",
    "Regional Pricing: Different regions have varying costs",
    "Commitment Discounts: Reserved Instances, Savings Plans",
    "Enterprise Agreements: Volume discounts and custom pricing",
)


class CostEstimator:
    """Service for estimating tiered monthly costs from a resource model."""

    def __init__(self, hours_per_month: Optional[int] = None):
        self.hours_per_month = hours_per_month or config.HOURS_PER_MONTH

    def _monthly(self, hourly: float) -> float:
        return hourly * self.hours_per_month

    def _compute_entries(self, resource: DetectedResource) -> List[CostEntry]:
        instance_type = resource.attributes.get("instance_type", DEFAULT_EC2_TYPE)
        hourly = EC2_HOURLY_PRICES.get(instance_type)
        details = "On-Demand pricing, 24/7 uptime"
        if hourly is None:
            logger.debug("No baseline price for instance_type=%s, using %s", instance_type, DEFAULT_EC2_TYPE)
            hourly = EC2_HOURLY_PRICES[DEFAULT_EC2_TYPE]
            details = f"On-Demand pricing, 24/7 uptime (estimated at {DEFAULT_EC2_TYPE} rates)"
        base = self._monthly(hourly)
        light, moderate, heavy = (base * factor for factor in COMPUTE_SCALING)
        return [
            CostEntry(f"EC2 {instance_type} Instance", light, moderate, heavy, "per instance", details),
            CostEntry(
                "EBS gp3 Storage (20GB)", 1.60, 4.00, 8.00,
                "per volume", "3,000 IOPS baseline, 125 MB/s throughput",
            ),
            CostEntry(
                "Auto Scaling (additional instances)", 0.0, base * 2, base * 4,
                "average monthly", "Scale-out during peak hours",
            ),
        ]

    def _database_entries(self, resource: DetectedResource) -> List[CostEntry]:
        instance_class = resource.attributes.get("instance_class", DEFAULT_RDS_CLASS)
        engine = resource.attributes.get("engine", "mysql")
        hourly = RDS_HOURLY_PRICES.get(instance_class)
        details = "Single-AZ deployment"
        if hourly is None:
            logger.debug("No baseline price for instance_class=%s, using %s", instance_class, DEFAULT_RDS_CLASS)
            hourly = RDS_HOURLY_PRICES[DEFAULT_RDS_CLASS]
            details = f"Single-AZ deployment (estimated at {DEFAULT_RDS_CLASS} rates)"
        base = self._monthly(hourly)
        light, moderate, heavy = (base * factor for factor in DATABASE_SCALING)
        label = ENGINE_LABELS.get(engine, engine.upper())
        return [
            CostEntry(f"RDS {label} {instance_class}", light, moderate, heavy, "per instance", details),
            CostEntry("RDS Storage (gp2)", 2.00, 10.00, 40.00, "per month", "General Purpose SSD storage"),
            CostEntry(
                "RDS Multi-AZ (High Availability)", 0.0, moderate, heavy,
                "additional cost", "Synchronous replication to standby",
            ),
            CostEntry(
                "RDS Backup Storage", 0.0, 2.00, 8.00,
                "per month", "7-day retention, beyond allocated storage",
            ),
        ]

    def _entries_for(self, resource: DetectedResource) -> List[Tuple[str, CostEntry]]:
        """(category key, entry) pairs contributed by one detected resource."""
        kind = resource.kind
        if kind == ResourceKind.COMPUTE:
            return [("compute", entry) for entry in self._compute_entries(resource)]
        if kind == ResourceKind.DATABASE:
            return [("database", entry) for entry in self._database_entries(resource)]
        if kind == ResourceKind.SERVERLESS:
            return [("compute", CostEntry(
                "Lambda Function Execution", 0.20, 2.50, 12.00,
                "per month", "1M requests, 512MB memory, 3s duration",
            ))]
        if kind == ResourceKind.OBJECT_STORAGE:
            return [
                ("storage", CostEntry("S3 Standard Storage", 2.30, 11.50, 46.00, "per month", "First 50TB tier pricing")),
                ("storage", CostEntry(
                    "S3 Requests (PUT/GET)", 0.40, 2.00, 10.00,
                    "per month", "API requests for object operations",
                )),
            ]
        if kind == ResourceKind.LOAD_BALANCER:
            return [
                ("networking", CostEntry("Application Load Balancer", 22.50, 22.50, 22.50, "per ALB", "Fixed hourly cost")),
                ("networking", CostEntry(
                    "ALB Load Balancer Capacity Units", 1.80, 7.20, 36.00,
                    "per month", "Based on processed bytes and connections",
                )),
            ]
        if kind == ResourceKind.NETWORK:
            return [("networking", CostEntry(
                "Public IPv4 Addresses", 3.60, 7.20, 14.40,
                "per month", "$0.005/hour per in-use public IPv4 address",
            ))]
        if kind == ResourceKind.CDN:
            return [
                ("networking", CostEntry(
                    "CloudFront Data Transfer", 8.50, 42.50, 170.00,
                    "per month", "Global edge locations, first 1TB tier",
                )),
                ("networking", CostEntry(
                    "CloudFront Requests", 0.75, 3.75, 15.00,
                    "per month", "HTTP/HTTPS requests to edge locations",
                )),
            ]
        return []

    @staticmethod
    def _baseline_entries() -> List[Tuple[str, CostEntry]]:
        return [
            ("dataTransfer", CostEntry(
                "Data Transfer Out (Internet)", 9.00, 45.00, 180.00,
                "per month", "First 1GB free, then $0.09/GB",
            )),
            ("dataTransfer", CostEntry("Inter-AZ Data Transfer", 1.00, 5.00, 20.00, "per month", "Between availability zones")),
            ("monitoring", CostEntry(
                "CloudWatch Metrics & Alarms", 3.00, 15.00, 75.00,
                "per month", "Standard and custom metrics, alarm notifications",
            )),
            ("monitoring", CostEntry("CloudWatch Logs", 0.50, 2.50, 12.50, "per month", "Log ingestion and storage")),
            ("monitoring", CostEntry("CloudTrail Logging", 2.00, 10.00, 50.00, "per month", "API call logging and data events")),
            ("monitoring", CostEntry(
                "Systems Manager", 0.0, 5.00, 25.00,
                "per month", "Patch Manager, Session Manager, Parameter Store",
            )),
        ]

    def estimate(self, model: Sequence[DetectedResource], region: str) -> TieredCostEstimate:
        """
        Estimate monthly costs under the light, moderate and heavy usage tiers.

        Args:
            model: Resources re-derived from the generated document
            region: Region the document is bound to

        Returns:
            TieredCostEstimate; categories without entries are omitted
        """
        location = get_region_location(region) or region
        logger.info("Estimating cost for %d resources in %s", len(model), region)

        pairs: List[Tuple[str, CostEntry]] = []
        for resource in model:
            pairs.extend(self._entries_for(resource))
        if model:
            pairs.extend(self._baseline_entries())

        categories = []
        for key, name, icon in COST_CATEGORIES:
            entries = [entry for category_key, entry in pairs if category_key == key]
            if entries:
                categories.append(CostCategory(key=key, name=name, icon=icon, entries=entries))

        disclaimers = [
            f"Estimates use on-demand baseline pricing for {location} ({region}) and "
            "assume 24/7 uptime; actual costs vary.",
        ]
        disclaimers.extend(COST_FACTORS)

        return TieredCostEstimate(
            currency="USD",
            region=region,
            region_location=location,
            categories=categories,
            recommendations=list(RECOMMENDATIONS),
            disclaimers=disclaimers,
        )


def estimate_cost(model: Sequence[DetectedResource], region: str) -> TieredCostEstimate:
    """Estimate cost with the default estimator."""
    return CostEstimator().estimate(model, region)
