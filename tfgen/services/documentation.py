"""
Documentation synthesizer.

Builds the documentation bundle for a generated document: overview, resource
details, diagram, flows, security groups, address table, monitoring guide,
deployment steps, cost estimate and best practices. Everything is re-derived
from the document text.
"""
from typing import Any, Dict, List, Optional, Union
import asyncio
import logging

from tfgen.core.config import config
from tfgen.domain.pattern_models import GeneratedDocument
from tfgen.services import hcl_scanner
from tfgen.services.cost_estimator import CostEstimator
from tfgen.services.model_deriver import (
    derive_model,
    render_diagram,
    render_flows,
    render_network_topology,
    render_security_groups,
)
from tfgen.services.pattern_catalog import HARDCODED_DEFAULT_REGION


logger = logging.getLogger(__name__)


MONITORING_GUIDE: Dict[str, List[Dict[str, str]]] = {
    "alarms": [
        {
            "name": "High CPU Utilization",
            "severity": "critical",
            "threshold": "CPU > 80% for 5 minutes",
            "action": "Scale out + SNS notification",
        },
        {
            "name": "Database Connections",
            "severity": "warning",
            "threshold": "Connections > 70",
            "action": "Email alert to DBA team",
        },
        {
            "name": "Disk Space Usage",
            "severity": "info",
            "threshold": "Disk > 85%",
            "action": "Slack notification",
        },
        {
            "name": "Application Health Check",
            "severity": "critical",
            "threshold": "Failed health checks > 2",
            "action": "Auto-replace instance",
        },
    ],
    "kpis": [
        {"name": "Response Time", "target": "< 200ms"},
        {"name": "Availability", "target": "99.9%"},
        {"name": "Error Rate", "target": "< 0.1%"},
        {"name": "Throughput", "target": "1000 req/min"},
    ],
    "scaling_policies": [
        {"name": "Scale Out Policy", "trigger": "CPU > 70% for 2 minutes", "action": "Add 1 instance (max 3)"},
        {"name": "Scale In Policy", "trigger": "CPU < 30% for 5 minutes", "action": "Remove 1 instance (min 1)"},
    ],
}

DEPLOYMENT_STEPS: List[Dict[str, Optional[str]]] = [
    {
        "title": "Prerequisites",
        "command": None,
        "description": (
            "AWS CLI configured with appropriate permissions, Terraform installed "
            "(version 1.0+), text editor for configuration files"
        ),
    },
    {
        "title": "Initialize Project",
        "command": "terraform init",
        "description": "Downloads AWS provider and initializes the working directory",
    },
    {
        "title": "Review Plan",
        "command": "terraform plan",
        "description": "Shows exactly what resources will be created and their dependencies",
    },
    {
        "title": "Deploy Infrastructure",
        "command": "terraform apply",
        "description": "Creates all resources in the correct order based on dependencies",
    },
    {
        "title": "Verify & Monitor",
        "command": "terraform show",
        "description": "Verify deployment and monitor resources in AWS Console",
    },
]

BEST_PRACTICES: Dict[str, List[str]] = {
    "security": [
        "Use IAM roles instead of access keys",
        "Enable encryption at rest and in transit",
        "Implement least privilege access",
        "Regular security audits and updates",
    ],
    "state_management": [
        "Use remote state with S3 + DynamoDB",
        "Enable state locking for team collaboration",
        "Regular state backups",
        "Version control for configurations",
    ],
    "organization": [
        "Consistent tagging strategy",
        "Environment separation (dev/staging/prod)",
        "Modular code structure",
        "Documentation and comments",
    ],
    "operations": [
        "Automated testing and validation",
        "CI/CD pipeline integration",
        "Monitoring and alerting",
        "Disaster recovery planning",
    ],
}


class DocumentationService:
    """Builds documentation bundles from generated Terraform."""

    def __init__(self, cost_estimator: Optional[CostEstimator] = None):
        self.cost_estimator = cost_estimator or CostEstimator()

    def build(self, document: Union[GeneratedDocument, str]) -> Dict[str, Any]:
        """
        Build the documentation bundle for a document.

        The region comes from the document's provider block so that every
        section describes the same configuration.
        """
        code = document.code if isinstance(document, GeneratedDocument) else document
        region = hcl_scanner.provider_region(code) or HARDCODED_DEFAULT_REGION

        model = derive_model(code)
        diagram = render_diagram(model, code)
        estimate = self.cost_estimator.estimate(model, region)
        logger.info("Built documentation region=%s resources=%d", region, len(model))

        return {
            "overview": {
                "region": region,
                "resource_count": len(model),
                "summary": (
                    "This Terraform configuration creates an infrastructure setup with "
                    f"{len(model)} main components."
                ),
            },
            "resources": [resource.to_dict() for resource in model],
            "diagram": diagram.to_dict(),
            "flows": [flow.to_dict() for flow in render_flows(model)],
            "security_groups": [view.to_dict() for view in render_security_groups(model)],
            "network_topology": [row.to_dict() for row in render_network_topology(code)],
            "monitoring": MONITORING_GUIDE,
            "deployment": DEPLOYMENT_STEPS,
            "cost_estimate": estimate.to_dict(),
            "best_practices": BEST_PRACTICES,
        }

    async def build_deferred(
        self,
        document: Union[GeneratedDocument, str],
        delay: Optional[float] = None
    ) -> Dict[str, Any]:
        """Build after a short delay so the caller can show its loading state first."""
        wait = config.DOCS_RENDER_DELAY_SECONDS if delay is None else delay
        if wait > 0:
            await asyncio.sleep(wait)
        return self.build(document)
