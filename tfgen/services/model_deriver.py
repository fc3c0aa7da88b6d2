"""
Model re-deriver.

Re-scans a generated document for resource signatures and builds the
documentation model from what the document actually declares: detected
resources, the topology diagram, data flows, security group tables and the
subnet address table. Nothing here looks at which patterns were matched.
"""
from typing import Dict, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass
import ipaddress
import logging
import re

from tfgen.domain.pattern_models import GeneratedDocument
from tfgen.domain.resource_models import (
    Diagram,
    DiagramGroup,
    DiagramNode,
    DetectedResource,
    FirewallRule,
    FlowEdge,
    ResourceKind,
    SecurityGroupView,
    SubnetRow,
)
from tfgen.services import hcl_scanner
from tfgen.services.hcl_scanner import Block


logger = logging.getLogger(__name__)


# Evaluation order of signatures; also the order of the derived model
RESOURCE_SIGNATURES: Tuple[Tuple[ResourceKind, Tuple[str, ...]], ...] = (
    (ResourceKind.OBJECT_STORAGE, ("aws_s3_bucket",)),
    (ResourceKind.COMPUTE, ("aws_instance",)),
    (ResourceKind.DATABASE, ("aws_db_instance",)),
    (ResourceKind.NETWORK, ("aws_vpc",)),
    (ResourceKind.LOAD_BALANCER, ("aws_lb", "aws_alb")),
    (ResourceKind.SERVERLESS, ("aws_lambda_function",)),
    (ResourceKind.CDN, ("aws_cloudfront_distribution",)),
)

ENGINE_PORTS = {"postgres": 5432, "mysql": 3306, "mariadb": 3306}
ENGINE_LABELS = {"postgres": "PostgreSQL", "mysql": "MySQL", "mariadb": "MariaDB"}


@dataclass(frozen=True)
class ResourceProfile:
    """Fixed descriptive payload of one resource kind."""
    name: str
    service_type: str
    icon: str
    purpose: str
    config: str
    security: str
    cost: str
    relations: Tuple[ResourceKind, ...]
    connections: Tuple[str, ...]


RESOURCE_PROFILES: Dict[ResourceKind, ResourceProfile] = {
    ResourceKind.OBJECT_STORAGE: ResourceProfile(
        name="S3 Bucket",
        service_type="Storage Service",
        icon="🪣",
        purpose=(
            "Provides highly scalable object storage for static files, application "
            "data, backups, or data lakes with 99.999999999% (11 9's) durability"
        ),
        config=(
            "Configured with versioning for data protection, server-side encryption, "
            "lifecycle policies, and fine-grained access controls"
        ),
        security=(
            "Bucket policies, IAM policies, and Access Control Lists (ACLs) provide "
            "multiple layers of access control. Supports encryption in transit and at rest"
        ),
        cost=(
            "Pay-per-use model with different storage classes (Standard, IA, Glacier) "
            "for cost optimization. Free tier includes 5GB of standard storage"
        ),
        relations=(ResourceKind.CDN, ResourceKind.COMPUTE, ResourceKind.SERVERLESS),
        connections=("CloudFront", "EC2 Instance", "Lambda Function"),
    ),
    ResourceKind.COMPUTE: ResourceProfile(
        name="EC2 Instance",
        service_type="Compute Service",
        icon="💻",
        purpose=(
            "Virtual server ({instance_type}) for running applications, web servers, "
            "databases, or any compute workload with full control over the operating system"
        ),
        config=(
            "Configured with security groups for network access control, user data "
            "scripts for automated setup, and EBS volumes for storage"
        ),
        security=(
            "Security groups act as virtual firewalls controlling inbound and outbound "
            "traffic. Instance metadata service provides secure access to instance information"
        ),
        cost=(
            "Hourly billing based on instance type ({instance_type}). Includes compute, "
            "memory, and network performance. Additional charges for EBS storage and data transfer"
        ),
        relations=(
            ResourceKind.NETWORK,
            ResourceKind.LOAD_BALANCER,
            ResourceKind.DATABASE,
            ResourceKind.OBJECT_STORAGE,
        ),
        connections=("VPC Network", "Security Groups", "Load Balancer", "RDS Database"),
    ),
    ResourceKind.DATABASE: ResourceProfile(
        name="RDS Database",
        service_type="Database Service",
        icon="🗄️",
        purpose=(
            "Managed {engine_upper} database ({instance_class}) with automated backups, "
            "software patching, monitoring, and failure detection"
        ),
        config=(
            "Automated backups with point-in-time recovery, performance monitoring, "
            "and automatic software patching"
        ),
        security=(
            "VPC isolation for network security, encryption at rest and in transit, "
            "IAM database authentication, and security group protection"
        ),
        cost=(
            "Based on instance class, storage type and size, backup retention period, "
            "and data transfer. Multi-AZ deployment doubles the cost for high availability"
        ),
        relations=(ResourceKind.NETWORK, ResourceKind.COMPUTE, ResourceKind.SERVERLESS),
        connections=("VPC Network", "Private Subnet", "EC2 Instance", "Security Groups"),
    ),
    ResourceKind.NETWORK: ResourceProfile(
        name="VPC Network",
        service_type="Networking Service",
        icon="🔒",
        purpose=(
            "Isolated virtual network ({cidr_block}) providing complete control over the "
            "network environment including IP address ranges, subnets, route tables, "
            "and network gateways"
        ),
        config=(
            "Public and private subnets across availability zones, Internet Gateway "
            "for public access, and custom route tables"
        ),
        security=(
            "Network ACLs provide subnet-level security, route tables control traffic "
            "routing, and VPC Flow Logs monitor network traffic for security analysis"
        ),
        cost=(
            "VPC itself is free. Charges apply for public IPv4 addresses, NAT Gateways, "
            "VPN connections, and data transfer between availability zones"
        ),
        relations=(ResourceKind.COMPUTE, ResourceKind.DATABASE, ResourceKind.LOAD_BALANCER),
        connections=("Internet Gateway", "Subnets", "Route Tables", "Security Groups"),
    ),
    ResourceKind.LOAD_BALANCER: ResourceProfile(
        name="Load Balancer",
        service_type="Networking Service",
        icon="⚖️",
        purpose=(
            "Application Load Balancer distributes incoming application traffic across "
            "multiple targets (EC2 instances, containers) in multiple availability zones"
        ),
        config=(
            "Layer 7 load balancing with advanced routing, health checks, SSL/TLS "
            "termination, WebSocket support, and integration with AWS services"
        ),
        security=(
            "Security groups control access, SSL certificates provide encryption, and "
            "AWS WAF integration protects against web exploits"
        ),
        cost=(
            "Hourly charge (~$22.50/month) plus data processing fees based on Load "
            "Balancer Capacity Units (LCUs) consumed"
        ),
        relations=(ResourceKind.COMPUTE, ResourceKind.NETWORK, ResourceKind.CDN),
        connections=("EC2 Instance", "Target Groups", "Security Groups", "Route 53"),
    ),
    ResourceKind.SERVERLESS: ResourceProfile(
        name="Lambda Function",
        service_type="Serverless Compute",
        icon="⚡",
        purpose=(
            "Serverless compute service that runs code in response to events without "
            "provisioning or managing servers, with automatic scaling"
        ),
        config=(
            "Event-driven execution with configurable memory (128MB-10GB), timeout "
            "settings, environment variables, and VPC connectivity options"
        ),
        security=(
            "IAM execution roles control permissions, resource-based policies control "
            "invocation access, and VPC configuration provides network isolation"
        ),
        cost=(
            "Pay per request and compute time (GB-seconds). Free tier includes 1M "
            "requests and 400,000 GB-seconds per month"
        ),
        relations=(ResourceKind.OBJECT_STORAGE, ResourceKind.DATABASE),
        connections=("API Gateway", "S3 Bucket", "DynamoDB", "CloudWatch"),
    ),
    ResourceKind.CDN: ResourceProfile(
        name="CloudFront CDN",
        service_type="Content Delivery",
        icon="🌐",
        purpose=(
            "Global content delivery network (CDN) that delivers content with low "
            "latency and high transfer speeds using edge locations worldwide"
        ),
        config=(
            "Origin configuration pointing to S3 or custom origins, caching behaviors, "
            "SSL certificates, and geographic restrictions"
        ),
        security=(
            "Origin Access Identity (OAI) secures S3 origins, SSL/TLS encryption, and "
            "AWS WAF integration for application protection"
        ),
        cost=(
            "Pay for data transfer out and HTTP/HTTPS requests. Free tier includes "
            "50GB data transfer and 2M HTTP/HTTPS requests"
        ),
        relations=(ResourceKind.OBJECT_STORAGE, ResourceKind.LOAD_BALANCER),
        connections=("S3 Bucket", "Route 53", "ACM Certificate", "WAF"),
    ),
}

SECURITY_GROUP_TITLES = {
    ResourceKind.LOAD_BALANCER: "ALB Security Group",
    ResourceKind.COMPUTE: "EC2 Security Group",
    ResourceKind.DATABASE: "RDS Security Group",
    ResourceKind.SERVERLESS: "Lambda Security Group",
}

SECURITY_GROUP_ORDER = (
    ResourceKind.LOAD_BALANCER,
    ResourceKind.COMPUTE,
    ResourceKind.DATABASE,
    ResourceKind.SERVERLESS,
)


def _code_of(document: Union[GeneratedDocument, str]) -> str:
    if isinstance(document, GeneratedDocument):
        return document.code
    return document


def _as_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


# -- attribute readers ------------------------------------------------------

def _first_attribute(blocks: Sequence[Block], name: str, default: str) -> str:
    for block in blocks:
        value = hcl_scanner.attribute(block.body, name)
        if value:
            return value
    return default


def _firewall_rules(block: Block, grouped: Dict[str, List[Block]]) -> List[FirewallRule]:
    """Rules of every security group the block references."""
    groups = {sg.name: sg for sg in grouped.get("aws_security_group", [])}
    rules = []
    for group_name in hcl_scanner.references(block.body, "aws_security_group"):
        group = groups.get(group_name)
        if group is None:
            continue
        for direction, nested in (("inbound", "ingress"), ("outbound", "egress")):
            for body in hcl_scanner.nested_blocks(group.body, nested):
                source = (
                    hcl_scanner.attribute(body, "cidr_blocks")
                    or hcl_scanner.attribute(body, "security_groups")
                    or "self"
                )
                rules.append(FirewallRule(
                    direction=direction,
                    protocol=hcl_scanner.attribute(body, "protocol") or "-1",
                    from_port=_as_int(hcl_scanner.attribute(body, "from_port")),
                    to_port=_as_int(hcl_scanner.attribute(body, "to_port")),
                    source=source,
                    group=group.address,
                    description=hcl_scanner.attribute(body, "description") or "",
                ))
    return rules


def _compute_attributes(blocks: List[Block], grouped: Dict[str, List[Block]]) -> Dict[str, str]:
    return {
        "instance_type": _first_attribute(blocks, "instance_type", "t3.micro"),
        "ami": _first_attribute(blocks, "ami", "unknown"),
    }


def _database_attributes(blocks: List[Block], grouped: Dict[str, List[Block]]) -> Dict[str, str]:
    engine = _first_attribute(blocks, "engine", "mysql")
    port = _first_attribute(blocks, "port", "")
    if not port:
        port = str(ENGINE_PORTS.get(engine, 3306))
    return {
        "engine": engine,
        "engine_upper": engine.upper(),
        "engine_version": _first_attribute(blocks, "engine_version", ""),
        "instance_class": _first_attribute(blocks, "instance_class", "db.t3.micro"),
        "port": port,
    }


def _network_attributes(blocks: List[Block], grouped: Dict[str, List[Block]]) -> Dict[str, str]:
    return {
        "cidr_block": _first_attribute(blocks, "cidr_block", "10.0.0.0/16"),
        "subnet_count": str(len(grouped.get("aws_subnet", []))),
        "internet_gateway": "yes" if grouped.get("aws_internet_gateway") else "no",
        "route_tables": str(len(grouped.get("aws_route_table", []))),
    }


def _object_storage_attributes(blocks: List[Block], grouped: Dict[str, List[Block]]) -> Dict[str, str]:
    versioned = any(
        hcl_scanner.attribute(body, "status") == "Enabled"
        for block in grouped.get("aws_s3_bucket_versioning", [])
        for body in hcl_scanner.nested_blocks(block.body, "versioning_configuration")
    )
    return {
        "buckets": ", ".join(block.name for block in blocks),
        "versioning": "Enabled" if versioned else "Disabled",
        "website": "yes" if grouped.get("aws_s3_bucket_website_configuration") else "no",
    }


def _load_balancer_attributes(blocks: List[Block], grouped: Dict[str, List[Block]]) -> Dict[str, str]:
    target_groups = grouped.get("aws_lb_target_group", []) + grouped.get("aws_alb_target_group", [])
    return {
        "load_balancer_type": _first_attribute(blocks, "load_balancer_type", "application"),
        "target_port": _first_attribute(target_groups, "port", "80"),
    }


def _serverless_attributes(blocks: List[Block], grouped: Dict[str, List[Block]]) -> Dict[str, str]:
    return {
        "runtime": _first_attribute(blocks, "runtime", "unknown"),
        "memory_size": _first_attribute(blocks, "memory_size", "128"),
    }


def _cdn_attributes(blocks: List[Block], grouped: Dict[str, List[Block]]) -> Dict[str, str]:
    origin = ""
    for block in blocks:
        for body in hcl_scanner.nested_blocks(block.body, "origin"):
            if re.search(r'\baws_(lb|alb)\.', body):
                origin = ResourceKind.LOAD_BALANCER.value
            elif "aws_s3_bucket." in body:
                origin = ResourceKind.OBJECT_STORAGE.value
            if origin:
                break
    return {"origin": origin}


ATTRIBUTE_READERS = {
    ResourceKind.OBJECT_STORAGE: _object_storage_attributes,
    ResourceKind.COMPUTE: _compute_attributes,
    ResourceKind.DATABASE: _database_attributes,
    ResourceKind.NETWORK: _network_attributes,
    ResourceKind.LOAD_BALANCER: _load_balancer_attributes,
    ResourceKind.SERVERLESS: _serverless_attributes,
    ResourceKind.CDN: _cdn_attributes,
}


# -- derivation -------------------------------------------------------------

def derive_model(document: Union[GeneratedDocument, str]) -> List[DetectedResource]:
    """
    Re-derive the resource model from a generated document.

    Only top-level resource declarations count as signatures; a type name in
    a comment or a string never does.
    """
    grouped = hcl_scanner.resources_by_type(_code_of(document))

    found: List[Tuple[ResourceKind, List[Block]]] = []
    for kind, signatures in RESOURCE_SIGNATURES:
        blocks = [block for signature in signatures for block in grouped.get(signature, [])]
        if blocks:
            found.append((kind, blocks))

    present = {kind for kind, _ in found}
    model = []
    for kind, blocks in found:
        profile = RESOURCE_PROFILES[kind]
        attributes = ATTRIBUTE_READERS[kind](blocks, grouped)
        rules: List[FirewallRule] = []
        for block in blocks:
            rules.extend(_firewall_rules(block, grouped))

        model.append(DetectedResource(
            kind=kind,
            name=profile.name,
            service_type=profile.service_type,
            icon=profile.icon,
            purpose=profile.purpose.format(**attributes),
            config=profile.config,
            security=profile.security,
            cost=profile.cost.format(**attributes),
            relations=[related for related in profile.relations if related in present],
            connections=list(profile.connections),
            addresses=[block.address for block in blocks],
            attributes=attributes,
            firewall_rules=rules,
        ))

    logger.debug("Derived model kinds=%s", [resource.kind.value for resource in model])
    return model


def _by_kind(model: Sequence[DetectedResource]) -> Dict[ResourceKind, DetectedResource]:
    return {resource.kind: resource for resource in model}


# -- flows ------------------------------------------------------------------

def render_flows(model: Sequence[DetectedResource]) -> List[FlowEdge]:
    """Protocol-labelled data flows between kinds that are both present."""
    resources = _by_kind(model)
    cdn = resources.get(ResourceKind.CDN)
    load_balancer = resources.get(ResourceKind.LOAD_BALANCER)
    compute = resources.get(ResourceKind.COMPUTE)
    database = resources.get(ResourceKind.DATABASE)
    storage = resources.get(ResourceKind.OBJECT_STORAGE)
    serverless = resources.get(ResourceKind.SERVERLESS)

    flows = []
    if cdn:
        flows.append(FlowEdge("users", "cdn", "HTTPS:443", "Global CDN edge locations"))

    if load_balancer:
        fronted_by_cdn = cdn and cdn.attributes.get("origin") == ResourceKind.LOAD_BALANCER.value
        flows.append(FlowEdge(
            "cdn" if fronted_by_cdn else "users",
            "load_balancer",
            "HTTP:80/HTTPS:443",
            "Load balanced across availability zones",
        ))
        if compute:
            port = load_balancer.attributes.get("target_port", "80")
            flows.append(FlowEdge(
                "load_balancer", "compute", f"HTTP:{port}", "Health-checked target forwarding"
            ))
    elif compute:
        flows.append(FlowEdge("users", "compute", "HTTP:80/HTTPS:443", "Direct public access"))

    if compute and database:
        engine = database.attributes.get("engine", "mysql")
        label = ENGINE_LABELS.get(engine, engine.upper())
        flows.append(FlowEdge(
            "compute",
            "database",
            f"{label}:{database.attributes.get('port')}",
            "Database queries within the VPC",
        ))

    if storage:
        if cdn and cdn.attributes.get("origin") == ResourceKind.OBJECT_STORAGE.value:
            flows.append(FlowEdge("cdn", "object_storage", "HTTPS:443", "Origin fetch via OAI"))
        if compute:
            flows.append(FlowEdge("compute", "object_storage", "HTTPS:443", "Object reads and writes via S3 API"))
        if serverless:
            flows.append(FlowEdge("serverless", "object_storage", "HTTPS:443", "Function access via S3 API"))
        reached = any(flow.target == "object_storage" for flow in flows)
        if not reached and storage.attributes.get("website") == "yes":
            flows.append(FlowEdge("users", "object_storage", "HTTP:80", "S3 website endpoint"))

    return flows


# -- diagram ----------------------------------------------------------------

def _resource_node(resource: DetectedResource, group: str) -> DiagramNode:
    attributes = resource.attributes
    details: List[str] = []
    if resource.kind == ResourceKind.COMPUTE:
        details = [f"Instance type: {attributes['instance_type']}", f"AMI: {attributes['ami']}"]
    elif resource.kind == ResourceKind.DATABASE:
        version = f" {attributes['engine_version']}" if attributes.get("engine_version") else ""
        details = [
            f"Engine: {attributes['engine_upper']}{version}",
            f"Class: {attributes['instance_class']}",
            f"Port: {attributes['port']}",
        ]
    elif resource.kind == ResourceKind.OBJECT_STORAGE:
        details = [f"Buckets: {attributes['buckets']}", f"Versioning: {attributes['versioning']}"]
    elif resource.kind == ResourceKind.LOAD_BALANCER:
        details = [f"Type: {attributes['load_balancer_type']}", f"Target port: {attributes['target_port']}"]
    elif resource.kind == ResourceKind.SERVERLESS:
        details = [f"Runtime: {attributes['runtime']}", f"Memory: {attributes['memory_size']} MB"]
    elif resource.kind == ResourceKind.NETWORK:
        details = [f"CIDR: {attributes['cidr_block']}", f"Subnets: {attributes['subnet_count']}"]

    return DiagramNode(
        id=resource.kind.value,
        label=resource.name,
        icon=resource.icon,
        group=group,
        description=resource.service_type,
        details=details,
        kind=resource.kind,
    )


def render_diagram(model: Sequence[DetectedResource], code: str = "") -> Diagram:
    """
    Build the topology diagram for a model.

    Optional components become nodes only when their kind is present. Edge,
    identity and observability scaffolding is added once the model is
    non-empty. Region and subnets are read from `code` when given.
    """
    region = (hcl_scanner.provider_region(code) if code else None) or "unknown"
    diagram = Diagram(region=region)
    if not model:
        return diagram

    resources = _by_kind(model)
    network = resources.get(ResourceKind.NETWORK)

    diagram.groups.append(DiagramGroup("internet", "Internet & Edge", "🌍"))
    diagram.groups.append(DiagramGroup("aws_cloud", "AWS Cloud", "☁️", detail=region))
    diagram.nodes.extend([
        DiagramNode("users", "End Users", "👥", "internet", "Web and mobile clients"),
        DiagramNode("internet", "Global Internet", "🌐", "internet", "Public network"),
        DiagramNode("dns", "Route 53", "🧭", "internet", "DNS resolution"),
    ])
    if ResourceKind.CDN in resources:
        diagram.nodes.append(_resource_node(resources[ResourceKind.CDN], "internet"))

    public_group = private_group = "aws_cloud"
    if network:
        diagram.groups.append(DiagramGroup(
            "vpc", "VPC", "🔒", parent="aws_cloud", detail=network.attributes["cidr_block"]
        ))
        diagram.nodes.append(_resource_node(network, "vpc"))
        for row in render_network_topology(code):
            if not row.address.startswith("aws_subnet."):
                continue
            group_id = f"subnet_{row.address.split('.')[-1]}"
            diagram.groups.append(DiagramGroup(
                group_id,
                row.name,
                "🟢" if row.public else "🔐",
                parent="vpc",
                detail=row.cidr,
            ))
            if row.public and public_group == "aws_cloud":
                public_group = group_id
            if not row.public and private_group == "aws_cloud":
                private_group = group_id
        if private_group == "aws_cloud":
            private_group = public_group if public_group != "aws_cloud" else "vpc"
        if public_group == "aws_cloud":
            public_group = "vpc"
        if network.attributes.get("internet_gateway") == "yes":
            diagram.nodes.append(DiagramNode("igw", "Internet Gateway", "🚪", "vpc", "Public ingress and egress"))
        if network.attributes.get("route_tables", "0") != "0":
            diagram.nodes.append(DiagramNode("route_tables", "Route Tables", "🗺️", "vpc", "Subnet routing"))

    for kind in (ResourceKind.LOAD_BALANCER, ResourceKind.COMPUTE):
        if kind in resources:
            diagram.nodes.append(_resource_node(resources[kind], public_group))
    if ResourceKind.DATABASE in resources:
        diagram.nodes.append(_resource_node(resources[ResourceKind.DATABASE], private_group))

    regional = [kind for kind in (ResourceKind.SERVERLESS, ResourceKind.OBJECT_STORAGE) if kind in resources]
    if regional:
        diagram.groups.append(DiagramGroup("regional", "Regional Services", "🏢", parent="aws_cloud"))
        for kind in regional:
            diagram.nodes.append(_resource_node(resources[kind], "regional"))

    diagram.groups.append(DiagramGroup("management", "Management & Governance", "🛠️", parent="aws_cloud"))
    diagram.nodes.extend([
        DiagramNode("cloudwatch", "CloudWatch", "📊", "management", "Metrics, logs and alarms"),
        DiagramNode("systems_manager", "Systems Manager", "⚙️", "management", "Patching and session access"),
        DiagramNode("cloudtrail", "CloudTrail", "📜", "management", "API audit trail"),
        DiagramNode("iam", "IAM", "🔑", "management", "Roles and policies"),
    ])

    diagram.edges.extend(render_flows(model))
    return diagram


# -- security groups & topology ---------------------------------------------

def render_security_groups(model: Sequence[DetectedResource]) -> List[SecurityGroupView]:
    """One view per security group referenced by a detected resource."""
    resources = _by_kind(model)
    views: List[SecurityGroupView] = []
    for kind in SECURITY_GROUP_ORDER:
        resource = resources.get(kind)
        if resource is None:
            continue
        for rule in resource.firewall_rules:
            view = next((item for item in views if item.address == rule.group), None)
            if view is None:
                view = SecurityGroupView(
                    name=SECURITY_GROUP_TITLES[kind], kind=kind, address=rule.group
                )
                views.append(view)
            view.rules.append(rule)
    return views


def _tag_name(body: str) -> Optional[str]:
    match = re.search(r'\bName\s*=\s*"([^"]+)"', body)
    return match.group(1) if match else None


def render_network_topology(document: Union[GeneratedDocument, str]) -> List[SubnetRow]:
    """Address table of every VPC and subnet declared in the document."""
    grouped = hcl_scanner.resources_by_type(_code_of(document))
    rows = []
    for resource_type in ("aws_vpc", "aws_subnet"):
        for block in grouped.get(resource_type, []):
            cidr = hcl_scanner.attribute(block.body, "cidr_block") or ""
            try:
                size = ipaddress.ip_network(cidr, strict=False).num_addresses
            except ValueError:
                logger.debug("Skipping non-literal CIDR %r in %s", cidr, block.address)
                size = 0
            public = hcl_scanner.attribute(block.body, "map_public_ip_on_launch") == "true"
            rows.append(SubnetRow(
                name=_tag_name(block.body) or block.name,
                address=block.address,
                cidr=cidr,
                available_ips=size,
                public=public,
                availability_zone=hcl_scanner.attribute(block.body, "availability_zone") or "",
            ))
    return rows
