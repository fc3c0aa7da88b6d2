"""
Domain models for documentation re-derived from a generated document.
Defines detected resources, diagram nodes/edges, flows and firewall rules.
"""
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field
from enum import Enum


class ResourceKind(str, Enum):
    """Resource kinds the re-deriver can recognise in a document."""
    OBJECT_STORAGE = "object_storage"
    COMPUTE = "compute"
    DATABASE = "database"
    NETWORK = "network"
    LOAD_BALANCER = "load_balancer"
    SERVERLESS = "serverless"
    CDN = "cdn"


@dataclass
class FirewallRule:
    """A single ingress or egress rule read from a security group block."""
    direction: str  # "inbound" | "outbound"
    protocol: str
    from_port: Optional[int]
    to_port: Optional[int]
    source: str  # CIDR list or referenced expression
    group: str = ""  # address of the declaring security group
    description: str = ""

    @property
    def port_label(self) -> str:
        if self.protocol == "-1":
            return "All traffic"
        if self.from_port == self.to_port:
            return f"{self.protocol.upper()}:{self.from_port}"
        return f"{self.protocol.upper()}:{self.from_port}-{self.to_port}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "direction": self.direction,
            "protocol": self.protocol,
            "from_port": self.from_port,
            "to_port": self.to_port,
            "source": self.source,
            "group": self.group,
            "port_label": self.port_label,
            "description": self.description,
        }


@dataclass
class DetectedResource:
    """
    A resource kind found by scanning the generated document.

    `addresses` lists the concrete declarations that carried the signature,
    `attributes` holds values read back from those declarations.
    """
    kind: ResourceKind
    name: str
    service_type: str
    icon: str
    purpose: str
    config: str
    security: str
    cost: str
    relations: List[ResourceKind] = field(default_factory=list)
    connections: List[str] = field(default_factory=list)
    addresses: List[str] = field(default_factory=list)
    attributes: Dict[str, str] = field(default_factory=dict)
    firewall_rules: List[FirewallRule] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "kind": self.kind.value,
            "name": self.name,
            "type": self.service_type,
            "icon": self.icon,
            "purpose": self.purpose,
            "config": self.config,
            "security": self.security,
            "cost": self.cost,
            "relations": [kind.value for kind in self.relations],
            "connections": list(self.connections),
            "addresses": list(self.addresses),
            "attributes": dict(self.attributes),
            "firewall_rules": [rule.to_dict() for rule in self.firewall_rules],
        }


@dataclass
class DiagramNode:
    """A box in the topology diagram. `kind` is None for scaffolding nodes."""
    id: str
    label: str
    icon: str
    group: str
    description: str = ""
    details: List[str] = field(default_factory=list)
    kind: Optional[ResourceKind] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "label": self.label,
            "icon": self.icon,
            "group": self.group,
            "description": self.description,
            "details": list(self.details),
            "kind": self.kind.value if self.kind else None,
        }


@dataclass
class FlowEdge:
    """A protocol-labelled data flow between two diagram nodes."""
    source: str
    target: str
    protocol: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "source": self.source,
            "target": self.target,
            "protocol": self.protocol,
            "description": self.description,
        }


@dataclass
class DiagramGroup:
    """A labelled container (internet, cloud, VPC, subnet...)."""
    id: str
    label: str
    icon: str
    parent: Optional[str] = None
    detail: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "label": self.label,
            "icon": self.icon,
            "parent": self.parent,
            "detail": self.detail,
        }


@dataclass
class Diagram:
    """Structured topology diagram; rendering to markup happens elsewhere."""
    region: str
    groups: List[DiagramGroup] = field(default_factory=list)
    nodes: List[DiagramNode] = field(default_factory=list)
    edges: List[FlowEdge] = field(default_factory=list)

    def node(self, node_id: str) -> Optional[DiagramNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "region": self.region,
            "groups": [group.to_dict() for group in self.groups],
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }


@dataclass
class SecurityGroupView:
    """Firewall rules of one resource's security group."""
    name: str
    kind: ResourceKind
    address: str
    rules: List[FirewallRule] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "kind": self.kind.value,
            "address": self.address,
            "rules": [rule.to_dict() for rule in self.rules],
        }


@dataclass
class SubnetRow:
    """One row of the IP address allocation table."""
    name: str
    address: str
    cidr: str
    available_ips: int
    public: bool
    availability_zone: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "address": self.address,
            "cidr": self.cidr,
            "available_ips": self.available_ips,
            "public": self.public,
            "availability_zone": self.availability_zone,
        }
