"""
Domain models for tiered cost estimation.
Defines cost entries, categories and the aggregated estimate.
"""
from typing import List, Dict, Any
from dataclasses import dataclass, field


USAGE_TIERS = ("light", "moderate", "heavy")

TIER_DESCRIPTIONS: Dict[str, Dict[str, str]] = {
    "light": {"name": "Light Usage", "description": "Development/Testing"},
    "moderate": {"name": "Moderate Usage", "description": "Small Production"},
    "heavy": {"name": "Heavy Usage", "description": "Enterprise Production"},
}


@dataclass(frozen=True)
class CostEntry:
    """Monthly cost of one service under each usage tier."""
    service: str
    light_cost: float
    moderate_cost: float
    heavy_cost: float
    unit: str
    details: str

    def cost_for(self, tier: str) -> float:
        """Return the monthly cost for a tier name."""
        return getattr(self, f"{tier}_cost")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "service": self.service,
            "light_cost": round(self.light_cost, 2),
            "moderate_cost": round(self.moderate_cost, 2),
            "heavy_cost": round(self.heavy_cost, 2),
            "unit": self.unit,
            "details": self.details,
        }


@dataclass
class CostCategory:
    """A group of cost entries (compute, storage, networking...)."""
    key: str
    name: str
    icon: str
    entries: List[CostEntry] = field(default_factory=list)

    def subtotal(self, tier: str) -> float:
        return sum(entry.cost_for(tier) for entry in self.entries)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "key": self.key,
            "name": self.name,
            "icon": self.icon,
            "subtotals": {tier: round(self.subtotal(tier), 2) for tier in USAGE_TIERS},
            "entries": [entry.to_dict() for entry in self.entries],
        }


@dataclass(frozen=True)
class Recommendation:
    """Static cost optimization advice."""
    title: str
    icon: str
    description: str
    savings: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "icon": self.icon,
            "description": self.description,
            "savings": self.savings,
        }


@dataclass
class TieredCostEstimate:
    """Represents a complete tiered cost estimate."""
    currency: str
    region: str
    region_location: str
    categories: List[CostCategory]
    recommendations: List[Recommendation]
    disclaimers: List[str]

    def total(self, tier: str) -> float:
        return sum(category.subtotal(tier) for category in self.categories)

    @property
    def per_tier(self) -> Dict[str, float]:
        return {tier: self.total(tier) for tier in USAGE_TIERS}

    @property
    def per_service(self) -> List[CostEntry]:
        return [entry for category in self.categories for entry in category.entries]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        tiers = {}
        for tier in USAGE_TIERS:
            monthly = self.total(tier)
            tiers[tier] = {
                "name": TIER_DESCRIPTIONS[tier]["name"],
                "description": TIER_DESCRIPTIONS[tier]["description"],
                "monthly_total_usd": round(monthly, 2),
                "annual_total_usd": round(monthly * 12, 0),
            }

        return {
            "currency": self.currency,
            "region": self.region,
            "region_location": self.region_location,
            "per_tier": tiers,
            "categories": [category.to_dict() for category in self.categories],
            "recommendations": [item.to_dict() for item in self.recommendations],
            "disclaimers": list(self.disclaimers),
        }
