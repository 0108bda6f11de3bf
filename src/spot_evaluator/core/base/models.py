from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List, Tuple
from enum import Enum


class CapacityType(Enum):
    SPOT = "spot"
    ON_DEMAND = "on_demand"


class EvaluationStatus(Enum):
    REPLACEMENTS_FOUND = "replacements_found"
    NO_REPLACEMENTS = "no_replacements"
    LOOKUP_FAILED = "lookup_failed"


@dataclass(frozen=True)
class NodeGroup:
    """Cluster nodes sharing an instance type and availability zone"""

    instance_type: str
    availability_zone: str
    region: str
    count: int
    is_spot: bool = False

    @property
    def key(self) -> Tuple[str, str]:
        return (self.instance_type, self.availability_zone)

    @property
    def capacity_type(self) -> CapacityType:
        return CapacityType.SPOT if self.is_spot else CapacityType.ON_DEMAND

    def to_dict(self) -> Dict[str, Any]:
        """Convert node group to dictionary"""
        return {
            "instance_type": self.instance_type,
            "availability_zone": self.availability_zone,
            "region": self.region,
            "count": self.count,
            "is_spot": self.is_spot,
        }


@dataclass(frozen=True)
class InstanceSpec:
    """Resource specification of an instance type"""

    instance_type: str
    vcpus: Optional[int] = None
    memory_mib: Optional[int] = None
    bare_metal: bool = False
    free_tier_eligible: bool = False

    @property
    def is_complete(self) -> bool:
        """Whether both vCPU and memory sizes are known"""
        return self.vcpus is not None and self.memory_mib is not None


@dataclass(frozen=True)
class ReplacementOption:
    """A cheaper, capacity-compatible substitute for a node group's instance type"""

    instance_type: str
    spot_price: float
    savings_per_node_per_hour: float
    savings_per_group_per_hour: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "instance_type": self.instance_type,
            "spot_price": self.spot_price,
            "savings_per_node_per_hour": self.savings_per_node_per_hour,
            "savings_per_group_per_hour": self.savings_per_group_per_hour,
        }


@dataclass
class GroupEvaluation:
    """Pricing summary and ranked replacements for one node group"""

    group: NodeGroup
    spot_price: Optional[float] = None
    on_demand_price: Optional[float] = None
    replacements: List[ReplacementOption] = field(default_factory=list)
    pricing_error: Optional[str] = None
    replacement_error: Optional[str] = None

    @property
    def savings_percentage(self) -> float:
        """Spot discount relative to on-demand, in percent"""
        if self.spot_price is None or not self.on_demand_price:
            return 0.0
        return (self.on_demand_price - self.spot_price) / self.on_demand_price * 100

    @property
    def status(self) -> EvaluationStatus:
        if self.replacement_error is not None:
            return EvaluationStatus.LOOKUP_FAILED
        if self.replacements:
            return EvaluationStatus.REPLACEMENTS_FOUND
        return EvaluationStatus.NO_REPLACEMENTS

    def get_best_savings_per_hour(self) -> float:
        """Group savings of the top-ranked replacement"""
        if not self.replacements:
            return 0.0
        return self.replacements[0].savings_per_group_per_hour

    def to_dict(self) -> Dict[str, Any]:
        """Convert evaluation to dictionary"""
        return {
            **self.group.to_dict(),
            "spot_price": self.spot_price,
            "on_demand_price": self.on_demand_price,
            "savings_percentage": round(self.savings_percentage, 2),
            "status": self.status.value,
            "pricing_error": self.pricing_error,
            "replacement_error": self.replacement_error,
            "replacements": [r.to_dict() for r in self.replacements],
        }
