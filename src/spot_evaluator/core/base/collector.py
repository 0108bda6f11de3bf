from abc import ABC, abstractmethod
from typing import List, Dict, Any
from datetime import datetime, timezone
import logging

from .models import NodeGroup


class BaseInventoryCollector(ABC):
    """Abstract base class for node inventory collectors"""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.groups: List[NodeGroup] = []
        self.errors: List[Dict[str, Any]] = []

    @abstractmethod
    def collect(self) -> List[NodeGroup]:
        """Collect node groups aggregated by instance type and zone"""
        pass

    def record_error(self, source: str, error: str) -> None:
        self.errors.append({
            "source": source,
            "error": error,
            "timestamp": datetime.now(timezone.utc)
        })

    def get_summary(self) -> Dict[str, Any]:
        """Get collection summary"""
        return {
            "total_groups": len(self.groups),
            "total_nodes": sum(g.count for g in self.groups),
            "spot_nodes": sum(g.count for g in self.groups if g.is_spot),
            "nodes_by_zone": self._count_by_zone(),
            "nodes_by_instance_type": self._count_by_instance_type(),
            "total_errors": len(self.errors),
            "errors": self.errors
        }

    def _count_by_zone(self) -> Dict[str, int]:
        """Count nodes by availability zone"""
        counts = {}
        for group in self.groups:
            counts[group.availability_zone] = counts.get(group.availability_zone, 0) + group.count
        return counts

    def _count_by_instance_type(self) -> Dict[str, int]:
        """Count nodes by instance type"""
        counts = {}
        for group in self.groups:
            counts[group.instance_type] = counts.get(group.instance_type, 0) + group.count
        return counts
