from .cloud_provider import BaseCloudProvider, CloudProvider, CloudCredentials
from .models import NodeGroup, InstanceSpec, ReplacementOption, GroupEvaluation, CapacityType, EvaluationStatus
from .oracles import CatalogOracle, PriceOracle
from .collector import BaseInventoryCollector

__all__ = [
    'BaseCloudProvider', 'CloudProvider', 'CloudCredentials',
    'NodeGroup', 'InstanceSpec', 'ReplacementOption', 'GroupEvaluation', 'CapacityType', 'EvaluationStatus',
    'CatalogOracle', 'PriceOracle',
    'BaseInventoryCollector'
]
