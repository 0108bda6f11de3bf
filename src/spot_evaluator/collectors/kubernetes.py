import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException

from ..core.base import BaseInventoryCollector, NodeGroup
from ..core.config import KubernetesConfig
from ..core.exceptions import InventoryError
from ..providers.aws.catalog import region_from_zone

logger = logging.getLogger(__name__)


def load_core_api(kubeconfig: Optional[Path] = None, context: Optional[str] = None,
                  in_cluster: bool = False) -> client.CoreV1Api:
    """Build a CoreV1Api from in-cluster config or a kubeconfig file"""
    try:
        if in_cluster:
            config.load_incluster_config()
        elif kubeconfig:
            config.load_kube_config(config_file=str(kubeconfig), context=context)
        else:
            config.load_kube_config(context=context)
    except (ConfigException, OSError) as e:
        raise InventoryError(f"Failed to load Kubernetes configuration: {e}") from e

    return client.CoreV1Api()


class KubernetesNodeCollector(BaseInventoryCollector):
    """Aggregates cluster nodes into node groups by instance type and zone"""

    def __init__(self, core_api, labels: Optional[KubernetesConfig] = None):
        super().__init__()
        self.core_api = core_api
        self.labels = labels or KubernetesConfig()

    def collect(self) -> List[NodeGroup]:
        """List nodes and aggregate them"""
        try:
            nodes = self.core_api.list_node()
        except ApiException as e:
            raise InventoryError(f"Failed to list nodes: {e.status} {e.reason}") from e

        self.logger.info(f"Found {len(nodes.items)} nodes")
        self.groups = self.aggregate(nodes.items)
        return self.groups

    def aggregate(self, nodes: Iterable[Any]) -> List[NodeGroup]:
        """Count nodes per (instance type, zone).

        The first node seen for a key decides the group's region and capacity
        type. Nodes missing an instance type or zone label are skipped.
        """
        counts: Dict[Tuple[str, str], int] = {}
        first_seen: Dict[Tuple[str, str], Tuple[str, bool]] = {}

        for node in nodes:
            name = node.metadata.name
            node_labels = node.metadata.labels or {}

            instance_type = node_labels.get(self.labels.instance_type_label)
            zone = node_labels.get(self.labels.zone_label)
            if not instance_type or not zone:
                self.logger.warning(f"Skipping node {name}: missing instance type or zone label")
                self.record_error(name, "missing instance type or zone label")
                continue

            key = (instance_type, zone)
            if key not in first_seen:
                region = node_labels.get(self.labels.region_label) or region_from_zone(zone)
                is_spot = node_labels.get(self.labels.capacity_type_label) == self.labels.spot_capacity_value
                first_seen[key] = (region, is_spot)
            counts[key] = counts.get(key, 0) + 1

        return [
            NodeGroup(
                instance_type=instance_type,
                availability_zone=zone,
                region=first_seen[(instance_type, zone)][0],
                count=count,
                is_spot=first_seen[(instance_type, zone)][1]
            )
            for (instance_type, zone), count in sorted(counts.items())
        ]
