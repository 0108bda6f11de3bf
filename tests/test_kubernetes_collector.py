"""Tests for Kubernetes node inventory collection"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException

from spot_evaluator.collectors import KubernetesNodeCollector, load_core_api
from spot_evaluator.core.base import NodeGroup
from spot_evaluator.core.config import KubernetesConfig
from spot_evaluator.core.exceptions import InventoryError


def labels(instance_type, zone, region=None, capacity=None):
    result = {
        "node.kubernetes.io/instance-type": instance_type,
        "topology.kubernetes.io/zone": zone,
    }
    if region:
        result["topology.kubernetes.io/region"] = region
    if capacity:
        result["eks.amazonaws.com/capacityType"] = capacity
    return result


@pytest.mark.kubernetes
class TestKubernetesNodeCollector:
    """Test KubernetesNodeCollector"""

    def test_collect_aggregates_by_type_and_zone(self, node_factory):
        core_api = MagicMock()
        core_api.list_node.return_value = SimpleNamespace(items=[
            node_factory("ip-10-0-1-1", labels("m5.large", "us-east-1a", "us-east-1", "SPOT")),
            node_factory("ip-10-0-1-2", labels("m5.large", "us-east-1a", "us-east-1", "SPOT")),
            node_factory("ip-10-0-2-1", labels("m5.large", "us-east-1b", "us-east-1", "ON_DEMAND")),
            node_factory("ip-10-0-3-1", labels("c5.xlarge", "us-east-1a", "us-east-1")),
        ])
        collector = KubernetesNodeCollector(core_api)

        groups = collector.collect()

        assert groups == [
            NodeGroup("c5.xlarge", "us-east-1a", "us-east-1", 1, False),
            NodeGroup("m5.large", "us-east-1a", "us-east-1", 2, True),
            NodeGroup("m5.large", "us-east-1b", "us-east-1", 1, False),
        ]
        summary = collector.get_summary()
        assert summary["total_groups"] == 3
        assert summary["total_nodes"] == 4
        assert summary["spot_nodes"] == 2
        assert summary["nodes_by_zone"] == {"us-east-1a": 3, "us-east-1b": 1}

    def test_first_node_decides_capacity_type(self, node_factory):
        collector = KubernetesNodeCollector(MagicMock())

        groups = collector.aggregate([
            node_factory("a", labels("m5.large", "us-east-1a", capacity="SPOT")),
            node_factory("b", labels("m5.large", "us-east-1a", capacity="ON_DEMAND")),
        ])

        assert groups == [NodeGroup("m5.large", "us-east-1a", "us-east-1", 2, True)]

    def test_region_falls_back_to_zone(self, node_factory):
        collector = KubernetesNodeCollector(MagicMock())

        groups = collector.aggregate([node_factory("a", labels("r5.large", "eu-west-1c"))])

        assert groups[0].region == "eu-west-1"

    def test_nodes_without_labels_are_skipped(self, node_factory):
        collector = KubernetesNodeCollector(MagicMock())

        groups = collector.aggregate([
            node_factory("no-labels", None),
            node_factory("no-zone", {"node.kubernetes.io/instance-type": "m5.large"}),
            node_factory("ok", labels("m5.large", "us-east-1a")),
        ])

        assert len(groups) == 1
        assert [e["source"] for e in collector.errors] == ["no-labels", "no-zone"]

    def test_custom_labels(self, node_factory):
        config = KubernetesConfig(
            instance_type_label="beta.kubernetes.io/instance-type",
            capacity_type_label="karpenter.sh/capacity-type",
            spot_capacity_value="spot"
        )
        collector = KubernetesNodeCollector(MagicMock(), config)

        groups = collector.aggregate([node_factory("a", {
            "beta.kubernetes.io/instance-type": "m6i.large",
            "topology.kubernetes.io/zone": "us-west-2a",
            "karpenter.sh/capacity-type": "spot",
        })])

        assert groups == [NodeGroup("m6i.large", "us-west-2a", "us-west-2", 1, True)]

    def test_api_failure_raises_inventory_error(self):
        core_api = MagicMock()
        core_api.list_node.side_effect = ApiException(status=403, reason="Forbidden")

        with pytest.raises(InventoryError, match="403"):
            KubernetesNodeCollector(core_api).collect()


@pytest.mark.kubernetes
class TestLoadCoreApi:

    @patch("spot_evaluator.collectors.kubernetes.client.CoreV1Api")
    @patch("spot_evaluator.collectors.kubernetes.config")
    def test_kubeconfig(self, mock_config, mock_core_api, tmp_path):
        kubeconfig = tmp_path / "config"

        api = load_core_api(kubeconfig, context="prod")

        mock_config.load_kube_config.assert_called_once_with(config_file=str(kubeconfig), context="prod")
        assert api is mock_core_api.return_value

    @patch("spot_evaluator.collectors.kubernetes.client.CoreV1Api")
    @patch("spot_evaluator.collectors.kubernetes.config")
    def test_in_cluster(self, mock_config, mock_core_api):
        load_core_api(in_cluster=True)

        mock_config.load_incluster_config.assert_called_once_with()
        mock_config.load_kube_config.assert_not_called()

    @patch("spot_evaluator.collectors.kubernetes.config.load_kube_config")
    def test_invalid_config_raises_inventory_error(self, mock_load):
        mock_load.side_effect = ConfigException("Invalid kube-config file")

        with pytest.raises(InventoryError):
            load_core_api()
