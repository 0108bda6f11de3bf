"""Pytest configuration and fixtures"""

import pytest
import tempfile
import threading
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import yaml

from spot_evaluator.core.base import CatalogOracle, PriceOracle, InstanceSpec, NodeGroup
from spot_evaluator.core.config import Settings
from spot_evaluator.core.exceptions import SpecLookupError, PriceLookupError


class FakeCatalog(CatalogOracle):
    """In-memory catalog; unknown types raise SpecLookupError"""

    def __init__(self, specs=None, offerings=None):
        self.specs = dict(specs or {})
        self.offerings = {zone: set(types) for zone, types in (offerings or {}).items()}
        self.spec_calls = []
        self._lock = threading.Lock()

    def get_spec(self, instance_type, zone=None):
        with self._lock:
            self.spec_calls.append(instance_type)
        if instance_type not in self.specs:
            raise SpecLookupError(instance_type, "instance type not found")
        return self.specs[instance_type]

    def list_offered_types(self, zone):
        return frozenset(self.offerings.get(zone, set()))


class FakePrices(PriceOracle):
    """In-memory prices; unknown keys raise PriceLookupError"""

    def __init__(self, spot=None, on_demand=None):
        self.spot = dict(spot or {})
        self.on_demand = dict(on_demand or {})

    def get_spot_price(self, instance_type, zone):
        try:
            return self.spot[(instance_type, zone)]
        except KeyError:
            raise PriceLookupError(instance_type, zone, "no spot history returned")

    def get_on_demand_price(self, instance_type, region):
        try:
            return self.on_demand[(instance_type, region)]
        except KeyError:
            raise PriceLookupError(instance_type, region, "no on-demand price found")


@pytest.fixture
def m5_large_group():
    """Four m5.large nodes in us-east-1a"""
    return NodeGroup(
        instance_type="m5.large",
        availability_zone="us-east-1a",
        region="us-east-1",
        count=4,
        is_spot=True
    )


@pytest.fixture
def scenario_catalog():
    """m5.large baseline with one valid, one free-tier and one bare-metal candidate"""
    return FakeCatalog(
        specs={
            "m5.large": InstanceSpec("m5.large", vcpus=2, memory_mib=8192),
            "m5.xlarge": InstanceSpec("m5.xlarge", vcpus=4, memory_mib=16384),
            "t3.nano": InstanceSpec("t3.nano", vcpus=2, memory_mib=512, free_tier_eligible=True),
            "m5.metal": InstanceSpec("m5.metal", vcpus=96, memory_mib=393216, bare_metal=True),
        },
        offerings={"us-east-1a": ["m5.large", "m5.xlarge", "t3.nano", "m5.metal"]}
    )


@pytest.fixture
def scenario_prices():
    return FakePrices(
        spot={
            ("m5.large", "us-east-1a"): 0.04,
            ("m5.xlarge", "us-east-1a"): 0.03,
            ("t3.nano", "us-east-1a"): 0.01,
            ("m5.metal", "us-east-1a"): 0.02,
        },
        on_demand={
            ("m5.large", "us-east-1"): 0.096,
        }
    )


@pytest.fixture
def wide_catalog():
    """Baseline c5.large with a spread of larger candidates"""
    specs = {"c5.large": InstanceSpec("c5.large", vcpus=2, memory_mib=4096)}
    for name, vcpus, memory in [
        ("c6i.large", 2, 4096), ("c6a.large", 2, 4096), ("m6i.large", 2, 8192),
        ("m6a.large", 2, 8192), ("r6i.large", 2, 16384), ("c5.xlarge", 4, 8192),
    ]:
        specs[name] = InstanceSpec(name, vcpus=vcpus, memory_mib=memory)
    return FakeCatalog(specs=specs, offerings={"eu-west-1b": list(specs)})


@pytest.fixture
def wide_prices():
    return FakePrices(spot={
        ("c5.large", "eu-west-1b"): 0.05,
        ("c6i.large", "eu-west-1b"): 0.03,
        ("c6a.large", "eu-west-1b"): 0.03,
        ("m6i.large", "eu-west-1b"): 0.045,
        ("m6a.large", "eu-west-1b"): 0.02,
        ("r6i.large", "eu-west-1b"): 0.06,
        ("c5.xlarge", "eu-west-1b"): 0.049,
    })


@pytest.fixture
def c5_large_group():
    return NodeGroup(
        instance_type="c5.large",
        availability_zone="eu-west-1b",
        region="eu-west-1",
        count=3
    )


@pytest.fixture
def test_settings():
    """Create test settings"""
    return Settings(
        environment="test",
        aws={"region": "us-east-1"},
        recommendation={"limit": 3, "max_workers": 4},
        logging={"level": "DEBUG", "console": False}
    )


@pytest.fixture
def temp_config_file():
    """Create temporary config file"""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        config = {
            "environment": "test",
            "aws": {"profile": "cost-readonly", "region": "eu-west-1"},
            "recommendation": {"limit": 5, "max_workers": 2}
        }
        yaml.dump(config, f)
        temp_path = Path(f.name)

    yield temp_path

    temp_path.unlink(missing_ok=True)


@pytest.fixture
def node_factory():
    """Build minimal stand-ins for V1Node objects"""
    def make_node(name, labels):
        return SimpleNamespace(metadata=SimpleNamespace(name=name, labels=labels))
    return make_node


@pytest.fixture
def mock_aws_client():
    """AWSClient double handing out one MagicMock per service"""
    clients = {"ec2": MagicMock(), "pricing": MagicMock()}
    aws_client = MagicMock()
    aws_client.get_client.side_effect = lambda service, region=None: clients[service]
    aws_client.clients = clients
    return aws_client


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset singleton instances between tests"""
    import spot_evaluator.core.config as config_module
    config_module.settings = None
    yield
    config_module.settings = None


def pytest_configure(config):
    """Configure pytest"""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "aws: mark test as AWS-specific"
    )
    config.addinivalue_line(
        "markers", "kubernetes: mark test as Kubernetes-specific"
    )
