"""Tests for the capacity compatibility predicate"""

import pytest

from spot_evaluator.analysis import is_compatible
from spot_evaluator.core.base import InstanceSpec


@pytest.fixture
def current():
    return InstanceSpec("m5.large", vcpus=2, memory_mib=8192)


@pytest.mark.unit
class TestIsCompatible:
    """Test is_compatible"""

    def test_same_spec_is_compatible(self, current):
        """An identical spec can replace itself"""
        assert is_compatible(current, current)
        assert is_compatible(current, InstanceSpec("m6i.large", vcpus=2, memory_mib=8192))

    def test_larger_candidate_is_compatible(self, current):
        assert is_compatible(current, InstanceSpec("m5.xlarge", vcpus=4, memory_mib=16384))

    def test_fewer_vcpus_is_incompatible(self, current):
        assert not is_compatible(current, InstanceSpec("r5.medium", vcpus=1, memory_mib=16384))

    def test_less_memory_is_incompatible(self, current):
        assert not is_compatible(current, InstanceSpec("c5.large", vcpus=2, memory_mib=4096))

    def test_bare_metal_is_incompatible(self, current):
        candidate = InstanceSpec("m5.metal", vcpus=96, memory_mib=393216, bare_metal=True)
        assert not is_compatible(current, candidate)

    def test_free_tier_is_incompatible(self, current):
        candidate = InstanceSpec("t3.xlarge", vcpus=4, memory_mib=16384, free_tier_eligible=True)
        assert not is_compatible(current, candidate)

    def test_missing_specs_are_incompatible(self, current):
        assert not is_compatible(None, current)
        assert not is_compatible(current, None)
        assert not is_compatible(None, None)

    def test_incomplete_specs_are_incompatible(self, current):
        assert not is_compatible(current, InstanceSpec("x1.unknown", vcpus=4))
        assert not is_compatible(current, InstanceSpec("x1.unknown", memory_mib=16384))
        assert not is_compatible(InstanceSpec("m5.large"), current)

    def test_is_asymmetric(self, current):
        larger = InstanceSpec("m5.2xlarge", vcpus=8, memory_mib=32768)
        assert is_compatible(current, larger)
        assert not is_compatible(larger, current)
