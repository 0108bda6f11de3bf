from typing import Optional

from ..core.base import InstanceSpec


def is_compatible(current: Optional[InstanceSpec], candidate: Optional[InstanceSpec]) -> bool:
    """Whether ``candidate`` can host everything ``current`` can.

    The candidate must not be bare-metal or free-tier eligible and must have
    at least as many vCPUs and as much memory as the current type. Missing or
    incomplete specs on either side are never compatible.
    """
    if current is None or candidate is None:
        return False

    if candidate.bare_metal or candidate.free_tier_eligible:
        return False

    if not current.is_complete or not candidate.is_complete:
        return False

    if candidate.vcpus < current.vcpus:
        return False

    if candidate.memory_mib < current.memory_mib:
        return False

    return True
