from abc import ABC, abstractmethod
from typing import AbstractSet, Optional

from .models import InstanceSpec


class CatalogOracle(ABC):
    """Source of instance type specifications and zone offerings"""

    @abstractmethod
    def get_spec(self, instance_type: str, zone: Optional[str] = None) -> InstanceSpec:
        """Describe an instance type, as seen from the given availability zone.

        Raises SpecLookupError when the type cannot be described.
        """
        pass

    @abstractmethod
    def list_offered_types(self, zone: str) -> AbstractSet[str]:
        """Instance types offered in an availability zone.

        An empty set is a valid answer. Raises SpecLookupError when the
        offerings cannot be listed.
        """
        pass


class PriceOracle(ABC):
    """Source of current spot and on-demand prices, in USD per hour"""

    @abstractmethod
    def get_spot_price(self, instance_type: str, zone: str) -> float:
        """Current spot price. Raises PriceLookupError when unavailable."""
        pass

    @abstractmethod
    def get_on_demand_price(self, instance_type: str, region: str) -> float:
        """Current on-demand price. Raises PriceLookupError when unavailable."""
        pass
