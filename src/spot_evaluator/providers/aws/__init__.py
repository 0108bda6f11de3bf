from .client import AWSClient
from .catalog import EC2CatalogOracle, region_from_zone
from .pricing import AWSPriceOracle, build_on_demand_filters
from .price_list import extract_usd_price

__all__ = [
    'AWSClient', 'EC2CatalogOracle', 'region_from_zone',
    'AWSPriceOracle', 'build_on_demand_filters', 'extract_usd_price'
]
