import logging
from datetime import datetime, timezone
from typing import Dict, Iterator, List

from botocore.exceptions import ClientError, BotoCoreError

from ...core.base import PriceOracle
from ...core.exceptions import PriceLookupError, NoPriceFoundError
from .client import AWSClient
from .catalog import region_from_zone
from .price_list import extract_usd_price


def build_on_demand_filters(instance_type: str, region: str,
                            operating_system: str = "Linux") -> List[Dict[str, str]]:
    """Price List filters selecting shared-tenancy, no-license on-demand usage"""
    terms = [
        ('ServiceCode', 'AmazonEC2'),
        ('instanceType', instance_type),
        ('regionCode', region),
        ('operatingSystem', operating_system),
        ('tenancy', 'Shared'),
        ('preInstalledSw', 'NA'),
        ('capacitystatus', 'Used'),
    ]
    return [{'Type': 'TERM_MATCH', 'Field': field, 'Value': value} for field, value in terms]


class AWSPriceOracle(PriceOracle):
    """Spot prices from EC2 price history, on-demand prices from the Price List API"""

    def __init__(self, aws_client: AWSClient, pricing_region: str = "us-east-1",
                 product_description: str = "Linux/UNIX"):
        self.aws_client = aws_client
        self.pricing_region = pricing_region
        self.product_description = product_description
        self.logger = logging.getLogger(__name__)

    def get_spot_price(self, instance_type: str, zone: str) -> float:
        try:
            ec2_client = self.aws_client.get_client('ec2', region_from_zone(zone))
            response = ec2_client.describe_spot_price_history(
                InstanceTypes=[instance_type],
                AvailabilityZone=zone,
                ProductDescriptions=[self.product_description],
                StartTime=datetime.now(timezone.utc),
                MaxResults=1
            )
        except (ClientError, BotoCoreError) as e:
            raise PriceLookupError(instance_type, zone, str(e)) from e

        history = response.get('SpotPriceHistory', [])
        if not history:
            raise PriceLookupError(instance_type, zone, "no spot history returned")

        try:
            return float(history[0]['SpotPrice'])
        except (KeyError, TypeError, ValueError) as e:
            raise PriceLookupError(instance_type, zone, f"unparsable spot price: {e}") from e

    def get_on_demand_price(self, instance_type: str, region: str) -> float:
        try:
            price = extract_usd_price(self._iter_price_documents(instance_type, region))
        except NoPriceFoundError as e:
            raise NoPriceFoundError(instance_type, region) from e
        except (ClientError, BotoCoreError) as e:
            raise PriceLookupError(instance_type, region, str(e)) from e

        self.logger.debug(f"On-demand price for {instance_type} in {region}: ${price:.4f}")
        return price

    def _iter_price_documents(self, instance_type: str, region: str) -> Iterator[str]:
        pricing_client = self.aws_client.get_client('pricing', self.pricing_region)
        paginator = pricing_client.get_paginator('get_products')
        page_iterator = paginator.paginate(
            ServiceCode='AmazonEC2',
            Filters=build_on_demand_filters(instance_type, region)
        )

        for page in page_iterator:
            yield from page.get('PriceList', [])
