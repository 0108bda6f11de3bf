import re
import logging
from typing import Any, Dict, FrozenSet, Optional

from botocore.exceptions import ClientError, BotoCoreError

from ...core.base import CatalogOracle, InstanceSpec
from ...core.exceptions import SpecLookupError
from .client import AWSClient

_ZONE_SUFFIX = re.compile(r'[a-z]$')


def region_from_zone(zone: str) -> str:
    """Region of a standard availability zone name, e.g. us-east-1a -> us-east-1"""
    return _ZONE_SUFFIX.sub('', zone)


class EC2CatalogOracle(CatalogOracle):
    """Instance catalog backed by the EC2 DescribeInstanceTypes APIs"""

    def __init__(self, aws_client: AWSClient):
        self.aws_client = aws_client
        self.logger = logging.getLogger(__name__)

    def get_spec(self, instance_type: str, zone: Optional[str] = None) -> InstanceSpec:
        """Describe an instance type in the zone's region, or the default region"""
        region = region_from_zone(zone) if zone else None
        try:
            ec2_client = self.aws_client.get_client('ec2', region)
            response = ec2_client.describe_instance_types(InstanceTypes=[instance_type])
        except (ClientError, BotoCoreError) as e:
            raise SpecLookupError(instance_type, str(e)) from e

        instance_types = response.get('InstanceTypes', [])
        if not instance_types:
            raise SpecLookupError(instance_type, "instance type not found")

        return self._to_spec(instance_type, instance_types[0])

    def list_offered_types(self, zone: str) -> FrozenSet[str]:
        offered = set()
        try:
            ec2_client = self.aws_client.get_client('ec2', region_from_zone(zone))
            paginator = ec2_client.get_paginator('describe_instance_type_offerings')
            page_iterator = paginator.paginate(
                LocationType='availability-zone',
                Filters=[{'Name': 'location', 'Values': [zone]}]
            )

            for page in page_iterator:
                for offering in page.get('InstanceTypeOfferings', []):
                    offered.add(offering['InstanceType'])

        except (ClientError, BotoCoreError) as e:
            raise SpecLookupError("", f"failed to list instance type offerings in {zone}: {e}") from e

        self.logger.debug(f"{len(offered)} instance types offered in {zone}")
        return frozenset(offered)

    @staticmethod
    def _to_spec(instance_type: str, info: Dict[str, Any]) -> InstanceSpec:
        return InstanceSpec(
            instance_type=info.get('InstanceType', instance_type),
            vcpus=info.get('VCpuInfo', {}).get('DefaultVCpus'),
            memory_mib=info.get('MemoryInfo', {}).get('SizeInMiB'),
            bare_metal=bool(info.get('BareMetal', False)),
            free_tier_eligible=bool(info.get('FreeTierEligible', False))
        )
