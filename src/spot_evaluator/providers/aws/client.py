import logging
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError, NoCredentialsError, BotoCoreError

from ...core.base import BaseCloudProvider, CloudCredentials, CloudProvider
from ...core.config import AWSConfig


class AWSClient(BaseCloudProvider):
    """boto3 session verified through STS, with retrying service clients"""

    def __init__(self, credentials: CloudCredentials, config: Optional[AWSConfig] = None):
        super().__init__(credentials)
        self.config = config or AWSConfig()
        self.session = None
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: AWSConfig) -> "AWSClient":
        credentials = CloudCredentials(
            provider=CloudProvider.AWS,
            profile=config.profile,
            region=config.region
        )
        return cls(credentials, config)

    def authenticate(self) -> bool:
        try:
            session = boto3.Session(profile_name=self.credentials.profile) \
                if self.credentials.profile else boto3.Session()
            identity = session.client('sts').get_caller_identity()
        except NoCredentialsError:
            self.logger.error("No AWS credentials found")
            return self._fail()
        except (ClientError, BotoCoreError) as e:
            self.logger.error(f"AWS authentication failed: {e}")
            return self._fail()

        self.logger.info(f"Authenticated as: {identity['Arn']}")
        self.session = session
        self._authenticated = True
        return True

    def create_client(self, service: str, region: str):
        self.logger.debug(f"Creating {service} client in {region}")
        return self.session.client(
            service,
            region_name=region,
            config=Config(
                retries={'max_attempts': self.config.max_retries, 'mode': 'adaptive'},
                connect_timeout=self.config.connect_timeout,
                read_timeout=self.config.read_timeout
            )
        )

    def _fail(self) -> bool:
        self.session = None
        self._authenticated = False
        return False
