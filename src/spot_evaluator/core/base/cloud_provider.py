import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..exceptions import AuthenticationError


class CloudProvider(Enum):
    AWS = "aws"


@dataclass
class CloudCredentials:
    """Profile and default region a provider session is opened with"""
    provider: CloudProvider
    profile: Optional[str] = None
    region: Optional[str] = None


class BaseCloudProvider(ABC):
    """Provider session that hands out one cached client per service and region.

    Client creation is serialized; the clients themselves are shared by the
    worker threads that look up specs and prices.
    """

    default_region = "us-east-1"

    def __init__(self, credentials: CloudCredentials):
        self.credentials = credentials
        self.clients: Dict[str, Any] = {}
        self._authenticated = False
        self._lock = threading.Lock()

    @abstractmethod
    def authenticate(self) -> bool:
        """Open and verify the provider session"""
        pass

    @abstractmethod
    def create_client(self, service: str, region: str):
        """Build a new API client; called at most once per service and region"""
        pass

    def get_client(self, service: str, region: Optional[str] = None):
        """Get the cached client for a service, authenticating on first use"""
        region = region or self.credentials.region or self.default_region
        client_key = f"{service}_{region}"

        with self._lock:
            if not self._authenticated and not self.authenticate():
                raise AuthenticationError(
                    f"Not authenticated with {self.credentials.provider.value.upper()}"
                )
            if client_key not in self.clients:
                self.clients[client_key] = self.create_client(service, region)
            return self.clients[client_key]

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    def get_provider_info(self) -> Dict[str, Any]:
        return {
            "provider": self.credentials.provider.value,
            "authenticated": self._authenticated,
            "profile": self.credentials.profile,
            "region": self.credentials.region or self.default_region,
            "clients": sorted(self.clients),
        }
