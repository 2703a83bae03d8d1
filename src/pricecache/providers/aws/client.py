import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
import logging
from typing import Any, Dict, Optional

from ...core.config import AWSConfig
from ...core.exceptions import TransportError


class AWSClient:
    """boto3 session and client factory"""

    def __init__(self, config: Optional[AWSConfig] = None, session: Optional[boto3.Session] = None):
        self.config = config or AWSConfig()
        self.session = session
        self.clients: Dict[str, Any] = {}
        self.logger = logging.getLogger(__name__)

    @property
    def region(self) -> str:
        if self.session is not None and self.session.region_name:
            return self.session.region_name
        return self.config.region

    def _create_session(self) -> boto3.Session:
        try:
            if self.config.profile:
                return boto3.Session(profile_name=self.config.profile, region_name=self.config.region)
            return boto3.Session(region_name=self.config.region)
        except BotoCoreError as e:
            raise TransportError("session", f"Unable to create AWS session: {e}") from e

    def get_client(self, service: str, region: Optional[str] = None):
        """Get or create a boto3 client for a service"""
        if self.session is None:
            self.session = self._create_session()

        region = region or self.region
        client_key = f"{service}_{region}"

        if client_key not in self.clients:
            self.logger.debug(f"Creating {service} client in {region}")
            self.clients[client_key] = self.session.client(
                service,
                region_name=region,
                config=Config(
                    retries={'max_attempts': self.config.max_retries, 'mode': 'standard'},
                    read_timeout=self.config.timeout,
                ),
            )

        return self.clients[client_key]

    def pricing_client(self):
        """Pricing API client, always in the pricing endpoint region"""
        return self.get_client('pricing', region=self.config.pricing_region)

    def ec2_client(self):
        return self.get_client('ec2')


def translate_error(service: str, operation: str, error: Exception) -> TransportError:
    """Convert a botocore failure into a TransportError"""
    if isinstance(error, ClientError):
        code = error.response.get('Error', {}).get('Code', 'Unknown')
        message = error.response.get('Error', {}).get('Message', str(error))
        return TransportError(service, f"{operation} failed ({code}): {message}")
    return TransportError(service, f"{operation} failed: {error}")
