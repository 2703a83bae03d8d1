from datetime import datetime
from typing import Any, Dict, Iterator, Mapping, Optional
import logging

from botocore.exceptions import BotoCoreError, ClientError

from ....core.base import SpotHistorySource
from ..client import AWSClient, translate_error


class SpotHistoryCollector(SpotHistorySource):
    """Collector for spot price change events (ec2:DescribeSpotPriceHistory)"""

    def __init__(self, aws_client: AWSClient, page_size: int = 1000):
        self.aws_client = aws_client
        self.page_size = page_size
        self.logger = logging.getLogger(__name__)

    def iter_spot_history(self, start_time: datetime, end_time: datetime,
                          product_description: str,
                          instance_type: Optional[str] = None) -> Iterator[Mapping[str, Any]]:
        params: Dict[str, Any] = {
            'ProductDescriptions': [product_description],
            'StartTime': start_time,
            'EndTime': end_time,
            'PaginationConfig': {'PageSize': self.page_size},
        }
        if instance_type:
            params['InstanceTypes'] = [instance_type]

        pages = 0
        try:
            ec2_client = self.aws_client.ec2_client()
            paginator = ec2_client.get_paginator('describe_spot_price_history')

            for page in paginator.paginate(**params):
                pages += 1
                for event in page.get('SpotPriceHistory', []):
                    yield event
        except (ClientError, BotoCoreError) as e:
            self.logger.error(f"Failed to read spot price history after {pages} page(s): {e}")
            raise translate_error('ec2', 'DescribeSpotPriceHistory', e) from e

        self.logger.debug(
            f"Read {pages} spot price page(s) in {self.aws_client.region}"
            + (f" for {instance_type}" if instance_type else "")
        )
