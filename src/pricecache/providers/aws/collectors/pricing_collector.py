from typing import Iterator, List
import logging

from botocore.exceptions import BotoCoreError, ClientError

from ....core.base import CatalogFilter, PriceDocument, PricingCatalogSource
from ..client import AWSClient, translate_error


class PricingCatalogCollector(PricingCatalogSource):
    """Collector for pricing catalog records (pricing:GetProducts)"""

    def __init__(self, aws_client: AWSClient, page_size: int = 100):
        self.aws_client = aws_client
        self.page_size = page_size
        self.logger = logging.getLogger(__name__)

    def iter_price_documents(self, service_code: str,
                             filters: List[CatalogFilter]) -> Iterator[PriceDocument]:
        """Yield raw PriceList entries (JSON strings) from every page"""
        pages = 0
        try:
            client = self.aws_client.pricing_client()
            paginator = client.get_paginator('get_products')
            page_iterator = paginator.paginate(
                ServiceCode=service_code,
                Filters=[f.to_api() for f in filters],
                PaginationConfig={'PageSize': self.page_size},
            )

            for page in page_iterator:
                pages += 1
                for document in page.get('PriceList', []):
                    yield document
        except (ClientError, BotoCoreError) as e:
            self.logger.error(f"Failed to list pricing records after {pages} page(s): {e}")
            raise translate_error('pricing', 'GetProducts', e) from e

        self.logger.debug(f"Read {pages} pricing page(s) for {service_code}")
