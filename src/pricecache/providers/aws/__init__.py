from .client import AWSClient
from .regions import RegionResolver
from .collectors import PricingCatalogCollector, SpotHistoryCollector

__all__ = ['AWSClient', 'RegionResolver', 'PricingCatalogCollector', 'SpotHistoryCollector']
