from .pricing_collector import PricingCatalogCollector
from .spot_collector import SpotHistoryCollector

__all__ = ['PricingCatalogCollector', 'SpotHistoryCollector']
