from .sources import CatalogFilter, PriceDocument, PricingCatalogSource, SpotHistorySource, RegionDirectory
from .price_provider import BasePriceProvider

__all__ = [
    'CatalogFilter', 'PriceDocument', 'PricingCatalogSource', 'SpotHistorySource', 'RegionDirectory',
    'BasePriceProvider'
]
