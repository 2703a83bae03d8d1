from .models import (
    CacheKind, CacheState, HydrationResult, OnDemandSnapshot, SpotPriceObservation, SpotSnapshot
)
from .parser import parse_ondemand_price, parse_spot_event
from .averager import SpotAverager
from .cache import OnDemandCache, SpotSeriesStore
from .facade import PriceCacheFacade

__all__ = [
    'CacheKind', 'CacheState', 'HydrationResult', 'OnDemandSnapshot', 'SpotPriceObservation', 'SpotSnapshot',
    'parse_ondemand_price', 'parse_spot_event',
    'SpotAverager', 'OnDemandCache', 'SpotSeriesStore', 'PriceCacheFacade'
]
