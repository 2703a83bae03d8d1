"""On-demand and spot EC2 price lookups backed by an in-memory cache"""

__version__ = "0.1.0"

from .core.exceptions import (
    PriceCacheError, TransportError, ParseError, ParseErrorGroup, ParseStage,
    NoMatchingZonesError, PriceNotFoundError, ValidationError
)
from .pricing import CacheState, HydrationResult, PriceCacheFacade, SpotAverager, SpotPriceObservation

__all__ = [
    'PriceCacheError', 'TransportError', 'ParseError', 'ParseErrorGroup', 'ParseStage',
    'NoMatchingZonesError', 'PriceNotFoundError', 'ValidationError',
    'CacheState', 'HydrationResult', 'PriceCacheFacade', 'SpotAverager', 'SpotPriceObservation'
]
