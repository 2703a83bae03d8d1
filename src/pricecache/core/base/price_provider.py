from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, Optional


class BasePriceProvider(ABC):
    """Abstract price lookup interface.

    Consumers that rank or filter instance types by cost depend on this
    interface so they can substitute a fake in their own tests.
    """

    @abstractmethod
    def get_ondemand_price(self, instance_type: str) -> float:
        """Get the on-demand hourly USD price of an instance type"""
        pass

    @abstractmethod
    def get_spot_average_price(self, instance_type: str, zones: Iterable[str] = (),
                               days: Optional[int] = None) -> float:
        """Get the time-weighted average spot price over the last N days"""
        pass

    # Hydrations write to different caches, so running both at once is safe
    @abstractmethod
    def hydrate_ondemand_cache(self):
        """Refresh the whole on-demand cache"""
        pass

    @abstractmethod
    def hydrate_spot_cache(self, days: Optional[int] = None):
        """Refresh the whole spot cache"""
        pass

    @abstractmethod
    def last_ondemand_refresh_time(self) -> Optional[datetime]:
        """UTC time of the last successful on-demand hydration, None if never hydrated"""
        pass

    @abstractmethod
    def last_spot_refresh_time(self) -> Optional[datetime]:
        """UTC time of the last successful spot hydration, None if never hydrated"""
        pass
