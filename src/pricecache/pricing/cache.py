import threading
from datetime import datetime
from typing import Dict, List, Optional

from .models import CacheState, OnDemandSnapshot, SpotSnapshot, SpotPriceObservation, ZoneSeries


class OnDemandCache:
    """Instance type -> hourly on-demand USD price.

    Readers use the current snapshot without locking. Writers build a new
    snapshot under the lock and swap the reference.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._snapshot = OnDemandSnapshot()

    @property
    def snapshot(self) -> OnDemandSnapshot:
        return self._snapshot

    @property
    def state(self) -> CacheState:
        return self._snapshot.state

    @property
    def refreshed_at(self) -> Optional[datetime]:
        return self._snapshot.refreshed_at

    def get(self, instance_type: str) -> Optional[float]:
        return self._snapshot.prices.get(instance_type)

    def __contains__(self, instance_type: str) -> bool:
        return instance_type in self._snapshot.prices

    def __len__(self) -> int:
        return len(self._snapshot)

    def put(self, instance_type: str, price: float) -> None:
        """Add one price without touching the refresh time"""
        with self._lock:
            current = self._snapshot
            prices = dict(current.prices)
            prices[instance_type] = price
            state = current.state
            if state is CacheState.UNINITIALIZED:
                state = CacheState.PARTIALLY_POPULATED
            self._snapshot = OnDemandSnapshot.build(prices, current.refreshed_at, state)

    def replace(self, prices: Dict[str, float], refreshed_at: datetime) -> OnDemandSnapshot:
        """Swap in a fully hydrated cache"""
        snapshot = OnDemandSnapshot.build(prices, refreshed_at, CacheState.HYDRATED)
        with self._lock:
            self._snapshot = snapshot
        return snapshot


class SpotSeriesStore:
    """Instance type -> availability zone -> spot price observations.

    Only populated by hydration; single instance type lookups are not
    written back.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._snapshot = SpotSnapshot()

    @property
    def snapshot(self) -> SpotSnapshot:
        return self._snapshot

    @property
    def state(self) -> CacheState:
        return self._snapshot.state

    @property
    def refreshed_at(self) -> Optional[datetime]:
        return self._snapshot.refreshed_at

    def get(self, instance_type: str) -> Optional[ZoneSeries]:
        return self._snapshot.series.get(instance_type)

    def __contains__(self, instance_type: str) -> bool:
        return instance_type in self._snapshot.series

    def __len__(self) -> int:
        return len(self._snapshot)

    def replace(self, series: Dict[str, Dict[str, List[SpotPriceObservation]]],
                refreshed_at: datetime, days: int) -> SpotSnapshot:
        """Swap in a fully hydrated cache"""
        snapshot = SpotSnapshot.build(series, refreshed_at, days, CacheState.HYDRATED)
        with self._lock:
            self._snapshot = snapshot
        return snapshot
