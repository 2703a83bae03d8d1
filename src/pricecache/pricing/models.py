from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from ..core.exceptions import ParseError, ParseErrorGroup


class CacheState(Enum):
    UNINITIALIZED = "uninitialized"
    PARTIALLY_POPULATED = "partially_populated"
    HYDRATED = "hydrated"


class CacheKind(Enum):
    ONDEMAND = "ondemand"
    SPOT = "spot"


@dataclass(frozen=True, order=True)
class SpotPriceObservation:
    """One spot price change event for an (instance type, zone) pair"""
    timestamp: datetime
    price: float


SpotSeries = Tuple[SpotPriceObservation, ...]
ZoneSeries = Mapping[str, SpotSeries]


def freeze_zone_series(series: Mapping[str, List[SpotPriceObservation]]) -> ZoneSeries:
    return MappingProxyType({zone: tuple(entries) for zone, entries in series.items()})


@dataclass(frozen=True)
class OnDemandSnapshot:
    """Immutable view of the on-demand cache"""
    prices: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    refreshed_at: Optional[datetime] = None
    state: CacheState = CacheState.UNINITIALIZED

    @classmethod
    def build(cls, prices: Dict[str, float], refreshed_at: Optional[datetime],
              state: CacheState) -> "OnDemandSnapshot":
        return cls(MappingProxyType(dict(prices)), refreshed_at, state)

    def __len__(self) -> int:
        return len(self.prices)


@dataclass(frozen=True)
class SpotSnapshot:
    """Immutable view of the spot cache: instance type -> zone -> series"""
    series: Mapping[str, ZoneSeries] = field(default_factory=lambda: MappingProxyType({}))
    refreshed_at: Optional[datetime] = None
    days: Optional[int] = None
    state: CacheState = CacheState.UNINITIALIZED

    @classmethod
    def build(cls, series: Dict[str, Dict[str, List[SpotPriceObservation]]],
              refreshed_at: Optional[datetime], days: Optional[int],
              state: CacheState) -> "SpotSnapshot":
        frozen = {instance_type: freeze_zone_series(zones) for instance_type, zones in series.items()}
        return cls(MappingProxyType(frozen), refreshed_at, days, state)

    def __len__(self) -> int:
        return len(self.series)

    def observation_count(self) -> int:
        return sum(len(entries) for zones in self.series.values() for entries in zones.values())


@dataclass
class HydrationResult:
    """Outcome of a full cache refresh.

    The parsed subset is committed even when some records failed; those
    failures are kept in ``errors``.
    """
    cache: CacheKind
    entries: int
    refreshed_at: datetime
    errors: List[ParseError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def error(self) -> Optional[ParseErrorGroup]:
        if not self.errors:
            return None
        return ParseErrorGroup(self.errors, partial=self.entries)

    def raise_for_errors(self) -> None:
        error = self.error
        if error is not None:
            raise error

    def to_dict(self) -> Dict[str, object]:
        return {
            "cache": self.cache.value,
            "entries": self.entries,
            "refreshed_at": self.refreshed_at.isoformat(),
            "errors": [str(e) for e in self.errors],
        }
