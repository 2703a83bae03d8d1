from typing import Collection, Iterable, Mapping

from ..core.exceptions import NoMatchingZonesError
from .models import SpotPriceObservation


class SpotAverager:
    """Time-weighted averaging of spot price history.

    Each observed price is weighted by how long the *next older* price
    stayed in effect before the change it records: walking the history
    newest first, observation ``i`` is weighted by the minutes between
    observation ``i - 1`` and itself, so the newest point carries no weight
    once there are two or more observations.
    """

    @staticmethod
    def zone_average(observations: Iterable[SpotPriceObservation]) -> float:
        """Time-weighted average price of one zone's observations"""
        entries = sorted(observations, key=lambda o: o.timestamp, reverse=True)
        if not entries:
            return 0.0

        total_minutes = (entries[0].timestamp - entries[-1].timestamp).total_seconds() / 60
        if total_minutes <= 0:
            # One observation, or several sharing a timestamp
            return sum(o.price for o in entries) / len(entries)

        weighted_sum = 0.0
        for i, entry in enumerate(entries):
            newer = entries[max(i - 1, 0)]
            minutes = (newer.timestamp - entry.timestamp).total_seconds() / 60
            weighted_sum += minutes * entry.price
        return weighted_sum / total_minutes

    @classmethod
    def average(cls, zone_series: Mapping[str, Iterable[SpotPriceObservation]],
                zones: Collection[str] = (), instance_type: str = "") -> float:
        """Unweighted mean of the per-zone averages of the selected zones.

        An empty ``zones`` selects every zone present. Zone names must match
        exactly.
        """
        wanted = frozenset(zones)
        selected = [zone for zone in zone_series if not wanted or zone in wanted]
        if not selected:
            raise NoMatchingZonesError(instance_type, sorted(wanted), list(zone_series))

        total = sum(cls.zone_average(zone_series[zone]) for zone in selected)
        return total / len(selected)
