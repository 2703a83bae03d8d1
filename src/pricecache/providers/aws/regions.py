"""Region code to pricing catalog location lookup.

The pricing API filters on the human readable ``location`` attribute
rather than the region code. Locations that differ from botocore's
partition table descriptions are listed explicitly.
"""

import logging
import threading
from typing import Any, Dict, Mapping, Optional

from botocore.loaders import create_loader

from ...core.base import RegionDirectory
from ...core.config import DEFAULT_REGION_DESCRIPTION

logger = logging.getLogger(__name__)

# The catalog still names European regions "EU (...)"
PRICING_LOCATIONS: Dict[str, str] = {
    "us-east-1": "US East (N. Virginia)",
    "us-east-2": "US East (Ohio)",
    "us-west-1": "US West (N. California)",
    "us-west-2": "US West (Oregon)",
    "eu-west-1": "EU (Ireland)",
    "eu-west-2": "EU (London)",
    "eu-west-3": "EU (Paris)",
    "eu-central-1": "EU (Frankfurt)",
    "eu-central-2": "EU (Zurich)",
    "eu-north-1": "EU (Stockholm)",
    "eu-south-1": "EU (Milan)",
    "eu-south-2": "EU (Spain)",
    "sa-east-1": "South America (Sao Paulo)",
}


def _load_partition_regions() -> Dict[str, str]:
    endpoints = create_loader().load_data('endpoints')
    descriptions = {}
    for partition in endpoints.get('partitions', []):
        for code, region in partition.get('regions', {}).items():
            description = region.get('description')
            if description:
                descriptions[code] = description
    return descriptions


class RegionResolver(RegionDirectory):
    """Resolve region codes to pricing catalog locations.

    Unknown codes fall back to ``default`` so lookups still run against a
    sane region instead of failing.
    """

    def __init__(self, overrides: Optional[Mapping[str, str]] = None,
                 default: str = DEFAULT_REGION_DESCRIPTION,
                 partition_regions: Optional[Mapping[str, str]] = None):
        self.overrides = dict(PRICING_LOCATIONS)
        self.overrides.update(overrides or {})
        self.default = default
        self._partition_regions = dict(partition_regions) if partition_regions is not None else None
        self._lock = threading.Lock()

    def _partitions(self) -> Mapping[str, str]:
        with self._lock:
            if self._partition_regions is None:
                try:
                    self._partition_regions = _load_partition_regions()
                except Exception as e:
                    logger.warning(f"Unable to load botocore partition data: {e}")
                    self._partition_regions = {}
            return self._partition_regions

    def describe(self, region: Optional[str]) -> str:
        if region:
            if region in self.overrides:
                return self.overrides[region]
            description = self._partitions().get(region)
            if description:
                return description
        logger.warning(f"Unknown region {region!r}, using pricing location {self.default!r}")
        return self.default

    def known_regions(self) -> Dict[str, Any]:
        regions = dict(self._partitions())
        regions.update(self.overrides)
        return regions
