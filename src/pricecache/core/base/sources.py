from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union


PriceDocument = Union[str, Mapping[str, Any]]


@dataclass(frozen=True)
class CatalogFilter:
    """A TERM_MATCH filter on the pricing catalog"""
    field: str
    value: str
    type: str = "TERM_MATCH"

    def to_api(self) -> Dict[str, str]:
        return {"Type": self.type, "Field": self.field, "Value": self.value}


class PricingCatalogSource(ABC):
    """Paged access to the on-demand pricing catalog"""

    @abstractmethod
    def iter_price_documents(self, service_code: str,
                             filters: List[CatalogFilter]) -> Iterator[PriceDocument]:
        """Yield every pricing record matching the filters, driving pagination until exhausted"""
        pass


class SpotHistorySource(ABC):
    """Paged access to spot price change events"""

    @abstractmethod
    def iter_spot_history(self, start_time: datetime, end_time: datetime,
                          product_description: str,
                          instance_type: Optional[str] = None) -> Iterator[Mapping[str, Any]]:
        """Yield spot price events with InstanceType, AvailabilityZone, SpotPrice and Timestamp"""
        pass


class RegionDirectory(ABC):
    """Lookup of pricing catalog region descriptions"""

    @abstractmethod
    def describe(self, region: str) -> str:
        """Return the catalog location description for a region code"""
        pass
