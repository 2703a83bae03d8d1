"""Custom exceptions for pricecache"""

from enum import Enum
from typing import Any, Iterable, Iterator, List, Optional, Sequence


class PriceCacheError(Exception):
    """Base exception for all pricecache errors"""
    pass


class ConfigurationError(PriceCacheError):
    """Raised when configuration is invalid"""
    pass


class ValidationError(PriceCacheError):
    """Raised when input validation fails"""
    pass


class TransportError(PriceCacheError):
    """Raised when an upstream pricing collaborator fails"""
    def __init__(self, service: str, message: str):
        self.service = service
        super().__init__(f"[{service}] {message}")


class ParseStage(str, Enum):
    """Stage of record parsing that failed"""
    DOCUMENT = "document"
    ATTRIBUTES = "attributes"
    INSTANCE_TYPE = "instance_type"
    TERMS = "terms"
    ON_DEMAND_TERMS = "on_demand_terms"
    PRICE_DIMENSIONS = "price_dimensions"
    USD_PRICE = "usd_price"
    USD_VALUE = "usd_value"
    SPOT_EVENT = "spot_event"
    SPOT_PRICE = "spot_price"


class ParseError(PriceCacheError):
    """Raised when a single pricing record cannot be parsed"""
    def __init__(self, stage: ParseStage, message: str, instance_type: str = ""):
        self.stage = stage
        self.instance_type = instance_type
        self.message = message
        label = instance_type or "<unknown>"
        super().__init__(f"{stage.value}: {message} (instance type: {label})")


class ParseErrorGroup(PriceCacheError):
    """Aggregate of parse errors collected over a multi-record pass.

    ``partial`` holds whatever usable result was still produced, so callers
    can tell "data with warnings" apart from "no data at all".
    """

    def __init__(self, errors: Iterable[ParseError], partial: Any = None):
        self.errors: List[ParseError] = list(errors)
        self.partial = partial
        summary = "; ".join(str(e) for e in self.errors[:3])
        if len(self.errors) > 3:
            summary += f"; ... {len(self.errors) - 3} more"
        super().__init__(f"{len(self.errors)} pricing record(s) failed to parse: {summary}")

    def __iter__(self) -> Iterator[ParseError]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    @property
    def has_partial(self) -> bool:
        return self.partial is not None


class NoMatchingZonesError(PriceCacheError):
    """Raised when a zone filter selects no spot price series"""
    def __init__(self, instance_type: str, zones: Sequence[str],
                 available: Optional[Sequence[str]] = None):
        self.instance_type = instance_type
        self.zones = list(zones)
        self.available = sorted(available or [])
        wanted = ", ".join(self.zones) if self.zones else "any zone"
        super().__init__(
            f"No spot price data for {instance_type} in {wanted} "
            f"(available: {', '.join(self.available) or 'none'})"
        )


class PriceNotFoundError(PriceCacheError):
    """Raised when the catalog has no price for an instance type"""
    def __init__(self, instance_type: str):
        self.instance_type = instance_type
        super().__init__(f"No on-demand price found for {instance_type}")
