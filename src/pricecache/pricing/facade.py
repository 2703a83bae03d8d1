from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, Optional, Tuple
import logging

import boto3

from ..core.base import (
    BasePriceProvider, CatalogFilter, PricingCatalogSource, RegionDirectory, SpotHistorySource
)
from ..core.config import AWSConfig, PricingConfig, Settings
from ..core.exceptions import NoMatchingZonesError, ParseError, ParseErrorGroup, PriceNotFoundError
from ..core.logging import get_performance_logger
from ..core.validation import Validator
from ..providers.aws import AWSClient, PricingCatalogCollector, RegionResolver, SpotHistoryCollector
from .averager import SpotAverager
from .cache import OnDemandCache, SpotSeriesStore
from .models import (
    CacheKind, CacheState, HydrationResult, SpotPriceObservation, ZoneSeries, freeze_zone_series
)
from .parser import parse_ondemand_price, parse_spot_event


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PriceCacheFacade(BasePriceProvider):
    """On-demand and spot price lookups backed by two in-memory caches.

    Queries answer from the cache when the instance type is present and
    otherwise fetch just that instance type. Hydration fetches everything
    and replaces the cache wholesale. There is no TTL: the refresh times
    only tell callers how old the hydrated data is.
    """

    def __init__(self, catalog: PricingCatalogSource, spot_history: SpotHistorySource,
                 regions: RegionDirectory, region: str,
                 pricing: Optional[PricingConfig] = None,
                 clock: Callable[[], datetime] = utcnow):
        self.catalog = catalog
        self.spot_history = spot_history
        self.regions = regions
        self.region = region
        self.pricing = pricing or PricingConfig()
        self.clock = clock
        self.ondemand_cache = OnDemandCache()
        self.spot_cache = SpotSeriesStore()
        self.averager = SpotAverager()
        self.logger = logging.getLogger(__name__)
        self.performance = get_performance_logger()

    @classmethod
    def from_settings(cls, settings: Settings, session: Optional[boto3.Session] = None) -> "PriceCacheFacade":
        """Build a facade talking to AWS"""
        aws_client = AWSClient(settings.aws, session=session)
        region = Validator.validate_aws_region(aws_client.region)
        return cls(
            catalog=PricingCatalogCollector(aws_client),
            spot_history=SpotHistoryCollector(aws_client),
            regions=RegionResolver(default=settings.pricing.default_region_description),
            region=region,
            pricing=settings.pricing,
        )

    @classmethod
    def from_session(cls, session: boto3.Session, region: Optional[str] = None) -> "PriceCacheFacade":
        region = region or session.region_name
        settings = Settings(aws=AWSConfig(region=region)) if region else Settings()
        return cls.from_settings(settings, session=session)

    # Cache state

    @property
    def ondemand_cache_state(self) -> CacheState:
        return self.ondemand_cache.state

    @property
    def spot_cache_state(self) -> CacheState:
        return self.spot_cache.state

    def last_ondemand_refresh_time(self) -> Optional[datetime]:
        return self.ondemand_cache.refreshed_at

    def last_spot_refresh_time(self) -> Optional[datetime]:
        return self.spot_cache.refreshed_at

    # Helpers

    def _catalog_filters(self, instance_type: Optional[str] = None) -> List[CatalogFilter]:
        filters = [
            CatalogFilter("ServiceCode", self.pricing.service_code),
            CatalogFilter("operatingSystem", self.pricing.operating_system),
            CatalogFilter("location", self.regions.describe(self.region)),
            CatalogFilter("capacitystatus", self.pricing.capacity_status),
            CatalogFilter("preInstalledSw", self.pricing.pre_installed_sw),
            CatalogFilter("tenancy", self.pricing.tenancy),
        ]
        if instance_type:
            filters.append(CatalogFilter("instanceType", instance_type))
        return filters

    def _days(self, days: Optional[int]) -> int:
        if days is None:
            return self.pricing.spot_days_back
        return Validator.validate_days(days)

    def _spot_window(self, days: int):
        end_time = self.clock()
        return end_time - timedelta(days=days), end_time

    def _log_parse_errors(self, operation: str, errors: List[ParseError]) -> None:
        if not errors:
            return
        self.logger.warning(f"{operation}: dropped {len(errors)} unparsable record(s)",
                            extra={'operation': operation, 'errors': len(errors)})
        for error in errors:
            self.logger.debug(f"{operation}: {error}")

    # Queries

    def get_ondemand_price(self, instance_type: str) -> float:
        """Get the on-demand hourly USD price for an instance type.

        A cache miss fetches only this instance type from the catalog and
        stores the result without changing the refresh time.

        Raises:
            ParseErrorGroup: a record failed to parse; ``partial`` holds the
                price if another record still supplied one.
            PriceNotFoundError: the catalog has no price for the type.
            TransportError: the pricing API call failed.
        """
        instance_type = Validator.validate_instance_type(instance_type)

        price = self.ondemand_cache.get(instance_type)
        if price is not None:
            self.logger.debug(f"On-demand cache hit for {instance_type}")
            return price

        errors: List[ParseError] = []
        with self.performance.timer('ondemand_lookup', instance_type=instance_type):
            for document in self.catalog.iter_price_documents(
                    self.pricing.service_code, self._catalog_filters(instance_type)):
                try:
                    name, value = parse_ondemand_price(document)
                except ParseError as e:
                    errors.append(e)
                    continue
                if name != instance_type:
                    self.logger.debug(f"Ignoring pricing record for {name} while looking up {instance_type}")
                    continue
                price = value
                break

        if price is not None:
            self.ondemand_cache.put(instance_type, price)
        if errors:
            self._log_parse_errors(f"on-demand lookup of {instance_type}", errors)
            raise ParseErrorGroup(errors, partial=price)
        if price is None:
            raise PriceNotFoundError(instance_type)
        return price

    def get_spot_average_price(self, instance_type: str, zones: Iterable[str] = (),
                               days: Optional[int] = None) -> float:
        """Get the time-weighted average spot price over the last ``days`` days.

        ``zones`` restricts the average to those availability zones; empty
        means every zone with data. Instance types present in the spot cache
        are answered from the hydrated history as is. Misses are fetched for
        this call only and never written to the shared cache.

        Raises:
            NoMatchingZonesError: no spot history for the selected zones.
            ParseErrorGroup: some events failed to parse; ``partial`` holds
                the average over the events that did parse, if any.
            TransportError: the EC2 API call failed.
        """
        instance_type = Validator.validate_instance_type(instance_type)
        zones = Validator.validate_zones(zones)
        days = self._days(days)

        zone_series = self.spot_cache.get(instance_type)
        if zone_series is not None:
            self.logger.debug(f"Spot cache hit for {instance_type}")
            return self.averager.average(zone_series, zones, instance_type)

        zone_series, errors = self._fetch_spot_series(instance_type, days)
        if not errors:
            return self.averager.average(zone_series, zones, instance_type)

        self._log_parse_errors(f"spot lookup of {instance_type}", errors)
        partial = None
        if zone_series:
            try:
                partial = self.averager.average(zone_series, zones, instance_type)
            except NoMatchingZonesError as e:
                self.logger.debug(f"No partial spot average for {instance_type}: {e}")
        raise ParseErrorGroup(errors, partial=partial)

    def _fetch_spot_series(self, instance_type: str, days: int) -> Tuple[ZoneSeries, List[ParseError]]:
        start_time, end_time = self._spot_window(days)
        working_set: Dict[str, List[SpotPriceObservation]] = defaultdict(list)
        errors: List[ParseError] = []

        with self.performance.timer('spot_lookup', instance_type=instance_type):
            for event in self.spot_history.iter_spot_history(
                    start_time, end_time, self.pricing.product_description, instance_type):
                try:
                    name, zone, observation = parse_spot_event(event)
                except ParseError as e:
                    errors.append(e)
                    continue
                if name == instance_type:
                    working_set[zone].append(observation)

        return freeze_zone_series(working_set), errors

    # Hydration

    def hydrate_ondemand_cache(self) -> HydrationResult:
        """Fetch the whole on-demand catalog for the region and replace the cache.

        Records that fail to parse are dropped and reported in the result;
        a transport failure raises and leaves the previous cache in place.
        """
        prices: Dict[str, float] = {}
        errors: List[ParseError] = []

        with self.performance.timer('hydrate_ondemand', cache=CacheKind.ONDEMAND.value, region=self.region):
            for document in self.catalog.iter_price_documents(
                    self.pricing.service_code, self._catalog_filters()):
                try:
                    name, price = parse_ondemand_price(document)
                except ParseError as e:
                    errors.append(e)
                    continue
                prices[name] = price

        refreshed_at = self.clock()
        self.ondemand_cache.replace(prices, refreshed_at)
        self._log_parse_errors("on-demand hydration", errors)
        self.logger.info(f"Hydrated on-demand cache with {len(prices)} instance type(s)",
                         extra={'cache': CacheKind.ONDEMAND.value, 'entries': len(prices)})
        return HydrationResult(CacheKind.ONDEMAND, len(prices), refreshed_at, errors)

    def hydrate_spot_cache(self, days: Optional[int] = None) -> HydrationResult:
        """Fetch the last ``days`` days of spot history for every instance type and replace the cache"""
        days = self._days(days)
        start_time, end_time = self._spot_window(days)
        series: Dict[str, Dict[str, List[SpotPriceObservation]]] = defaultdict(lambda: defaultdict(list))
        errors: List[ParseError] = []

        with self.performance.timer('hydrate_spot', cache=CacheKind.SPOT.value, region=self.region):
            for event in self.spot_history.iter_spot_history(
                    start_time, end_time, self.pricing.product_description):
                try:
                    name, zone, observation = parse_spot_event(event)
                except ParseError as e:
                    errors.append(e)
                    continue
                series[name][zone].append(observation)

        refreshed_at = self.clock()
        self.spot_cache.replace(series, refreshed_at, days)
        self._log_parse_errors("spot hydration", errors)
        self.logger.info(f"Hydrated spot cache with {len(series)} instance type(s) over {days} day(s)",
                         extra={'cache': CacheKind.SPOT.value, 'entries': len(series)})
        return HydrationResult(CacheKind.SPOT, len(series), refreshed_at, errors)
