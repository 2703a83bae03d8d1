"""Pytest configuration and fixtures"""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest

from pricecache.core.base import PricingCatalogSource, RegionDirectory, SpotHistorySource
from pricecache.core.config import PricingConfig
from pricecache.core.exceptions import TransportError
from pricecache.pricing import PriceCacheFacade

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def build_price_document(instance_type: Optional[str], usd: Any = "0.0960000000",
                         as_json: bool = True, **attributes) -> Any:
    """Build a GetProducts PriceList entry shaped like the real catalog"""
    product_attributes = {"operatingSystem": "Linux", "location": "US East (N. Virginia)", **attributes}
    if instance_type is not None:
        product_attributes["instanceType"] = instance_type
    document = {
        "product": {"productFamily": "Compute Instance", "sku": "SKU123", "attributes": product_attributes},
        "serviceCode": "AmazonEC2",
        "terms": {
            "OnDemand": {
                "SKU123.JRTCKXETXF": {
                    "offerTermCode": "JRTCKXETXF",
                    "priceDimensions": {
                        "SKU123.JRTCKXETXF.6YS6EN2CT7": {
                            "unit": "Hrs",
                            "pricePerUnit": {"USD": usd},
                            "description": "hourly",
                        }
                    },
                }
            }
        },
    }
    return json.dumps(document) if as_json else document


def build_spot_event(instance_type: str, zone: str, price: Any, timestamp: datetime) -> Dict[str, Any]:
    return {
        "InstanceType": instance_type,
        "AvailabilityZone": zone,
        "ProductDescription": "Linux/UNIX (Amazon VPC)",
        "SpotPrice": price,
        "Timestamp": timestamp,
    }


class FakeCatalog(PricingCatalogSource):
    """In-memory pricing catalog that records every call"""

    def __init__(self, documents: Optional[List[Any]] = None, fail: bool = False):
        self.documents = list(documents or [])
        self.fail = fail
        self.calls: List[Dict[str, Any]] = []

    def iter_price_documents(self, service_code, filters):
        self.calls.append({"service_code": service_code, "filters": {f.field: f.value for f in filters}})
        wanted = next((f.value for f in filters if f.field == "instanceType"), None)
        for i, document in enumerate(self.documents):
            if self.fail and i == len(self.documents) // 2:
                raise TransportError("pricing", "GetProducts failed (Throttling): Rate exceeded")
            # TERM_MATCH ignores case
            if wanted is not None and wanted.lower() not in str(document).lower():
                continue
            yield document
        if self.fail and not self.documents:
            raise TransportError("pricing", "GetProducts failed (Throttling): Rate exceeded")


class FakeSpotHistory(SpotHistorySource):
    """In-memory spot price history that records every call"""

    def __init__(self, events: Optional[List[Dict[str, Any]]] = None, fail: bool = False):
        self.events = list(events or [])
        self.fail = fail
        self.calls: List[Dict[str, Any]] = []

    def iter_spot_history(self, start_time, end_time, product_description, instance_type=None):
        self.calls.append({
            "start_time": start_time,
            "end_time": end_time,
            "product_description": product_description,
            "instance_type": instance_type,
        })
        for event in self.events:
            if instance_type and event.get("InstanceType") != instance_type:
                continue
            yield event
        if self.fail:
            raise TransportError("ec2", "DescribeSpotPriceHistory failed (RequestLimitExceeded): slow down")


class StaticRegions(RegionDirectory):
    def __init__(self, description: str = "US East (N. Virginia)"):
        self.description = description
        self.calls: List[str] = []

    def describe(self, region):
        self.calls.append(region)
        return self.description


class Clock:
    """Controllable clock"""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def price_document():
    return build_price_document


@pytest.fixture
def spot_event():
    return build_spot_event


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def catalog():
    return FakeCatalog([
        build_price_document("m5.large", "0.0960000000"),
        build_price_document("c5.xlarge", "0.1700000000"),
        build_price_document("t3.micro", "0.0104000000"),
    ])


@pytest.fixture
def spot_history():
    return FakeSpotHistory([
        build_spot_event("m5.large", "us-east-1a", "0.0400", NOW - timedelta(hours=2)),
        build_spot_event("m5.large", "us-east-1a", "0.0300", NOW - timedelta(hours=1)),
        build_spot_event("m5.large", "us-east-1a", "0.0500", NOW),
        build_spot_event("m5.large", "us-east-1b", "0.0800", NOW - timedelta(hours=1)),
        build_spot_event("c5.xlarge", "us-east-1a", "0.0700", NOW - timedelta(hours=3)),
    ])


@pytest.fixture
def regions():
    return StaticRegions()


@pytest.fixture
def facade(catalog, spot_history, regions, clock):
    return PriceCacheFacade(
        catalog=catalog,
        spot_history=spot_history,
        regions=regions,
        region="us-east-1",
        pricing=PricingConfig(),
        clock=clock,
    )


@pytest.fixture
def fake_catalog_class():
    return FakeCatalog


@pytest.fixture
def fake_spot_history_class():
    return FakeSpotHistory


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset singleton instances between tests"""
    import pricecache.core.config as config_module
    config_module.settings = None
    yield
    config_module.settings = None


def pytest_configure(config):
    """Configure pytest"""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "aws: mark test as AWS-specific"
    )
