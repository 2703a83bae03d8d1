"""Parsing of raw pricing records into normalized prices.

Pricing catalog records have no fixed schema: product lines nest their
terms differently and the keys under ``OnDemand`` and ``priceDimensions``
are opaque offer/rate codes. Each level is validated on its own so a
failure can be reported with the stage it happened at and whatever
instance type was already recovered.
"""

import json
import math
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, StrictStr
from pydantic import ValidationError as PydanticValidationError

from ..core.base import PriceDocument
from ..core.exceptions import ParseError, ParseStage
from .models import SpotPriceObservation

ModelT = TypeVar("ModelT", bound=BaseModel)


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore")


class PricingDocument(_Record):
    product: Optional[Any] = None
    terms: Optional[Any] = None


class Product(_Record):
    attributes: Optional[Dict[str, Any]] = None


class ProductAttributes(_Record):
    instanceType: StrictStr


class Terms(_Record):
    OnDemand: Dict[str, Any]


class OnDemandTerm(_Record):
    priceDimensions: Dict[str, Any]


class PriceDimension(_Record):
    pricePerUnit: Dict[str, Any]


class PricePerUnit(_Record):
    USD: Any


class SpotPriceEvent(_Record):
    InstanceType: StrictStr
    AvailabilityZone: StrictStr
    SpotPrice: Any
    Timestamp: datetime


def _validate(model: Type[ModelT], data: Any, stage: ParseStage, message: str,
              instance_type: str = "") -> ModelT:
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ParseError(stage, message, instance_type) from e


def parse_price(value: Any) -> float:
    """Convert a USD price string to a finite, non-negative float"""
    if not isinstance(value, str):
        raise ValueError(f"price must be a string, got {type(value).__name__}")
    price = float(value)
    if not math.isfinite(price) or price < 0:
        raise ValueError(f"price out of range: {value}")
    return price


def _decode(document: PriceDocument) -> Mapping[str, Any]:
    if isinstance(document, (str, bytes)):
        try:
            document = json.loads(document)
        except ValueError as e:
            raise ParseError(ParseStage.DOCUMENT, f"Pricing document is not valid JSON: {e}") from e
    if not isinstance(document, Mapping):
        raise ParseError(ParseStage.DOCUMENT, "Pricing document is not an object")
    return document


def _price_from_term(term: Any, instance_type: str) -> float:
    ondemand_term = _validate(OnDemandTerm, term, ParseStage.PRICE_DIMENSIONS,
                              "Unable to find on-demand pricing dimensions", instance_type)
    if not ondemand_term.priceDimensions:
        raise ParseError(ParseStage.PRICE_DIMENSIONS, "On-demand pricing dimensions are empty", instance_type)

    first_error = None
    for dimension in ondemand_term.priceDimensions.values():
        try:
            price_dimension = _validate(PriceDimension, dimension, ParseStage.USD_PRICE,
                                        "Unable to find on-demand price per unit in pricing dimensions",
                                        instance_type)
            per_unit = _validate(PricePerUnit, price_dimension.pricePerUnit, ParseStage.USD_PRICE,
                                 "Unable to find on-demand price per unit in USD", instance_type)
            try:
                return parse_price(per_unit.USD)
            except ValueError as e:
                raise ParseError(ParseStage.USD_VALUE,
                                 f"Could not convert price per unit in USD to a float: {e}",
                                 instance_type) from e
        except ParseError as e:
            first_error = first_error or e
    raise first_error


def parse_ondemand_price(document: PriceDocument) -> Tuple[str, float]:
    """Extract ``(instance type, hourly USD price)`` from one pricing record.

    The price is the first parsable ``pricePerUnit.USD`` found under
    ``terms.OnDemand.*.priceDimensions.*``. Raises :class:`ParseError` naming
    the failed stage otherwise.
    """
    doc = _validate(PricingDocument, _decode(document), ParseStage.DOCUMENT,
                    "Pricing document is malformed")

    product = _validate(Product, doc.product, ParseStage.ATTRIBUTES,
                        "Unable to find product attributes")
    if product.attributes is None:
        raise ParseError(ParseStage.ATTRIBUTES, "Unable to find product attributes")

    attributes = _validate(ProductAttributes, product.attributes, ParseStage.INSTANCE_TYPE,
                           "Unable to find instance type name from product attributes")
    instance_type = attributes.instanceType

    if doc.terms is None:
        raise ParseError(ParseStage.TERMS, "Unable to find pricing terms", instance_type)
    if not isinstance(doc.terms, Mapping):
        raise ParseError(ParseStage.TERMS, "Pricing terms are not an object", instance_type)
    terms = _validate(Terms, doc.terms, ParseStage.ON_DEMAND_TERMS,
                      "Unable to find on-demand pricing terms", instance_type)
    if not terms.OnDemand:
        raise ParseError(ParseStage.ON_DEMAND_TERMS, "On-demand pricing terms are empty", instance_type)

    first_error = None
    for term in terms.OnDemand.values():
        try:
            return instance_type, _price_from_term(term, instance_type)
        except ParseError as e:
            first_error = first_error or e
    raise first_error


def parse_spot_event(event: Mapping[str, Any]) -> Tuple[str, str, SpotPriceObservation]:
    """Convert one spot price history entry to ``(instance type, zone, observation)``"""
    if isinstance(event, Mapping):
        instance_type = event.get("InstanceType")
        label = instance_type if isinstance(instance_type, str) else ""
    else:
        label = ""
    entry = _validate(SpotPriceEvent, event, ParseStage.SPOT_EVENT,
                      "Spot price event is missing instance type, zone, price or timestamp", label)
    try:
        price = parse_price(entry.SpotPrice)
    except ValueError as e:
        raise ParseError(ParseStage.SPOT_PRICE, f"Could not convert spot price to a float: {e}",
                         entry.InstanceType) from e

    timestamp = entry.Timestamp
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return entry.InstanceType, entry.AvailabilityZone, SpotPriceObservation(timestamp, price)
