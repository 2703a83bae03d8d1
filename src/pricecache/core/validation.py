"""Input validation utilities"""

import re
from typing import Any, Iterable, Optional, Tuple

from .exceptions import ValidationError as CustomValidationError


class Validator:
    """Central validation utility"""

    PATTERNS = {
        # e.g. m5.large, u-6tb1.metal, mac2-m2pro.metal, x2iedn.32xlarge
        'instance_type': re.compile(r'^[A-Za-z0-9][A-Za-z0-9-]*\.[A-Za-z0-9-]+$'),
        'aws_region': re.compile(r'^[a-z]{2}(-gov|-iso[a-z]?)?-[a-z]+-\d{1}$'),
        # e.g. us-east-1a, or local zones like us-west-2-lax-1a
        'availability_zone': re.compile(r'^[a-z]{2}(-gov)?-[a-z]+-\d[a-z0-9-]*[a-z]$'),
    }

    MAX_DAYS_BACK = 90

    @classmethod
    def validate_instance_type(cls, instance_type: str) -> str:
        """Validate an EC2 instance type name"""
        if not isinstance(instance_type, str) or not cls.PATTERNS['instance_type'].match(instance_type):
            raise CustomValidationError(f"Invalid instance type: {instance_type!r}")
        return instance_type

    @classmethod
    def validate_aws_region(cls, region: str) -> str:
        """Validate AWS region code"""
        if not isinstance(region, str) or not cls.PATTERNS['aws_region'].match(region):
            raise CustomValidationError(f"Invalid AWS region: {region!r}")
        return region

    @classmethod
    def validate_availability_zone(cls, zone: str) -> str:
        """Validate availability zone name"""
        if not isinstance(zone, str) or not cls.PATTERNS['availability_zone'].match(zone):
            raise CustomValidationError(f"Invalid availability zone: {zone!r}")
        return zone

    @classmethod
    def validate_zones(cls, zones: Optional[Iterable[str]]) -> Tuple[str, ...]:
        """Validate a zone filter, dropping duplicates while keeping order"""
        if zones is None:
            return ()
        if isinstance(zones, str):
            raise CustomValidationError("Zone filter must be a collection of zone names, not a string")
        unique = dict.fromkeys(cls.validate_availability_zone(z) for z in zones)
        return tuple(unique)

    @classmethod
    def validate_days(cls, days: Any) -> int:
        """Validate a look-back window in days"""
        if isinstance(days, bool):
            raise CustomValidationError(f"Invalid number of days: {days!r}")
        try:
            value = int(days)
        except (TypeError, ValueError):
            raise CustomValidationError(f"Invalid number of days: {days!r}")
        if value != days and not isinstance(days, str):
            raise CustomValidationError(f"Number of days must be a whole number: {days!r}")
        if not 1 <= value <= cls.MAX_DAYS_BACK:
            raise CustomValidationError(f"Number of days must be between 1 and {cls.MAX_DAYS_BACK}: {days}")
        return value

