"""Tests for validation module"""

import pytest

from pricecache.core.validation import Validator
from pricecache.core.exceptions import ValidationError


class TestValidator:
    """Test Validator class"""

    def test_validate_instance_type(self):
        """Test instance type validation"""
        assert Validator.validate_instance_type("m5.large") == "m5.large"
        assert Validator.validate_instance_type("u-6tb1.112xlarge") == "u-6tb1.112xlarge"
        assert Validator.validate_instance_type("mac2-m2pro.metal") == "mac2-m2pro.metal"

        with pytest.raises(ValidationError):
            Validator.validate_instance_type("m5")

        with pytest.raises(ValidationError):
            Validator.validate_instance_type("m5 .large")

        with pytest.raises(ValidationError):
            Validator.validate_instance_type(None)

    def test_validate_aws_region(self):
        """Test AWS region validation"""
        assert Validator.validate_aws_region("us-east-1") == "us-east-1"
        assert Validator.validate_aws_region("us-gov-west-1") == "us-gov-west-1"

        with pytest.raises(ValidationError):
            Validator.validate_aws_region("invalid-region")

        with pytest.raises(ValidationError):
            Validator.validate_aws_region("us-east")

    def test_validate_availability_zone(self):
        """Test availability zone validation"""
        assert Validator.validate_availability_zone("us-east-1a") == "us-east-1a"
        assert Validator.validate_availability_zone("us-west-2-lax-1a") == "us-west-2-lax-1a"

        with pytest.raises(ValidationError):
            Validator.validate_availability_zone("us-east-1")

        with pytest.raises(ValidationError):
            Validator.validate_availability_zone("a")

    def test_validate_zones(self):
        """Test zone filter validation"""
        assert Validator.validate_zones(None) == ()
        assert Validator.validate_zones([]) == ()
        assert Validator.validate_zones(["us-east-1b", "us-east-1a", "us-east-1b"]) == ("us-east-1b", "us-east-1a")

        with pytest.raises(ValidationError):
            Validator.validate_zones("us-east-1a")

        with pytest.raises(ValidationError):
            Validator.validate_zones(["us-east-1a", "bogus"])

    def test_validate_days(self):
        """Test look-back window validation"""
        assert Validator.validate_days(1) == 1
        assert Validator.validate_days(30) == 30
        assert Validator.validate_days("7") == 7
        assert Validator.validate_days(90) == 90

        for days in (0, 91, -3, 1.5, None, True, "a week"):
            with pytest.raises(ValidationError):
                Validator.validate_days(days)
