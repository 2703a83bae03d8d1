"""Tests for region description lookup"""

from unittest.mock import patch

import pytest

from pricecache.providers.aws.regions import RegionResolver


class TestRegionResolver:
    """Test RegionResolver"""

    @pytest.fixture
    def resolver(self):
        return RegionResolver(partition_regions={
            "us-east-1": "US East (N. Virginia)",
            "ap-southeast-3": "Asia Pacific (Jakarta)",
            "eu-west-1": "Europe (Ireland)",
        })

    def test_known_region(self, resolver):
        assert resolver.describe("ap-southeast-3") == "Asia Pacific (Jakarta)"

    def test_pricing_location_preferred(self, resolver):
        assert resolver.describe("eu-west-1") == "EU (Ireland)"

    def test_unknown_region_falls_back(self, resolver):
        assert resolver.describe("xx-nowhere-9") == "US East (N. Virginia)"

    @pytest.mark.parametrize("region", [None, ""])
    def test_missing_region_falls_back(self, resolver, region):
        assert resolver.describe(region) == "US East (N. Virginia)"

    def test_custom_default_and_overrides(self):
        resolver = RegionResolver(
            overrides={"il-central-1": "Israel (Tel Aviv)"},
            default="US West (Oregon)",
            partition_regions={},
        )
        assert resolver.describe("il-central-1") == "Israel (Tel Aviv)"
        assert resolver.describe("xx-nowhere-9") == "US West (Oregon)"

    def test_botocore_partition_table(self):
        resolver = RegionResolver()
        assert resolver.describe("us-east-2") == "US East (Ohio)"
        assert resolver.describe("ap-northeast-1") == "Asia Pacific (Tokyo)"
        assert "ap-northeast-1" in resolver.known_regions()

    def test_partition_table_loaded_once(self):
        with patch("pricecache.providers.aws.regions._load_partition_regions",
                   return_value={"ap-south-2": "Asia Pacific (Hyderabad)"}) as loader:
            resolver = RegionResolver()
            assert resolver.describe("ap-south-2") == "Asia Pacific (Hyderabad)"
            assert resolver.describe("ap-south-2") == "Asia Pacific (Hyderabad)"
        loader.assert_called_once()

    def test_partition_table_failure_falls_back(self):
        with patch("pricecache.providers.aws.regions._load_partition_regions",
                   side_effect=OSError("missing data")):
            resolver = RegionResolver()
            assert resolver.describe("ap-south-2") == "US East (N. Virginia)"
            assert resolver.describe("us-west-2") == "US West (Oregon)"
