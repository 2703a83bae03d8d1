"""Tests for the AWS pricing collaborators"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from pricecache.core.base import CatalogFilter
from pricecache.core.config import AWSConfig
from pricecache.core.exceptions import TransportError
from pricecache.providers.aws import AWSClient, PricingCatalogCollector, SpotHistoryCollector

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def throttled(operation):
    return ClientError({"Error": {"Code": "ThrottlingException", "Message": "Rate exceeded"}}, operation)


@pytest.fixture
def mock_client():
    return MagicMock()


@pytest.fixture
def aws_client(mock_client):
    client = MagicMock(spec=AWSClient)
    client.region = "us-east-1"
    client.pricing_client.return_value = mock_client
    client.ec2_client.return_value = mock_client
    return client


class TestPricingCatalogCollector:
    """Test pricing:GetProducts pagination"""

    def test_yields_every_page(self, aws_client, mock_client):
        mock_client.get_paginator.return_value.paginate.return_value = [
            {"PriceList": ["doc-1", "doc-2"]},
            {"PriceList": ["doc-3"]},
            {},
        ]
        collector = PricingCatalogCollector(aws_client)
        filters = [CatalogFilter("instanceType", "m5.large")]

        assert list(collector.iter_price_documents("AmazonEC2", filters)) == ["doc-1", "doc-2", "doc-3"]

        mock_client.get_paginator.assert_called_once_with("get_products")
        mock_client.get_paginator.return_value.paginate.assert_called_once_with(
            ServiceCode="AmazonEC2",
            Filters=[{"Type": "TERM_MATCH", "Field": "instanceType", "Value": "m5.large"}],
            PaginationConfig={"PageSize": 100},
        )

    def test_client_error_becomes_transport_error(self, aws_client, mock_client):
        def pages():
            yield {"PriceList": ["doc-1"]}
            raise throttled("GetProducts")

        mock_client.get_paginator.return_value.paginate.return_value = pages()
        collector = PricingCatalogCollector(aws_client)

        documents = collector.iter_price_documents("AmazonEC2", [])
        assert next(documents) == "doc-1"
        with pytest.raises(TransportError) as exc_info:
            next(documents)
        assert exc_info.value.service == "pricing"
        assert "ThrottlingException" in str(exc_info.value)

    def test_connection_error_becomes_transport_error(self, aws_client, mock_client):
        mock_client.get_paginator.side_effect = EndpointConnectionError(endpoint_url="https://api.pricing")
        collector = PricingCatalogCollector(aws_client)
        with pytest.raises(TransportError):
            list(collector.iter_price_documents("AmazonEC2", []))


class TestSpotHistoryCollector:
    """Test ec2:DescribeSpotPriceHistory pagination"""

    def test_single_instance_type(self, aws_client, mock_client):
        event = {"InstanceType": "m5.large", "AvailabilityZone": "us-east-1a",
                 "SpotPrice": "0.04", "Timestamp": NOW}
        mock_client.get_paginator.return_value.paginate.return_value = [
            {"SpotPriceHistory": [event]},
            {"SpotPriceHistory": []},
        ]
        collector = SpotHistoryCollector(aws_client)
        start = NOW - timedelta(days=7)

        assert list(collector.iter_spot_history(start, NOW, "Linux/UNIX (Amazon VPC)", "m5.large")) == [event]

        mock_client.get_paginator.assert_called_once_with("describe_spot_price_history")
        mock_client.get_paginator.return_value.paginate.assert_called_once_with(
            ProductDescriptions=["Linux/UNIX (Amazon VPC)"],
            StartTime=start,
            EndTime=NOW,
            PaginationConfig={"PageSize": 1000},
            InstanceTypes=["m5.large"],
        )

    def test_whole_fleet(self, aws_client, mock_client):
        mock_client.get_paginator.return_value.paginate.return_value = []
        collector = SpotHistoryCollector(aws_client)
        list(collector.iter_spot_history(NOW - timedelta(days=30), NOW, "Linux/UNIX (Amazon VPC)"))

        kwargs = mock_client.get_paginator.return_value.paginate.call_args.kwargs
        assert "InstanceTypes" not in kwargs

    def test_client_error_becomes_transport_error(self, aws_client, mock_client):
        mock_client.get_paginator.return_value.paginate.side_effect = throttled("DescribeSpotPriceHistory")
        collector = SpotHistoryCollector(aws_client)
        with pytest.raises(TransportError) as exc_info:
            list(collector.iter_spot_history(NOW - timedelta(days=1), NOW, "Linux/UNIX (Amazon VPC)"))
        assert exc_info.value.service == "ec2"


class TestAWSClient:
    """Test boto3 client factory"""

    def test_pricing_client_region(self):
        session = MagicMock()
        session.region_name = "eu-west-1"
        client = AWSClient(AWSConfig(region="eu-west-1"), session=session)

        client.pricing_client()
        client.ec2_client()

        regions = [call.kwargs["region_name"] for call in session.client.call_args_list]
        services = [call.args[0] for call in session.client.call_args_list]
        assert services == ["pricing", "ec2"]
        assert regions == ["us-east-1", "eu-west-1"]

    def test_clients_reused(self):
        session = MagicMock()
        session.region_name = None
        client = AWSClient(AWSConfig(region="us-west-2"), session=session)
        assert client.ec2_client() is client.ec2_client()
        assert session.client.call_count == 1
        assert client.region == "us-west-2"

    def test_session_created_from_profile(self):
        with patch("pricecache.providers.aws.client.boto3.Session") as mock_session:
            client = AWSClient(AWSConfig(profile="pricing", region="us-west-2"))
            client.ec2_client()
        mock_session.assert_called_once_with(profile_name="pricing", region_name="us-west-2")
