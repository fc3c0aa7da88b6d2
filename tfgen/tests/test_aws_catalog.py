"""
Tests for the AWS catalog client and async lookups (boto3 is mocked).
"""

import pytest
from unittest.mock import Mock
from botocore.exceptions import ClientError, NoCredentialsError

from tfgen.aws.catalog_client import AWSCatalogClient, AWSCatalogError
from tfgen.services.catalog_lookup import CatalogLookup


def _client_with(service_mocks):
    session = Mock()
    session.client = Mock(side_effect=lambda service, **kwargs: service_mocks[service])
    return AWSCatalogClient(default_region='eu-central-1', session=session)


def test_describe_regions_is_sorted():
    ec2 = Mock()
    ec2.describe_regions.return_value = {
        'Regions': [{'RegionName': 'us-west-2'}, {'RegionName': 'eu-central-1'}, {'RegionName': 'ap-south-1'}]
    }
    client = _client_with({'ec2': ec2})
    assert client.describe_regions() == ['ap-south-1', 'eu-central-1', 'us-west-2']


def test_latest_image_picks_newest():
    ec2 = Mock()
    ec2.describe_images.return_value = {
        'Images': [
            {'ImageId': 'ami-old', 'Name': 'amzn2-ami-hvm-old', 'CreationDate': '2023-01-01T00:00:00.000Z'},
            {'ImageId': 'ami-new', 'Name': 'amzn2-ami-hvm-new', 'CreationDate': '2024-06-01T00:00:00.000Z'},
        ]
    }
    client = _client_with({'ec2': ec2})

    assert client.latest_image('us-east-1') == {'ami': 'ami-new', 'name': 'amzn2-ami-hvm-new'}
    kwargs = ec2.describe_images.call_args.kwargs
    assert kwargs['Owners'] == ['amazon']


def test_latest_image_without_results_raises():
    ec2 = Mock()
    ec2.describe_images.return_value = {'Images': []}
    with pytest.raises(AWSCatalogError):
        _client_with({'ec2': ec2}).latest_image('us-east-1')


def test_boto_errors_are_wrapped():
    sts = Mock()
    sts.get_caller_identity.side_effect = NoCredentialsError()
    with pytest.raises(AWSCatalogError):
        _client_with({'sts': sts}).caller_identity()

    ec2 = Mock()
    ec2.describe_regions.side_effect = ClientError(
        {'Error': {'Code': 'UnauthorizedOperation', 'Message': 'denied'}}, 'DescribeRegions'
    )
    with pytest.raises(AWSCatalogError):
        _client_with({'ec2': ec2}).describe_regions()


@pytest.mark.asyncio
async def test_lookup_falls_back_to_hardcoded_regions():
    client = Mock()
    client.describe_regions.side_effect = AWSCatalogError('no credentials')

    regions = await CatalogLookup(client=client).list_regions()
    assert regions == ['us-west-2', 'us-east-1', 'eu-west-1', 'eu-central-1']


@pytest.mark.asyncio
async def test_lookup_falls_back_to_default_image():
    client = Mock()
    client.latest_image.side_effect = AWSCatalogError('throttled')

    image = await CatalogLookup(client=client).latest_image('eu-central-1')
    assert image == {'ami': 'ami-0c02fb55956c7d316', 'name': 'Amazon Linux 2 (default)'}


@pytest.mark.asyncio
async def test_identity_success_and_failure():
    client = Mock()
    client.caller_identity.return_value = {'account': '123456789012', 'region': 'eu-central-1'}
    context = await CatalogLookup(client=client).account_identity()
    assert context.connected
    assert context.account == '123456789012'

    client.caller_identity.side_effect = AWSCatalogError('expired token')
    context = await CatalogLookup(client=client).account_identity()
    assert not context.connected
    assert context.account is None
