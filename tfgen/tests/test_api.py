"""
Tests for the HTTP routes and middleware.
"""

import pytest
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient

from tfgen.core.account_context import AccountContext, account_cache
from tfgen.main import app
from tfgen.services.catalog_lookup import CatalogLookup


KNOWN_REGIONS = ['us-west-2', 'us-east-1', 'eu-west-1', 'eu-central-1']


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def offline_catalog():
    """Keep every route away from AWS."""
    with patch.object(CatalogLookup, 'list_regions', AsyncMock(return_value=list(KNOWN_REGIONS))), \
            patch.object(CatalogLookup, 'latest_image', AsyncMock(return_value={'ami': 'ami-test', 'name': 'test'})), \
            patch.object(CatalogLookup, 'account_identity', AsyncMock(return_value=AccountContext())):
        yield


def test_health(client):
    response = client.get('/api/health')
    body = response.json()

    assert response.status_code == 200
    assert body['status'] == 'healthy'
    assert body['version'] == '2.0.0'
    assert body['features']


def test_security_headers_are_set(client):
    response = client.get('/api/health')
    assert response.headers['X-Content-Type-Options'] == 'nosniff'
    assert response.headers['X-Frame-Options'] == 'DENY'
    assert 'Strict-Transport-Security' in response.headers


def test_regions_and_ami(client):
    assert client.get('/api/regions').json() == KNOWN_REGIONS
    assert client.get('/api/ami/eu-west-1').json() == {'ami': 'ami-test', 'name': 'test'}


def test_templates_lists_all_eight(client):
    templates = client.get('/api/templates').json()['templates']
    assert [template['key'] for template in templates] == [
        'static-website', 'web-app', 'database', 'serverless',
        'vpc-network', 'load-balancer', 'container', 'data-pipeline',
    ]


def test_aws_status_disconnected_leaves_cache_untouched(client):
    body = client.get('/api/aws-status').json()
    assert body['connected'] is False
    assert account_cache.get().region is None


def test_aws_status_connected_updates_cache(client):
    context = AccountContext(account='123456789012', region='eu-west-1', connected=True)
    with patch.object(CatalogLookup, 'account_identity', AsyncMock(return_value=context)):
        body = client.get('/api/aws-status').json()

    assert body == {'connected': True, 'account': '123456789012', 'region': 'eu-west-1'}
    assert account_cache.get() == context


def test_generate_terraform(client):
    response = client.post('/api/generate-terraform', json={'description': 'a postgres database'})
    body = response.json()

    assert response.status_code == 200
    assert body['generatedBy'] == 'rule-engine'
    assert body['region'] == 'eu-central-1'
    assert 'resource "aws_db_instance"' in body['terraform']
    assert body['explanation']


def test_generate_uses_cached_account_region(client):
    account_cache.update(AccountContext(account='1', region='us-east-1', connected=True))
    body = client.post('/api/generate-terraform', json={'description': 'an s3 bucket'}).json()
    assert body['region'] == 'us-east-1'


def test_generate_rejects_blank_description(client):
    response = client.post('/api/generate-terraform', json={'description': '   '})
    assert response.status_code == 400


def test_generate_rejects_oversized_description(client):
    response = client.post('/api/generate-terraform', json={'description': 'x' * 6000})
    assert response.status_code == 413
    assert response.json()['error'] == 'request_too_large'


def test_documentation_for_generated_code(client):
    terraform = client.post(
        '/api/generate-terraform', json={'description': 'web server with a mysql database'}
    ).json()['terraform']

    response = client.post('/api/documentation', json={'terraform': terraform})
    documentation = response.json()['documentation']

    assert response.status_code == 200
    kinds = {resource['kind'] for resource in documentation['resources']}
    assert kinds == {'compute', 'database', 'network'}
    assert documentation['overview']['region'] == 'eu-central-1'
    assert documentation['cost_estimate']['region_location'] == 'Europe (Frankfurt)'
    flows = {(flow['source'], flow['target']): flow['protocol'] for flow in documentation['flows']}
    assert flows[('compute', 'database')] == 'MySQL:3306'
    assert len(documentation['deployment']) == 5


def test_documentation_rejects_blank_input(client):
    response = client.post('/api/documentation', json={'terraform': ''})
    assert response.status_code == 400
