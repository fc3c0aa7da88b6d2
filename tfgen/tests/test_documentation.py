"""
Tests for the documentation bundle.
"""

import pytest
from unittest.mock import AsyncMock, patch

from tfgen.services.documentation import DocumentationService
from tfgen.services.model_deriver import RESOURCE_SIGNATURES


def test_bundle_sections(web_stack_code):
    bundle = DocumentationService().build(web_stack_code)

    assert set(bundle) == {
        'overview', 'resources', 'diagram', 'flows', 'security_groups',
        'network_topology', 'monitoring', 'deployment', 'cost_estimate', 'best_practices',
    }
    assert bundle['overview']['region'] == 'eu-west-1'
    assert bundle['overview']['resource_count'] == len(bundle['resources'])
    assert bundle['diagram']['region'] == 'eu-west-1'
    assert bundle['cost_estimate']['region'] == 'eu-west-1'


def test_every_documented_kind_is_declared_in_the_code(web_stack_code):
    bundle = DocumentationService().build(web_stack_code)

    signatures = {kind.value: types for kind, types in RESOURCE_SIGNATURES}
    for resource in bundle['resources']:
        assert any(
            f'resource "{signature}"' in web_stack_code for signature in signatures[resource['kind']]
        )


def test_bundle_for_code_without_provider_uses_default_region():
    bundle = DocumentationService().build('resource "aws_s3_bucket" "main" {\n  bucket = "b"\n}\n')

    assert bundle['overview']['region'] == 'eu-central-1'
    assert [resource['kind'] for resource in bundle['resources']] == ['object_storage']
    assert bundle['network_topology'] == []


@pytest.mark.asyncio
async def test_deferred_build_waits_before_rendering(web_stack_code):
    with patch('tfgen.services.documentation.asyncio.sleep', new=AsyncMock()) as sleep:
        bundle = await DocumentationService().build_deferred(web_stack_code, delay=0.25)

    sleep.assert_awaited_once_with(0.25)
    assert bundle['resources']


@pytest.mark.asyncio
async def test_zero_delay_skips_sleep(web_stack_code):
    with patch('tfgen.services.documentation.asyncio.sleep', new=AsyncMock()) as sleep:
        await DocumentationService().build_deferred(web_stack_code, delay=0)

    sleep.assert_not_awaited()
