"""
Tests for the generation pipeline.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock, Mock, patch

from tfgen.core.account_context import AccountContext
from tfgen.domain.pattern_models import GENERATED_BY_VALUES, GenerationResult
from tfgen.services.generator import EmptyInputError, TerraformGenerator


@pytest.mark.asyncio
async def test_scenario_a_bucket_for_file_storage(rule_generator):
    result = await rule_generator.generate('create an S3-style bucket for file storage')

    assert result.generated_by == 'rule-engine'
    assert result.detected == ['object_storage']
    assert 'resource "aws_s3_bucket_versioning"' in result.code
    assert 'status = "Enabled"' in result.code
    assert 'resource "aws_instance"' not in result.code
    assert 'resource "aws_db_instance"' not in result.code


@pytest.mark.asyncio
async def test_scenario_b_postgres_database(rule_generator):
    result = await rule_generator.generate('I need a postgres database')

    assert result.detected == ['database']
    assert 'engine         = "postgres"' in result.code
    assert 'engine_version = "15.4"' in result.code
    assert 'from_port   = 5432' in result.code


@pytest.mark.asyncio
async def test_scenario_c_large_server_in_named_region(rule_generator, mock_catalog):
    result = await rule_generator.generate('large server in us-east-1')

    assert result.region == 'us-east-1'
    assert 'region = "us-east-1"' in result.code
    assert 'instance_type = "t3.large"' in result.code
    assert 'ami-0123456789abcdef0' in result.code
    mock_catalog.latest_image.assert_awaited_once_with('us-east-1')


@pytest.mark.asyncio
@pytest.mark.parametrize('description', ['', '   ', '\n\t'])
async def test_scenario_d_blank_input_is_rejected(rule_generator, mock_catalog, description):
    with pytest.raises(EmptyInputError):
        await rule_generator.generate(description)
    mock_catalog.list_regions.assert_not_awaited()


@pytest.mark.asyncio
async def test_scenario_e_llm_failure_falls_back_to_rule_engine(mock_catalog, failing_llm):
    generator = TerraformGenerator(catalog=mock_catalog, llm_generator=failing_llm)
    result = await generator.generate('a website')

    assert result.generated_by == 'rule-engine'
    assert 'terraform {' in result.code
    assert 'provider "aws"' in result.code
    failing_llm.generate.assert_awaited_once()


@pytest.mark.asyncio
async def test_llm_timeout_falls_back_to_rule_engine(mock_catalog):
    async def slow_generate(description, region):
        await asyncio.sleep(5)

    llm = Mock()
    llm.is_configured = Mock(return_value=True)
    llm.generate = slow_generate
    generator = TerraformGenerator(catalog=mock_catalog, llm_generator=llm, llm_timeout=0.01)

    result = await generator.generate('a website')
    assert result.generated_by == 'rule-engine'


@pytest.mark.asyncio
async def test_llm_result_is_used_when_available(mock_catalog):
    llm = Mock()
    llm.is_configured = Mock(return_value=True)
    llm.generate = AsyncMock(return_value=('provider "aws" {\n  region = "eu-west-1"\n}\n', 'Explained.'))
    generator = TerraformGenerator(catalog=mock_catalog, llm_generator=llm)

    result = await generator.generate('a website in eu-west-1')

    assert result.generated_by == 'llm-backend'
    assert result.region == 'eu-west-1'
    llm.generate.assert_awaited_once_with('a website in eu-west-1', 'eu-west-1')


@pytest.mark.asyncio
async def test_rule_engine_failure_returns_raw_fallback(rule_generator):
    with patch('tfgen.services.generator.compose', side_effect=RuntimeError('boom')):
        result = await rule_generator.generate('a website', region='us-west-2')

    assert result.generated_by == 'raw-fallback'
    assert 'region = "us-west-2"' in result.code
    assert result.code.count('resource "aws_vpc"') == 1


@pytest.mark.asyncio
async def test_no_keyword_yields_network_only_document(rule_generator):
    result = await rule_generator.generate('something entirely unrelated')

    assert result.generated_by == 'rule-engine'
    assert result.detected == []
    assert result.code.count('resource "aws_vpc"') == 1
    assert 'resource "aws_instance"' not in result.code


@pytest.mark.asyncio
async def test_several_patterns_share_one_network_fragment(rule_generator):
    result = await rule_generator.generate('web server, mysql database, s3 bucket and a load balancer')

    assert len(result.detected) == 4
    assert result.code.count('resource "aws_vpc"') == 1
    assert result.code.count('provider "aws"') == 1


@pytest.mark.asyncio
async def test_generation_is_deterministic(rule_generator):
    description = 'static website with an s3 bucket and a lambda function'
    first = await rule_generator.generate(description, region='eu-west-1')
    second = await rule_generator.generate(description, region='eu-west-1')

    assert first.code == second.code
    assert first.explanation == second.explanation


@pytest.mark.asyncio
async def test_region_from_text_beats_request_region(rule_generator):
    result = await rule_generator.generate('a database in eu-west-1', region='us-west-2')
    assert result.region == 'eu-west-1'


@pytest.mark.asyncio
async def test_region_from_request_when_text_has_none(rule_generator):
    result = await rule_generator.generate('a database', region='us-west-2')
    assert result.region == 'us-west-2'


@pytest.mark.asyncio
async def test_region_from_account_context_when_request_has_none(rule_generator):
    context = AccountContext(account='123456789012', region='eu-west-1', connected=True)
    result = await rule_generator.generate('a database', context=context)
    assert result.region == 'eu-west-1'


@pytest.mark.asyncio
async def test_region_hardcoded_default_as_last_resort(rule_generator):
    result = await rule_generator.generate('a database')
    assert result.region == 'eu-central-1'


@pytest.mark.asyncio
async def test_image_is_only_fetched_for_compute(rule_generator, mock_catalog):
    await rule_generator.generate('an s3 bucket')
    mock_catalog.latest_image.assert_not_awaited()


def test_result_rejects_unknown_generation_path():
    with pytest.raises(ValueError):
        GenerationResult(code='', explanation='', generated_by='manual', region='eu-west-1')


@pytest.mark.parametrize('generated_by', GENERATED_BY_VALUES)
def test_result_accepts_every_generation_path(generated_by):
    result = GenerationResult(code='x', explanation='y', generated_by=generated_by, region='eu-west-1')
    assert result.to_dict()['generatedBy'] == generated_by
