"""
Tests for the LLM generator and chat-completion clients (HTTP is mocked).
"""

import asyncio

import httpx
import pytest
from unittest.mock import AsyncMock, Mock, patch

from tfgen.resilience.circuit_breaker import CircuitBreaker, CircuitState
from tfgen.services.llm_clients import ChatCompletionClient, LLMAPIError, OpenAIClient
from tfgen.services.llm_generator import (
    FALLBACK_EXPLANATION,
    LLMGenerationError,
    TerraformLLMGenerator,
    build_generation_prompt,
    strip_code_fences,
)


def _response(content):
    return {'choices': [{'message': {'content': content}}]}


def _client(provider, configured=True, **kwargs):
    client = Mock()
    client.provider = provider
    client.is_configured = configured
    client.chat_completion = AsyncMock(**kwargs)
    return client


TERRAFORM = 'provider "aws" {\n  region = "eu-west-1"\n}'


def _http_client(post):
    http_client = AsyncMock()
    http_client.__aenter__.return_value = http_client
    http_client.__aexit__.return_value = False
    http_client.post = post
    return http_client


def _chat_client(retries=1):
    return ChatCompletionClient(
        api_key='test-key',
        base_url='https://example.test',
        model='test-model',
        timeout=1,
        retries=retries,
        backoff_factor=0,
    )


def test_prompt_binds_region_and_provider_version():
    prompt = build_generation_prompt('a website', 'eu-west-1')
    assert 'Set region to eu-west-1' in prompt
    assert '~> 5.0' in prompt
    assert '"a website"' in prompt


def test_strip_code_fences():
    assert strip_code_fences('```hcl\nresource "x" "y" {}\n```') == 'resource "x" "y" {}'
    assert strip_code_fences('  plain text  ') == 'plain text'


@pytest.mark.asyncio
async def test_openai_answer_is_used_first():
    openai = _client('openai', side_effect=[_response('```hcl\n' + TERRAFORM + '\n```'), _response('It is a VPC.')])
    mistral = _client('mistral')
    generator = TerraformLLMGenerator(openai_client=openai, mistral_client=mistral)

    code, explanation = await generator.generate('a vpc', 'eu-west-1')

    assert code == TERRAFORM
    assert explanation == 'It is a VPC.'
    assert generator.last_used_provider == 'openai'
    mistral.chat_completion.assert_not_awaited()


@pytest.mark.asyncio
async def test_mistral_is_used_when_openai_fails():
    openai = _client('openai', side_effect=LLMAPIError('rate limited'))
    mistral = _client('mistral', side_effect=[_response(TERRAFORM), _response('Explained.')])
    generator = TerraformLLMGenerator(openai_client=openai, mistral_client=mistral)

    code, _ = await generator.generate('a vpc', 'eu-west-1')

    assert code == TERRAFORM
    assert generator.last_used_provider == 'mistral'


@pytest.mark.asyncio
async def test_all_backends_failing_raises():
    generator = TerraformLLMGenerator(
        openai_client=_client('openai', side_effect=LLMAPIError('down')),
        mistral_client=_client('mistral', side_effect=LLMAPIError('down')),
    )
    with pytest.raises(LLMGenerationError):
        await generator.generate('a vpc', 'eu-west-1')


@pytest.mark.asyncio
async def test_response_without_provider_block_is_rejected():
    generator = TerraformLLMGenerator(
        openai_client=_client('openai', return_value=_response('I cannot help with that.')),
        mistral_client=_client('mistral', configured=False),
    )
    with pytest.raises(LLMGenerationError):
        await generator.generate('a vpc', 'eu-west-1')


@pytest.mark.asyncio
async def test_explanation_failure_uses_default_text():
    openai = _client('openai', side_effect=[_response(TERRAFORM), LLMAPIError('timeout')])
    generator = TerraformLLMGenerator(
        openai_client=openai,
        mistral_client=_client('mistral', configured=False),
    )

    _, explanation = await generator.generate('a vpc', 'eu-west-1')
    assert explanation == FALLBACK_EXPLANATION


def test_is_configured_requires_key_and_flag():
    generator = TerraformLLMGenerator(
        openai_client=_client('openai', configured=True),
        mistral_client=_client('mistral', configured=False),
    )
    with patch('tfgen.services.llm_generator.config') as mock_config:
        mock_config.LLM_ENABLED = True
        assert generator.is_configured()
        mock_config.LLM_ENABLED = False
        assert not generator.is_configured()


@pytest.mark.asyncio
async def test_client_without_key_raises():
    with pytest.raises(LLMAPIError):
        await OpenAIClient(api_key='').chat_completion([{'role': 'user', 'content': 'hi'}])


@pytest.mark.asyncio
async def test_client_retries_then_wraps_http_errors():
    request = httpx.Request('POST', 'https://example.test/chat/completions')
    response = httpx.Response(503, request=request, json={'error': {'message': 'overloaded'}})

    http_client = _http_client(AsyncMock(return_value=response))
    client = _chat_client(retries=2)
    with patch('tfgen.services.llm_clients.httpx.AsyncClient', return_value=http_client):
        with pytest.raises(LLMAPIError, match='overloaded'):
            await client.chat_completion([{'role': 'user', 'content': 'hi'}])

    assert http_client.post.await_count == 2
    assert client.circuit_breaker.failure_count == 1


@pytest.mark.asyncio
async def test_cancelled_half_open_request_does_not_wedge_breaker():
    now = [0.0]
    client = _chat_client()
    client.circuit_breaker = CircuitBreaker('test-llm', failure_threshold=1, open_duration=10, clock=lambda: now[0])
    client.circuit_breaker.record_failure()
    now[0] = 10

    async def hung_post(*args, **kwargs):
        await asyncio.sleep(5)

    with patch('tfgen.services.llm_clients.httpx.AsyncClient', return_value=_http_client(hung_post)):
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(client.chat_completion([{'role': 'user', 'content': 'hi'}]), timeout=0.05)

    assert client.circuit_breaker.state == CircuitState.OPEN
    now[0] = 10000
    assert client.circuit_breaker.allow_request()


@pytest.mark.asyncio
async def test_non_json_body_falls_back_to_next_backend():
    request = httpx.Request('POST', 'https://example.test/chat/completions')
    response = httpx.Response(200, request=request, content=b'<html>gateway page</html>')
    openai = _chat_client()
    mistral = _client('mistral', side_effect=[_response(TERRAFORM), _response('Explained.')])
    generator = TerraformLLMGenerator(openai_client=openai, mistral_client=mistral)

    with patch('tfgen.services.llm_clients.httpx.AsyncClient',
               return_value=_http_client(AsyncMock(return_value=response))):
        code, explanation = await generator.generate('a vpc', 'eu-west-1')

    assert code == TERRAFORM
    assert explanation == 'Explained.'
    assert generator.last_used_provider == 'mistral'
    assert openai.circuit_breaker.failure_count == 2


@pytest.mark.asyncio
async def test_non_json_body_raises_api_error():
    request = httpx.Request('POST', 'https://example.test/chat/completions')
    response = httpx.Response(200, request=request, content=b'not json')
    client = _chat_client()

    with patch('tfgen.services.llm_clients.httpx.AsyncClient',
               return_value=_http_client(AsyncMock(return_value=response))):
        with pytest.raises(LLMAPIError):
            await client.chat_completion([{'role': 'user', 'content': 'hi'}])


@pytest.mark.asyncio
@pytest.mark.parametrize('malformed', [
    {'choices': [{'message': None}]},
    {'choices': [None]},
    {'choices': None},
    {'choices': [{'message': {'content': None}}]},
])
async def test_malformed_answer_falls_back_to_next_backend(malformed):
    openai = _client('openai', return_value=malformed)
    mistral = _client('mistral', side_effect=[_response(TERRAFORM), _response('Explained.')])
    generator = TerraformLLMGenerator(openai_client=openai, mistral_client=mistral)

    code, _ = await generator.generate('a vpc', 'eu-west-1')

    assert code == TERRAFORM
    assert generator.last_used_provider == 'mistral'
