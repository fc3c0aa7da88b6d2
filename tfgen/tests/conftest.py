"""
Shared pytest fixtures for tfgen tests.
"""

import sys
import os
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

# Set environment variables for testing before config is imported
os.environ['AWS_DEFAULT_REGION'] = 'eu-central-1'
os.environ['LLM_ENABLED'] = 'false'
os.environ['OPENAI_API_KEY'] = ''
os.environ['MISTRAL_API_KEY'] = ''
os.environ['DOCS_RENDER_DELAY_SECONDS'] = '0'

import pytest
from unittest.mock import AsyncMock, Mock

from tfgen.core.account_context import account_cache
from tfgen.resilience.circuit_breaker import reset_circuit_breakers


KNOWN_REGIONS = ['us-west-2', 'us-east-1', 'eu-west-1', 'eu-central-1']


@pytest.fixture(autouse=True)
def reset_process_state():
    """Isolate breakers and the account cache between tests."""
    reset_circuit_breakers()
    account_cache.clear()
    yield
    reset_circuit_breakers()
    account_cache.clear()


@pytest.fixture
def known_regions():
    """Fallback region list in its fixed order."""
    return list(KNOWN_REGIONS)


@pytest.fixture
def mock_catalog():
    """Catalog lookup that never touches AWS."""
    mock = Mock()
    mock.list_regions = AsyncMock(return_value=list(KNOWN_REGIONS))
    mock.latest_image = AsyncMock(return_value={'ami': 'ami-0123456789abcdef0', 'name': 'amzn2-ami-hvm-test'})
    return mock


@pytest.fixture
def disabled_llm():
    """LLM generator that reports itself unconfigured."""
    mock = Mock()
    mock.is_configured = Mock(return_value=False)
    mock.generate = AsyncMock()
    return mock


@pytest.fixture
def failing_llm():
    """LLM generator that is configured but always raises."""
    from tfgen.services.llm_generator import LLMGenerationError

    mock = Mock()
    mock.is_configured = Mock(return_value=True)
    mock.generate = AsyncMock(side_effect=LLMGenerationError('backend unavailable'))
    return mock


@pytest.fixture
def rule_generator(mock_catalog, disabled_llm):
    """Generator running only the rule engine."""
    from tfgen.services.generator import TerraformGenerator

    return TerraformGenerator(catalog=mock_catalog, llm_generator=disabled_llm)


@pytest.fixture
def web_stack_code():
    """Composed document with storage, database, compute and load balancer."""
    from tfgen.services.composer import compose
    from tfgen.services.pattern_catalog import base_params, build_fragments, match_patterns

    text = 'web server behind a load balancer with a postgres database and an s3 bucket'
    match = match_patterns(text, KNOWN_REGIONS, 'eu-west-1')
    params = base_params(text, match.region, image_id='ami-0123456789abcdef0')
    return compose(build_fragments(text, match.patterns, params), match.region).code
