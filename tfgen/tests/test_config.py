"""
Tests for environment-driven configuration.
"""

import importlib

import pytest

import tfgen.core.config as config_module


@pytest.fixture
def reload_config(monkeypatch):
    """Reload the config module under a patched environment, then restore it."""
    def _reload(**env):
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        return importlib.reload(config_module).Config

    yield _reload
    monkeypatch.undo()
    importlib.reload(config_module)


def test_llm_limits_and_endpoints_come_from_environment(reload_config):
    config = reload_config(
        OPENAI_MAX_TOKENS='1500',
        MISTRAL_MAX_TOKENS='2500',
        MISTRAL_API_BASE_URL='https://mistral.internal.test/v1',
    )

    assert config.OPENAI_MAX_TOKENS == 1500
    assert config.MISTRAL_MAX_TOKENS == 2500
    assert config.MISTRAL_API_BASE_URL == 'https://mistral.internal.test/v1'


def test_llm_defaults(reload_config, monkeypatch):
    for key in ('OPENAI_MAX_TOKENS', 'MISTRAL_MAX_TOKENS', 'MISTRAL_API_BASE_URL'):
        monkeypatch.delenv(key, raising=False)
    config = reload_config()

    assert config.OPENAI_MAX_TOKENS == 4000
    assert config.MISTRAL_MAX_TOKENS == 4000
    assert config.MISTRAL_API_BASE_URL == 'https://api.mistral.ai/v1'


def test_validate_rejects_non_positive_token_limit(reload_config):
    config = reload_config(OPENAI_MAX_TOKENS='0')
    with pytest.raises(ValueError):
        config.validate()
