"""Unit tests for the configuration module.

Tests defaults and environment variable overrides of the settings sections.
"""

import os
from unittest.mock import patch

from support_agent.config.settings import (
    AgentSettings,
    AISettings,
    RAGSettings,
    ScraperSettings,
    SecuritySettings,
    Settings,
)


def test_default_settings():
    """Test default settings."""
    with patch.dict(os.environ, {}, clear=True):
        settings = Settings()

    assert settings.service.port == 3001
    assert settings.ai.model == "gpt-3.5-turbo"
    assert settings.ai.max_tokens == 700
    assert settings.ai.temperature == 0.7
    assert settings.rag.embedding_model == "text-embedding-3-small"
    assert settings.rag.embedding_max_input_length == 8000
    assert settings.rag.embedding_delay_seconds == 0.1
    assert settings.rag.chunk_size == 500
    assert settings.rag.chunk_overlap == 50
    assert settings.rag.top_k == 5
    assert settings.rag.relevance_threshold == 0.3
    assert settings.scraper.timeout_seconds == 30
    assert settings.scraper.delay_seconds == 0.5
    assert len(settings.scraper.pages) == 6
    assert settings.agent.predefined_confidence_threshold == 0.6
    assert settings.agent.match_threshold == 0.3
    assert settings.agent.keyword_boost == 0.5


def test_environment_variable_override():
    """Test overriding settings with environment variables."""
    env_vars = {
        "RAG_CHUNK_SIZE": "300",
        "RAG_CHUNK_OVERLAP": "30",
        "RAG_EMBEDDING_PROVIDER": "local",
        "SCRAPER_DELAY_SECONDS": "0",
        "AGENT_PREDEFINED_CONFIDENCE_THRESHOLD": "0.75",
        "AI_PROVIDER": "anthropic",
        "AI_MODEL": "claude-3-5-haiku-20241022",
    }

    with patch.dict(os.environ, env_vars):
        rag = RAGSettings()
        scraper = ScraperSettings()
        agent = AgentSettings()
        ai = AISettings()

    assert rag.chunk_size == 300
    assert rag.chunk_overlap == 30
    assert rag.embedding_provider == "local"
    assert scraper.delay_seconds == 0
    assert agent.predefined_confidence_threshold == 0.75
    assert ai.provider == "anthropic"
    assert ai.model == "claude-3-5-haiku-20241022"


def test_api_keys_read_from_unprefixed_variables():
    """Test that provider keys use their conventional variable names."""
    env_vars = {"OPENAI_API_KEY": "sk-test", "ANTHROPIC_API_KEY": "sk-ant-test"}

    with patch.dict(os.environ, env_vars):
        ai = AISettings()
        rag = RAGSettings()

    assert ai.openai_api_key == "sk-test"
    assert ai.anthropic_api_key == "sk-ant-test"
    assert rag.openai_api_key == "sk-test"


def test_cors_origin_list():
    """Test parsing of comma separated CORS origins."""
    security = SecuritySettings(cors_origins="http://localhost:3000, https://support.example.com,")

    assert security.cors_origin_list == ["http://localhost:3000", "https://support.example.com"]
