"""
Configuration settings for the support agent service.
"""
from typing import List, Optional
import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from support_agent.rag.models import PageSource


DEFAULT_PAGES = [
    PageSource(url="https://www.thoughtful.ai/", name="Home"),
    PageSource(url="https://www.thoughtful.ai/prior-authorization", name="Prior Authorization"),
    PageSource(url="https://www.thoughtful.ai/accounts-receivable", name="Accounts Receivable"),
    PageSource(url="https://www.thoughtful.ai/payment-posting", name="Payment Posting"),
    PageSource(url="https://www.thoughtful.ai/about", name="About"),
    PageSource(url="https://www.thoughtful.ai/trust-and-security", name="Trust and Security"),
]


class ServiceSettings(BaseSettings):
    """Main service configuration settings."""

    name: str = "thoughtful-support-agent"
    version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False

    # HTTP server settings
    host: str = "0.0.0.0"
    port: int = 3001

    model_config = SettingsConfigDict(env_prefix="SERVICE_", env_file=".env", extra="ignore")


class AISettings(BaseSettings):
    """Completion model configuration settings."""

    provider: str = "openai"  # openai, anthropic, ollama
    model: str = "gpt-3.5-turbo"
    max_tokens: int = 700
    temperature: float = 0.7
    request_timeout: float = 60.0

    openai_api_key: Optional[str] = Field(default=None, validation_alias="OPENAI_API_KEY")
    anthropic_api_key: Optional[str] = Field(default=None, validation_alias="ANTHROPIC_API_KEY")
    ollama_base_url: str = Field(default="http://localhost:11434", validation_alias="OLLAMA_BASE_URL")

    model_config = SettingsConfigDict(
        env_prefix="AI_",
        env_file=".env",
        populate_by_name=True,
        protected_namespaces=(),
        extra="ignore",
    )


class RAGSettings(BaseSettings):
    """Retrieval configuration settings."""

    embedding_provider: str = "openai"  # openai, local
    embedding_model: str = "text-embedding-3-small"
    local_embedding_model: str = "all-MiniLM-L6-v2"
    embedding_max_input_length: int = 8000
    embedding_delay_seconds: float = 0.1
    openai_api_key: Optional[str] = Field(default=None, validation_alias="OPENAI_API_KEY")

    chunk_size: int = 500
    chunk_overlap: int = 50
    min_chunk_length: int = 20

    top_k: int = 5
    relevance_threshold: float = 0.3

    model_config = SettingsConfigDict(env_prefix="RAG_", env_file=".env", populate_by_name=True, extra="ignore")


class ScraperSettings(BaseSettings):
    """Page fetcher configuration settings."""

    pages: List[PageSource] = Field(default_factory=lambda: list(DEFAULT_PAGES))
    timeout_seconds: float = 30.0
    delay_seconds: float = 0.5
    user_agent: str = "Mozilla/5.0 (compatible; ThoughtfulAI-Bot/1.0; +https://thoughtful.ai)"

    model_config = SettingsConfigDict(env_prefix="SCRAPER_", env_file=".env", extra="ignore")


class AgentSettings(BaseSettings):
    """Response routing configuration settings."""

    predefined_confidence_threshold: float = 0.6
    match_threshold: float = 0.3
    keyword_boost: float = 0.5

    model_config = SettingsConfigDict(env_prefix="AGENT_", env_file=".env", extra="ignore")


class SecuritySettings(BaseSettings):
    """Security configuration settings."""

    cors_origins: str = "*"

    @property
    def cors_origin_list(self) -> List[str]:
        """Parse the comma separated CORS origins."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    model_config = SettingsConfigDict(env_prefix="SECURITY_", env_file=".env", extra="ignore")


class MonitoringSettings(BaseSettings):
    """Logging configuration settings."""

    log_level: str = "info"
    log_format: str = "json"  # json, console

    model_config = SettingsConfigDict(env_prefix="MONITORING_", env_file=".env", extra="ignore")


class Settings(BaseSettings):
    """Main settings class that combines all configuration sections."""

    service: ServiceSettings = Field(default_factory=ServiceSettings)
    ai: AISettings = Field(default_factory=AISettings)
    rag: RAGSettings = Field(default_factory=RAGSettings)
    scraper: ScraperSettings = Field(default_factory=ScraperSettings)
    agent: AgentSettings = Field(default_factory=AgentSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings


# Environment-specific overrides
if os.getenv("ENVIRONMENT") == "production":
    settings.service.debug = False
    settings.monitoring.log_level = "warning"
elif os.getenv("ENVIRONMENT") == "testing":
    settings.service.debug = True
    settings.monitoring.log_level = "debug"
    settings.rag.embedding_delay_seconds = 0.0
    settings.scraper.delay_seconds = 0.0
