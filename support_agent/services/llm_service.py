"""
LLM Service

Provides a unified completion interface over the supported providers:
- OpenAI API (GPT-3.5-turbo, GPT-4o, etc.)
- Anthropic API (Claude models)
- Local Ollama models
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

import anthropic
import ollama
import openai
import structlog
from pydantic import BaseModel, Field

from support_agent.agents.models import ChatMessage
from support_agent.config.settings import AISettings, get_settings
from support_agent.core.exceptions import CompletionError, ConfigurationError

settings = get_settings()


class LLMMessage(BaseModel):
    """Message format for LLM interactions"""
    role: str  # 'system', 'user', 'assistant'
    content: str


class LLMRequest(BaseModel):
    """Request model for LLM calls"""
    messages: List[LLMMessage]
    model: str
    temperature: float = 0.7
    max_tokens: int = 700
    system_prompt: Optional[str] = None


class LLMResponse(BaseModel):
    """Response model for LLM calls"""
    content: str
    model: str
    tokens_used: int
    finish_reason: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers"""

    name: str = ""

    @abstractmethod
    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Generate a response from the LLM"""

    @abstractmethod
    def validate_config(self) -> bool:
        """Validate that the provider is properly configured"""

    def _chat_messages(self, request: LLMRequest) -> List[Dict[str, str]]:
        messages = []
        if request.system_prompt:
            messages.append({"role": "system", "content": request.system_prompt})
        messages.extend({"role": msg.role, "content": msg.content} for msg in request.messages)
        return messages


class OpenAIProvider(BaseLLMProvider):
    """OpenAI API provider"""

    name = "openai"

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None):
        self.api_key = api_key or settings.ai.openai_api_key
        self.client = None
        if self.api_key:
            self.client = openai.AsyncOpenAI(api_key=self.api_key, timeout=timeout)

    def validate_config(self) -> bool:
        return self.api_key is not None

    async def generate(self, request: LLMRequest) -> LLMResponse:
        if not self.client:
            raise CompletionError(self.name, request.model, "OpenAI client not initialized")

        try:
            response = await self.client.chat.completions.create(
                model=request.model,
                messages=self._chat_messages(request),
                temperature=request.temperature,
                max_tokens=request.max_tokens
            )

            return LLMResponse(
                content=response.choices[0].message.content or "",
                model=response.model,
                tokens_used=response.usage.total_tokens if response.usage else 0,
                finish_reason=response.choices[0].finish_reason,
                metadata={"provider": self.name}
            )

        except Exception as e:
            raise CompletionError(self.name, request.model, f"OpenAI API error: {str(e)}")


class AnthropicProvider(BaseLLMProvider):
    """Anthropic API provider"""

    name = "anthropic"

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None):
        self.api_key = api_key or settings.ai.anthropic_api_key
        self.client = None
        if self.api_key:
            self.client = anthropic.AsyncAnthropic(api_key=self.api_key, timeout=timeout)

    def validate_config(self) -> bool:
        return self.api_key is not None

    async def generate(self, request: LLMRequest) -> LLMResponse:
        if not self.client:
            raise CompletionError(self.name, request.model, "Anthropic client not initialized")

        try:
            # System prompt travels separately for the messages API
            messages = [
                {"role": msg.role, "content": msg.content}
                for msg in request.messages
                if msg.role != "system"
            ]

            response = await self.client.messages.create(
                model=request.model,
                max_tokens=request.max_tokens,
                temperature=request.temperature,
                system=request.system_prompt or "",
                messages=messages
            )

            return LLMResponse(
                content=response.content[0].text,
                model=response.model,
                tokens_used=response.usage.input_tokens + response.usage.output_tokens,
                finish_reason=response.stop_reason,
                metadata={"provider": self.name}
            )

        except Exception as e:
            raise CompletionError(self.name, request.model, f"Anthropic API error: {str(e)}")


class OllamaProvider(BaseLLMProvider):
    """Local Ollama provider"""

    name = "ollama"

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = base_url or settings.ai.ollama_base_url
        self.client = ollama.AsyncClient(host=self.base_url, timeout=timeout)

    def validate_config(self) -> bool:
        return bool(self.base_url)

    async def generate(self, request: LLMRequest) -> LLMResponse:
        try:
            response = await self.client.chat(
                model=request.model,
                messages=self._chat_messages(request),
                options={
                    "temperature": request.temperature,
                    "num_predict": request.max_tokens
                }
            )

            return LLMResponse(
                content=response["message"]["content"],
                model=response["model"],
                tokens_used=(response.get("eval_count") or 0) + (response.get("prompt_eval_count") or 0),
                finish_reason="stop",
                metadata={"provider": self.name}
            )

        except Exception as e:
            raise CompletionError(self.name, request.model, f"Ollama API error: {str(e)}")


class LLMService:
    """
    Completion client for the support agent.

    One provider is selected by ``settings.ai.provider``; every call uses the
    configured model, temperature and token limit.
    """

    def __init__(self, ai_settings: Optional[AISettings] = None, provider: Optional[BaseLLMProvider] = None):
        self.logger = structlog.get_logger("llm_service")
        self.settings = ai_settings or settings.ai
        self.provider = provider or self._create_provider()

    def _create_provider(self) -> BaseLLMProvider:
        """Instantiate the configured provider"""
        provider_name = self.settings.provider.lower()
        timeout = self.settings.request_timeout

        if provider_name == "openai":
            provider = OpenAIProvider(self.settings.openai_api_key, timeout=timeout)
        elif provider_name == "anthropic":
            provider = AnthropicProvider(self.settings.anthropic_api_key, timeout=timeout)
        elif provider_name == "ollama":
            provider = OllamaProvider(self.settings.ollama_base_url, timeout=timeout)
        else:
            raise ConfigurationError("llm_service", f"Unknown LLM provider: {self.settings.provider}")

        if provider.validate_config():
            self.logger.info("LLM provider initialized", provider=provider_name, model=self.settings.model)
        else:
            self.logger.warning("LLM provider is not configured", provider=provider_name)

        return provider

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Generate a response using the configured provider"""
        self.logger.info(
            "Generating LLM response",
            provider=self.provider.name,
            model=request.model,
            messages=len(request.messages)
        )
        return await self.provider.generate(request)

    async def complete(
        self,
        system_prompt: str,
        history: Sequence[ChatMessage],
        message: str
    ) -> str:
        """Answer ``message`` given a system prompt and the prior conversation.

        Raises:
            CompletionError: If the provider call fails
        """
        messages = [LLMMessage(role=turn.role, content=turn.content) for turn in history]
        messages.append(LLMMessage(role="user", content=message))

        request = LLMRequest(
            messages=messages,
            model=self.settings.model,
            temperature=self.settings.temperature,
            max_tokens=self.settings.max_tokens,
            system_prompt=system_prompt
        )

        response = await self.generate(request)
        return response.content

    async def health_check(self) -> Dict[str, bool]:
        """Report whether the configured provider is usable"""
        try:
            return {self.provider.name: self.provider.validate_config()}
        except Exception as e:
            self.logger.warning("Provider health check failed", provider=self.provider.name, error=str(e))
            return {self.provider.name: False}
