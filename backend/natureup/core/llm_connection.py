import logging
from natureup.core.config import Settings
from natureup.core.errors import AppError
from natureup.core.logger import logs
from natureup.core.llm_providers import (
    BaseLLMProvider,
    OpenAIProvider,
    GeminiProvider
)


def build_provider(config: Settings, provider: str | None = None, transport=None) -> BaseLLMProvider:
    """Initialize the selected LLM provider based on settings"""
    provider = (provider or config.AI_PROVIDER).lower()

    if provider == "openai":
        return OpenAIProvider(
            api_key=config.OPENAI_API_KEY,
            model=config.OPENAI_MODEL,
            base_url=config.OPENAI_BASE_URL,
            timeout=config.HTTP_TIMEOUT,
            transport=transport
        )
    elif provider == "gemini":
        return GeminiProvider(
            api_key=config.GEMINI_API_KEY,
            model=config.GEMINI_MODEL,
            base_url=config.GEMINI_BASE_URL,
            timeout=config.HTTP_TIMEOUT,
            transport=transport
        )

    logs.log(logging.ERROR, f"Unsupported AI_PROVIDER: {provider}")
    raise AppError(f"Unsupported AI_PROVIDER: {provider}", status_code=500, code="AI_RUN_FAILED")


class LLMService:
    """Holds the provider used by /ai-chat, chosen once per process."""

    def __init__(self, config: Settings, transport=None):
        self.config = config
        self.transport = transport
        self._provider: BaseLLMProvider | None = None

    @property
    def provider(self) -> BaseLLMProvider:
        # Resolved lazily so a bad AI_PROVIDER fails the request, not app startup
        if self._provider is None:
            self._provider = build_provider(self.config, transport=self.transport)
            logs.log(logging.INFO, f"🤖 LLM Provider initialized: {self._provider.get_provider_name()}")
        return self._provider
