"""
LLM Provider Implementations
Supports multiple chat-completion providers with a unified interface.
"""
import httpx
import logging
from abc import ABC, abstractmethod
from natureup.core.errors import UpstreamError
from natureup.core.logger import logs

class BaseLLMProvider(ABC):
    """Base class for all LLM providers"""

    provider_id: str = ""

    def __init__(self, api_key: str, model: str, timeout: float = 30.0,
                 transport: httpx.AsyncBaseTransport | None = None):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.transport = transport

    @abstractmethod
    async def generate(self, messages: list, temperature: float | None = None, json_mode: bool = False) -> str:
        """Generate a response from the LLM"""
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the name of the provider"""
        pass

    def _require_key(self, env_name: str):
        if not self.api_key:
            raise UpstreamError(self.provider_id, f"{env_name} not configured", code="CONFIG_ERROR")

    async def _post(self, url: str, payload: dict, headers: dict, label: str) -> dict:
        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            try:
                response = await client.post(url, json=payload, headers=headers)
            except httpx.HTTPError as e:
                logs.log(logging.ERROR, f"{label} request failed: {str(e)}")
                raise UpstreamError(self.provider_id, f"{label} request failed: {str(e)}")

        if response.status_code != 200:
            logs.log(logging.ERROR, f"{label} API error: {response.status_code}")
            raise UpstreamError(
                self.provider_id,
                f"{label} API error: {response.status_code} {response.text}",
                upstream_status=response.status_code
            )
        try:
            return response.json()
        except ValueError:
            raise UpstreamError(self.provider_id, f"{label} API returned invalid JSON", response.status_code)


class OpenAIProvider(BaseLLMProvider):
    """OpenAI Provider (gpt-4o-mini by default)"""

    provider_id = "openai"

    def __init__(self, api_key: str, model: str, base_url: str = "https://api.openai.com/v1", **kwargs):
        super().__init__(api_key, model, **kwargs)
        self.base_url = f"{base_url.rstrip('/')}/chat/completions"

    async def generate(self, messages: list, temperature: float | None = None, json_mode: bool = False) -> str:
        self._require_key("OPENAI_API_KEY")
        payload = {
            "model": self.model,
            "messages": messages
        }
        if temperature is not None:
            payload["temperature"] = temperature
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }
        data = await self._post(self.base_url, payload, headers, "OpenAI")
        choices = data.get("choices") or [{}]
        return ((choices[0].get("message") or {}).get("content") or "").strip()

    def get_provider_name(self) -> str:
        return "OpenAI"


class GeminiProvider(BaseLLMProvider):
    """Google Gemini Provider"""

    provider_id = "gemini"

    def __init__(self, api_key: str, model: str,
                 base_url: str = "https://generativelanguage.googleapis.com/v1beta", **kwargs):
        super().__init__(api_key, model, **kwargs)
        self.base_url = base_url.rstrip("/")

    @staticmethod
    def to_gemini_contents(messages: list) -> tuple[str | None, list]:
        """
        Convert OpenAI-style messages to Gemini format.
        The first system message becomes the system instruction, later ones are dropped;
        assistant turns use the "model" role.
        """
        system_message = None
        contents = []
        for msg in messages:
            if msg["role"] == "system":
                if system_message is None:
                    system_message = msg["content"]
                continue
            contents.append({
                "role": "model" if msg["role"] == "assistant" else "user",
                "parts": [{"text": msg["content"]}]
            })
        return system_message, contents

    async def generate(self, messages: list, temperature: float | None = None, json_mode: bool = False) -> str:
        self._require_key("GEMINI_API_KEY")
        system_message, contents = self.to_gemini_contents(messages)

        payload = {"contents": contents}
        if system_message:
            payload["systemInstruction"] = {"parts": [{"text": system_message}]}

        generation_config = {}
        if json_mode:
            generation_config["responseMimeType"] = "application/json"
        if temperature is not None:
            generation_config["temperature"] = temperature
        if generation_config:
            payload["generationConfig"] = generation_config

        url = f"{self.base_url}/models/{self.model}:generateContent?key={self.api_key}"
        data = await self._post(url, payload, {"Content-Type": "application/json"}, "Gemini")

        candidates = data.get("candidates") or [{}]
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(p.get("text") or "" for p in parts).strip()

    def get_provider_name(self) -> str:
        return "Google Gemini"
