from typing import Any, Iterable, List

import httpx

from mixology.errors import AllProvidersFailed, ProviderError
from mixology.logging import get_logger
from mixology.services.llm.client import run_with_logging

logger = get_logger(__name__)

ANTHROPIC_VERSION = "2023-06-01"
VISION_MAX_TOKENS = 300


def _openai_content(data: Any) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        raise ProviderError("response has no choices[0].message.content") from None
    if not isinstance(content, str) or not content.strip():
        raise ProviderError("empty completion")
    return content


def _anthropic_content(data: Any) -> str:
    try:
        content = data["content"][0]["text"]
    except (KeyError, IndexError, TypeError):
        raise ProviderError("response has no content[0].text") from None
    if not isinstance(content, str) or not content.strip():
        raise ProviderError("empty completion")
    return content


class TextProvider:
    """One vendor endpoint. Subclasses implement `complete` and, for vision models, `describe_image`."""

    name: str = "provider"
    model: str = ""
    supports_vision: bool = False

    def complete(self, system: str, user: str) -> str:
        raise NotImplementedError

    def describe_image(self, image_base64: str, prompt: str) -> str:
        raise ProviderError(f"{self.name} does not accept images")


class OpenAICompatibleProvider(TextProvider):
    """Chat-completions API as served by OpenAI and Groq."""

    def __init__(
        self,
        name: str,
        api_key: str,
        base_url: str,
        model: str,
        *,
        temperature: float = 0.7,
        max_tokens: int = 1000,
        timeout: float = 30.0,
        supports_vision: bool = False,
    ) -> None:
        self.name = name
        self.model = model
        self.supports_vision = supports_vision
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self._api_key}", "Content-Type": "application/json"}

    def _post(self, payload: dict) -> str:
        resp = httpx.post(
            f"{self._base_url}/chat/completions",
            headers=self._headers(),
            json=payload,
            timeout=self._timeout,
        )
        resp.raise_for_status()
        return _openai_content(resp.json())

    def complete(self, system: str, user: str) -> str:
        return self._post(
            {
                "model": self.model,
                "messages": [
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                "temperature": self._temperature,
                "max_tokens": self._max_tokens,
            }
        )

    def describe_image(self, image_base64: str, prompt: str) -> str:
        if not self.supports_vision:
            return super().describe_image(image_base64, prompt)
        return self._post(
            {
                "model": self.model,
                "messages": [
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {
                                "type": "image_url",
                                "image_url": {"url": f"data:image/jpeg;base64,{image_base64}"},
                            },
                        ],
                    }
                ],
                "max_tokens": VISION_MAX_TOKENS,
            }
        )


class AnthropicProvider(TextProvider):
    """Anthropic messages API."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        *,
        name: str = "claude",
        temperature: float = 0.7,
        max_tokens: int = 1000,
        timeout: float = 30.0,
    ) -> None:
        self.name = name
        self.model = model
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout

    def _headers(self) -> dict:
        return {
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }

    def complete(self, system: str, user: str) -> str:
        resp = httpx.post(
            f"{self._base_url}/messages",
            headers=self._headers(),
            json={
                "model": self.model,
                "system": system,
                "messages": [{"role": "user", "content": user}],
                "temperature": self._temperature,
                "max_tokens": self._max_tokens,
            },
            timeout=self._timeout,
        )
        resp.raise_for_status()
        return _anthropic_content(resp.json())


class ProviderChain:
    """Tries providers in order; the first usable answer wins."""

    def __init__(self, providers: Iterable[TextProvider]) -> None:
        self.providers: List[TextProvider] = list(providers)

    def __len__(self) -> int:
        return len(self.providers)

    def _first_success(self, providers: List[TextProvider], prompt_name: str, prompt_version: str, call) -> str:
        errors: list[str] = []
        for provider in providers:
            try:
                result = run_with_logging(
                    prompt_name,
                    prompt_version,
                    call,
                    provider=provider.name,
                    model=provider.model,
                    p=provider,
                )
            except (httpx.HTTPError, ProviderError, ValueError) as exc:
                logger.warning("llm.provider.failed provider=%s error=%s", provider.name, exc)
                errors.append(f"{provider.name}: {exc}")
                continue
            logger.info("llm.provider.answered provider=%s", provider.name)
            return result
        raise AllProvidersFailed(errors)

    def complete(self, system: str, user: str, *, prompt_name: str = "completion", prompt_version: str = "v1") -> str:
        return self._first_success(
            self.providers,
            prompt_name,
            prompt_version,
            lambda p: p.complete(system, user),
        )

    def describe_image(
        self,
        image_base64: str,
        prompt: str,
        *,
        prompt_name: str = "image_analysis",
        prompt_version: str = "v1",
    ) -> str:
        return self._first_success(
            [p for p in self.providers if p.supports_vision],
            prompt_name,
            prompt_version,
            lambda p: p.describe_image(image_base64, prompt),
        )


def _openai_compatible(settings, name: str, api_key: str, base_url: str, model: str, **kwargs) -> OpenAICompatibleProvider:
    return OpenAICompatibleProvider(
        name,
        api_key,
        base_url,
        model,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        timeout=settings.llm_timeout_s,
        **kwargs,
    )


def build_text_chain(settings) -> ProviderChain:
    """Groq, then Claude, then OpenAI; vendors without an API key are left out."""
    providers: List[TextProvider] = []
    if settings.groq_api_key:
        providers.append(
            _openai_compatible(settings, "groq", settings.groq_api_key, settings.groq_base_url, settings.groq_model)
        )
    if settings.claude_api_key:
        providers.append(
            AnthropicProvider(
                settings.claude_api_key,
                settings.claude_base_url,
                settings.claude_model,
                temperature=settings.llm_temperature,
                max_tokens=settings.llm_max_tokens,
                timeout=settings.llm_timeout_s,
            )
        )
    if settings.openai_api_key:
        providers.append(
            _openai_compatible(
                settings, "openai", settings.openai_api_key, settings.openai_base_url, settings.openai_model
            )
        )
    logger.info("llm.configure chain=%s", ",".join(p.name for p in providers) or "none")
    return ProviderChain(providers)


def build_vision_chain(settings) -> ProviderChain:
    providers: List[TextProvider] = []
    if settings.openai_api_key:
        providers.append(
            _openai_compatible(
                settings,
                "openai",
                settings.openai_api_key,
                settings.openai_base_url,
                settings.openai_vision_model,
                supports_vision=True,
            )
        )
    logger.info("llm.configure vision_chain=%s", ",".join(p.name for p in providers) or "none")
    return ProviderChain(providers)
