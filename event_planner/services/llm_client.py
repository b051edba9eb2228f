from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from openai import OpenAI, OpenAIError

from event_planner.config import settings

logger = logging.getLogger(__name__)


class LLMUnavailableError(RuntimeError):
    """Raised when the LLM cannot be reached or used."""


@runtime_checkable
class TextLLMProvider(Protocol):
    """Common protocol for chat-completion providers."""

    name: str
    configured: bool

    def complete(self, system: str, user: str, *, max_tokens: int) -> str: ...


class OfflineLLMProvider:
    """Stand-in used when credentials are missing."""

    configured = False

    def __init__(self, name: str = "offline") -> None:
        self.name = name

    def complete(self, system: str, user: str, *, max_tokens: int) -> str:
        logger.info("LLM provider '%s' operating in offline mode", self.name)
        raise LLMUnavailableError(f"{self.name} credentials are not configured")


class OpenAIProvider:
    """Free-text generation backed by the OpenAI chat completions API."""

    name = "openai"
    configured = True

    def __init__(
        self,
        *,
        api_host: str,
        api_key: str,
        model: str,
        temperature: float,
        client: OpenAI | None = None,
        default_headers: dict[str, str] | None = None,
    ) -> None:
        self._model = model
        self._temperature = temperature
        if client is None:
            try:
                client = OpenAI(
                    api_key=api_key,
                    base_url=api_host or None,
                    default_headers=default_headers,
                )
            except OpenAIError as exc:
                logger.error("Failed to initialise %s client: %s", self.name, exc)
                raise LLMUnavailableError(f"{self.name} client is not configured") from exc
        self._client = client

    def complete(self, system: str, user: str, *, max_tokens: int) -> str:
        try:
            completion = self._client.chat.completions.create(
                model=self._model,
                temperature=self._temperature,
                max_tokens=max_tokens,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
            )
        except OpenAIError as exc:
            logger.error("Chat completion failed: %s", exc)
            raise LLMUnavailableError(str(exc)) from exc

        if not completion.choices:
            raise LLMUnavailableError("LLM returned no choices")
        content = completion.choices[0].message.content or ""
        logger.debug("Raw LLM output from %s: %s", self.name, content)
        return content


class OpenRouterProvider(OpenAIProvider):
    """OpenRouter provider using the OpenAI-compatible SDK."""

    name = "openrouter"

    def __init__(
        self,
        *,
        api_host: str,
        api_key: str,
        model: str,
        temperature: float,
    ) -> None:
        super().__init__(
            api_host=api_host,
            api_key=api_key,
            model=model,
            temperature=temperature,
            default_headers={"X-Title": "Event Task Planner"},
        )


PROVIDERS: dict[str, type[OpenAIProvider]] = {
    OpenAIProvider.name: OpenAIProvider,
    OpenRouterProvider.name: OpenRouterProvider,
}


class LLMClient:
    """Wrapper that selects the correct LLM provider at runtime."""

    def __init__(self, provider: TextLLMProvider | None = None) -> None:
        self._provider = provider or self._build_provider()
        self.provider_name = getattr(self._provider, "name", "unknown")

    @property
    def configured(self) -> bool:
        return bool(getattr(self._provider, "configured", False))

    def complete(self, system: str, user: str, *, max_tokens: int) -> str:
        """Return the raw model text or raise :class:`LLMUnavailableError`."""

        try:
            return self._provider.complete(system, user, max_tokens=max_tokens)
        except LLMUnavailableError as exc:
            logger.warning(
                "LLM provider '%s' unavailable: %s", self.provider_name, exc
            )
            raise

    # ----------------------------------------------------------------- internals
    def _build_provider(self) -> TextLLMProvider:
        provider_key = settings.provider_key
        provider_cls = PROVIDERS.get(provider_key)
        if provider_cls is None:
            logger.warning(
                "Unknown LLM provider '%s'; falling back to offline mode", provider_key
            )
            return OfflineLLMProvider(provider_key)

        api_key = settings.llm_api_key
        if not api_key:
            return OfflineLLMProvider(provider_key)
        try:
            return provider_cls(
                api_host=settings.llm_api_host,
                api_key=api_key,
                model=settings.openai_model,
                temperature=settings.openai_temperature,
            )
        except LLMUnavailableError as exc:
            logger.error("Failed to build %s provider: %s", provider_key, exc)
            return OfflineLLMProvider(provider_key)
