from __future__ import annotations

from types import SimpleNamespace

import pytest
from openai import OpenAIError

from event_planner.config import settings
from event_planner.services import llm_client
from event_planner.services.llm_client import (
    LLMClient,
    LLMUnavailableError,
    OfflineLLMProvider,
    OpenAIProvider,
    OpenRouterProvider,
)


@pytest.fixture
def configure(monkeypatch):
    def _configure(provider: str, *, openai_key: str = "", openrouter_key: str = "") -> None:
        monkeypatch.setattr(settings, "llm_provider", provider)
        monkeypatch.setattr(settings, "openai_api_key", openai_key)
        monkeypatch.setattr(settings, "openrouter_api_key", openrouter_key)

    return _configure


def _fake_openai(reply=None, error: Exception | None = None):
    calls = []

    def create(**kwargs):
        calls.append(kwargs)
        if error is not None:
            raise error
        return reply

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return client, calls


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.mark.parametrize("provider", ["openai", "openrouter"])
def test_missing_credentials_select_offline_provider(configure, provider):
    configure(provider)
    client = LLMClient()
    assert not client.configured
    assert client.provider_name == provider
    with pytest.raises(LLMUnavailableError):
        client.complete("s", "u", max_tokens=10)


def test_openai_key_selects_openai_provider(configure):
    configure("OpenAI", openai_key="sk-test")
    client = LLMClient()
    assert client.configured
    assert isinstance(client._provider, OpenAIProvider)
    assert client.provider_name == "openai"


def test_openrouter_reuses_openai_key(configure):
    configure("openrouter", openai_key="sk-test")
    assert settings.llm_api_host == settings.openrouter_api_host
    client = LLMClient()
    assert isinstance(client._provider, OpenRouterProvider)
    assert client.provider_name == "openrouter"


def test_unknown_provider_is_offline(configure):
    configure("anthropic-proxy", openai_key="sk-test")
    client = LLMClient()
    assert isinstance(client._provider, OfflineLLMProvider)
    assert client.provider_name == "anthropic-proxy"


def test_sdk_construction_failure_degrades_to_offline(configure, monkeypatch):
    def broken(**kwargs):
        raise OpenAIError("bad base url")

    configure("openai", openai_key="sk-test")
    monkeypatch.setattr(llm_client, "OpenAI", broken)

    client = LLMClient()

    assert not client.configured
    assert isinstance(client._provider, OfflineLLMProvider)


def test_openai_provider_sends_both_messages():
    fake, calls = _fake_openai(_completion("本文"))
    provider = OpenAIProvider(
        api_host="", api_key="k", model="gpt-4", temperature=0.7, client=fake
    )

    assert provider.complete("system", "user", max_tokens=42) == "本文"
    assert calls[0]["max_tokens"] == 42
    assert [m["role"] for m in calls[0]["messages"]] == ["system", "user"]


@pytest.mark.parametrize(
    "fake",
    [
        _fake_openai(error=OpenAIError("rate limited"))[0],
        _fake_openai(SimpleNamespace(choices=[]))[0],
    ],
)
def test_openai_provider_failures_raise_unavailable(fake):
    provider = OpenAIProvider(
        api_host="", api_key="k", model="gpt-4", temperature=0.7, client=fake
    )
    with pytest.raises(LLMUnavailableError):
        provider.complete("s", "u", max_tokens=1)


def test_empty_content_is_returned_as_blank_text():
    fake, _ = _fake_openai(_completion(None))
    provider = OpenAIProvider(
        api_host="", api_key="k", model="gpt-4", temperature=0.7, client=fake
    )
    assert provider.complete("s", "u", max_tokens=1) == ""
