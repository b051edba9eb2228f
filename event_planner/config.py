from __future__ import annotations

import logging
import os

from pydantic import BaseModel, ConfigDict


class Settings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    openai_api_key: str = os.getenv("OPENAI_API_KEY", "")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4")
    openai_temperature: float = float(os.getenv("OPENAI_TEMPERATURE", 0.7))
    openai_api_host: str = os.getenv(
        "OPENAI_API_HOST", "https://api.openai.com/v1"
    )

    llm_provider: str = os.getenv("LLM_PROVIDER", "openai")
    openrouter_api_key: str = os.getenv("OPENROUTER_API_KEY", "")
    openrouter_api_host: str = os.getenv(
        "OPENROUTER_API_HOST", "https://openrouter.ai/api/v1"
    )

    tasks_max_tokens: int = int(os.getenv("TASKS_MAX_TOKENS", 3000))
    details_max_tokens: int = int(os.getenv("DETAILS_MAX_TOKENS", 2000))

    project_timezone: str = os.getenv("PROJECT_TIMEZONE", "Asia/Tokyo")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    planner_api_url: str = os.getenv("PLANNER_API_URL", "http://localhost:8000")
    client_timeout: float = float(os.getenv("CLIENT_TIMEOUT", 30))

    @property
    def provider_key(self) -> str:
        return (self.llm_provider or "openai").strip().lower()

    @property
    def llm_api_key(self) -> str:
        """Credential for the selected provider; OpenRouter may reuse the OpenAI key."""

        if self.provider_key == "openrouter":
            return self.openrouter_api_key or self.openai_api_key
        return self.openai_api_key

    @property
    def llm_api_host(self) -> str:
        if self.provider_key == "openrouter":
            return self.openrouter_api_host
        return self.openai_api_host

    def model_post_init(self, __context: dict[str, object]) -> None:
        if not self.llm_api_key:
            logging.getLogger(__name__).warning(
                "No API key for LLM provider '%s'. Task generation will be refused "
                "and task details will use canned advisories.",
                self.provider_key,
            )


settings = Settings()
