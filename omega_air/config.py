"""Application configuration management."""

import logging
import threading
from functools import lru_cache
from typing import Dict, List

from pydantic_settings import BaseSettings, SettingsConfigDict

from .providers.base_provider import Provider, ProviderConfig
from .reliability.retry_policy import RoutingMode

logger = logging.getLogger(__name__)


def _split(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Provider credentials, endpoints and routing defaults."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # API Configuration
    api_title: str = "OmegaAIR"
    api_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Providers
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_models: str = "gpt-4o,gpt-4-turbo,gpt-3.5-turbo"

    claude_api_key: str = ""
    claude_base_url: str = "https://api.anthropic.com/v1"
    claude_models: str = "claude-3-5-sonnet-20241022,claude-3-haiku-20240307"
    anthropic_version: str = "2023-06-01"

    mistral_api_key: str = ""
    mistral_base_url: str = "https://api.mistral.ai/v1"
    mistral_models: str = "mistral-large-latest,mistral-medium-latest"

    # Routing
    ai_providers: str = "openai,claude,mistral"
    omegaair_mode: str = "auto"
    request_timeout: float = 30.0
    max_concurrent_per_provider: int = 0

    # Retry policies
    fallback_max_retries: int = 3
    fallback_backoff_multiplier: float = 2.0
    priority_max_retries: int = 2
    priority_backoff_multiplier: float = 1.5

    def configured_providers(self) -> List[Provider]:
        """Ordered provider list from AI_PROVIDERS, unknown names dropped."""
        providers: List[Provider] = []
        for name in _split(self.ai_providers):
            try:
                provider = Provider(name.lower())
            except ValueError:
                logger.warning(f"Ignoring unknown provider in AI_PROVIDERS: {name}")
                continue
            if provider not in providers:
                providers.append(provider)
        return providers

    def provider_config(self, provider: Provider) -> ProviderConfig:
        api_key = getattr(self, f"{provider.value}_api_key")
        return ProviderConfig(
            api_key=api_key,
            base_url=getattr(self, f"{provider.value}_base_url").rstrip("/"),
            supported_models=tuple(_split(getattr(self, f"{provider.value}_models"))),
            enabled=bool(api_key),
        )

    def enabled_providers(self) -> Dict[str, bool]:
        """Credential presence per provider."""
        return {provider.value: bool(getattr(self, f"{provider.value}_api_key")) for provider in Provider}


class RoutingModeConfig:
    """Current routing mode, changeable at runtime."""

    def __init__(self, mode: str = RoutingMode.AUTO.value):
        self._lock = threading.Lock()
        self._mode = RoutingMode.parse(mode)

    @property
    def mode(self) -> RoutingMode:
        with self._lock:
            return self._mode

    def set_mode(self, mode: str) -> RoutingMode:
        parsed = RoutingMode.parse(mode)
        with self._lock:
            previous, self._mode = self._mode, parsed
        if previous != parsed:
            logger.info(f"Routing mode changed from {previous.value} to {parsed.value}")
        return parsed


@lru_cache
def get_settings() -> Settings:
    return Settings()
