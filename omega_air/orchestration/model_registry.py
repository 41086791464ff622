"""Static catalog of known models used for ranking and model lookup."""

import math
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional


@dataclass(frozen=True)
class ModelMeta:
    provider: str
    name: str
    max_tokens: int
    cost_per_1k_tokens: float
    priority: int  # lower = higher priority
    available: bool = True


DEFAULT_MODELS = [
    ModelMeta("openai", "gpt-4o", 128000, 0.03, 1),
    ModelMeta("openai", "gpt-4-turbo", 128000, 0.01, 2),
    ModelMeta("openai", "gpt-3.5-turbo", 16385, 0.002, 3),
    ModelMeta("claude", "claude-3-5-sonnet-20241022", 200000, 0.015, 1),
    ModelMeta("claude", "claude-3-haiku-20240307", 200000, 0.00125, 2),
    ModelMeta("mistral", "mistral-large-latest", 32000, 0.008, 1),
    ModelMeta("mistral", "mistral-medium-latest", 32000, 0.0027, 2),
]


class ModelRegistry:
    """Read-only model metadata, keyed by model name."""

    def __init__(self, models: Iterable[ModelMeta]):
        self._models: Dict[str, ModelMeta] = {m.name: m for m in models}

    def lookup(self, name: str) -> Optional[ModelMeta]:
        return self._models.get(name)

    def all(self) -> List[ModelMeta]:
        return list(self._models.values())

    def __len__(self) -> int:
        return len(self._models)

    def __contains__(self, name: str) -> bool:
        return name in self._models

    def provider_rank(self, provider: str) -> float:
        """Minimum priority across the provider's models; inf when it has none."""
        provider = getattr(provider, "value", provider)
        priorities = [m.priority for m in self._models.values() if m.provider == provider]
        return min(priorities) if priorities else math.inf

    def rank_providers(self, providers: Iterable[str]) -> List[str]:
        """Providers by ascending rank; ties keep their input order."""
        return sorted(providers, key=self.provider_rank)


def default_registry(available_providers: Optional[Iterable[str]] = None) -> ModelRegistry:
    """Built-in catalog, with ``available`` reflecting which providers can be called."""
    if available_providers is None:
        return ModelRegistry(DEFAULT_MODELS)

    available = {getattr(p, "value", p) for p in available_providers}
    return ModelRegistry(replace(m, available=m.provider in available) for m in DEFAULT_MODELS)
