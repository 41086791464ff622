import asyncio
import logging
from typing import Dict, Iterable, List, Optional

from ..config import Settings
from ..exceptions import (
    AllProvidersExhausted,
    NoProvidersAvailable,
    ProviderRequestFailed,
    ProviderUnavailable,
)
from ..monitoring.metrics import provider_attempts, provider_latency, tokens_used
from ..providers import BaseProvider, GenerationRequest, GenerationResponse, Provider, build_adapter
from ..reliability.admission import ProviderAdmission
from ..reliability.retry_policy import FallbackPolicy, SleepFunc

logger = logging.getLogger(__name__)


class FallbackManager:
    """Runs a request against candidate providers in order until one succeeds.

    Each provider gets up to ``policy.max_retries`` attempts with exponential
    backoff between them; moving on to the next provider happens without delay.
    Only one attempt is in flight per call.
    """

    def __init__(
        self,
        adapters: Dict[Provider, BaseProvider],
        provider_order: Optional[Iterable[Provider]] = None,
        default_policy: Optional[FallbackPolicy] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.adapters = dict(adapters)
        order = list(provider_order) if provider_order is not None else list(self.adapters)
        self._available: List[Provider] = [p for p in order if p in self.adapters]
        self.default_policy = default_policy or FallbackPolicy()
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        admission: Optional[ProviderAdmission] = None,
        default_policy: Optional[FallbackPolicy] = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> "FallbackManager":
        """Build adapters for providers that are both configured and credentialed."""
        configured = settings.configured_providers()
        adapters: Dict[Provider, BaseProvider] = {}

        for provider in configured:
            options = {"anthropic_version": settings.anthropic_version} if provider is Provider.CLAUDE else {}
            try:
                adapters[provider] = build_adapter(
                    provider,
                    settings.provider_config(provider),
                    admission=admission,
                    timeout=settings.request_timeout,
                    **options,
                )
            except ProviderUnavailable as e:
                logger.info(f"{e}, not initializing")

        logger.info(f"Available providers: {[p.value for p in adapters] or 'none'}")
        return cls(adapters, provider_order=configured, default_policy=default_policy, sleep=sleep)

    @property
    def available_providers(self) -> List[Provider]:
        return list(self._available)

    def is_provider_available(self, provider: str) -> bool:
        name = getattr(provider, "value", provider)
        return any(p.value == name for p in self._available)

    def _candidates(self, candidates: Optional[Iterable[str]], policy: FallbackPolicy) -> List[Provider]:
        ordered: List[Provider] = []
        for candidate in self._available if candidates is None else candidates:
            name = getattr(candidate, "value", candidate)
            if name in policy.exclude_providers:
                continue
            if not self.is_provider_available(name):
                logger.warning(f"{ProviderUnavailable(name)}, skipping")
                continue
            provider = Provider(name)
            if provider not in ordered:
                ordered.append(provider)
        return ordered

    async def execute_with_fallback(
        self,
        request: GenerationRequest,
        candidates: Optional[Iterable[str]] = None,
        policy: Optional[FallbackPolicy] = None,
    ) -> GenerationResponse:
        policy = policy or self.default_policy
        providers = self._candidates(candidates, policy)

        if not providers:
            raise NoProvidersAvailable()

        last_error: Optional[ProviderRequestFailed] = None

        for provider in providers:
            adapter = self.adapters[provider]
            retrying = policy.retrying(self._sleep)
            try:
                response = await retrying(self._attempt, adapter, request)
            except ProviderRequestFailed as e:
                last_error = e
                logger.warning(f"OmegaAIR: {provider.value} exhausted after {policy.max_retries} attempt(s): {e}")
                continue

            logger.info(f"OmegaAIR: Success with {provider.value}")
            return response

        logger.error(f"OmegaAIR: all providers failed, last error from {last_error.provider}")
        raise AllProvidersExhausted(last_error)

    async def _attempt(self, adapter: BaseProvider, request: GenerationRequest) -> GenerationResponse:
        logger.info(f"OmegaAIR: Attempting {adapter.name}")
        try:
            response = await adapter.generate(request)
        except ProviderRequestFailed:
            provider_attempts.labels(provider=adapter.name, outcome="failure").inc()
            raise

        provider_attempts.labels(provider=adapter.name, outcome="success").inc()
        tokens_used.labels(provider=adapter.name, model=response.model).inc(response.usage.total_tokens)
        provider_latency.labels(provider=adapter.name).observe(response.latency_ms / 1000)
        return response

    async def close(self):
        for adapter in self.adapters.values():
            await adapter.close()
