"""Routing policies that decide provider order and retry aggressiveness."""

import asyncio
import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Union

from ..config import RoutingModeConfig, Settings, get_settings
from ..exceptions import AllProvidersExhausted, NoProvidersAvailable, OmegaAIRError, ProviderRequestFailed
from ..monitoring.metrics import route_requests
from ..providers import GenerationRequest, GenerationResponse, Provider
from ..reliability.admission import ProviderAdmission
from ..reliability.retry_policy import FallbackPolicy, RoutingMode, SleepFunc
from .fallback_manager import FallbackManager
from .model_registry import ModelMeta, ModelRegistry, default_registry
from .status import StatusReporter

logger = logging.getLogger(__name__)

# A requested model gets exactly one attempt before general fallback
PINNED_MODEL_POLICY = FallbackPolicy(max_retries=1, backoff_multiplier=1)


class ModelRouter:
    """Entry point: picks a routing policy per call and delegates to the fallback manager."""

    def __init__(
        self,
        fallback_manager: FallbackManager,
        registry: Optional[ModelRegistry] = None,
        routing_config: Optional[RoutingModeConfig] = None,
        fallback_policy: Optional[FallbackPolicy] = None,
        priority_policy: Optional[FallbackPolicy] = None,
        enabled_providers: Optional[Dict[str, bool]] = None,
    ):
        """
        Initialize model router.

        Args:
            fallback_manager: Orchestrator holding the available adapters
            registry: Model metadata used for model lookup and provider ranking
            routing_config: Holder of the current routing mode
            fallback_policy: Retry policy for the full fallback chain
            priority_policy: Retry policy applied to each provider in priority mode
            enabled_providers: Credential presence per provider, for status reporting
        """
        self.fallback_manager = fallback_manager
        self.registry = registry or default_registry(fallback_manager.available_providers)
        self.routing_config = routing_config or RoutingModeConfig()
        self.fallback_policy = fallback_policy or FallbackPolicy(max_retries=3, backoff_multiplier=2)
        self.priority_policy = priority_policy or FallbackPolicy(max_retries=2, backoff_multiplier=1.5)
        self.status = StatusReporter(fallback_manager, self.registry, self.routing_config, enabled_providers)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, sleep: SleepFunc = asyncio.sleep) -> "ModelRouter":
        settings = settings or get_settings()
        fallback_policy = FallbackPolicy(
            max_retries=settings.fallback_max_retries,
            backoff_multiplier=settings.fallback_backoff_multiplier,
        )
        fallback_manager = FallbackManager.from_settings(
            settings,
            admission=ProviderAdmission(settings.max_concurrent_per_provider),
            default_policy=fallback_policy,
            sleep=sleep,
        )
        return cls(
            fallback_manager,
            registry=default_registry(fallback_manager.available_providers),
            routing_config=RoutingModeConfig(settings.omegaair_mode),
            fallback_policy=fallback_policy,
            priority_policy=FallbackPolicy(
                max_retries=settings.priority_max_retries,
                backoff_multiplier=settings.priority_backoff_multiplier,
            ),
            enabled_providers=settings.enabled_providers(),
        )

    @property
    def available_providers(self) -> List[Provider]:
        return self.fallback_manager.available_providers

    async def route(self, request: GenerationRequest) -> GenerationResponse:
        mode = self.routing_config.mode

        try:
            if mode is RoutingMode.FALLBACK:
                response = await self.fallback_manager.execute_with_fallback(request, policy=self.fallback_policy)
            elif mode is RoutingMode.PRIORITY:
                response = await self._priority_route(request)
            else:
                response = await self._auto_route(request)
        except OmegaAIRError as e:
            route_requests.labels(mode=mode.value, outcome="failure").inc()
            logger.error(f"OmegaAIR routing failed in {mode.value} mode: {e}")
            raise

        route_requests.labels(mode=mode.value, outcome="success").inc()
        return response

    def _others(self, provider: str) -> List[Provider]:
        return [p for p in self.available_providers if p.value != provider]

    async def _auto_route(self, request: GenerationRequest) -> GenerationResponse:
        # If specific model requested, try its provider once first
        if request.model:
            meta = self.registry.lookup(request.model)
            if meta and self.fallback_manager.is_provider_available(meta.provider):
                try:
                    return await self.fallback_manager.execute_with_fallback(
                        request, policy=PINNED_MODEL_POLICY.excluding(self._others(meta.provider))
                    )
                except AllProvidersExhausted as e:
                    logger.warning(f"Requested model {request.model} failed, falling back to auto-selection: {e}")
                request = replace(request, model=None)

        return await self.fallback_manager.execute_with_fallback(request, policy=self.fallback_policy)

    async def _priority_route(self, request: GenerationRequest) -> GenerationResponse:
        available = self.available_providers
        if not available:
            raise NoProvidersAvailable()

        last_error: Optional[ProviderRequestFailed] = None

        for provider in self.registry.rank_providers(available):
            try:
                return await self.fallback_manager.execute_with_fallback(
                    request, policy=self.priority_policy.excluding(self._others(provider.value))
                )
            except AllProvidersExhausted as e:
                last_error = e.last_error
                logger.warning(f"Priority provider {provider.value} failed, trying next")

        raise AllProvidersExhausted(last_error)

    def get_model_metadata(self, model: Optional[str] = None) -> Union[ModelMeta, List[ModelMeta], None]:
        if model:
            return self.registry.lookup(model)
        return self.registry.all()

    def system_status(self) -> Dict[str, Any]:
        return self.status.system_status()

    async def close(self):
        await self.fallback_manager.close()
