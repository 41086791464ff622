"""Global test configuration and fixtures."""
from typing import Dict, List, Optional

import pytest

from omega_air.config import RoutingModeConfig
from omega_air.exceptions import ProviderRequestFailed
from omega_air.orchestration import FallbackManager, ModelRegistry, ModelRouter
from omega_air.providers import GenerationRequest, GenerationResponse, Provider, TokenUsage


class ScriptedAdapter:
    """Adapter stand-in that replays scripted outcomes ("ok" / "fail")."""

    def __init__(self, provider: Provider, outcomes: Optional[List[str]] = None, always: str = "ok", log=None):
        self.provider = provider
        self.name = provider.value
        self.outcomes = list(outcomes or [])
        self.always = always
        self.calls: List[GenerationRequest] = []
        self.log = log if log is not None else []
        self.closed = False

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        self.calls.append(request)
        self.log.append(self.name)
        outcome = self.outcomes.pop(0) if self.outcomes else self.always
        if outcome == "fail":
            raise ProviderRequestFailed(self.name, "500 Internal Server Error")
        return GenerationResponse(
            content=f"hello from {self.name}",
            model=request.model or f"{self.name}-default",
            provider=self.name,
            usage=TokenUsage.of(12, 30),
            metadata=dict(request.metadata),
        )

    async def close(self):
        self.closed = True


@pytest.fixture
def call_log() -> List[str]:
    return []


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def fake_sleep(sleeps):
    async def _sleep(delay):
        sleeps.append(float(delay))

    return _sleep


@pytest.fixture
def make_adapter(call_log):
    def _make(provider: Provider, outcomes=None, always: str = "ok") -> ScriptedAdapter:
        return ScriptedAdapter(provider, outcomes=outcomes, always=always, log=call_log)

    return _make


@pytest.fixture
def make_manager(fake_sleep):
    def _make(*adapters: ScriptedAdapter) -> FallbackManager:
        adapter_map: Dict[Provider, ScriptedAdapter] = {a.provider: a for a in adapters}
        return FallbackManager(adapter_map, sleep=fake_sleep)

    return _make


@pytest.fixture
def make_router(make_manager):
    def _make(*adapters: ScriptedAdapter, mode: str = "auto", registry: Optional[ModelRegistry] = None) -> ModelRouter:
        return ModelRouter(
            make_manager(*adapters),
            registry=registry,
            routing_config=RoutingModeConfig(mode),
        )

    return _make


@pytest.fixture
def request_payload() -> GenerationRequest:
    return GenerationRequest(prompt="Write a tagline", metadata={"campaign_id": 42})
