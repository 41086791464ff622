from typing import Any, Dict, Optional

from ..config import RoutingModeConfig
from ..providers import Provider
from .fallback_manager import FallbackManager
from .model_registry import ModelRegistry


class StatusReporter:
    """Read-only view of provider availability for dashboards.

    Never performs network calls and never exposes credentials.
    """

    def __init__(
        self,
        fallback_manager: FallbackManager,
        registry: ModelRegistry,
        routing_config: RoutingModeConfig,
        enabled_providers: Optional[Dict[str, bool]] = None,
    ):
        self.fallback_manager = fallback_manager
        self.registry = registry
        self.routing_config = routing_config
        if enabled_providers is None:
            enabled_providers = {p.value: p in fallback_manager.adapters for p in Provider}
        self.enabled_providers = dict(enabled_providers)

    def system_status(self) -> Dict[str, Any]:
        available = [p.value for p in self.fallback_manager.available_providers]
        return {
            "mode": self.routing_config.mode.value,
            "enabled_providers": dict(self.enabled_providers),
            "available_providers": available,
            "total_models": len(self.registry),
            "status": "operational" if available else "offline",
        }

    def provider_statuses(self) -> Dict[str, str]:
        return {
            p.value: "online" if self.fallback_manager.is_provider_available(p) else "offline"
            for p in Provider
        }

    def is_any_provider_available(self) -> bool:
        return bool(self.fallback_manager.available_providers)
