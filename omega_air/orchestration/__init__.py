from .fallback_manager import FallbackManager
from .model_registry import ModelMeta, ModelRegistry, default_registry
from .model_router import ModelRouter
from .status import StatusReporter

__all__ = [
    "FallbackManager",
    "ModelMeta",
    "ModelRegistry",
    "ModelRouter",
    "StatusReporter",
    "default_registry"
]
