from .admission import ProviderAdmission
from .retry_policy import FallbackPolicy, RoutingMode

__all__ = [
    "FallbackPolicy",
    "ProviderAdmission",
    "RoutingMode"
]
