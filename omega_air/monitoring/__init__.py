from .metrics import metrics_endpoint, provider_attempts, provider_latency, route_requests, tokens_used

__all__ = [
    "metrics_endpoint",
    "provider_attempts",
    "provider_latency",
    "route_requests",
    "tokens_used"
]
