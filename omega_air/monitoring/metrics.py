from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Define metrics
provider_attempts = Counter(
    'omegaair_provider_attempts_total',
    'Provider attempts by outcome',
    ['provider', 'outcome']
)

tokens_used = Counter(
    'omegaair_tokens_total',
    'Total tokens used',
    ['provider', 'model']
)

provider_latency = Histogram(
    'omegaair_provider_latency_seconds',
    'Provider response latency',
    ['provider'],
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0]
)

route_requests = Counter(
    'omegaair_route_requests_total',
    'Routed generation requests',
    ['mode', 'outcome']
)


# Metrics endpoint
async def metrics_endpoint():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
