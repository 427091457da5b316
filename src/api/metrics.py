import time

from prometheus_client import Counter, Histogram, REGISTRY
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


# we check if they are already registered to avoid errors during hot reloads or test runs
def get_or_create_metric(name, documentation, metric_type, **kwargs):
    try:
        return metric_type(name, documentation, **kwargs)
    except ValueError:
        # Counters register under their base name without the _total suffix
        base = name[: -len("_total")] if name.endswith("_total") else name
        return REGISTRY._names_to_collectors.get(name) or REGISTRY._names_to_collectors[base]


REQUESTS_TOTAL = get_or_create_metric(
    "mindstream_requests_total",
    "Total requests",
    Counter,
    labelnames=["endpoint", "status"],
)

REQUEST_LATENCY_SECONDS = get_or_create_metric(
    "mindstream_request_latency_seconds",
    "Request latency",
    Histogram,
    labelnames=["endpoint"],
)

TASKS_STRUCTURED_TOTAL = get_or_create_metric(
    "mindstream_tasks_structured_total", "Tasks proposed by the AI structuring step", Counter
)

TASKS_SAVED_TOTAL = get_or_create_metric(
    "mindstream_tasks_saved_total", "Tasks materialized and saved", Counter
)

PROVIDER_CALLS_TOTAL = get_or_create_metric(
    "mindstream_provider_calls_total",
    "AI provider calls",
    Counter,
    labelnames=["provider", "kind", "outcome"],
)


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            route = request.scope.get("route")
            endpoint = getattr(route, "path", None) or "unmatched"
            REQUESTS_TOTAL.labels(endpoint=endpoint, status=str(status)).inc()
            REQUEST_LATENCY_SECONDS.labels(endpoint=endpoint).observe(time.perf_counter() - start)
