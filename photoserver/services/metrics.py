"""
Prometheus metrics service for the photo server
Provides monitoring for HTTP traffic, the thumbnail cache and rendering
"""

import time
from fastapi import Request
from fastapi.responses import Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

REQUESTS_TOTAL = Counter(
    "photoserver_http_requests_total",
    "Total HTTP requests",
    ["method", "status"]
)

REQUEST_DURATION = Histogram(
    "photoserver_http_request_seconds",
    "Request duration in seconds",
    ["method"]
)

CACHE_LOOKUPS = Counter(
    "photoserver_cache_lookups_total",
    "Thumbnail cache lookups",
    ["result"]
)

RENDERS_TOTAL = Counter(
    "photoserver_renders_total",
    "Thumbnail renders",
    ["status"]
)

RENDER_DURATION = Histogram(
    "photoserver_render_seconds",
    "Time spent decoding, resizing and encoding a thumbnail"
)


async def metrics_endpoint(enabled: bool = True):
    """Prometheus metrics endpoint"""
    if not enabled:
        return Response(b"metrics disabled", media_type="text/plain")
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


def metrics_middleware(app, enabled: bool = True):
    """Add metrics middleware to FastAPI app"""
    if not enabled:
        return

    @app.middleware("http")
    async def _metrics(request: Request, call_next):
        start = time.time()
        response = await call_next(request)

        # Paths carry photo ids; keep label cardinality bounded
        REQUESTS_TOTAL.labels(
            method=request.method,
            status=str(response.status_code)
        ).inc()

        REQUEST_DURATION.labels(
            method=request.method
        ).observe(time.time() - start)

        return response


def record_cache_lookup(hit: bool):
    CACHE_LOOKUPS.labels(result="hit" if hit else "miss").inc()


def record_render(status: str, seconds: float):
    RENDERS_TOTAL.labels(status=status).inc()
    if status == "ok":
        RENDER_DURATION.observe(seconds)
