# ─────────────────────────────────────────────────────────────────────────────
# Prometheus Metrics Endpoint — text exposition format
# ─────────────────────────────────────────────────────────────────────────────
# GET /metrics/prometheus → text/plain Prometheus format
# Mirrors GenerationMetrics into gauges on each scrape.
# ─────────────────────────────────────────────────────────────────────────────

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from prometheus_client import CollectorRegistry, Gauge, generate_latest

from hf3d.dependencies import get_metrics
from hf3d.services.metrics import GenerationMetrics

router = APIRouter()

# Custom registry keeps default process/platform collectors out.
_registry = CollectorRegistry()

_requests_total = Gauge(
    "hf3d_requests_total",
    "Generation calls handled since start",
    ["task"],
    registry=_registry,
)

_failures_total = Gauge(
    "hf3d_failures_total",
    "Failed generation calls since start",
    ["kind"],
    registry=_registry,
)

_success_ratio = Gauge(
    "hf3d_success_ratio",
    "Successful share of generation calls (0.0–1.0)",
    registry=_registry,
)

_latency_ms = Gauge(
    "hf3d_latency_ms",
    "Generation latency over the recent window",
    ["quantile"],
    registry=_registry,
)


def _sync_metrics(metrics: GenerationMetrics) -> None:
    data = metrics.to_dict()

    _requests_total.labels(task="text").set(data["text_requests"])
    _requests_total.labels(task="image").set(data["image_requests"])
    for kind, count in data["failures_by_kind"].items():
        _failures_total.labels(kind=kind).set(count)
    _success_ratio.set(data["success_rate"])
    _latency_ms.labels(quantile="0.5").set(data["latency_p50_ms"])
    _latency_ms.labels(quantile="0.95").set(data["latency_p95_ms"])


@router.get("/metrics/prometheus")
async def prometheus_metrics(
    metrics: GenerationMetrics = Depends(get_metrics),
) -> Response:
    """Prometheus text exposition format metrics endpoint."""
    _sync_metrics(metrics)
    return Response(
        content=generate_latest(_registry),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )
