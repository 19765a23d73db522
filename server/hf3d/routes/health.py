# ─────────────────────────────────────────────────────────────────────────────
# Health + metrics routes
# ─────────────────────────────────────────────────────────────────────────────
#   /health   → Liveness. No upstream calls; reports whether a token is set.
#   /metrics  → Generation counters and latency percentiles (JSON).
# ─────────────────────────────────────────────────────────────────────────────

from typing import Any

from fastapi import APIRouter, Depends

from hf3d.dependencies import get_generation_service, get_metrics
from hf3d.schemas import HealthResponse
from hf3d.services.generation import GenerationService
from hf3d.services.metrics import GenerationMetrics

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def liveness(
    service: GenerationService = Depends(get_generation_service),
) -> HealthResponse:
    return HealthResponse(status="ok", authenticated=service.config.authenticated)


@router.get("/metrics")
async def metrics_endpoint(
    metrics: GenerationMetrics = Depends(get_metrics),
) -> dict[str, Any]:
    """Generation counters, failures by kind, latency percentiles."""
    return metrics.to_dict()
