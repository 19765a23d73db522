# ─────────────────────────────────────────────────────────────────────────────
# Dependency Injection — FastAPI Depends() providers
# ─────────────────────────────────────────────────────────────────────────────
# State flows: lifespan creates → app.state stores → Depends() injects.
# ─────────────────────────────────────────────────────────────────────────────


from fastapi import Request

from hf3d.services.generation import GenerationService
from hf3d.services.metrics import GenerationMetrics


def get_metrics(request: Request) -> GenerationMetrics:
    """Inject GenerationMetrics into endpoints via Depends()."""
    return request.app.state.metrics  # type: ignore[no-any-return]


def get_generation_service(request: Request) -> GenerationService:
    """Inject GenerationService into endpoints via Depends()."""
    return request.app.state.generation_service  # type: ignore[no-any-return]
