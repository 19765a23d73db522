# ─────────────────────────────────────────────────────────────────────────────
# Generation routes (THIN) — validation here, everything else in the service
# ─────────────────────────────────────────────────────────────────────────────
#   POST /generate         → full GenerationEnvelope, 200 once validated
#   POST /api/3d-generate  → browser-client contract: data on success,
#                            500 {"error": ...} on failure
# ─────────────────────────────────────────────────────────────────────────────


from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from hf3d.dependencies import get_generation_service
from hf3d.rate_limit import generation_rate_limit, limiter
from hf3d.schemas import GenerateRequest, GenerationEnvelope
from hf3d.services.generation import GenerationService

router = APIRouter()


@router.post("/generate", response_model=GenerationEnvelope, response_model_exclude_unset=True)
@limiter.limit(generation_rate_limit)
async def generate(
    request: Request,
    body: GenerateRequest,
    service: GenerationService = Depends(get_generation_service),
) -> GenerationEnvelope:
    """Generate a 3D result from a prompt or an image.

    Upstream failures come back as success=false envelopes with HTTP 200;
    only a request with neither prompt nor image is rejected (400).
    """
    body.require_input()
    return await service.generate(body)


@router.post("/api/3d-generate", response_model=None)
@limiter.limit(generation_rate_limit)
async def generate_legacy(
    request: Request,
    body: GenerateRequest,
    service: GenerationService = Depends(get_generation_service),
) -> Any:
    """Contract used by the web client: unwraps the envelope."""
    body.require_input()
    envelope = await service.generate(body)
    payload = envelope.wire()
    if not envelope.success:
        return JSONResponse(
            status_code=500,
            content={"error": envelope.data.error or "Generation failed"},
        )
    return payload["data"]
