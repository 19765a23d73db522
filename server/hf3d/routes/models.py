# ─────────────────────────────────────────────────────────────────────────────
# Model listing routes
# ─────────────────────────────────────────────────────────────────────────────


from fastapi import APIRouter, Depends

from hf3d.dependencies import get_generation_service
from hf3d.registry import DEFAULT_IMAGE_MODEL, DEFAULT_TEXT_MODEL, MODEL_REGISTRY, Task
from hf3d.schemas import AvailableModelsResponse, ModelInfo
from hf3d.services.generation import GenerationService

router = APIRouter()

_DEFAULTS = {DEFAULT_TEXT_MODEL: Task.text_to_3d, DEFAULT_IMAGE_MODEL: Task.image_to_3d}


@router.get("/models", response_model=list[ModelInfo])
async def list_models() -> list[ModelInfo]:
    """Static registry listing. ``kind`` shows which entries are Spaces."""
    return [
        ModelInfo(
            symbol=entry.symbol,
            remote_id=entry.remote_id,
            kind=entry.kind,
            task=entry.task,
            default_for=[_DEFAULTS[entry.symbol]] if entry.symbol in _DEFAULTS else [],
        )
        for entry in MODEL_REGISTRY.values()
    ]


@router.get("/models/available", response_model=AvailableModelsResponse)
async def available_models(
    service: GenerationService = Depends(get_generation_service),
) -> AvailableModelsResponse:
    """Registry entries the Hub currently knows about. One probe per entry."""
    return AvailableModelsResponse(available=await service.available_models())
