# Availability probe: does the Hub still know this repo? Never raises.


import asyncio

import httpx
import structlog

from hf3d.inference.config import InferenceConfig
from hf3d.registry import MODEL_REGISTRY, ModelKind, ModelSymbol, RegisteredModel

logger = structlog.get_logger(__name__)


def hub_url(config: InferenceConfig, entry: RegisteredModel) -> str:
    collection = "spaces" if entry.kind is ModelKind.space else "models"
    return f"{config.hub_api_url}/{collection}/{entry.remote_id}"


async def check_model_availability(
    client: httpx.AsyncClient, config: InferenceConfig, entry: RegisteredModel
) -> bool:
    """True when the Hub answers 2xx for the entry; False on anything else."""
    headers = {"Authorization": f"Bearer {config.api_token}"} if config.api_token else {}
    try:
        response = await client.get(hub_url(config, entry), headers=headers)
    except Exception as exc:
        logger.debug("availability_probe_failed", model=entry.remote_id, error=str(exc))
        return False
    return response.is_success


async def get_available_models(client: httpx.AsyncClient, config: InferenceConfig) -> list[ModelSymbol]:
    """Probe every registry entry concurrently; keeps registry order."""
    entries = list(MODEL_REGISTRY.values())
    results = await asyncio.gather(*[check_model_availability(client, config, e) for e in entries])
    available = [entry.symbol for entry, ok in zip(entries, results, strict=True) if ok]
    logger.info("availability_probed", available=len(available), total=len(entries))
    return available
