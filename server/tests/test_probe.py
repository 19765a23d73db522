# ─────────────────────────────────────────────────────────────────────────────
# Tests — Availability probe
# ─────────────────────────────────────────────────────────────────────────────

import httpx
import respx

from hf3d.inference.config import InferenceConfig
from hf3d.inference.probe import check_model_availability, get_available_models, hub_url
from hf3d.registry import MODEL_REGISTRY, ModelSymbol, resolve

HUB = "https://huggingface.co/api"


class TestHubUrl:
    def test_models_and_spaces_use_their_collection(self, inference_config: InferenceConfig):
        assert hub_url(inference_config, resolve(ModelSymbol.SHAP_E_DIRECT)) == f"{HUB}/models/openai/shap-e"
        assert hub_url(inference_config, resolve(ModelSymbol.THREEDY)) == f"{HUB}/spaces/lucataco/threedy"


class TestCheckModelAvailability:
    @respx.mock
    async def test_available(self, http_client, inference_config):
        route = respx.get(f"{HUB}/models/openai/shap-e").mock(
            return_value=httpx.Response(200, json={"id": "openai/shap-e"})
        )

        assert await check_model_availability(http_client, inference_config, resolve(ModelSymbol.SHAP_E_DIRECT))
        assert route.calls.last.request.headers["Authorization"] == "Bearer hf_test_token"

    @respx.mock
    async def test_no_token_no_header(self, http_client):
        route = respx.get(f"{HUB}/models/openai/shap-e").mock(return_value=httpx.Response(200))

        await check_model_availability(http_client, InferenceConfig(), resolve(ModelSymbol.SHAP_E_DIRECT))

        assert "Authorization" not in route.calls.last.request.headers

    @respx.mock
    async def test_not_found_is_unavailable(self, http_client, inference_config):
        respx.get(f"{HUB}/spaces/openxai/point-e").mock(return_value=httpx.Response(404))
        assert not await check_model_availability(
            http_client, inference_config, resolve(ModelSymbol.POINT_E_SPACE)
        )

    @respx.mock
    async def test_errors_are_swallowed(self, http_client, inference_config):
        respx.get(f"{HUB}/spaces/openxai/point-e").mock(side_effect=httpx.ConnectError("dns"))
        assert not await check_model_availability(
            http_client, inference_config, resolve(ModelSymbol.POINT_E_SPACE)
        )


class TestGetAvailableModels:
    @respx.mock
    async def test_filters_and_keeps_registry_order(self, http_client, inference_config):
        respx.get(f"{HUB}/models/openai/shap-e").mock(return_value=httpx.Response(200))
        respx.get(f"{HUB}/spaces/lucataco/threedy").mock(return_value=httpx.Response(200))
        respx.get(f"{HUB}/spaces/ashawkey/stable-zero123").mock(return_value=httpx.Response(401))
        respx.get(url__startswith=f"{HUB}/spaces/openxai/").mock(side_effect=httpx.ReadTimeout("slow"))

        available = await get_available_models(http_client, inference_config)

        assert available == [ModelSymbol.SHAP_E_DIRECT, ModelSymbol.THREEDY]

    @respx.mock
    async def test_one_probe_per_entry(self, http_client, inference_config):
        route = respx.get(url__startswith=HUB).mock(return_value=httpx.Response(200))

        available = await get_available_models(http_client, inference_config)

        assert route.call_count == len(MODEL_REGISTRY)
        assert available == list(MODEL_REGISTRY)
