# ─────────────────────────────────────────────────────────────────────────────
# Test Fixtures — shared across all tests
# ─────────────────────────────────────────────────────────────────────────────
# Every outbound call goes through respx; nothing here touches the network.
# ─────────────────────────────────────────────────────────────────────────────

import os

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from hf3d.config import Settings
from hf3d.inference.config import InferenceConfig
from hf3d.main import create_app
from hf3d.rate_limit import limiter
from hf3d.services.generation import GenerationService
from hf3d.services.metrics import GenerationMetrics

TEST_TOKEN = "hf_test_token"


@pytest.fixture
def test_settings() -> Settings:
    """Settings configured for testing — console logs, a dummy token."""
    return Settings(
        huggingface_api_key=TEST_TOKEN,
        log_json=False,
        log_level="DEBUG",
    )


@pytest.fixture
def inference_config(test_settings: Settings) -> InferenceConfig:
    return InferenceConfig.from_settings(test_settings)


@pytest.fixture
def http_client() -> httpx.AsyncClient:
    """Outbound client; respx intercepts its transport inside @respx.mock."""
    return httpx.AsyncClient()


@pytest.fixture
def metrics() -> GenerationMetrics:
    return GenerationMetrics()


@pytest.fixture
def service(
    http_client: httpx.AsyncClient, inference_config: InferenceConfig, metrics: GenerationMetrics
) -> GenerationService:
    return GenerationService(http_client, inference_config, metrics=metrics)


def _build_app(settings: Settings) -> FastAPI:
    """create_app() with test-safe env, then app.state filled by hand.

    Lifespan does not run under ASGITransport or an un-entered TestClient.
    """
    from hf3d.config import get_settings

    get_settings.cache_clear()
    limiter.reset()

    env_overrides = {
        "LOG_JSON": "false",
        "LOG_LEVEL": "DEBUG",
        "ALLOWED_ORIGINS": "*",
    }
    for k, v in env_overrides.items():
        os.environ[k] = v

    try:
        return create_app()
    finally:
        for k in env_overrides:
            os.environ.pop(k, None)
        get_settings.cache_clear()


def _install_state(app: FastAPI, settings: Settings, service: GenerationService, metrics: GenerationMetrics):
    app.state.settings = settings
    app.state.inference_config = service.config
    app.state.metrics = metrics
    app.state.generation_service = service


@pytest.fixture
def app(test_settings: Settings, service: GenerationService, metrics: GenerationMetrics) -> FastAPI:
    app = _build_app(test_settings)
    _install_state(app, test_settings, service, metrics)
    return app


@pytest.fixture
async def api(app: FastAPI):
    """httpx AsyncClient talking to the app in-process."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Synchronous TestClient for routes that make no outbound calls."""
    return TestClient(app)
