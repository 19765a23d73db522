# ─────────────────────────────────────────────────────────────────────────────
# Tests — Settings and InferenceConfig
# ─────────────────────────────────────────────────────────────────────────────

from hf3d.config import Settings, get_settings
from hf3d.inference.config import InferenceConfig


class TestSettings:
    def test_token_read_from_env(self, monkeypatch):
        monkeypatch.setenv("HUGGINGFACE_API_KEY", "hf_from_env")
        get_settings.cache_clear()
        try:
            settings = get_settings()
            assert settings.huggingface_api_key.get_secret_value() == "hf_from_env"
        finally:
            get_settings.cache_clear()

    def test_token_hidden_from_repr(self):
        settings = Settings(huggingface_api_key="hf_secret")
        assert "hf_secret" not in repr(settings)
        assert "hf_secret" not in str(settings.model_dump())

    def test_defaults_point_at_router(self, monkeypatch):
        monkeypatch.delenv("INFERENCE_BASE_URL", raising=False)
        settings = Settings()
        assert settings.inference_base_url == "https://router.huggingface.co/hf-inference/models"


class TestInferenceConfig:
    def test_from_settings_unwraps_token(self):
        config = InferenceConfig.from_settings(Settings(huggingface_api_key="hf_abc"))
        assert config.api_token == "hf_abc"
        assert config.authenticated is True

    def test_blank_token_means_unauthenticated(self):
        config = InferenceConfig.from_settings(Settings(huggingface_api_key="  "))
        assert config.api_token is None
        assert config.authenticated is False

    def test_trailing_slash_stripped(self):
        config = InferenceConfig.from_settings(
            Settings(inference_base_url="https://example.test/models/", hub_api_url="https://hub.test/api/")
        )
        assert config.base_url == "https://example.test/models"
        assert config.hub_api_url == "https://hub.test/api"

    def test_token_not_in_repr(self):
        assert "hf_abc" not in repr(InferenceConfig(api_token="hf_abc"))
