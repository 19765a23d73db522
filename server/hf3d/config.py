# ─────────────────────────────────────────────────────────────────────────────
# Settings — Pydantic v2 BaseSettings
# ─────────────────────────────────────────────────────────────────────────────


from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Gateway configuration sourced from environment variables.

    Uses pydantic-settings v2 (separate package from pydantic).
    """

    model_config = SettingsConfigDict(env_prefix="", env_file=".env")

    # ── Upstream ─────────────────────────────────────────────────────────────
    # Hugging Face access token. Read via get_secret_value() only when the
    # InferenceConfig is built. Empty string = unauthenticated calls
    # (stricter upstream rate limits, but not an error).
    huggingface_api_key: SecretStr = SecretStr("")

    inference_base_url: str = "https://router.huggingface.co/hf-inference/models"
    hub_api_url: str = "https://huggingface.co/api"

    # Transport timeout for every outbound call. Generation requests are
    # not otherwise bounded.
    upstream_timeout_seconds: float = 60.0

    # ── HTTP surface ─────────────────────────────────────────────────────────
    # Comma-separated origins for CORS (e.g. "http://localhost:3000").
    # Empty string = deny all cross-origin requests.
    allowed_origins: str = ""

    # Per-IP limit on generation routes (slowapi format, e.g. "30/minute").
    rate_limit: str = "30/minute"

    # ── Logging ──────────────────────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool = True


@lru_cache
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
