# ─────────────────────────────────────────────────────────────────────────────
# InferenceConfig — immutable upstream settings, built once at startup
# ─────────────────────────────────────────────────────────────────────────────
# Passed explicitly to the adapter and probe; nothing reads the token from
# the environment at call time.
# ─────────────────────────────────────────────────────────────────────────────

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hf3d.config import Settings


@dataclass(frozen=True)
class InferenceConfig:
    """Where and how to call the inference router and the Hub API."""

    base_url: str = "https://router.huggingface.co/hf-inference/models"
    hub_api_url: str = "https://huggingface.co/api"
    api_token: str | None = field(default=None, repr=False)
    timeout_seconds: float = 60.0

    @property
    def authenticated(self) -> bool:
        return bool(self.api_token)

    @classmethod
    def from_settings(cls, settings: Settings) -> InferenceConfig:
        token = settings.huggingface_api_key.get_secret_value().strip()
        return cls(
            base_url=settings.inference_base_url.rstrip("/"),
            hub_api_url=settings.hub_api_url.rstrip("/"),
            api_token=token or None,
            timeout_seconds=settings.upstream_timeout_seconds,
        )
