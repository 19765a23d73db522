# ─────────────────────────────────────────────────────────────────────────────
# Response Normalizer — content-type classification + status mapping
# ─────────────────────────────────────────────────────────────────────────────
#
#   application/json  → JsonPayload(parsed body)
#   image/*           → ImagePayload("data:<type>;base64,...")
#   anything else     → BinaryPayload("data:<type|octet-stream>;base64,...")
#
# Non-2xx answers raise a GenerationError subclass picked by status code.
# The declared content type is embedded as received (parameters included).
# ─────────────────────────────────────────────────────────────────────────────

from __future__ import annotations

import json
from typing import Any

import httpx
import structlog

from hf3d.exceptions import (
    GenerationError,
    ModelLoadingError,
    ModelNotFoundError,
    RateLimitedError,
    RemoteError,
)
from hf3d.inference.payloads import (
    DEFAULT_BINARY_TYPE,
    BinaryPayload,
    ImagePayload,
    JsonPayload,
    Payload,
    to_data_url,
)

logger = structlog.get_logger(__name__)

_ERROR_FIELDS = ("error", "message", "detail")


def _content_type(response: httpx.Response) -> str | None:
    return response.headers.get("content-type") or None


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def normalize_response(response: httpx.Response) -> Payload:
    """Decode a successful response into one of the three payload shapes."""
    content_type = _content_type(response)

    if content_type and "application/json" in content_type:
        try:
            return JsonPayload(response.json())
        except ValueError as exc:
            raise RemoteError(f"Upstream sent malformed JSON: {exc}", response.status_code) from exc

    if content_type and content_type.startswith("image/"):
        return ImagePayload(to_data_url(response.content, content_type))

    return BinaryPayload(to_data_url(response.content, content_type or DEFAULT_BINARY_TYPE))


def extract_error_message(response: httpx.Response) -> str:
    """Best-effort human message from an error body.

    JSON bodies: first truthy of error / message / detail. Other bodies:
    the raw text. Falls back to the status line when nothing usable exists.
    """
    fallback = f"HTTP {response.status_code}"
    content_type = _content_type(response) or ""
    try:
        if "application/json" in content_type:
            body = response.json()
            if isinstance(body, dict):
                for key in _ERROR_FIELDS:
                    if body.get(key):
                        return _as_text(body[key])
            return fallback
        return response.text or fallback
    except ValueError:
        return f"HTTP {response.status_code}: {response.reason_phrase}"


def classify_error(status_code: int, model_id: str, detail: str, *, image: bool = False) -> GenerationError:
    """Map an upstream status code to the matching GenerationError."""
    if status_code == 404:
        return ModelNotFoundError(model_id, detail, image=image)
    if status_code == 503:
        return ModelLoadingError(model_id, detail)
    if status_code == 429:
        return RateLimitedError(detail)
    return RemoteError(detail, upstream_status=status_code)


def raise_for_status(response: httpx.Response, model_id: str, *, image: bool = False) -> None:
    """Raise a classified GenerationError for any non-2xx response."""
    if response.is_success:
        return
    detail = extract_error_message(response)
    logger.warning(
        "inference_request_failed",
        model=model_id,
        status=response.status_code,
        detail=detail,
    )
    raise classify_error(response.status_code, model_id, detail, image=image)
