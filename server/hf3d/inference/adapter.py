# ─────────────────────────────────────────────────────────────────────────────
# Request Adapter — builds and sends router calls
# ─────────────────────────────────────────────────────────────────────────────
# POST {base_url}/{remote_id}
#   {"inputs": <prompt | image data URL>, "parameters": {...fixed defaults...}}
#
# One outbound POST per call. No retries, no queueing. The image path adds
# exactly one GET for the referenced image (zero for data: URLs).
# ─────────────────────────────────────────────────────────────────────────────

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import unquote_to_bytes

import httpx
import structlog

from hf3d.exceptions import InvalidInputError, NetworkError
from hf3d.inference.config import InferenceConfig
from hf3d.inference.payloads import to_data_url
from hf3d.registry import RegisteredModel

logger = structlog.get_logger(__name__)

TEXT_PARAMETERS: dict[str, Any] = {"num_inference_steps": 20, "guidance_scale": 7.5}
IMAGE_NUM_INFERENCE_STEPS = 20
DEFAULT_IMAGE_CAPTION = "Generate 3D model"
DEFAULT_IMAGE_TYPE = "image/jpeg"


@dataclass(frozen=True)
class InferenceRequest:
    """Everything needed to issue one router call."""

    url: str
    headers: dict[str, str] = field(repr=False)
    body: dict[str, Any] = field(repr=False)


@dataclass(frozen=True)
class FetchedImage:
    content: bytes = field(repr=False)
    media_type: str = DEFAULT_IMAGE_TYPE

    def to_data_url(self) -> str:
        return to_data_url(self.content, self.media_type)


def build_headers(config: InferenceConfig) -> dict[str, str]:
    """JSON content type, plus a bearer token only when one is configured."""
    headers = {"Content-Type": "application/json"}
    if config.api_token:
        headers["Authorization"] = f"Bearer {config.api_token}"
    return headers


def endpoint_url(config: InferenceConfig, entry: RegisteredModel) -> str:
    return f"{config.base_url}/{entry.remote_id}"


def build_text_request(config: InferenceConfig, entry: RegisteredModel, prompt: str) -> InferenceRequest:
    return InferenceRequest(
        url=endpoint_url(config, entry),
        headers=build_headers(config),
        body={"inputs": prompt, "parameters": dict(TEXT_PARAMETERS)},
    )


def build_image_request(
    config: InferenceConfig,
    entry: RegisteredModel,
    image: FetchedImage,
    prompt: str | None = None,
) -> InferenceRequest:
    return InferenceRequest(
        url=endpoint_url(config, entry),
        headers=build_headers(config),
        body={
            "inputs": image.to_data_url(),
            "parameters": {
                "prompt": prompt or DEFAULT_IMAGE_CAPTION,
                "num_inference_steps": IMAGE_NUM_INFERENCE_STEPS,
            },
        },
    )


def decode_data_url(reference: str) -> FetchedImage:
    """Decode an inline ``data:`` URL without touching the network."""
    header, sep, payload = reference.partition(",")
    if not sep:
        raise InvalidInputError("Malformed image data URL")

    meta = header[len("data:") :].split(";")
    media_type = meta[0].strip() or DEFAULT_IMAGE_TYPE
    try:
        if "base64" in meta[1:]:
            content = base64.b64decode("".join(payload.split()), validate=True)
        else:
            content = unquote_to_bytes(payload)
    except (binascii.Error, ValueError):
        raise InvalidInputError("Image data URL is not valid base64") from None
    return FetchedImage(content=content, media_type=media_type)


async def fetch_image(client: httpx.AsyncClient, reference: str) -> FetchedImage:
    """Retrieve the referenced image and its declared media type."""
    if reference.startswith("data:"):
        return decode_data_url(reference)

    try:
        response = await client.get(reference, follow_redirects=True)
    except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
        raise InvalidInputError(f"Invalid image URL: {exc}") from exc
    except httpx.TransportError as exc:
        raise NetworkError(reference, str(exc) or type(exc).__name__) from exc

    if not response.is_success:
        raise InvalidInputError(f"Could not retrieve image: HTTP {response.status_code}")

    media_type = response.headers.get("content-type", "").split(";")[0].strip() or DEFAULT_IMAGE_TYPE
    logger.info("image_fetched", media_type=media_type, size_bytes=len(response.content))
    return FetchedImage(content=response.content, media_type=media_type)


async def send(client: httpx.AsyncClient, request: InferenceRequest) -> httpx.Response:
    """Issue the router call. Transport failures become NetworkError."""
    try:
        return await client.post(request.url, headers=request.headers, json=request.body)
    except httpx.TransportError as exc:
        raise NetworkError(request.url, str(exc) or type(exc).__name__) from exc
