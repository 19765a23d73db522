"""Inference router client — request adapter, response normalizer, probe."""

from hf3d.inference.adapter import (
    FetchedImage,
    InferenceRequest,
    build_image_request,
    build_text_request,
    fetch_image,
    send,
)
from hf3d.inference.config import InferenceConfig
from hf3d.inference.normalizer import extract_error_message, normalize_response, raise_for_status
from hf3d.inference.payloads import BinaryPayload, ImagePayload, JsonPayload, Payload
from hf3d.inference.probe import check_model_availability, get_available_models

__all__ = [
    "BinaryPayload",
    "FetchedImage",
    "ImagePayload",
    "InferenceConfig",
    "InferenceRequest",
    "JsonPayload",
    "Payload",
    "build_image_request",
    "build_text_request",
    "check_model_availability",
    "extract_error_message",
    "fetch_image",
    "get_available_models",
    "normalize_response",
    "raise_for_status",
    "send",
]
