# ─────────────────────────────────────────────────────────────────────────────
# Property-Based Tests — Hypothesis
# ─────────────────────────────────────────────────────────────────────────────
# Invariants of the pure pieces: payload classification and header building.
# ─────────────────────────────────────────────────────────────────────────────

import base64

import httpx
from hypothesis import given, settings
from hypothesis import strategies as st

from hf3d.exceptions import RemoteError
from hf3d.inference.adapter import build_headers
from hf3d.inference.config import InferenceConfig
from hf3d.inference.normalizer import classify_error, normalize_response
from hf3d.inference.payloads import BinaryPayload, ImagePayload

image_subtypes = st.sampled_from(["png", "jpeg", "webp", "gif"])
non_image_types = st.sampled_from(
    ["model/gltf-binary", "application/zip", "application/octet-stream", "text/plain"]
)
tokens = st.text(alphabet=st.characters(min_codepoint=33, max_codepoint=126), min_size=1, max_size=40)


class TestNormalizeProperties:
    @given(body=st.binary(max_size=2048), subtype=image_subtypes)
    @settings(max_examples=100)
    def test_image_data_url_decodes_to_body(self, body: bytes, subtype: str):
        content_type = f"image/{subtype}"
        response = httpx.Response(200, content=body, headers={"Content-Type": content_type})

        payload = normalize_response(response)

        assert isinstance(payload, ImagePayload)
        prefix = f"data:{content_type};base64,"
        assert payload.data_url.startswith(prefix)
        assert base64.b64decode(payload.data_url[len(prefix) :]) == body

    @given(body=st.binary(max_size=2048), content_type=non_image_types)
    @settings(max_examples=100)
    def test_non_image_types_are_binary(self, body: bytes, content_type: str):
        response = httpx.Response(200, content=body, headers={"Content-Type": content_type})
        payload = normalize_response(response)
        assert isinstance(payload, BinaryPayload)
        assert payload.to_output()["data"].startswith(f"data:{content_type};base64,")


class TestClassifyProperties:
    @given(status=st.integers(min_value=400, max_value=599).filter(lambda s: s not in (404, 429, 503)))
    def test_unlisted_status_passes_detail_through(self, status: int):
        error = classify_error(status, "openai/shap-e", "detail text")
        assert isinstance(error, RemoteError)
        assert error.message == "detail text"
        assert error.upstream_status == status


class TestHeaderProperties:
    @given(token=tokens)
    def test_bearer_always_matches_token(self, token: str):
        headers = build_headers(InferenceConfig(api_token=token))
        assert headers["Authorization"] == f"Bearer {token}"
        assert headers["Content-Type"] == "application/json"
