# ─────────────────────────────────────────────────────────────────────────────
# Schema Factory Tests — polyfactory
# ─────────────────────────────────────────────────────────────────────────────
# polyfactory builds valid GenerateRequest / envelope instances; the tests
# check validation and serialization rules on top of them.
# ─────────────────────────────────────────────────────────────────────────────

import pytest
from dirty_equals import IsStr
from polyfactory.factories.pydantic_factory import ModelFactory

from hf3d.exceptions import InvalidInputError, ModelLoadingError
from hf3d.inference.payloads import BinaryPayload, JsonPayload
from hf3d.registry import ModelSymbol
from hf3d.schemas import GenerateRequest, GenerationEnvelope


class GenerateRequestFactory(ModelFactory):
    __model__ = GenerateRequest

    @classmethod
    def prompt(cls) -> str:
        return cls.__faker__.sentence()


class TestGenerateRequest:
    def test_factory_instances_are_valid(self):
        for _ in range(20):
            request = GenerateRequestFactory.build()
            assert isinstance(request, GenerateRequest)
            request.require_input()

    def test_model_accepts_symbol_names(self):
        request = GenerateRequest.model_validate({"prompt": "x", "model": "THREEDY"})
        assert request.model is ModelSymbol.THREEDY

    @pytest.mark.parametrize("key", ["image_url", "imageUrl", "image"])
    def test_image_aliases(self, key):
        request = GenerateRequest.model_validate({key: "https://images.example.com/a.png"})
        assert request.image_url == "https://images.example.com/a.png"

    def test_blank_strings_are_missing(self):
        request = GenerateRequest.model_validate({"prompt": "  ", "image": ""})
        assert request.prompt is None
        assert request.image_url is None
        with pytest.raises(InvalidInputError):
            request.require_input()

    def test_prompt_whitespace_is_preserved(self):
        assert GenerateRequest(prompt="  a red chair \n").prompt == "  a red chair \n"


class TestEnvelope:
    def test_ok_omits_error_fields(self):
        envelope = GenerationEnvelope.ok("openai/shap-e", JsonPayload({"a": 1}))
        assert envelope.wire() == {"success": True, "data": {"model": "openai/shap-e", "output": {"a": 1}}}

    def test_ok_binary_output_shape(self):
        envelope = GenerationEnvelope.ok("openai/shap-e", BinaryPayload("data:application/octet-stream;base64,"))
        assert envelope.wire()["data"]["output"] == {"data": "data:application/octet-stream;base64,"}

    def test_failure_omits_output(self):
        envelope = GenerationEnvelope.failure("openai/shap-e", ModelLoadingError("openai/shap-e", "loading"))
        assert envelope.wire() == {
            "success": False,
            "data": {
                "model": "openai/shap-e",
                "error": IsStr(regex=r".*currently loading.*"),
                "error_kind": "model_loading",
            },
        }