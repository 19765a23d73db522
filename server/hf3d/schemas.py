# ─────────────────────────────────────────────────────────────────────────────
# Pydantic v2 Request / Response Schemas
# ─────────────────────────────────────────────────────────────────────────────


from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from hf3d.exceptions import ErrorKind, GenerationError, InvalidInputError
from hf3d.inference.payloads import Payload
from hf3d.registry import ModelKind, ModelSymbol, Task


class GenerateRequest(BaseModel):
    """Incoming generation request: a text prompt, an image, or both.

    With an image, the prompt is an optional caption.
    """

    model_config = ConfigDict(populate_by_name=True)

    prompt: str | None = Field(None, max_length=2000, description="Text prompt or image caption")
    image_url: str | None = Field(
        None,
        validation_alias=AliasChoices("image_url", "imageUrl", "image"),
        description="http(s) URL or data: URL of the source image",
    )
    model: ModelSymbol | None = Field(None, description="Registry symbol; defaults per task")

    @field_validator("prompt", "image_url")
    @classmethod
    def blank_is_missing(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v

    def require_input(self) -> None:
        """Reject requests carrying neither a prompt nor an image."""
        if self.prompt is None and self.image_url is None:
            raise InvalidInputError()


class EnvelopeData(BaseModel):
    """Per-call result. Only the fields that apply are set."""

    model: str = Field(..., description="Resolved remote identifier")
    output: Any = None
    error: str | None = None
    error_kind: ErrorKind | None = None
    hint: str | None = None


class GenerationEnvelope(BaseModel):
    """Uniform success / failure wrapper returned by every generation call."""

    success: bool
    data: EnvelopeData

    @classmethod
    def ok(cls, model_id: str, payload: Payload) -> "GenerationEnvelope":
        return cls(success=True, data=EnvelopeData(model=model_id, output=payload.to_output()))

    @classmethod
    def failure(
        cls, model_id: str, error: GenerationError, hint: str | None = None
    ) -> "GenerationEnvelope":
        fields: dict[str, Any] = {"model": model_id, "error": error.message, "error_kind": error.kind}
        if hint:
            fields["hint"] = hint
        return cls(success=False, data=EnvelopeData(**fields))

    def wire(self) -> dict[str, Any]:
        """JSON-ready dict with unset fields omitted."""
        return self.model_dump(mode="json", exclude_unset=True)


class ModelInfo(BaseModel):
    symbol: ModelSymbol
    remote_id: str
    kind: ModelKind
    task: Task
    default_for: list[Task] = Field(default_factory=list)


class AvailableModelsResponse(BaseModel):
    available: list[ModelSymbol]


class HealthResponse(BaseModel):
    """Liveness probe — no upstream calls."""

    status: str = "ok"
    authenticated: bool = False
