# Generation call boundary: validate → adapter → router → normalizer → envelope.
# Every upstream failure is folded into a success=False envelope here.


import time
from collections.abc import Awaitable, Callable

import httpx
import structlog
from opentelemetry import trace

from hf3d.exceptions import ErrorKind, GenerationError, InvalidInputError, NetworkError, RemoteError
from hf3d.inference.adapter import build_image_request, build_text_request, fetch_image, send
from hf3d.inference.config import InferenceConfig
from hf3d.inference.normalizer import normalize_response, raise_for_status
from hf3d.inference.payloads import Payload
from hf3d.inference.probe import get_available_models
from hf3d.registry import (
    DEFAULT_IMAGE_MODEL,
    DEFAULT_TEXT_MODEL,
    ModelKind,
    ModelSymbol,
    RegisteredModel,
    alternatives_for,
    resolve,
)
from hf3d.schemas import GenerateRequest, GenerationEnvelope
from hf3d.services.metrics import GenerationMetrics

logger = structlog.get_logger(__name__)
tracer = trace.get_tracer(__name__)

_UNKNOWN_TEXT_ERROR = "Unknown error. Model may not have inference endpoint."
_UNKNOWN_IMAGE_ERROR = "Unknown error. Model may not support image-to-3D."


class GenerationService:
    """Turns a GenerateRequest into a GenerationEnvelope.

    Holds the shared httpx client and the immutable InferenceConfig; no
    per-request state. Parallel calls are independent.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: InferenceConfig,
        metrics: GenerationMetrics | None = None,
    ) -> None:
        self._client = client
        self._config = config
        self._metrics = metrics

    @property
    def config(self) -> InferenceConfig:
        return self._config

    async def generate(self, request: GenerateRequest) -> GenerationEnvelope:
        """Dispatch to the image or text path.

        Raises InvalidInputError before any network call when the request
        carries neither a prompt nor an image.
        """
        if request.image_url is not None:
            return await self.generate_from_image(
                request.image_url, request.prompt, request.model or DEFAULT_IMAGE_MODEL
            )
        if request.prompt is not None:
            return await self.generate_from_text(request.prompt, request.model or DEFAULT_TEXT_MODEL)
        raise InvalidInputError()

    async def generate_from_text(
        self, prompt: str, symbol: ModelSymbol = DEFAULT_TEXT_MODEL
    ) -> GenerationEnvelope:
        entry = resolve(symbol)
        with tracer.start_as_current_span("generate_text") as span:
            span.set_attribute("model", entry.remote_id)
            return await self._run(entry, "text", lambda: self._call_text(entry, prompt))

    async def generate_from_image(
        self,
        image_url: str,
        prompt: str | None = None,
        symbol: ModelSymbol = DEFAULT_IMAGE_MODEL,
    ) -> GenerationEnvelope:
        entry = resolve(symbol)
        with tracer.start_as_current_span("generate_image") as span:
            span.set_attribute("model", entry.remote_id)
            return await self._run(entry, "image", lambda: self._call_image(entry, image_url, prompt))

    async def available_models(self) -> list[ModelSymbol]:
        return await get_available_models(self._client, self._config)

    # ── Internals ────────────────────────────────────────────────────────────

    async def _call_text(self, entry: RegisteredModel, prompt: str) -> Payload:
        self._warn_if_space(entry)
        request = build_text_request(self._config, entry, prompt)
        with tracer.start_as_current_span("inference_call"):
            response = await send(self._client, request)
        raise_for_status(response, entry.remote_id)
        return normalize_response(response)

    async def _call_image(self, entry: RegisteredModel, image_url: str, prompt: str | None) -> Payload:
        self._warn_if_space(entry)
        with tracer.start_as_current_span("fetch_image"):
            image = await fetch_image(self._client, image_url)
        request = build_image_request(self._config, entry, image, prompt)
        with tracer.start_as_current_span("inference_call"):
            response = await send(self._client, request)
        raise_for_status(response, entry.remote_id, image=True)
        return normalize_response(response)

    async def _run(
        self,
        entry: RegisteredModel,
        task: str,
        call: Callable[[], Awaitable[Payload]],
    ) -> GenerationEnvelope:
        start = time.perf_counter()
        error: GenerationError | None = None
        try:
            payload = await call()
            envelope = GenerationEnvelope.ok(entry.remote_id, payload)
        except GenerationError as exc:
            error = exc
        except httpx.HTTPError as exc:
            error = NetworkError(entry.remote_id, str(exc) or type(exc).__name__)
        except Exception:
            logger.exception("generation_unexpected_error", model=entry.remote_id, task=task)
            error = RemoteError(_UNKNOWN_IMAGE_ERROR if task == "image" else _UNKNOWN_TEXT_ERROR)

        duration_ms = (time.perf_counter() - start) * 1000

        if error is not None:
            envelope = GenerationEnvelope.failure(entry.remote_id, error, hint=self._hint(entry, error))
            logger.warning(
                "generation_failed",
                model=entry.remote_id,
                task=task,
                error=error.message,
                error_kind=error.kind.value,
                duration_ms=round(duration_ms, 1),
            )
        else:
            logger.info(
                "generation_completed",
                model=entry.remote_id,
                task=task,
                payload=type(payload).__name__,
                duration_ms=round(duration_ms, 1),
            )

        if self._metrics:
            self._metrics.record_request(
                entry.remote_id, task, duration_ms, error.kind if error is not None else None
            )
        return envelope

    @staticmethod
    def _hint(entry: RegisteredModel, error: GenerationError) -> str | None:
        if error.kind is not ErrorKind.not_found:
            return None
        alternatives = ", ".join(alternatives_for(entry))
        return f"This model may not have an inference endpoint. Try a different model: {alternatives}"

    @staticmethod
    def _warn_if_space(entry: RegisteredModel) -> None:
        if entry.kind is ModelKind.space:
            logger.warning(
                "space_called_as_model_endpoint",
                model=entry.remote_id,
                hint="Spaces may expect their own calling convention",
            )
