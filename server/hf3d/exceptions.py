# ─────────────────────────────────────────────────────────────────────────────
# Error taxonomy + FastAPI exception handlers
# ─────────────────────────────────────────────────────────────────────────────


from enum import StrEnum

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)


class ErrorKind(StrEnum):
    """Classification carried on every failure envelope."""

    not_found = "not_found"
    model_loading = "model_loading"
    rate_limited = "rate_limited"
    remote_error = "remote_error"
    network_error = "network_error"
    invalid_input = "invalid_input"


# ── Exception hierarchy ──────────────────────────────────────────────────────


class GenerationError(Exception):
    """Base exception for all generation failures."""

    kind: ErrorKind = ErrorKind.remote_error

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ModelNotFoundError(GenerationError):
    """Upstream answered 404: unknown model or no inference endpoint."""

    kind = ErrorKind.not_found

    def __init__(self, model_id: str, detail: str, *, image: bool = False):
        reason = "doesn't support image-to-3D" if image else "doesn't have an inference endpoint"
        super().__init__(f'Model "{model_id}" not found or {reason}. {detail}', status_code=404)


class ModelLoadingError(GenerationError):
    """Upstream answered 503 while the model warms up.

    The caller decides when to try again; nothing here retries.
    """

    kind = ErrorKind.model_loading

    def __init__(self, model_id: str, detail: str):
        super().__init__(
            f'Model "{model_id}" is currently loading. Please try again in a few moments. {detail}',
            status_code=503,
        )


class RateLimitedError(GenerationError):
    """Upstream answered 429."""

    kind = ErrorKind.rate_limited

    def __init__(self, detail: str):
        super().__init__(
            f"Rate limit exceeded. Please wait before trying again. {detail}",
            status_code=429,
        )


class RemoteError(GenerationError):
    """Any other non-2xx answer; the upstream message is passed through."""

    kind = ErrorKind.remote_error

    def __init__(self, detail: str, upstream_status: int | None = None):
        self.upstream_status = upstream_status
        super().__init__(detail, status_code=502)


class NetworkError(GenerationError):
    """Transport failure (DNS, connect, read timeout, ...)."""

    kind = ErrorKind.network_error

    def __init__(self, url: str, reason: str):
        super().__init__(f"Network error calling {url}: {reason}", status_code=502)


class InvalidInputError(GenerationError):
    """Request is missing both prompt and image, or the image is unusable."""

    kind = ErrorKind.invalid_input

    def __init__(self, message: str = "A prompt or an image is required"):
        super().__init__(message, status_code=400)


# ── Handler registration ────────────────────────────────────────────────────


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI app.

    Upstream failures never reach these handlers: the generation service
    folds them into the failure envelope. Only request-level problems
    (invalid input) and genuine bugs escape as exceptions.
    """

    @app.exception_handler(GenerationError)
    async def generation_error_handler(request: Request, exc: GenerationError) -> JSONResponse:
        logger.warning(
            "generation_error",
            error=exc.message,
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, "type": type(exc).__name__},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("unhandled_error", error=str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "type": "UnhandledError"},
        )
