# ─────────────────────────────────────────────────────────────────────────────
# Decoded payloads — tagged union over what the router can send back
# ─────────────────────────────────────────────────────────────────────────────

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any

DEFAULT_BINARY_TYPE = "application/octet-stream"


def to_data_url(content: bytes, media_type: str) -> str:
    """Encode raw bytes as ``data:<media_type>;base64,<payload>``."""
    return f"data:{media_type};base64,{base64.b64encode(content).decode('ascii')}"


@dataclass(frozen=True)
class JsonPayload:
    """Parsed JSON body, returned to the caller unchanged."""

    value: Any

    def to_output(self) -> Any:
        return self.value


@dataclass(frozen=True)
class ImagePayload:
    """``image/*`` body as a data URL."""

    data_url: str

    def to_output(self) -> dict[str, str]:
        return {"image": self.data_url}


@dataclass(frozen=True)
class BinaryPayload:
    """Any other body (meshes, archives, unknown) as a data URL."""

    data_url: str

    def to_output(self) -> dict[str, str]:
        return {"data": self.data_url}


Payload = JsonPayload | ImagePayload | BinaryPayload
