# ─────────────────────────────────────────────────────────────────────────────
# Model Registry — fixed symbol → remote identifier mapping
# ─────────────────────────────────────────────────────────────────────────────
# Direct models and hosted Spaces share one mapping and are called through
# the same router URL template. Spaces usually expect a different calling
# convention; that mismatch is surfaced (kind="space", a warning per call)
# rather than papered over.
# ─────────────────────────────────────────────────────────────────────────────

from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType


class ModelSymbol(StrEnum):
    """Symbolic model names accepted by the API."""

    SHAP_E_SPACE = "SHAP_E_SPACE"
    POINT_E_SPACE = "POINT_E_SPACE"
    ZERO123_SPACE = "ZERO123_SPACE"
    SHAP_E_DIRECT = "SHAP_E_DIRECT"
    THREEDY = "THREEDY"


class ModelKind(StrEnum):
    model = "model"
    space = "space"


class Task(StrEnum):
    text_to_3d = "text-to-3d"
    image_to_3d = "image-to-3d"


@dataclass(frozen=True)
class RegisteredModel:
    """One registry entry."""

    symbol: ModelSymbol
    remote_id: str
    kind: ModelKind
    task: Task


DEFAULT_TEXT_MODEL = ModelSymbol.SHAP_E_DIRECT
DEFAULT_IMAGE_MODEL = ModelSymbol.ZERO123_SPACE

MODEL_REGISTRY: MappingProxyType[ModelSymbol, RegisteredModel] = MappingProxyType(
    {
        entry.symbol: entry
        for entry in (
            RegisteredModel(ModelSymbol.SHAP_E_SPACE, "openxai/shap-e", ModelKind.space, Task.text_to_3d),
            RegisteredModel(ModelSymbol.POINT_E_SPACE, "openxai/point-e", ModelKind.space, Task.text_to_3d),
            RegisteredModel(
                ModelSymbol.ZERO123_SPACE, "ashawkey/stable-zero123", ModelKind.space, Task.image_to_3d
            ),
            RegisteredModel(ModelSymbol.SHAP_E_DIRECT, "openai/shap-e", ModelKind.model, Task.text_to_3d),
            RegisteredModel(ModelSymbol.THREEDY, "lucataco/threedy", ModelKind.space, Task.text_to_3d),
        )
    }
)


def resolve(symbol: ModelSymbol | str) -> RegisteredModel:
    """Look up a registry entry. Raises KeyError for unknown symbols."""
    try:
        return MODEL_REGISTRY[ModelSymbol(symbol)]
    except ValueError:
        raise KeyError(f"Unknown model '{symbol}'. Available: {list(MODEL_REGISTRY)}") from None


def alternatives_for(entry: RegisteredModel) -> list[ModelSymbol]:
    """Other symbols to suggest on 404, same-task entries first."""
    others = [other for other in MODEL_REGISTRY.values() if other.symbol != entry.symbol]
    same_task = [other.symbol for other in others if other.task == entry.task]
    return same_task or [other.symbol for other in others]
