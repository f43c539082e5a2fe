# -----------------------------------------------------------------------------
# This module defines a tiny, in-process model registry used by the LLM client.
#
# The registry gives us a single place to:
#   - declare human-friendly aliases ("expander", "illustrator")
#   - pin them to concrete Google model IDs
#   - record whether the model answers with text or with images
#   - keep default sampling parameters (temperature, max_tokens)
#
# The implementation is pure-Python so it can be imported anywhere (CLI, API
# handlers, agents) without side effects.
# -----------------------------------------------------------------------------
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

ModelKind = Literal["text", "image"]


@dataclass(frozen=True, slots=True)
class ModelConfig:
    """Configuration for a single generative model.

    Parameters
    ----------
    name:
        Provider-specific model identifier, e.g. ``"gemini-2.5-flash"`` or
        ``"imagen-3.0-generate-002"``.
    kind:
        ``"text"`` models are called through ``:generateContent``;
        ``"image"`` models through ``:predict``.
    provider:
        Logical provider name. Only ``"google"`` is wired up in the client.
    base_url:
        Base URL for the API endpoint. ``GEMINI_API_BASE_URL`` overrides it.
    max_tokens:
        Default output token limit for text models; ignored for image models.
    temperature:
        Default sampling temperature for text models; ignored for image models.
    """

    name: str
    kind: ModelKind = "text"
    provider: str = "google"
    base_url: str = GEMINI_BASE_URL
    max_tokens: int = 2048
    temperature: float = 0.5


#: Logical aliases → model configs. Application code should use the aliases.
MODEL_REGISTRY: dict[str, ModelConfig] = {
    # Term expansion: classification plus schema-constrained JSON output.
    "expander": ModelConfig(
        name="gemini-2.5-flash",
        kind="text",
        max_tokens=2048,
        temperature=0.4,
    ),
    # Illustration: one square photographic image per term.
    "illustrator": ModelConfig(
        name="imagen-3.0-generate-002",
        kind="image",
    ),
}

#: Default logical alias used when callers do not explicitly choose a model.
DEFAULT_ALIAS: str = "expander"

#: Default alias for image generation.
DEFAULT_IMAGE_ALIAS: str = "illustrator"


def get_model(alias_or_name: str) -> ModelConfig:
    """Return a :class:`ModelConfig` for the given alias or model name.

    Known aliases resolve through :data:`MODEL_REGISTRY`. Anything else is
    treated as a concrete Google model ID; names starting with ``imagen`` are
    assumed to be image models, everything else a text model.
    """
    if alias_or_name in MODEL_REGISTRY:
        return MODEL_REGISTRY[alias_or_name]
    kind: ModelKind = "image" if alias_or_name.startswith("imagen") else "text"
    return ModelConfig(name=alias_or_name, kind=kind)


def all_models() -> Mapping[str, ModelConfig]:
    """Return a shallow copy of the registry (used by ``wordcards models``)."""
    return dict(MODEL_REGISTRY)


__all__ = [
    "GEMINI_BASE_URL",
    "ModelConfig",
    "ModelKind",
    "MODEL_REGISTRY",
    "DEFAULT_ALIAS",
    "DEFAULT_IMAGE_ALIAS",
    "get_model",
    "all_models",
]
