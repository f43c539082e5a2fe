from __future__ import annotations

from .client import ImagePayload, LLMClient, LLMError
from .models import (
    DEFAULT_ALIAS,
    DEFAULT_IMAGE_ALIAS,
    MODEL_REGISTRY,
    ModelConfig,
    all_models,
    get_model,
)

__all__ = [
    "ModelConfig",
    "MODEL_REGISTRY",
    "DEFAULT_ALIAS",
    "DEFAULT_IMAGE_ALIAS",
    "get_model",
    "all_models",
    "ImagePayload",
    "LLMClient",
    "LLMError",
]
