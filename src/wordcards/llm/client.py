# -----------------------------------------------------------------------------
# This module provides a small, synchronous client for the two Google endpoints
# the flashcard pipeline needs:
#
#   - Gemini "generateContent" with a response schema (structured JSON output)
#   - Imagen "predict" (text-to-image)
#
# The implementation uses only the Python standard library (`urllib.request`).
# Unit tests mock the internal `_post()` method so that no real HTTP calls are
# made during CI. Async callers run these methods in worker threads.
# -----------------------------------------------------------------------------
from __future__ import annotations

import http.client
import json
import os
import urllib.error
import urllib.request
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from typing import Any

from wordcards.core.settings import get_logger, load_settings

from .models import DEFAULT_ALIAS, DEFAULT_IMAGE_ALIAS, GEMINI_BASE_URL, ModelConfig, get_model

logger = get_logger(__name__)


class LLMError(RuntimeError):
    """Raised when a request cannot be sent or its response cannot be read."""


@dataclass(frozen=True, slots=True)
class ImagePayload:
    """One image as returned by the provider: base64 text plus MIME type."""

    b64_data: str
    mime_type: str


@dataclass(slots=True)
class LLMClient:
    """Gemini/Imagen client with `generate_json()` and `generate_images()`.

    Parameters
    ----------
    api_key:
        Google AI Studio key, sent as ``x-goog-api-key``.
    base_url:
        API root; registry entries carry the same default.
    default_model_alias:
        Alias used by :meth:`generate_json` when no model is given.
    default_image_alias:
        Alias used by :meth:`generate_images` when no model is given.
    timeout_seconds:
        Network timeout for each HTTP request in seconds.
    """

    api_key: str
    base_url: str = GEMINI_BASE_URL
    default_model_alias: str = DEFAULT_ALIAS
    default_image_alias: str = DEFAULT_IMAGE_ALIAS
    timeout_seconds: float = 60.0

    # --------------------------------------------------------------------- #
    # Constructors
    # --------------------------------------------------------------------- #
    @classmethod
    def from_env(cls, default_model_alias: str = DEFAULT_ALIAS) -> LLMClient:
        """Construct a client from environment variables and settings.

        Environment variables
        ---------------------
        - ``GEMINI_API_KEY``       (preferred)
        - ``GOOGLE_API_KEY``       (fallback)
        - ``GEMINI_API_BASE_URL``  (default: Gemini v1beta endpoint)

        A missing key is not an error here; :meth:`_require_key` raises on the
        first request instead, so surfaces can start without credentials.
        """
        cfg = load_settings()
        api_key = cfg.gemini_api_key or os.getenv("GOOGLE_API_KEY", "")
        base_url = os.getenv("GEMINI_API_BASE_URL", GEMINI_BASE_URL)
        return cls(
            api_key=api_key,
            base_url=base_url,
            default_model_alias=default_model_alias,
            timeout_seconds=cfg.http_timeout_seconds,
        )

    # --------------------------------------------------------------------- #
    # Public API
    # --------------------------------------------------------------------- #
    def generate_json(
        self,
        prompt: str,
        *,
        schema: Mapping[str, Any],
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Ask a text model for JSON that conforms to ``schema``.

        Parameters
        ----------
        prompt:
            The single user prompt.
        schema:
            An OpenAPI-style schema in Gemini's dialect (``"type": "OBJECT"``
            and friends), sent as ``generationConfig.responseSchema``.
        model:
            Optional alias or concrete model ID.
        temperature, max_tokens:
            Optional overrides of the registry defaults.

        Returns
        -------
        str
            The raw JSON text of the first candidate. Callers parse it.

        Raises
        ------
        LLMError
            If the key is missing, the request fails, or the response has no
            text.
        """
        config = get_model(model or self.default_model_alias)
        if config.kind != "text":
            raise LLMError(f"Model '{config.name}' is not a text model.")

        payload: MutableMapping[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": float(
                    temperature if temperature is not None else config.temperature
                ),
                "maxOutputTokens": int(max_tokens if max_tokens is not None else config.max_tokens),
                "responseMimeType": "application/json",
                "responseSchema": dict(schema),
            },
        }

        url = self._url(config, "generateContent")
        logger.debug("generateContent -> %s", config.name)
        response = self._post(url=url, headers=self._headers(), payload=payload)
        return self._extract_text(response)

    def generate_images(
        self,
        prompt: str,
        *,
        model: str | None = None,
        number_of_images: int = 1,
        output_mime_type: str = "image/jpeg",
        aspect_ratio: str = "1:1",
    ) -> list[ImagePayload]:
        """Generate images for ``prompt`` with an Imagen model.

        Returns
        -------
        list[ImagePayload]
            One entry per returned prediction, in provider order. An empty list
            means the provider answered but produced no image (for example,
            because every sample was filtered).

        Raises
        ------
        LLMError
            If the key is missing, the request fails, or the response is not a
            JSON object.
        """
        config = get_model(model or self.default_image_alias)
        if config.kind != "image":
            raise LLMError(f"Model '{config.name}' is not an image model.")

        payload: MutableMapping[str, Any] = {
            "instances": [{"prompt": prompt}],
            "parameters": {
                "sampleCount": number_of_images,
                "aspectRatio": aspect_ratio,
                "outputOptions": {"mimeType": output_mime_type},
            },
        }

        url = self._url(config, "predict")
        logger.debug("predict -> %s (%d image(s), %s)", config.name, number_of_images, aspect_ratio)
        response = self._post(url=url, headers=self._headers(), payload=payload)
        return self._extract_images(response, default_mime_type=output_mime_type)

    # --------------------------------------------------------------------- #
    # Request helpers
    # --------------------------------------------------------------------- #
    def _require_key(self) -> str:
        if not self.api_key:
            raise LLMError("Missing GEMINI_API_KEY; cannot call Google generative models.")
        return self.api_key

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-goog-api-key": self._require_key(),
        }

    def _url(self, config: ModelConfig, method: str) -> str:
        # An explicit client base URL wins over the registry default.
        base = self.base_url or config.base_url
        return f"{base.rstrip('/')}/models/{config.name}:{method}"

    # --------------------------------------------------------------------- #
    # Internal helpers (test seams)
    # --------------------------------------------------------------------- #
    def _post(
        self,
        *,
        url: str,
        headers: Mapping[str, str],
        payload: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Perform an HTTP POST request and decode the JSON response.

        This is the main seam for unit tests: patch :meth:`_post` on the class
        to return a stubbed response without any network I/O.

        Raises
        ------
        LLMError
            If the HTTP request fails for any reason, or if the response body
            cannot be decoded as a JSON object.
        """
        body = json.dumps(payload).encode("utf-8")
        request = urllib.request.Request(
            url=url,
            data=body,
            headers=dict(headers),
            method="POST",
        )

        try:
            with urllib.request.urlopen(request, timeout=self.timeout_seconds) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore")
            raise LLMError(f"HTTP error {exc.code}: {exc.reason}; body={detail[:500]!r}") from exc
        except urllib.error.URLError as exc:
            raise LLMError(f"Network error: {exc.reason}") from exc
        except TimeoutError as exc:
            raise LLMError(f"Request timed out after {self.timeout_seconds:.0f}s") from exc
        except (http.client.HTTPException, OSError) as exc:
            # Connection dropped or reset while reading the response.
            raise LLMError(f"Network error: {exc!r}") from exc

        try:
            decoded = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise LLMError("Failed to decode response as JSON") from exc

        if not isinstance(decoded, dict):
            raise LLMError("Response JSON is not an object")
        return decoded

    # --------------------------------------------------------------------- #
    # Response extraction helpers
    # --------------------------------------------------------------------- #
    @staticmethod
    def _extract_text(response: Mapping[str, Any]) -> str:
        """Return the concatenated text parts of ``candidates[0]``.

        Expected shape::

            {"candidates": [{"content": {"parts": [{"text": "..."}]}}]}
        """
        candidates = response.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            feedback = response.get("promptFeedback")
            reason = ""
            if isinstance(feedback, Mapping) and feedback.get("blockReason"):
                reason = f" (blocked: {feedback['blockReason']})"
            raise LLMError(f"Gemini response has no candidates{reason}.")

        content = candidates[0].get("content") if isinstance(candidates[0], Mapping) else None
        if not isinstance(content, Mapping):
            raise LLMError("Gemini response candidates[0].content is missing or invalid.")

        parts = content.get("parts")
        if not isinstance(parts, list) or not parts:
            raise LLMError("Gemini response candidates[0].content.parts is empty.")

        texts = [
            part["text"]
            for part in parts
            if isinstance(part, Mapping) and isinstance(part.get("text"), str)
        ]
        if not texts:
            raise LLMError("Gemini response parts contain no text fields.")

        return "".join(texts)

    @staticmethod
    def _extract_images(
        response: Mapping[str, Any],
        *,
        default_mime_type: str,
    ) -> list[ImagePayload]:
        """Return the image payloads of an Imagen ``predict`` response.

        Expected shape::

            {"predictions": [{"bytesBase64Encoded": "...", "mimeType": "image/jpeg"}]}

        Predictions without bytes (e.g. filtered samples that only carry a
        ``raiFilteredReason``) are skipped.
        """
        predictions = response.get("predictions") or []
        if not isinstance(predictions, list):
            raise LLMError("Imagen response 'predictions' is not a list.")

        images: list[ImagePayload] = []
        for prediction in predictions:
            if not isinstance(prediction, Mapping):
                continue
            data = prediction.get("bytesBase64Encoded")
            if not isinstance(data, str) or not data:
                continue
            mime = prediction.get("mimeType")
            images.append(
                ImagePayload(
                    b64_data=data,
                    mime_type=mime if isinstance(mime, str) and mime else default_mime_type,
                )
            )
        return images


__all__ = ["LLMClient", "LLMError", "ImagePayload"]
