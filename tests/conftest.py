"""Shared fakes for the WordCards test suite.

:class:`FakeLLMClient` stands in for :class:`wordcards.llm.client.LLMClient`.
It answers ``generate_json`` with a canned ``{"cards": [...]}`` payload and
``generate_images`` with one tiny fake JPEG per prompt, and records every call
so tests can assert on what the agents sent.
"""

from __future__ import annotations

import base64
import json
import threading
from collections.abc import Callable, Iterable, Mapping
from typing import Any

import pytest

from wordcards.agents import image_synthesizer, term_expander
from wordcards.llm.client import ImagePayload, LLMError

CAT_CARDS: list[dict[str, str]] = [
    {"arabic": "قطة", "english": "cat", "imagePrompt": "a photo of a cat"},
]

FRUIT_CARDS: list[dict[str, str]] = [
    {"arabic": "فواكه", "english": "fruits", "imagePrompt": "a bowl of assorted fresh fruits"},
    {"arabic": "تفاحة", "english": "apple", "imagePrompt": "a red apple on a table"},
    {"arabic": "موزة", "english": "banana", "imagePrompt": "a ripe banana"},
    {"arabic": "برتقالة", "english": "orange", "imagePrompt": "an orange cut in half"},
]


def fake_jpeg(prompt: str) -> bytes:
    """Deterministic stand-in for the image bytes generated for ``prompt``."""
    return b"\xff\xd8\xff" + prompt.encode("utf-8")


class FakeLLMClient:
    """Records calls and returns canned text/image responses.

    Parameters
    ----------
    cards:
        Elements of the ``cards`` array returned by ``generate_json``.
    raw_json:
        Exact text to return from ``generate_json`` (overrides ``cards``).
    expansion_error:
        If set, ``generate_json`` raises ``LLMError(expansion_error)``.
    fail_prompts:
        Image prompts for which ``generate_images`` raises ``LLMError``.
    empty_prompts:
        Image prompts for which ``generate_images`` returns no images.
    on_image:
        Optional hook called (in the worker thread) before each image answer.
    """

    def __init__(
        self,
        cards: list[dict[str, str]] | None = None,
        *,
        raw_json: str | None = None,
        expansion_error: str | None = None,
        fail_prompts: Iterable[str] = (),
        empty_prompts: Iterable[str] = (),
        on_image: Callable[[str], None] | None = None,
    ) -> None:
        self.cards = cards if cards is not None else CAT_CARDS
        self.raw_json = raw_json
        self.expansion_error = expansion_error
        self.fail_prompts = set(fail_prompts)
        self.empty_prompts = set(empty_prompts)
        self.on_image = on_image
        self.json_calls: list[dict[str, Any]] = []
        self.image_calls: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def generate_json(
        self,
        prompt: str,
        *,
        schema: Mapping[str, Any],
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        self.json_calls.append({"prompt": prompt, "schema": schema, "model": model})
        if self.expansion_error is not None:
            raise LLMError(self.expansion_error)
        if self.raw_json is not None:
            return self.raw_json
        return json.dumps({"cards": self.cards}, ensure_ascii=False)

    def generate_images(
        self,
        prompt: str,
        *,
        model: str | None = None,
        number_of_images: int = 1,
        output_mime_type: str = "image/jpeg",
        aspect_ratio: str = "1:1",
    ) -> list[ImagePayload]:
        with self._lock:
            self.image_calls.append(
                {
                    "prompt": prompt,
                    "model": model,
                    "number_of_images": number_of_images,
                    "output_mime_type": output_mime_type,
                    "aspect_ratio": aspect_ratio,
                }
            )
        if self.on_image is not None:
            self.on_image(prompt)
        if prompt in self.fail_prompts:
            raise LLMError(f"Imagen quota exceeded for '{prompt}'")
        if prompt in self.empty_prompts:
            return []
        b64 = base64.b64encode(fake_jpeg(prompt)).decode("ascii")
        return [ImagePayload(b64_data=b64, mime_type=output_mime_type)]


@pytest.fixture  # type: ignore[misc]
def install_client(monkeypatch: pytest.MonkeyPatch) -> Callable[[FakeLLMClient], FakeLLMClient]:
    """Route both agents' default client lookups to a given fake.

    Used by surface tests (CLI, API) that cannot pass a client explicitly.
    """

    def _install(fake: FakeLLMClient) -> FakeLLMClient:
        monkeypatch.setattr(term_expander, "_get_llm_client", lambda: fake)
        monkeypatch.setattr(image_synthesizer, "_get_llm_client", lambda: fake)
        return fake

    return _install
