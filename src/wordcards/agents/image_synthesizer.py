"""Image synthesizer agent: one image prompt in, one square JPEG out.

The prompt is passed to Imagen verbatim. Exactly one image is requested per
call; a failed call or an empty answer becomes a :class:`SynthesisError`.
Nothing is retried.
"""

from __future__ import annotations

import asyncio
import base64
import binascii

from pydantic import ValidationError

from wordcards.core.contracts.image import GeneratedImage
from wordcards.core.errors import SynthesisError
from wordcards.core.result import Result, err, ok
from wordcards.core.settings import get_logger
from wordcards.llm.client import LLMClient, LLMError

logger = get_logger(__name__)

_ILLUSTRATOR_MODEL_ALIAS = "illustrator"

OUTPUT_MIME_TYPE = "image/jpeg"
ASPECT_RATIO = "1:1"


def _get_llm_client() -> LLMClient:
    """Return the LLM client for image synthesis (monkeypatched in tests)."""
    return LLMClient.from_env()


def run_synthesizer(
    prompt: str,
    *,
    index: int,
    client: LLMClient | None = None,
) -> Result[GeneratedImage, SynthesisError]:
    """Generate the image for the term at position ``index``.

    Returns
    -------
    Result[GeneratedImage, SynthesisError]
        ``Ok`` with the decoded image tagged with ``index``, or ``Err`` with
        the provider's message.
    """
    llm = client or _get_llm_client()
    try:
        images = llm.generate_images(
            prompt,
            model=_ILLUSTRATOR_MODEL_ALIAS,
            number_of_images=1,
            output_mime_type=OUTPUT_MIME_TYPE,
            aspect_ratio=ASPECT_RATIO,
        )
    except LLMError as exc:
        logger.warning("image %d failed: %s", index, exc)
        return err(SynthesisError(str(exc), index=index))

    if not images:
        logger.warning("image %d: model returned no images", index)
        return err(SynthesisError(f"No image was generated for '{prompt}'.", index=index))

    first = images[0]
    try:
        image = GeneratedImage(
            index=index,
            data=base64.b64decode(first.b64_data, validate=True),
            mime_type=first.mime_type,
        )
    except (binascii.Error, ValidationError) as exc:
        return err(SynthesisError(f"Image {index + 1} could not be decoded: {exc}", index=index))

    logger.debug("image %d: %d bytes (%s)", index, len(image.data), image.mime_type)
    return ok(image)


async def synthesize(
    prompt: str,
    *,
    index: int,
    client: LLMClient | None = None,
) -> Result[GeneratedImage, SynthesisError]:
    """Coroutine form of :func:`run_synthesizer`.

    The blocking HTTP call runs in a worker thread, so several of these can be
    gathered on one event loop and proceed concurrently.
    """
    return await asyncio.to_thread(run_synthesizer, prompt, index=index, client=client)


__all__ = ["OUTPUT_MIME_TYPE", "ASPECT_RATIO", "run_synthesizer", "synthesize"]
