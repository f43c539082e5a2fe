"""Card assembler: pair each term with its image, position by position."""

from __future__ import annotations

from collections.abc import Sequence

from wordcards.core.contracts.card import CardData
from wordcards.core.contracts.image import GeneratedImage
from wordcards.core.contracts.term import TermRecord
from wordcards.core.errors import AssemblyInvariantViolation


def build_data_uri(image: GeneratedImage) -> str:
    """Return ``data:<mime>;base64,<bytes>`` for ``image``."""
    return f"data:{image.mime_type};base64,{image.b64}"


def assemble(
    terms: Sequence[TermRecord],
    images: Sequence[GeneratedImage],
) -> list[CardData]:
    """Zip ``terms`` and ``images`` into display-ready cards.

    ``images[i]`` must illustrate ``terms[i]``. Correlation is positional only;
    ``GeneratedImage.index`` is checked but never used to reorder.

    Raises
    ------
    AssemblyInvariantViolation
        If the sequences differ in length or an image sits at the wrong position.
    """
    if len(terms) != len(images):
        raise AssemblyInvariantViolation(
            f"Cannot pair {len(terms)} term(s) with {len(images)} image(s)."
        )

    cards: list[CardData] = []
    for position, (term, image) in enumerate(zip(terms, images, strict=True)):
        if image.index != position:
            raise AssemblyInvariantViolation(
                f"Image for term {image.index} found at position {position}."
            )
        cards.append(
            CardData(
                image_url=build_data_uri(image),
                arabic_word=term.source_term,
                english_translation=term.target_term,
            )
        )
    return cards


__all__ = ["assemble", "build_data_uri"]
