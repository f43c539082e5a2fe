"""TermRecord: one source-language term, its translation, and an image prompt."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TermRecord(BaseModel):
    """A single flashcard's worth of vocabulary, as returned by the expander.

    Field aliases match the wire names used in the structured-output schema
    (``arabic``, ``english``, ``imagePrompt``), so a decoded JSON element can be
    validated directly with :meth:`model_validate`.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    source_term: str = Field(alias="arabic", min_length=1, description="The Arabic word.")
    target_term: str = Field(
        alias="english", min_length=1, description="The English translation of the word."
    )
    image_prompt: str = Field(
        alias="imagePrompt",
        min_length=1,
        description="A simple, photographic image prompt for the word.",
    )


#: Allowed TermSet lengths: one card for a concept, four for a category.
TERM_SET_SIZES: frozenset[int] = frozenset({1, 4})


__all__ = ["TermRecord", "TERM_SET_SIZES"]
