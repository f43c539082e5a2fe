"""CardData: the display-ready flashcard handed to a renderer."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CardData(BaseModel):
    """One finished flashcard.

    Serialized with camelCase keys (``imageUrl``, ``arabicWord``,
    ``englishTranslation``) via ``model_dump(by_alias=True)``; that is the
    shape renderers and the HTTP API consume.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    image_url: str = Field(alias="imageUrl", pattern=r"^data:image/[\w.+-]+;base64,")
    arabic_word: str = Field(alias="arabicWord", min_length=1)
    english_translation: str = Field(alias="englishTranslation", min_length=1)


__all__ = ["CardData"]
