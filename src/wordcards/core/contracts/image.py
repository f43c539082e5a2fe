"""GeneratedImage: an encoded image tied to the term it illustrates."""

from __future__ import annotations

import base64

from pydantic import BaseModel, ConfigDict, Field


class GeneratedImage(BaseModel):
    """Raw image bytes plus MIME type, correlated to a term by position.

    Instances only live between synthesis and assembly inside one run.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0, description="Position of the source TermRecord.")
    data: bytes = Field(min_length=1, description="Decoded image bytes.")
    mime_type: str = Field(default="image/jpeg", pattern=r"^image/[\w.+-]+$")

    @property
    def b64(self) -> str:
        """Return :attr:`data` as an ASCII base64 string."""
        return base64.b64encode(self.data).decode("ascii")


__all__ = ["GeneratedImage"]
