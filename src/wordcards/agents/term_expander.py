"""
Term expander agent: turn one Arabic word or category into 1 or 4 term records.

The agent sends a single structured-output request to a Gemini text model.
The prompt asks the model to decide whether the input is a single, specific
concept or a broader category:

- single concept → a ``cards`` array with ONE element;
- category       → a ``cards`` array with FOUR elements (one general card
  plus three specific examples).

Each element carries ``arabic``, ``english`` and ``imagePrompt``. The
classification is left entirely to the model; no local heuristic overrides it.
The response text is validated into :class:`TermRecord` objects and returned
in model order, wrapped in a :class:`Result`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from wordcards.core.contracts.term import TERM_SET_SIZES, TermRecord
from wordcards.core.errors import ExpansionError
from wordcards.core.result import Result, err, ok
from wordcards.core.settings import get_logger
from wordcards.llm.client import LLMClient, LLMError

logger = get_logger(__name__)

# Logical model alias for term expansion.
_EXPANDER_MODEL_ALIAS = "expander"

NO_VALID_DATA_MESSAGE = "Could not get valid data from the model."

#: Response shape in Gemini's schema dialect. Mirrors :class:`TermRecord` aliases.
RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "cards": {
            "type": "ARRAY",
            "description": (
                "An array of 1 or 4 card objects, depending on if the input is "
                "a single item or a category."
            ),
            "items": {
                "type": "OBJECT",
                "properties": {
                    "arabic": {
                        "type": "STRING",
                        "description": "The related Arabic word.",
                    },
                    "english": {
                        "type": "STRING",
                        "description": "The English translation of the related word.",
                    },
                    "imagePrompt": {
                        "type": "STRING",
                        "description": "A simple, photographic image prompt for the related word.",
                    },
                },
                "required": ["arabic", "english", "imagePrompt"],
            },
        },
    },
    "required": ["cards"],
}


def _get_llm_client() -> LLMClient:
    """Return the LLM client for the expander.

    Split into a helper so tests can monkeypatch this function and inject
    a fake client.
    """
    return LLMClient.from_env(default_model_alias=_EXPANDER_MODEL_ALIAS)


def build_expansion_prompt(raw_input: str) -> str:
    """Build the classification + expansion prompt for ``raw_input``."""
    return f"""Analyze the user's Arabic input: "{raw_input}". Determine if it represents a single, specific concept (e.g., "قطة" - cat, "سعيد" - happy) or a broader category (e.g., "حيوانات بحرية" - sea animals, "فواكه" - fruits).
- If it's a single concept, return a JSON object containing a 'cards' array with ONE element for that concept.
- If it's a category, return a JSON object containing a 'cards' array with FOUR elements: one general card for the category and three specific examples.
Each element in the 'cards' array must have these properties: "arabic" (the Arabic word), "english" (the English translation), and "imagePrompt" (a simple, photographic, family-friendly image prompt in English)."""


def parse_expansion_json(raw: str) -> Result[list[TermRecord], ExpansionError]:
    """Parse the model's JSON text into an ordered list of :class:`TermRecord`.

    The whole response is rejected when any element is invalid, so a term set
    is never silently shortened.
    """
    try:
        payload: Any = json.loads(raw)
    except json.JSONDecodeError as exc:
        return err(ExpansionError(f"Model returned invalid JSON: {exc}"))

    if not isinstance(payload, Mapping):
        return err(ExpansionError(NO_VALID_DATA_MESSAGE))

    cards = payload.get("cards")
    if not isinstance(cards, list) or not cards:
        return err(ExpansionError(NO_VALID_DATA_MESSAGE))

    if len(cards) not in TERM_SET_SIZES:
        return err(ExpansionError(f"Model returned {len(cards)} cards; expected 1 or 4."))

    terms: list[TermRecord] = []
    for position, node in enumerate(cards):
        try:
            terms.append(TermRecord.model_validate(node))
        except ValidationError as exc:
            fields = ", ".join(str(e["loc"][0]) for e in exc.errors() if e.get("loc")) or "card"
            return err(ExpansionError(f"Card {position + 1} is missing or has empty: {fields}."))

    return ok(terms)


def run_expander(
    raw_input: str,
    *,
    client: LLMClient | None = None,
) -> Result[list[TermRecord], ExpansionError]:
    """Run the term expander for one user input.

    Parameters
    ----------
    raw_input:
        The user's word or category. Callers trim and reject empty input
        before calling; an empty string here is still reported as an error.
    client:
        Optional client; defaults to :func:`_get_llm_client`.

    Returns
    -------
    Result[list[TermRecord], ExpansionError]
        ``Ok`` with 1 or 4 records in model order, or ``Err`` carrying the
        provider's message or a description of what was wrong with the data.
    """
    text = raw_input.strip()
    if not text:
        return err(ExpansionError("Nothing to expand: input is empty."))

    llm = client or _get_llm_client()
    try:
        raw = llm.generate_json(
            build_expansion_prompt(text),
            schema=RESPONSE_SCHEMA,
            model=_EXPANDER_MODEL_ALIAS,
        )
    except LLMError as exc:
        logger.warning("expansion call failed: %s", exc)
        return err(ExpansionError(str(exc)))

    result = parse_expansion_json(raw)
    if result.is_ok():
        logger.info("expanded %r into %d term(s)", text, len(result.unwrap()))
    else:
        logger.warning("expansion output rejected: %s", result.unwrap_err().detail)
    return result


__all__ = [
    "RESPONSE_SCHEMA",
    "NO_VALID_DATA_MESSAGE",
    "build_expansion_prompt",
    "parse_expansion_json",
    "run_expander",
]
