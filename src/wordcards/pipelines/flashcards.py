"""
Flashcard pipeline: from one Arabic word or category to illustrated cards.

Flow Overview
-------------
1. **Validate** the raw input (trimmed, non-empty).
2. **Expand** it into 1 or 4 :class:`TermRecord` objects with one
   structured-output call (awaited before anything else starts).
3. **Synthesize** one image per term. All calls are issued at once and
   joined with :func:`asyncio.gather`, which keeps results in request order.
   If any call fails, the whole run fails and no card is shown.
4. **Assemble** terms and images into :class:`CardData`.

State machine
-------------
``idle → validating → expanding → synthesizing → assembling → done``, with
``failed`` reachable from every non-idle state. ``done`` and ``failed`` are
terminal; the next call resets to ``idle`` first. A call made while a run is
in flight is ignored; there is no queue.

Surfaces observe a run through three callbacks: ``on_progress(stage_text)``,
``on_success(cards)`` and ``on_error(message)``. :meth:`request_generation`
also returns the outcome as a :class:`PipelineResult` for callers that prefer
awaiting a value.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from typing import TypedDict

from wordcards.agents import card_assembler, image_synthesizer, term_expander
from wordcards.core.contracts.card import CardData
from wordcards.core.contracts.image import GeneratedImage
from wordcards.core.contracts.term import TermRecord
from wordcards.core.errors import FlashcardError, InvalidInputError, SynthesisError
from wordcards.core.result import Result, err, ok
from wordcards.core.settings import get_logger
from wordcards.llm.client import LLMClient

logger = get_logger(__name__)

ANALYZING_MESSAGE = "Analyzing your request..."
INVALID_INPUT_MESSAGE = "Please enter an Arabic word or category."
ERROR_PREFIX = "An error occurred. Please try again. Details: "
UNKNOWN_ERROR_DETAIL = "An unknown error occurred"

ProgressCallback = Callable[[str], None]
SuccessCallback = Callable[[list[CardData]], None]
ErrorCallback = Callable[[str], None]


def synthesis_message(count: int) -> str:
    """Progress text shown while ``count`` images are being generated."""
    return f"Generating {count} image(s) (this may take a moment)..."


def format_error(error: BaseException) -> str:
    """Turn a pipeline error into the single message shown to the user.

    Empty input is a prompt to the user rather than a failure, so it is shown
    without the error prefix.
    """
    if isinstance(error, InvalidInputError):
        return error.detail
    detail = error.detail if isinstance(error, FlashcardError) else str(error)
    return f"{ERROR_PREFIX}{detail or UNKNOWN_ERROR_DETAIL}"


class RunState(str, Enum):
    """Lifecycle of a single pipeline run."""

    IDLE = "idle"
    VALIDATING = "validating"
    EXPANDING = "expanding"
    SYNTHESIZING = "synthesizing"
    ASSEMBLING = "assembling"
    DONE = "done"
    FAILED = "failed"


_BUSY_STATES = frozenset(
    {RunState.VALIDATING, RunState.EXPANDING, RunState.SYNTHESIZING, RunState.ASSEMBLING}
)


class PipelineResult(TypedDict):
    """JSON-safe outcome of one run.

    Attributes
    ----------
    input:
        The trimmed input text.
    state:
        Terminal state value, ``"done"`` or ``"failed"``.
    cards:
        ``CardData`` dumped with camelCase keys; empty unless ``state == "done"``.
    error:
        The user-facing error message, or ``None`` on success.
    transitions:
        Every state the run passed through, in order.
    """

    input: str
    state: str
    cards: list[Mapping[str, object]]
    error: str | None
    transitions: list[str]


class PipelineOrchestrator:
    """Runs the expand → synthesize → assemble pipeline, one run at a time.

    Parameters
    ----------
    on_progress, on_success, on_error:
        Optional callbacks; see the module docstring.
    client:
        Optional :class:`LLMClient` shared by every agent call. When omitted,
        each agent builds its own client from the environment.
    """

    def __init__(
        self,
        *,
        on_progress: ProgressCallback | None = None,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
        client: LLMClient | None = None,
    ) -> None:
        self._on_progress = on_progress
        self._on_success = on_success
        self._on_error = on_error
        self._client = client

        self.state: RunState = RunState.IDLE
        self.transitions: list[RunState] = []
        self.cards: list[CardData] = []
        self.error: str | None = None

    def is_busy(self) -> bool:
        """Return ``True`` while a run is in flight."""
        return self.state in _BUSY_STATES

    # ------------------------------------------------------------------ #
    # Public entry point
    # ------------------------------------------------------------------ #
    async def request_generation(self, raw_input: str) -> PipelineResult | None:
        """Run the pipeline once for ``raw_input``.

        Returns ``None`` without side effects if a run is already in flight.
        Otherwise every failure is reported through ``on_error`` and the
        returned result; nothing is raised.
        """
        if self.is_busy():
            logger.warning("generation requested while %s; ignoring", self.state.value)
            return None

        self.transitions = []
        self.cards = []
        self.error = None
        self._transition(RunState.IDLE)
        self._transition(RunState.VALIDATING)

        text = raw_input.strip()
        logger.info("run started for %r", text)

        try:
            return await self._run(text)
        except Exception as exc:
            logger.exception("run failed unexpectedly")
            return self._fail(text, exc)

    # ------------------------------------------------------------------ #
    # Stages
    # ------------------------------------------------------------------ #
    async def _run(self, text: str) -> PipelineResult:
        if not text:
            return self._fail(text, InvalidInputError(INVALID_INPUT_MESSAGE))

        self._progress(ANALYZING_MESSAGE)
        self._transition(RunState.EXPANDING)
        expansion = await asyncio.to_thread(term_expander.run_expander, text, client=self._client)
        if expansion.is_err():
            return self._fail(text, expansion.unwrap_err())
        terms = expansion.unwrap()

        self._progress(synthesis_message(len(terms)))
        self._transition(RunState.SYNTHESIZING)
        images = await self._synthesize_all(terms)
        if images.is_err():
            return self._fail(text, images.unwrap_err())

        self._transition(RunState.ASSEMBLING)
        try:
            cards = card_assembler.assemble(terms, images.unwrap())
        except FlashcardError as exc:
            return self._fail(text, exc)

        return self._succeed(text, cards)

    async def _synthesize_all(
        self,
        terms: Sequence[TermRecord],
    ) -> Result[list[GeneratedImage], SynthesisError]:
        """Fan out one synthesis per term and join; first failure by position wins.

        Every request is awaited before the run can fail, including when one of
        them raises instead of returning an ``Err``.
        """
        outcomes = await asyncio.gather(
            *(
                image_synthesizer.synthesize(term.image_prompt, index=i, client=self._client)
                for i, term in enumerate(terms)
            ),
            return_exceptions=True,
        )
        results: list[Result[GeneratedImage, SynthesisError]] = []
        for i, outcome in enumerate(outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.error("image %d raised %r", i, outcome)
                results.append(err(SynthesisError(str(outcome) or repr(outcome), index=i)))
            else:
                results.append(outcome)

        for result in results:
            if result.is_err():
                failed = sum(1 for r in results if r.is_err())
                logger.warning("%d of %d image(s) failed; discarding the run", failed, len(results))
                return err(result.unwrap_err())
        return ok([r.unwrap() for r in results])

    # ------------------------------------------------------------------ #
    # Transitions and notifications
    # ------------------------------------------------------------------ #
    def _transition(self, state: RunState) -> None:
        logger.debug("state %s -> %s", self.state.value, state.value)
        self.state = state
        self.transitions.append(state)

    def _progress(self, stage_text: str) -> None:
        if self._on_progress is not None:
            self._on_progress(stage_text)

    def _succeed(self, text: str, cards: list[CardData]) -> PipelineResult:
        self._transition(RunState.DONE)
        self.cards = cards
        logger.info("run finished with %d card(s)", len(cards))
        if self._on_success is not None:
            self._on_success(list(cards))
        return self._result(text)

    def _fail(self, text: str, error: BaseException) -> PipelineResult:
        self._transition(RunState.FAILED)
        self.cards = []
        self.error = format_error(error)
        logger.warning("run failed: %r", error)
        if self._on_error is not None:
            self._on_error(self.error)
        return self._result(text)

    def _result(self, text: str) -> PipelineResult:
        return {
            "input": text,
            "state": self.state.value,
            "cards": [card.model_dump(by_alias=True) for card in self.cards],
            "error": self.error,
            "transitions": [s.value for s in self.transitions],
        }


def run_pipeline(raw_input: str, *, client: LLMClient | None = None) -> PipelineResult:
    """Run one pipeline synchronously and return its outcome."""
    orchestrator = PipelineOrchestrator(client=client)
    result = asyncio.run(orchestrator.request_generation(raw_input))
    if result is None:  # pragma: no cover - a fresh orchestrator is never busy
        raise RuntimeError("pipeline did not start")
    return result


__all__ = [
    "ANALYZING_MESSAGE",
    "INVALID_INPUT_MESSAGE",
    "ERROR_PREFIX",
    "PipelineOrchestrator",
    "PipelineResult",
    "RunState",
    "format_error",
    "run_pipeline",
    "synthesis_message",
]
