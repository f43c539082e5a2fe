"""
End-to-end tests for the flashcard pipeline orchestrator, using a fake client.

Scenarios
---------
A. One concept ("قطة") → one card.
B. A category ("فواكه") → four cards in expansion order, images in parallel.
C. Empty expansion → failed run, no image calls.
Plus: all-or-nothing synthesis, input validation, the busy guard, and the
state/progress sequence observed by callbacks.
"""

from __future__ import annotations

import asyncio
import threading
import time
from typing import Any

from conftest import CAT_CARDS, FRUIT_CARDS, FakeLLMClient, fake_jpeg

from wordcards.agents.card_assembler import build_data_uri
from wordcards.core.contracts.card import CardData
from wordcards.core.contracts.image import GeneratedImage
from wordcards.pipelines.flashcards import (
    ANALYZING_MESSAGE,
    ERROR_PREFIX,
    INVALID_INPUT_MESSAGE,
    PipelineOrchestrator,
    RunState,
    run_pipeline,
    synthesis_message,
)


class Recorder:
    """Collects every callback the orchestrator fires."""

    def __init__(self) -> None:
        self.progress: list[str] = []
        self.successes: list[list[CardData]] = []
        self.errors: list[str] = []

    def orchestrator(self, fake: FakeLLMClient) -> PipelineOrchestrator:
        return PipelineOrchestrator(
            on_progress=self.progress.append,
            on_success=self.successes.append,
            on_error=self.errors.append,
            client=fake,  # type: ignore[arg-type]
        )


def _run(orchestrator: PipelineOrchestrator, text: str) -> Any:
    return asyncio.run(orchestrator.request_generation(text))


def test_scenario_a_single_concept_yields_one_card() -> None:
    fake = FakeLLMClient(CAT_CARDS)
    rec = Recorder()
    orch = rec.orchestrator(fake)

    result = _run(orch, "قطة")

    assert orch.state is RunState.DONE
    assert rec.errors == []
    assert len(rec.successes) == 1
    (card,) = rec.successes[0]
    assert card.english_translation == "cat"
    assert card.arabic_word == "قطة"
    assert card.image_url == build_data_uri(
        GeneratedImage(index=0, data=fake_jpeg("a photo of a cat"))
    )
    assert result["state"] == "done"
    assert result["cards"][0]["englishTranslation"] == "cat"
    assert result["error"] is None


def test_scenario_b_category_yields_four_cards_in_expansion_order() -> None:
    # Answer images in reverse order of request to prove ordering is positional.
    gates = {c["imagePrompt"]: threading.Event() for c in FRUIT_CARDS}
    prompts = [c["imagePrompt"] for c in FRUIT_CARDS]

    def answer_in_reverse(prompt: str) -> None:
        pos = prompts.index(prompt)
        if pos + 1 < len(prompts):
            assert gates[prompts[pos + 1]].wait(timeout=5), "images were not requested in parallel"
        gates[prompt].set()

    fake = FakeLLMClient(FRUIT_CARDS, on_image=answer_in_reverse)
    rec = Recorder()

    _run(rec.orchestrator(fake), "فواكه")

    assert rec.errors == []
    cards = rec.successes[0]
    assert [c.english_translation for c in cards] == ["fruits", "apple", "banana", "orange"]
    for card, prompt in zip(cards, prompts, strict=True):
        assert card.image_url == build_data_uri(GeneratedImage(index=0, data=fake_jpeg(prompt)))
    assert sorted(call["prompt"] for call in fake.image_calls) == sorted(prompts)


def test_exactly_one_synthesis_call_per_term() -> None:
    fake = FakeLLMClient(FRUIT_CARDS)

    _run(PipelineOrchestrator(client=fake), "فواكه")  # type: ignore[arg-type]

    assert len(fake.image_calls) == 4
    assert {c["prompt"] for c in fake.image_calls} == {c["imagePrompt"] for c in FRUIT_CARDS}


def test_scenario_c_empty_expansion_fails_without_synthesis() -> None:
    fake = FakeLLMClient([])
    rec = Recorder()
    orch = rec.orchestrator(fake)

    result = _run(orch, "شيء")

    assert orch.state is RunState.FAILED
    assert rec.successes == []
    assert rec.errors == [f"{ERROR_PREFIX}Could not get valid data from the model."]
    assert fake.image_calls == []
    assert result["cards"] == []
    assert result["transitions"] == ["idle", "validating", "expanding", "failed"]


def test_one_failed_image_discards_the_whole_run() -> None:
    fake = FakeLLMClient(FRUIT_CARDS, fail_prompts=["a ripe banana"])
    rec = Recorder()
    orch = rec.orchestrator(fake)

    _run(orch, "فواكه")

    assert orch.state is RunState.FAILED
    assert rec.successes == []
    assert orch.cards == []
    assert len(rec.errors) == 1
    assert rec.errors[0].startswith(ERROR_PREFIX)
    assert "a ripe banana" in rec.errors[0]
    assert len(fake.image_calls) == 4, "siblings still run to completion"


def test_first_failure_by_position_is_reported() -> None:
    fake = FakeLLMClient(FRUIT_CARDS, fail_prompts=["an orange cut in half", "a red apple on a table"])
    rec = Recorder()

    _run(rec.orchestrator(fake), "فواكه")

    assert "a red apple on a table" in rec.errors[0]


def test_raising_image_call_still_waits_for_siblings() -> None:
    """A non-service exception in one slot fails the run only after the rest finish."""
    finished: list[str] = []
    lock = threading.Lock()

    def on_image(prompt: str) -> None:
        if prompt == FRUIT_CARDS[0]["imagePrompt"]:
            raise ValueError("dropped")
        time.sleep(0.3)
        with lock:
            finished.append(prompt)

    fake = FakeLLMClient(FRUIT_CARDS, on_image=on_image)
    finished_at_error: list[int] = []
    orch = PipelineOrchestrator(
        on_error=lambda _msg: finished_at_error.append(len(finished)),
        client=fake,  # type: ignore[arg-type]
    )

    result = _run(orch, "فواكه")

    assert finished_at_error == [3]
    assert result["state"] == "failed"
    assert result["error"] == f"{ERROR_PREFIX}dropped"
    assert result["transitions"][-2:] == ["synthesizing", "failed"]
    assert not orch.is_busy()


def test_invalid_input_never_reaches_the_service() -> None:
    for text in ("", "   "):
        fake = FakeLLMClient(CAT_CARDS)
        rec = Recorder()
        orch = rec.orchestrator(fake)

        result = _run(orch, text)

        assert orch.state is RunState.FAILED
        assert rec.errors == [INVALID_INPUT_MESSAGE]
        assert rec.progress == []
        assert fake.json_calls == [] and fake.image_calls == []
        assert result["transitions"] == ["idle", "validating", "failed"]


def test_progress_and_state_sequence_on_success() -> None:
    fake = FakeLLMClient(FRUIT_CARDS)
    rec = Recorder()
    orch = rec.orchestrator(fake)

    result = _run(orch, "فواكه")

    assert rec.progress == [ANALYZING_MESSAGE, synthesis_message(4)]
    assert synthesis_message(4) == "Generating 4 image(s) (this may take a moment)..."
    assert result["transitions"] == [
        "idle",
        "validating",
        "expanding",
        "synthesizing",
        "assembling",
        "done",
    ]
    assert not orch.is_busy()


def test_request_while_busy_is_ignored() -> None:
    """A second request during a run returns None and leaves the run untouched."""
    release = threading.Event()
    fake = FakeLLMClient(CAT_CARDS, on_image=lambda _: release.wait(timeout=5))
    rec = Recorder()
    orch = rec.orchestrator(fake)

    async def scenario() -> tuple[Any, Any, bool]:
        first = asyncio.create_task(orch.request_generation("قطة"))
        while orch.state is not RunState.SYNTHESIZING:
            await asyncio.sleep(0.01)
        busy = orch.is_busy()
        second = await orch.request_generation("فواكه")
        release.set()
        return await first, second, busy

    first, second, busy = asyncio.run(scenario())

    assert busy is True
    assert second is None
    assert first["state"] == "done"
    assert len(fake.json_calls) == 1
    assert len(rec.successes) == 1


def test_new_run_supersedes_previous_result() -> None:
    fake = FakeLLMClient(CAT_CARDS)
    orch = PipelineOrchestrator(client=fake)  # type: ignore[arg-type]

    _run(orch, "قطة")
    assert len(orch.cards) == 1

    fake.cards = []
    _run(orch, "قطة")
    assert orch.cards == []
    assert orch.error is not None


def test_unexpected_exception_is_reported_not_raised() -> None:
    class ExplodingClient(FakeLLMClient):
        def generate_json(self, prompt: str, **kwargs: Any) -> str:
            raise ValueError("boom")

    rec = Recorder()
    orch = rec.orchestrator(ExplodingClient())

    _run(orch, "قطة")

    assert orch.state is RunState.FAILED
    assert rec.errors == [f"{ERROR_PREFIX}boom"]


def test_run_pipeline_wrapper_returns_json_safe_result() -> None:
    result = run_pipeline("فواكه", client=FakeLLMClient(FRUIT_CARDS))  # type: ignore[arg-type]

    assert result["input"] == "فواكه"
    assert result["state"] == "done"
    assert [c["arabicWord"] for c in result["cards"]] == [c["arabic"] for c in FRUIT_CARDS]
