import asyncio
import dataclasses
import itertools
from collections import defaultdict

import pytest

from edutube.models.study import Chapter, Flashcard, MindMapNode
from edutube.models.transcript import TranscriptSegment
from edutube.services import generation, pipeline
from edutube.services import transcript as transcript_mod
from edutube.services.generation import GenerationError
from edutube.services.transcript import TranscriptFetchError

URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

SEGMENTS = [
    TranscriptSegment(text="hello", offset_ms=0, duration_ms=1000),
    TranscriptSegment(text="world", offset_ms=1000, duration_ms=1000),
]

DEPENDENT = [
    "generate_flashcards",
    "generate_notes",
    "generate_key_takeaways",
    "generate_further_study",
    "generate_mind_map",
]


async def _mind_map(req):
    if req.chapters:
        return MindMapNode(name="chapter map", children=[MindMapNode(name=c.title) for c in req.chapters])
    return MindMapNode(name="summary map", children=[MindMapNode(name="idea")])


class Stubs:
    """Replaces the transcript fetcher and every generator, recording each call."""

    def __init__(self, monkeypatch):
        self.monkeypatch = monkeypatch
        self.calls = defaultdict(list)
        self.set_transcript(SEGMENTS)
        self.set("generate_summary", "the summary")
        self.set("generate_flashcards", [Flashcard(question="Q?", answer="A.")])
        self.set("generate_notes", "the notes")
        self.set("generate_key_takeaways", ["k1", "k2", "k3"])
        self.set("generate_further_study", ["f1", "f2", "f3"])
        self.set("generate_chapters", [Chapter(title="Intro", start_time_seconds=0)])
        self.set_impl("generate_mind_map", _mind_map)

    def set_transcript(self, segments=None, exc=None):
        async def fake_fetch(video_url, language=None):
            self.calls["fetch_transcript"].append(video_url)
            if exc:
                raise exc
            return segments

        self.monkeypatch.setattr(transcript_mod, "fetch_transcript", fake_fetch)

    def set_impl(self, name, impl):
        async def fake(req):
            self.calls[name].append(req)
            return await impl(req)

        self.monkeypatch.setattr(generation, name, fake)

    def set(self, name, value=None, exc=None):
        async def impl(req):
            if exc:
                raise exc
            return value

        self.set_impl(name, impl)

    def generation_calls(self):
        return sum(len(v) for k, v in self.calls.items() if k != "fetch_transcript")


@pytest.fixture
def stubs(monkeypatch):
    return Stubs(monkeypatch)


def run(**kwargs):
    return asyncio.run(pipeline.process_video_url(URL, **kwargs))


def test_empty_transcript_short_circuits(stubs):
    stubs.set_transcript([])

    result = run()

    assert result.summary is None
    assert result.flashcards is None
    assert result.notes is None
    assert result.chapters is None
    assert result.key_takeaways is None
    assert result.further_study_prompts is None
    assert result.mind_map_outline is None
    assert "transcript" in result.error.lower()
    assert stubs.generation_calls() == 0


def test_transcript_error_is_treated_like_missing_transcript(stubs):
    stubs.set_transcript(exc=TranscriptFetchError("network down"))

    result = run()

    assert result.error == pipeline.TRANSCRIPT_UNAVAILABLE
    assert stubs.generation_calls() == 0


def test_summary_gets_space_joined_transcript_and_options(stubs):
    run(summary_style="academic", target_language="German")

    req = stubs.calls["generate_summary"][0]
    assert req.text == "hello world"
    assert req.summary_style.value == "academic"
    assert req.target_language == "German"


def test_all_features_succeed(stubs):
    result = run()

    assert result.error is None
    assert result.video_id == "dQw4w9WgXcQ"
    assert result.summary == "the summary"
    assert result.notes == "the notes"
    assert result.flashcards[0].question == "Q?"
    assert result.key_takeaways == ["k1", "k2", "k3"]
    assert result.further_study_prompts == ["f1", "f2", "f3"]
    assert [c.title for c in result.chapters] == ["Intro"]


def test_flashcard_failure_does_not_affect_siblings(stubs):
    stubs.set("generate_flashcards", exc=GenerationError("boom"))

    result = run()

    assert result.summary == "the summary"
    assert result.flashcards is None
    assert result.notes == "the notes"
    assert result.key_takeaways == ["k1", "k2", "k3"]
    assert "flashcards" in result.error
    assert "notes" not in result.error


def test_summary_failure_gates_dependent_features(stubs):
    stubs.set("generate_summary", exc=GenerationError("llm down"))

    result = run(summary_style="short", target_language="French")

    for name in DEPENDENT:
        assert len(stubs.calls[name]) == 0, name
    assert len(stubs.calls["generate_chapters"]) == 1
    assert result.summary is None
    assert result.chapters is not None
    assert "style: short" in result.error
    assert "language: French" in result.error
    assert pipeline.SUMMARY_SKIPPED in result.error


def test_chapters_are_sorted_even_if_generator_is_not(stubs):
    stubs.set(
        "generate_chapters",
        [
            Chapter(title="C", start_time_seconds=300),
            Chapter(title="A", start_time_seconds=0),
            Chapter(title="B", start_time_seconds=90),
        ],
    )

    result = run()

    starts = [c.start_time_seconds for c in result.chapters]
    assert starts == sorted(starts)


def test_chapter_input_uses_raw_segment_offsets(stubs):
    run()

    req = stubs.calls["generate_chapters"][0]
    assert [(s.text, s.offset_ms) for s in req.segments] == [("hello", 0), ("world", 1000)]


def test_chapter_failure_is_reported(stubs):
    stubs.set("generate_chapters", exc=GenerationError("bad json"))

    result = run()

    assert result.chapters is None
    assert result.error == "Failed to generate chapters."
    # no chapters, so no chapter-aware mind map either
    assert len(stubs.calls["generate_mind_map"]) == 1
    assert result.mind_map_outline.name == "summary map"


def test_chapter_aware_mind_map_replaces_summary_map(stubs):
    result = run()

    assert len(stubs.calls["generate_mind_map"]) == 2
    assert stubs.calls["generate_mind_map"][1].chapters is not None
    assert result.mind_map_outline.name == "chapter map"


def test_chapter_aware_mind_map_failure_is_silent(stubs):
    async def flaky(req):
        if req.chapters:
            raise GenerationError("second call failed")
        return MindMapNode(name="summary map")

    stubs.set_impl("generate_mind_map", flaky)

    result = run()

    assert result.error is None
    assert result.mind_map_outline.name == "summary map"


def test_no_mind_map_possible_is_not_an_error(stubs):
    stubs.set("generate_mind_map", None)

    result = run()

    assert result.mind_map_outline is None
    assert result.error is None


def test_mind_map_failure_is_reported(stubs):
    stubs.set("generate_mind_map", exc=GenerationError("boom"))

    result = run()

    assert result.mind_map_outline is None
    assert result.error == "Failed to generate mind map."


def test_mind_map_nodes_get_ids_from_injected_source(stubs):
    result = run(id_source=itertools.count(100))

    root = result.mind_map_outline
    assert root.node_id == "mindmap-node-100"
    assert [c.node_id for c in root.children] == ["mindmap-node-101"]


def test_node_ids_restart_for_each_run(stubs):
    first = run()
    second = run()

    assert first.mind_map_outline.node_id == second.mind_map_outline.node_id == "mindmap-node-0"


def test_slow_feature_times_out_without_blocking_others(stubs, monkeypatch):
    monkeypatch.setattr(
        pipeline,
        "settings",
        dataclasses.replace(pipeline.settings, generation_timeout_sec=0.05),
    )

    async def slow_notes(req):
        await asyncio.sleep(2)
        return "never"

    stubs.set_impl("generate_notes", slow_notes)

    result = run()

    assert result.notes is None
    assert result.flashcards is not None
    assert result.error == "Notes generation timed out."


def test_several_failures_are_space_joined(stubs):
    stubs.set("generate_notes", exc=GenerationError("x"))
    stubs.set("generate_key_takeaways", exc=GenerationError("y"))

    result = run()

    assert result.error == "Failed to generate notes. Failed to generate key takeaways."


def test_transcript_timeout_is_terminal(stubs, monkeypatch):
    monkeypatch.setattr(
        pipeline,
        "settings",
        dataclasses.replace(pipeline.settings, transcript_timeout_sec=0.05),
    )

    async def slow_fetch(video_url, language=None):
        await asyncio.sleep(2)
        return SEGMENTS

    monkeypatch.setattr(transcript_mod, "fetch_transcript", slow_fetch)

    result = run()

    assert result.error == pipeline.TRANSCRIPT_TIMED_OUT
    assert result.summary is None
    assert result.chapters is None
    assert stubs.generation_calls() == 0


def test_summary_features_are_issued_concurrently(stubs):
    active = 0
    peak = 0

    def overlapping(value):
        async def impl(req):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.05)
            active -= 1
            return value

        return impl

    stubs.set_impl("generate_flashcards", overlapping([Flashcard(question="Q?", answer="A.")]))
    stubs.set_impl("generate_notes", overlapping("the notes"))
    stubs.set_impl("generate_key_takeaways", overlapping(["k1"]))
    stubs.set_impl("generate_further_study", overlapping(["f1"]))
    stubs.set_impl("generate_mind_map", overlapping(MindMapNode(name="map")))

    result = run()

    assert result.error is None
    assert peak == len(DEPENDENT)


def test_chapter_aware_mind_map_clears_summary_map_failure(stubs):
    async def summary_map_fails(req):
        if not req.chapters:
            raise GenerationError("boom")
        return MindMapNode(name="chapter map")

    stubs.set_impl("generate_mind_map", summary_map_fails)
    stubs.set("generate_notes", exc=GenerationError("x"))

    result = run()

    assert result.mind_map_outline.name == "chapter map"
    assert result.error == "Failed to generate notes."


def test_summary_map_failure_stays_reported_without_chapters(stubs):
    stubs.set("generate_mind_map", exc=GenerationError("boom"))
    stubs.set("generate_chapters", [])

    result = run()

    assert result.mind_map_outline is None
    assert result.error == "Failed to generate mind map."
