"""
Video processing pipeline.

transcript -> summary -> {flashcards, notes, key takeaways, further study,
mind map} concurrently, then chapters (always attempted) and an optional
chapter-aware mind map. Only a missing transcript stops the run; every other
failure is recorded in the aggregate error and the feature is left as None.
"""
from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Any, Awaitable, Iterator, TypeVar

import edutube.services.generation as generation
import edutube.services.transcript as transcript
from edutube.core.config import settings
from edutube.models.result import ProcessedVideoResult
from edutube.models.study import (
    DEFAULT_LANGUAGE,
    Chapter,
    ChapterSegment,
    ChaptersRequest,
    MindMapNode,
    MindMapRequest,
    SummaryBasedRequest,
    SummaryRequest,
    SummaryStyle,
)
from edutube.models.transcript import TranscriptSegment, transcript_text
from edutube.services.youtube import extract_youtube_video_id

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSCRIPT_UNAVAILABLE = (
    "Could not retrieve transcript for the video. It might be unavailable or have transcripts disabled."
)
TRANSCRIPT_TIMED_OUT = "Timed out while retrieving the transcript for the video."
SUMMARY_SKIPPED = (
    "Summary generation failed, skipping flashcards, notes, key takeaways, further study prompts and mind map."
)


def _failure_message(label: str, exc: BaseException) -> str:
    if isinstance(exc, generation.UpstreamTimeout):
        return f"{label.capitalize()} generation timed out."
    return f"Failed to generate {label}."


async def _bounded(awaitable: Awaitable[T], label: str) -> T:
    return await generation.bounded(awaitable, settings.generation_timeout_sec, f"{label} generation")


def number_mind_map(root: MindMapNode, ids: Iterator[int]) -> MindMapNode:
    """Return a copy of the tree with a node_id on every node, depth first."""
    node_id = f"mindmap-node-{next(ids)}"
    children = None
    if root.children is not None:
        children = [number_mind_map(child, ids) for child in root.children]
    return root.model_copy(update={"node_id": node_id, "children": children})


async def _fetch_segments(video_url: str) -> tuple[list[TranscriptSegment], str | None]:
    """Returns (segments, terminal_error). Segments are empty whenever the error is set."""
    try:
        segments = await generation.bounded(
            transcript.fetch_transcript(video_url),
            settings.transcript_timeout_sec,
            "transcript fetch",
        )
    except generation.UpstreamTimeout as e:
        logger.warning("Transcript fetch timed out for %s: %s", video_url, e)
        return [], TRANSCRIPT_TIMED_OUT
    except Exception as e:
        logger.warning("Transcript fetch failed for %s: %s", video_url, e)
        return [], TRANSCRIPT_UNAVAILABLE

    if not segments:
        logger.warning("No transcript available for %s", video_url)
        return [], TRANSCRIPT_UNAVAILABLE
    return list(segments), None


async def _summary_features(summary: str, target_language: str) -> tuple[dict[str, Any], dict[str, str]]:
    """
    Fan out every summary-based feature at once and wait for all of them.
    One failure never cancels or hides the others. Errors are keyed by result field.
    """
    base = SummaryBasedRequest(video_summary=summary, target_language=target_language)
    jobs = [
        ("flashcards", "flashcards", generation.generate_flashcards(base)),
        ("notes", "notes", generation.generate_notes(base)),
        ("key_takeaways", "key takeaways", generation.generate_key_takeaways(base)),
        ("further_study_prompts", "further study prompts", generation.generate_further_study(base)),
        (
            "mind_map_outline",
            "mind map",
            generation.generate_mind_map(MindMapRequest(video_summary=summary, target_language=target_language)),
        ),
    ]

    outcomes = await asyncio.gather(
        *(_bounded(coro, label) for _, label, coro in jobs),
        return_exceptions=True,
    )

    values: dict[str, Any] = {}
    errors: dict[str, str] = {}
    for (field, label, _), outcome in zip(jobs, outcomes):
        if isinstance(outcome, BaseException):
            logger.warning("Error generating %s: %s", label, outcome)
            errors[field] = _failure_message(label, outcome)
            continue
        # a None mind map is the generator's "no map possible" answer
        values[field] = outcome
    return values, errors


async def process_video_url(
    video_url: str,
    summary_style: SummaryStyle | str = SummaryStyle.medium,
    target_language: str = DEFAULT_LANGUAGE,
    *,
    id_source: Iterator[int] | None = None,
) -> ProcessedVideoResult:
    style = SummaryStyle(summary_style)
    target_language = (target_language or "").strip() or DEFAULT_LANGUAGE
    video_id = extract_youtube_video_id(video_url)
    errors: list[str] = []

    logger.info("Processing %s (style=%s, language=%s)", video_url, style.value, target_language)

    # 1) Transcript (terminal on failure)
    segments, terminal_error = await _fetch_segments(video_url)
    if terminal_error:
        return ProcessedVideoResult(video_url=video_url, video_id=video_id, error=terminal_error)

    # 2) Summary
    summary: str | None = None
    try:
        summary = await _bounded(
            generation.generate_summary(
                SummaryRequest(text=transcript_text(segments), summary_style=style, target_language=target_language)
            ),
            "summary",
        )
    except Exception as e:
        logger.warning("Error generating summary: %s", e)
        reason = "timed out" if isinstance(e, generation.UpstreamTimeout) else "failed"
        errors.append(f"Summary generation {reason} (style: {style.value}, language: {target_language}).")

    # 3) Summary-gated features
    features: dict[str, Any] = {}
    feature_errors: dict[str, str] = {}
    if summary is not None:
        features, feature_errors = await _summary_features(summary, target_language)
        errors.extend(feature_errors.values())
    else:
        errors.append(SUMMARY_SKIPPED)

    # 4) Chapters depend on the transcript only
    chapters: list[Chapter] | None = None
    try:
        chapters = await _bounded(
            generation.generate_chapters(
                ChaptersRequest(
                    segments=tuple(ChapterSegment(text=s.text, offset_ms=s.offset_ms) for s in segments),
                    target_language=target_language,
                )
            ),
            "chapters",
        )
        chapters = sorted(chapters, key=lambda ch: ch.start_time_seconds)
    except Exception as e:
        logger.warning("Error generating chapters: %s", e)
        errors.append(_failure_message("chapters", e))

    # 5) Chapter-aware mind map replaces the summary-only one when it works
    mind_map: MindMapNode | None = features.get("mind_map_outline")
    if summary is not None and chapters:
        try:
            refined = await _bounded(
                generation.generate_mind_map(
                    MindMapRequest(video_summary=summary, chapters=tuple(chapters), target_language=target_language)
                ),
                "mind map",
            )
        except Exception as e:
            logger.info("Chapter-aware mind map failed, keeping the summary-only one: %s", e)
        else:
            if refined is not None:
                mind_map = refined
                # the summary-only failure no longer applies once a map exists
                if "mind_map_outline" in feature_errors:
                    errors.remove(feature_errors["mind_map_outline"])

    if mind_map is not None:
        mind_map = number_mind_map(mind_map, id_source if id_source is not None else itertools.count())

    # 6) Assemble
    result = ProcessedVideoResult(
        video_url=video_url,
        video_id=video_id,
        summary=summary,
        flashcards=features.get("flashcards"),
        notes=features.get("notes"),
        chapters=chapters,
        key_takeaways=features.get("key_takeaways"),
        further_study_prompts=features.get("further_study_prompts"),
        mind_map_outline=mind_map,
        error=" ".join(errors) if errors else None,
    )
    logger.info("Finished %s with %d feature error(s)", video_url, len(errors))
    return result
