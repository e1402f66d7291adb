from __future__ import annotations

from pydantic import BaseModel

from edutube.models.study import Chapter, Flashcard, MindMapNode


class ProcessedVideoResult(BaseModel):
    """
    Everything one process_video_url run produced.

    Every feature is independently nullable; `error` is the space-joined
    summary of all feature failures, or None when nothing failed.
    """

    video_url: str
    video_id: str | None = None

    summary: str | None = None
    flashcards: list[Flashcard] | None = None
    notes: str | None = None
    chapters: list[Chapter] | None = None
    key_takeaways: list[str] | None = None
    further_study_prompts: list[str] | None = None
    mind_map_outline: MindMapNode | None = None

    error: str | None = None
