from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TranscriptSegment(BaseModel):
    """One timed caption snippet. Offsets and durations are in milliseconds."""

    model_config = ConfigDict(frozen=True)

    text: str
    offset_ms: float = Field(ge=0)
    duration_ms: float = Field(default=0.0, ge=0)


def transcript_text(segments: list[TranscriptSegment]) -> str:
    return " ".join(seg.text for seg in segments)
