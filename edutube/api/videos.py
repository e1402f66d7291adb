from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from edutube.models.result import ProcessedVideoResult
from edutube.models.study import DEFAULT_LANGUAGE, SummaryStyle
from edutube.services import pipeline
from edutube.services.youtube import build_video_url, extract_youtube_video_id

router = APIRouter(prefix="/videos", tags=["videos"])


class ProcessVideoRequest(BaseModel):
    url: str
    summary_style: SummaryStyle = SummaryStyle.medium
    target_language: str = DEFAULT_LANGUAGE


class ProcessVideoResponse(ProcessedVideoResult):
    ok: bool
    # one watch URL per chapter, same order as `chapters`
    chapter_links: list[str] | None = None


@router.post("/process", response_model=ProcessVideoResponse)
async def process_video(req: ProcessVideoRequest) -> ProcessVideoResponse:
    url = (req.url or "").strip()
    if not url:
        raise HTTPException(status_code=400, detail="URL is required")
    if not extract_youtube_video_id(url):
        raise HTTPException(status_code=400, detail="Invalid YouTube URL (not a video)")

    result = await pipeline.process_video_url(url, req.summary_style, req.target_language)

    chapter_links = None
    if result.video_id and result.chapters is not None:
        chapter_links = [build_video_url(result.video_id, start_seconds=ch.start_time_seconds) for ch in result.chapters]

    # partial success is a normal outcome: ok only says whether the transcript step passed
    terminal = result.error in (pipeline.TRANSCRIPT_UNAVAILABLE, pipeline.TRANSCRIPT_TIMED_OUT)
    return ProcessVideoResponse(
        ok=not terminal,
        chapter_links=chapter_links,
        **result.model_dump(),
    )
