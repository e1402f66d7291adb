from __future__ import annotations

import asyncio
import logging
from typing import Any

from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    TranscriptsDisabled,
    VideoUnavailable,
    YouTubeTranscriptApi,
)
from youtube_transcript_api.proxies import GenericProxyConfig

from edutube.core.youtube_settings import youtube_settings
from edutube.models.transcript import TranscriptSegment
from edutube.services.youtube import extract_youtube_video_id

logger = logging.getLogger(__name__)


class TranscriptFetchError(Exception):
    pass


# Conditions that mean "this video has no transcript", as opposed to a failure
_NO_TRANSCRIPT_ERRORS = (NoTranscriptFound, TranscriptsDisabled, VideoUnavailable)


def _build_api() -> YouTubeTranscriptApi:
    proxy_url = youtube_settings.proxy_url
    if proxy_url:
        return YouTubeTranscriptApi(proxy_config=GenericProxyConfig(http_url=proxy_url, https_url=proxy_url))
    return YouTubeTranscriptApi()


def _fetch_raw_segments(video_id: str, language: str | None) -> list[dict[str, Any]]:
    """
    Returns raw snippets [{text, start, duration}] (seconds).
    Prefers the requested/configured languages, then whatever track exists.
    """
    api = _build_api()
    transcript_list = api.list(video_id)

    languages = [language] if language else list(youtube_settings.caption_languages)
    try:
        transcript = transcript_list.find_transcript(languages)
    except NoTranscriptFound:
        transcript = next(iter(transcript_list), None)
        if transcript is None:
            raise

    return transcript.fetch().to_raw_data()


def _to_segments(raw: list[dict[str, Any]]) -> list[TranscriptSegment]:
    segments: list[TranscriptSegment] = []
    for snippet in raw or []:
        txt = " ".join(str(snippet.get("text") or "").split())
        if not txt:
            continue
        start = max(0.0, float(snippet.get("start") or 0.0))
        duration = max(0.0, float(snippet.get("duration") or 0.0))
        segments.append(TranscriptSegment(text=txt, offset_ms=start * 1000.0, duration_ms=duration * 1000.0))

    segments.sort(key=lambda s: s.offset_ms)
    return segments


async def fetch_transcript(video_url: str, language: str | None = None) -> list[TranscriptSegment]:
    """
    Fetch the timed transcript for a YouTube URL.

    Returns [] when the video has no transcript (disabled, missing, unavailable).
    Raises TranscriptFetchError for a bad URL or any other library/network error.
    """
    video_id = extract_youtube_video_id(video_url)
    if not video_id:
        raise TranscriptFetchError(f"Not a valid YouTube video URL: {video_url!r}")

    try:
        raw = await asyncio.to_thread(_fetch_raw_segments, video_id, language)
    except _NO_TRANSCRIPT_ERRORS as e:
        logger.warning("No transcript found for video %s: %s", video_id, type(e).__name__)
        return []
    except CouldNotRetrieveTranscript as e:
        raise TranscriptFetchError(f"Failed to fetch transcript: {type(e).__name__}") from e
    except Exception as e:
        raise TranscriptFetchError(f"Failed to fetch transcript: {e}") from e

    return _to_segments(raw)
