import asyncio

import pytest
from youtube_transcript_api import TranscriptsDisabled

from edutube.services import transcript as transcript_mod
from edutube.services.transcript import TranscriptFetchError, fetch_transcript

URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


def test_fetch_converts_seconds_to_ms_and_orders(monkeypatch):
    def fake_raw(video_id, language):
        assert video_id == "dQw4w9WgXcQ"
        return [
            {"text": "second  part", "start": 2.5, "duration": 1.0},
            {"text": "   ", "start": 1.0, "duration": 1.0},
            {"text": "first part", "start": 0.0, "duration": 2.5},
        ]

    monkeypatch.setattr(transcript_mod, "_fetch_raw_segments", fake_raw)

    segments = asyncio.run(fetch_transcript(URL))

    assert [s.text for s in segments] == ["first part", "second part"]
    assert segments[0].offset_ms == 0.0
    assert segments[0].duration_ms == 2500.0
    assert segments[1].offset_ms == 2500.0


def test_fetch_returns_empty_when_transcripts_disabled(monkeypatch):
    def fake_raw(video_id, language):
        raise TranscriptsDisabled(video_id)

    monkeypatch.setattr(transcript_mod, "_fetch_raw_segments", fake_raw)

    assert asyncio.run(fetch_transcript(URL)) == []


def test_fetch_raises_on_other_errors(monkeypatch):
    def fake_raw(video_id, language):
        raise ConnectionError("network down")

    monkeypatch.setattr(transcript_mod, "_fetch_raw_segments", fake_raw)

    with pytest.raises(TranscriptFetchError):
        asyncio.run(fetch_transcript(URL))


def test_fetch_rejects_non_youtube_url():
    with pytest.raises(TranscriptFetchError):
        asyncio.run(fetch_transcript("https://example.com/video"))
