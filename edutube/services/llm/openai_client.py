from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from openai import AsyncOpenAI

from edutube.core.config import settings

logger = logging.getLogger(__name__)


# ----------------------------
# OpenAI call helpers
# ----------------------------

def _build_openai_client() -> AsyncOpenAI:
    api_key = settings.openai_api_key
    if not api_key:
        raise ValueError("OPENAI_API_KEY is missing")

    timeout = httpx.Timeout(settings.openai_timeout_sec, connect=10.0)
    return AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=settings.openai_max_retries)


def _extract_json(text: str) -> dict[str, Any]:
    """
    Best-effort JSON extraction if model returns extra text.
    """
    text = (text or "").strip()
    if not text:
        raise ValueError("Empty response from OpenAI")

    # Fast path
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        # Try to find outermost JSON object
        start = text.find("{")
        end = text.rfind("}")
        if start < 0 or end <= start:
            raise ValueError(f"OpenAI returned non-JSON. First 200 chars: {text[:200]!r}")
        payload = json.loads(text[start : end + 1])

    if not isinstance(payload, dict):
        raise ValueError(f"OpenAI returned JSON {type(payload).__name__}, expected an object")
    return payload


# ----------------------------
# Public API
# ----------------------------

async def complete_json(system: str, user: str, *, temperature: float = 0.3) -> dict[str, Any]:
    """
    One Chat Completions call in JSON mode. Returns the parsed object.
    Raises on transport errors, timeouts and unparseable output; never retries.
    """
    client = _build_openai_client()
    async with client:
        chat = await client.chat.completions.create(
            model=settings.openai_model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            response_format={"type": "json_object"},
            temperature=temperature,
        )

    raw_text = (chat.choices[0].message.content or "").strip()
    logger.debug("OpenAI returned %d chars (model=%s)", len(raw_text), settings.openai_model)
    return _extract_json(raw_text)
