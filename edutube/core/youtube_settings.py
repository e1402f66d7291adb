import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class YouTubeSettings:
    # Optional: proxy URL, e.g. http://127.0.0.1:7890
    proxy_url: str | None = os.getenv("YOUTUBE_PROXY_URL")

    # Preferred caption languages, comma separated (tried in order)
    caption_languages: tuple[str, ...] = tuple(
        lang.strip() for lang in os.getenv("YOUTUBE_CAPTION_LANGUAGES", "en").split(",") if lang.strip()
    )


youtube_settings = YouTubeSettings()
