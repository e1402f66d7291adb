import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Always load .env from the repo root (stable, regardless of CWD)
BASE_DIR = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=BASE_DIR / ".env", override=False)


@dataclass(frozen=True)
class Settings:
    env: str = os.getenv("ENV", "local")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # OpenAI
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    openai_timeout_sec: float = float(os.getenv("OPENAI_TIMEOUT_SEC", "180"))
    # No retries by default: a failed generation is reported once
    openai_max_retries: int = int(os.getenv("OPENAI_MAX_RETRIES", "0"))

    # Upper bounds for a single upstream call, seen from the pipeline
    generation_timeout_sec: float = float(os.getenv("GENERATION_TIMEOUT_SEC", "120"))
    transcript_timeout_sec: float = float(os.getenv("TRANSCRIPT_TIMEOUT_SEC", "60"))

    # Chapters prompt size bound
    chapter_max_segments: int = int(os.getenv("CHAPTER_MAX_SEGMENTS", "700"))


settings = Settings()
