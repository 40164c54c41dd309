import os
from typing import Optional

class Settings:
    # Fetching
    FETCH_MAX_ATTEMPTS: int = int(os.getenv("FETCH_MAX_ATTEMPTS", "4"))
    FETCH_TIMEOUT_SECONDS: float = float(os.getenv("FETCH_TIMEOUT_SECONDS", "30"))
    FETCH_BACKOFF_BASE_SECONDS: float = float(os.getenv("FETCH_BACKOFF_BASE_SECONDS", "1.0"))
    # Kept at or below half the base so the delay schedule never decreases
    FETCH_BACKOFF_JITTER_SECONDS: float = float(os.getenv("FETCH_BACKOFF_JITTER_SECONDS", "0.3"))

    # Extraction
    CONTENT_MIN_LENGTH: int = int(os.getenv("CONTENT_MIN_LENGTH", "100"))

    # Translation (OpenRouter)
    OPENROUTER_API_KEY: Optional[str] = os.getenv("OPENROUTER_API_KEY")
    OPENROUTER_URL: str = os.getenv("OPENROUTER_URL", "https://openrouter.ai/api/v1/chat/completions")
    OPENROUTER_MODEL: str = os.getenv("OPENROUTER_MODEL", "deepseek/deepseek-r1-0528:free")
    APP_URL: str = os.getenv("APP_URL", "http://localhost:8000")

    # LLM timeouts and retries
    LLM_TIMEOUT_SECONDS: int = int(os.getenv("LLM_TIMEOUT_SECONDS", "60"))
    LLM_MAX_ATTEMPTS: int = int(os.getenv("LLM_MAX_ATTEMPTS", "3"))

    # Development
    USE_MOCK: bool = os.getenv("USE_MOCK", "0").lower() in ("1", "true", "yes")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

settings = Settings()
