from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List

class Settings(BaseSettings):
    # OpenAI
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    MOCK_MODE: bool = False
    LLM_TIMEOUT: float = 60.0

    # Generation knobs
    MAX_QUESTIONS: int = 50
    MAX_SESSIONS: int = 500

    # Safety/abuse knobs
    RATE_LIMIT: str = "30/minute"
    RATE_LIMIT_ENABLED: bool = True

    # CORS
    ALLOW_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    # Optional extra frontend
    FRONTEND_ORIGIN: str | None = None

    # Exports
    WATERMARK_TEXT: str = "LessonSmith"

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
if settings.FRONTEND_ORIGIN:
    settings.ALLOW_ORIGINS.append(settings.FRONTEND_ORIGIN)
