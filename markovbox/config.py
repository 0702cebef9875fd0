"""
markovbox Configuration
"""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Settings loaded from MARKOVBOX_* environment variables or .env"""

    # ===== Service =====
    SERVICE_NAME: str = Field(default="markovbox")
    SERVICE_VERSION: str = Field(default="1.0.0")
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)
    LOG_LEVEL: str = Field(default="info")
    DEBUG: bool = Field(default=False)

    # ===== CORS =====
    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"]
    )

    # ===== Training =====
    DEFAULT_LEVEL: int = Field(default=4, ge=1)
    CORPUS_ENCODING: str = Field(default="utf-8")
    MAX_CACHED_MODELS: int = Field(default=32, ge=1)

    # ===== Playback defaults (baked into artifacts) =====
    DEFAULT_SENTENCE_LIMIT: int = Field(default=5, ge=1)
    DEFAULT_CHARACTER_LIMIT: int = Field(default=140, ge=1)

    # ===== HTTP =====
    MAX_HTTP_CHARACTERS: int = Field(default=5000, ge=1)

    # ===== Packaging =====
    JSON_SUFFIX: str = Field(default=".json")

    model_config = SettingsConfigDict(
        env_prefix="MARKOVBOX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def playback_defaults(self) -> tuple:
        return (self.DEFAULT_SENTENCE_LIMIT, self.DEFAULT_CHARACTER_LIMIT)


settings = Settings()
