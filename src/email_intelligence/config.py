"""
Configuration settings for the Email Intelligence Service.

All settings are loaded from environment variables with sensible defaults.
Use a .env file for local development.
"""

from pathlib import Path
from typing import Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_PROMPT_TEMPLATES_DIR = str(Path(__file__).parent / "prompts")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Email Intelligence Service"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # === Model Tiers ===
    LLM_PROVIDER: str = "anthropic"
    ECONOMY_LLM_PROVIDER: Optional[str] = None  # Falls back to LLM_PROVIDER
    LLM_MODEL: Optional[str] = None  # Falls back to the vendor default
    ECONOMY_LLM_MODEL: Optional[str] = None

    # === Vendor Credentials ===
    ANTHROPIC_API_KEY: Optional[SecretStr] = None
    OPENAI_API_KEY: Optional[SecretStr] = None
    GOOGLE_AI_API_KEY: Optional[SecretStr] = None

    # === Vendor Endpoints ===
    ANTHROPIC_BASE_URL: str = "https://api.anthropic.com/v1"
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    LLM_TIMEOUT_SECONDS: int = 60

    # === LLM Generation Parameters ===
    LLM_TEMPERATURE: float = 0.1  # Low for determinism
    LLM_MAX_TOKENS: int = 2048

    # === Caching & Usage ===
    CACHE_TTL_SECONDS: int = 3600  # 0 disables the result cache
    USAGE_HISTORY_LIMIT: int = 1000

    # === Batch ===
    BATCH_MAX_SIZE: int = 50

    # === Input Processing ===
    BODY_TRUNCATION_LIMIT: int = 8000  # chars
    THREAD_PREVIEW_CHARS: int = 500
    DEFAULT_MAX_HISTORY_MESSAGES: int = 10
    PROMPT_TEMPLATES_DIR: str = DEFAULT_PROMPT_TEMPLATES_DIR

    # === Email Source ===
    EMAIL_SOURCE_BASE_URL: str = "http://localhost:8080"
    EMAIL_SOURCE_TIMEOUT_SECONDS: int = 30

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True


# Global settings instance
settings = Settings()
