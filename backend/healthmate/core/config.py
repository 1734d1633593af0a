from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # --------------------
    # App
    # --------------------
    PROJECT_NAME: str = "AI HealthMate"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:8080",
    ]

    # --------------------
    # Security / Auth
    # --------------------
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # --------------------
    # Database
    # --------------------
    DATABASE_URL: str

    # --------------------
    # LLM (OpenAI-compatible chat completions, OpenRouter by default)
    # --------------------
    LLM_API_KEY: str = ""
    LLM_BASE_URL: str = "https://openrouter.ai/api/v1"
    LLM_MODEL: str = "anthropic/claude-3.5-sonnet"
    LLM_MAX_TOKENS: int = 1024
    LLM_TIMEOUT_SECONDS: float = 25.0
    LLM_APP_URL: str = "https://your-health-app.com"
    LLM_APP_TITLE: str = "AI HealthMate"

    # --------------------
    # Geocoding
    # --------------------
    GEOCODER_URL: str = "https://nominatim.openstreetmap.org/search"
    GEOCODER_USER_AGENT: str = "healthmate-backend/1.0"
    GEOCODER_TIMEOUT_SECONDS: float = 5.0

    # --------------------
    # Doctor directory
    # --------------------
    DIRECTORY_MAX_CONCURRENCY: int = 8

    # --------------------
    # Chat rate limiting
    # --------------------
    CHAT_RATE_LIMIT_MAX_ATTEMPTS: int = 10
    CHAT_RATE_LIMIT_WINDOW_SECONDS: float = 60.0
    CHAT_RATE_LIMIT_BLOCK_SECONDS: float = 60.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

settings = Settings()

if not settings.DATABASE_URL:
    raise RuntimeError("DATABASE_URL environment variable is required")
