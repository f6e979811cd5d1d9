# hep_companion/core/config.py
import os
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).parent.parent.parent

class Settings(BaseSettings):
    app_name: str = "HEP Companion"
    env: str = "local"

    # Supabase (auth, tables, RPC)
    SUPABASE_URL: str
    SUPABASE_SERVICE_ROLE_KEY: str
    SUPABASE_ANON_KEY: str | None = None
    SUPABASE_JWT_SECRET: str

    # Session tokens issued by Supabase auth
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str = "authenticated"
    SESSION_COOKIE_NAME: str = "sb-access-token"
    SESSION_REFRESH_COOKIE_NAME: str = "sb-refresh-token"

    SITE_URL: str = "http://localhost:3000"
    CORS_ALLOW_ORIGINS: str | None = None

    # =========================
    # LLM
    # =========================
    LLM_PROVIDER: str = "gemini"
    GEMINI_API_KEY: str | None = None
    GEMINI_MODEL: str = "gemini-1.5-pro"

    # Runtime controls
    LLM_TIMEOUT_SECONDS: int = 30
    LLM_MAX_RETRIES: int = 3
    LLM_BASE_DELAY_MS: int = 1000
    LLM_MAX_OUTPUT_TOKENS: int = 1000
    LLM_TEMPERATURE: float = 0.7

    # Parse/validate attempts per generate request (each attempt has its own retry budget)
    LLM_MAX_PROCESSING_ATTEMPTS: int = 2

    # Observability
    LLM_LOG_PROMPTS: bool = False  # keep False by default (prompts may contain PHI)

    model_config = SettingsConfigDict(
        env_file=os.path.join(PROJECT_ROOT, ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

settings = Settings()
