import json
import os
from functools import lru_cache
from pathlib import Path
from typing import List
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings


PROJECT_ROOT = Path(__file__).resolve().parent.parent
LOCAL_ENV_FILE = PROJECT_ROOT / ".env.local"

if LOCAL_ENV_FILE.exists():
    load_dotenv(LOCAL_ENV_FILE, override=True)


class Settings(BaseSettings):
    class Config:
        env_file = ".env"
        extra = "ignore"
    database_url: str = "sqlite:///./emailstudio.db"
    database_public_url: str = ""
    environment: str = "development"
    log_level: str = "INFO"
    jwt_secret_key: str = Field(default="change-me")
    jwt_algorithm: str = Field(default="HS256")
    frontend_base_url: str = Field(default="http://localhost:4200")
    additional_cors_origins: str | None = Field(default=None)

    # Text generation
    anthropic_api_key: str | None = Field(default=None)
    openai_api_key: str | None = Field(default=None)
    generation_model: str = Field(default="claude-sonnet-4-20250514")
    generation_max_tokens: int = Field(default=8000)

    # Email asset behaviour
    default_template_id: str = Field(default="minimal")
    edit_history_limit: int = Field(default=10, ge=1)
    undo_preserves_history: bool = Field(default=False)  # True: undo reads the last entry without removing it
    staged_regenerate: bool = Field(default=False)  # True: old assets are kept until the new sweep succeeds

    def get_database_url(self) -> str:
        """
        Get the appropriate database URL.
        Prefers DATABASE_PUBLIC_URL for local development (external access).
        Falls back to DATABASE_URL.
        """
        public_url = os.getenv('DATABASE_PUBLIC_URL') or self.database_public_url
        internal_url = os.getenv('DATABASE_URL') or self.database_url

        if public_url:
            return public_url

        return internal_url

    def get_additional_cors_origins(self) -> list[str]:
        value = self.additional_cors_origins
        if not value:
            return []

        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return []
            if stripped.startswith("[") and stripped.endswith("]"):
                try:
                    parsed = json.loads(stripped)
                    if isinstance(parsed, list):
                        return [
                            str(origin).strip()
                            for origin in parsed
                            if str(origin).strip()
                        ]
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in stripped.split(",") if item.strip()]

        if isinstance(value, (list, tuple, set)):
            return [str(origin).strip() for origin in value if str(origin).strip()]

        return []


def _is_valid_origin(origin: str) -> bool:
    parsed = urlparse(origin)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def get_cors_origins(settings: Settings) -> List[str]:
    """Frontend origin plus any additional origins, validated and de-duplicated."""
    origins: List[str] = []
    for origin in [settings.frontend_base_url, *settings.get_additional_cors_origins()]:
        if not origin:
            continue
        origin = origin.rstrip("/")
        if _is_valid_origin(origin) and origin not in origins:
            origins.append(origin)
    return origins


@lru_cache()
def get_settings():
    return Settings()
