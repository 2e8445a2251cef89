"""
Runtime configuration for podbrief.

Values come from the environment (optionally a .env file loaded with
python-dotenv). The AI credential is not required to import or start
anything; the episode processor checks it before calling the model.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv


DEFAULT_AI_BASE_URL = "https://api.siliconflow.cn/v1"
DEFAULT_AI_MODEL = "gpt-4o-mini"
DEFAULT_DATABASE_URL = "sqlite:///data/podbrief.db"


@dataclass
class Settings:
    """Configuration for ingestion, processing and storage"""

    # Chat-completion endpoint (OpenAI compatible)
    ai_base_url: str = DEFAULT_AI_BASE_URL
    ai_model: str = DEFAULT_AI_MODEL
    ai_api_key: Optional[str] = field(default=None, repr=False)
    ai_max_tokens: int = 2000

    # Storage
    database_url: str = DEFAULT_DATABASE_URL

    # Scraping
    request_timeout: int = 30  # seconds

    @property
    def key_configured(self) -> bool:
        return bool(self.ai_api_key)

    def debug_info(self) -> dict:
        """Non-sensitive view of the AI configuration for error payloads."""
        return {
            "baseUrl": self.ai_base_url,
            "model": self.ai_model,
            "keyConfigured": self.key_configured,
        }


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {value!r}")


def load_settings() -> Settings:
    """Build Settings from the environment (and .env when present)."""
    load_dotenv()
    return Settings(
        ai_base_url=os.getenv("OPENAI_BASE_URL") or DEFAULT_AI_BASE_URL,
        ai_model=os.getenv("AI_MODEL") or DEFAULT_AI_MODEL,
        ai_api_key=os.getenv("OPENAI_API_KEY") or None,
        ai_max_tokens=_int_env("AI_MAX_TOKENS", 2000),
        database_url=os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL,
        request_timeout=_int_env("REQUEST_TIMEOUT", 30),
    )
