from __future__ import annotations
import os
from pydantic import BaseModel


class Settings(BaseModel):
    """
    Runtime settings for the serving layer and the coach client.
    Environment variables:
      OPENROUTER_API_KEY  : empty means the rule-based coach is used
      OPENROUTER_MODEL    : default 'google/gemma-2-27b-it'
      OPENROUTER_BASE_URL : default 'https://openrouter.ai/api/v1'
      COACH_TIMEOUT       : seconds, default 60
      HISTORY_LIMIT       : records returned by /router/seven, default 7
      LOG_LEVEL, HOST, PORT
    """
    api_key: str = ""
    model: str = "google/gemma-2-27b-it"
    base_url: str = "https://openrouter.ai/api/v1"
    timeout: float = 60.0
    history_limit: int = 7
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_key=os.getenv("OPENROUTER_API_KEY", ""),
            model=os.getenv("OPENROUTER_MODEL", "google/gemma-2-27b-it"),
            base_url=os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1"),
            timeout=_env_number("COACH_TIMEOUT", "60", float),
            history_limit=_env_number("HISTORY_LIMIT", "7", int),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=_env_number("PORT", "8000", int),
        )


def _env_number(name: str, default: str, cast):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"environment variable {name} must be a number, got {raw!r}") from None
