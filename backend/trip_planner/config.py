"""Environment-driven settings for the TripPlanner backend.

Values are read from the process environment (optionally seeded from a .env
file). The gateway credential is deliberately not cached: it is looked up on
every generation call so a missing key only fails that one request.
"""

import os
import logging
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

logger = logging.getLogger(__name__)

API_KEY_ENV = "AI_GATEWAY_API_KEY"

DEFAULT_GATEWAY_URL = "https://ai.gateway.lovable.dev/v1"
DEFAULT_MODEL = "google/gemini-2.5-flash"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_TIMEOUT = 60.0


class Settings(BaseModel):
    gateway_url: str = DEFAULT_GATEWAY_URL
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    timeout: float = DEFAULT_TIMEOUT
    mongodb_uri: Optional[str] = None
    mongodb_db: str = "tripplanner"
    log_level: str = "INFO"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}; using {default}")
        return default


def get_settings() -> Settings:
    return Settings(
        gateway_url=os.getenv("AI_GATEWAY_URL", DEFAULT_GATEWAY_URL).rstrip("/"),
        model=os.getenv("AI_GATEWAY_MODEL", DEFAULT_MODEL),
        temperature=_float_env("AI_GATEWAY_TEMPERATURE", DEFAULT_TEMPERATURE),
        timeout=_float_env("AI_GATEWAY_TIMEOUT", DEFAULT_TIMEOUT),
        mongodb_uri=os.getenv("MONGODB_URI") or None,
        mongodb_db=os.getenv("MONGODB_DB", "tripplanner"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def get_api_key() -> Optional[str]:
    """Return the gateway credential, or None when it is unset or blank."""
    key = os.getenv(API_KEY_ENV)
    if not key or not key.strip():
        return None
    return key.strip()
