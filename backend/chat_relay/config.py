"""
Environment-driven settings for the relay.
"""
import logging
import os
from functools import lru_cache
from typing import List, Optional

DEFAULT_MODEL = "claude-3-sonnet-20240229"
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:3001"

# Fixed generation parameters
MAX_TOKENS = 4096
TEMPERATURE = 0.7


class Settings:
    """Process-wide configuration, read once from the environment."""

    def __init__(self):
        self.anthropic_api_key: Optional[str] = os.getenv("ANTHROPIC_API_KEY")
        self.model: str = os.getenv("ANTHROPIC_MODEL", DEFAULT_MODEL)
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.cors_origins: List[str] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",")
            if origin.strip()
        ]


def resolve_log_level(name: str) -> int:
    """Numeric level for a LOG_LEVEL name; unknown names fall back to INFO."""
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level
    logging.getLogger("chat_relay").warning("Unknown LOG_LEVEL %r, using INFO", name)
    return logging.INFO


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
