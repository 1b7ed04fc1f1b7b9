import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from errors import AssistError, ErrorKind

logger = logging.getLogger(__name__)

# Load environment
load_dotenv()

DEFAULT_MODEL = "claude-sonnet-4-20250514"


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str]
    model: str
    timeout: float
    max_retries: int
    max_tokens: int
    timezone: str
    environment: str

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    def require_api_key(self) -> str:
        if not self.api_key:
            raise AssistError(
                ErrorKind.CONFIGURATION_MISSING,
                "The AI API key is not configured."
            )
        return self.api_key


def _number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"⚠️  {name}={raw!r} is not a valid number, using {default}")
        return default


def load_settings() -> Settings:
    """Read settings from the environment. Called per request so changes apply without restart."""
    return Settings(
        api_key=os.getenv("ANTHROPIC_API_KEY") or None,
        model=os.getenv("ANTHROPIC_MODEL") or DEFAULT_MODEL,
        timeout=_number("ANTHROPIC_TIMEOUT", 30.0, float),
        max_retries=_number("ANTHROPIC_MAX_RETRIES", 2, int),
        max_tokens=_number("MAX_TOKENS", 2048, int),
        timezone=os.getenv("APP_TIMEZONE") or "UTC",
        environment=os.getenv("APP_ENV") or "production",
    )
