"""
Environment-driven settings.

Values come from os.getenv; the CLI loads a .env file first with python-dotenv.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from .errors import ConfigurationError
from .models import DEFAULT_MODEL, DEFAULT_PROVIDER

logger = logging.getLogger(__name__)

DEFAULT_RESPONSE_RESERVE = 1000

_API_KEY_ENV = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
}


def env_int(name: str, default: int, *, minimum: int | None = None) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"{name} must be an integer, got {raw!r}",
            details={"variable": name, "value": raw},
            original_error=exc,
        ) from exc
    if minimum is not None and value < minimum:
        raise ConfigurationError(
            f"{name} must be >= {minimum}, got {value}",
            details={"variable": name, "value": value, "minimum": minimum},
        )
    return value


def env_choice(name: str, choices: tuple[str, ...], *, default: str) -> str:
    value = (os.getenv(name) or default).strip().lower()
    if value not in choices:
        logger.warning("Ignoring %s=%r; expected one of %s", name, value, ", ".join(choices))
        return default
    return value


def api_key_env_var(provider: str) -> str | None:
    return _API_KEY_ENV.get(provider)


def resolve_api_key(provider: str, user_key: str | None = None) -> str | None:
    """A user's own key wins; otherwise the server-wide key from the environment."""
    if user_key and user_key.strip():
        return user_key.strip()
    env_name = api_key_env_var(provider)
    if env_name is None:
        return None
    return (os.getenv(env_name) or "").strip() or None


@dataclass
class Settings:
    provider: str
    model: str
    response_reserve: int
    tokenizer: str
    log_level: str
    openai_base_url: str | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            provider=env_choice("CHAT_PROVIDER", ("openai", "gemini"), default=DEFAULT_PROVIDER),
            model=(os.getenv("CHAT_MODEL") or DEFAULT_MODEL).strip(),
            response_reserve=env_int("CHAT_RESPONSE_RESERVE", DEFAULT_RESPONSE_RESERVE, minimum=0),
            tokenizer=env_choice("CHAT_TOKENIZER", ("heuristic", "tiktoken"), default="heuristic"),
            log_level=(os.getenv("CHAT_LOG_LEVEL") or "WARNING").strip().upper(),
            openai_base_url=(os.getenv("OPENAI_BASE_URL") or "").strip() or None,
        )
