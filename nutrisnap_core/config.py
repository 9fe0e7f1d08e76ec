"""Runtime settings, read from the environment (and a local .env file)."""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    model: str = "gpt-4o-mini"
    temperature: float = 0.2
    max_tool_rounds: int = 3
    timeout_seconds: float = 60.0
    food_lookup: str = "stub"
    log_level: str = "INFO"
    base_url: Optional[str] = None


def _env(name: str, default: str) -> str:
    value = os.getenv(name)
    return value.strip() if value and value.strip() else default


def _number(name: str, default, cast):
    raw = _env(name, str(default))
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a {cast.__name__}, got {raw!r}") from None


def load_settings() -> Settings:
    load_dotenv(find_dotenv(usecwd=True))
    defaults = Settings()
    settings = Settings(
        model=_env("NUTRISNAP_MODEL", defaults.model),
        temperature=_number("NUTRISNAP_TEMPERATURE", defaults.temperature, float),
        max_tool_rounds=_number("NUTRISNAP_MAX_TOOL_ROUNDS", defaults.max_tool_rounds, int),
        timeout_seconds=_number("NUTRISNAP_TIMEOUT_SECONDS", defaults.timeout_seconds, float),
        food_lookup=_env("NUTRISNAP_FOOD_LOOKUP", defaults.food_lookup).lower(),
        log_level=_env("NUTRISNAP_LOG_LEVEL", defaults.log_level).upper(),
        base_url=_env("NUTRISNAP_BASE_URL", "") or None,
    )
    if settings.max_tool_rounds < 0:
        raise ValueError("NUTRISNAP_MAX_TOOL_ROUNDS must be >= 0")
    if settings.timeout_seconds <= 0:
        raise ValueError("NUTRISNAP_TIMEOUT_SECONDS must be > 0")
    if settings.log_level not in logging.getLevelNamesMapping():
        raise ValueError(f"NUTRISNAP_LOG_LEVEL is not a logging level: {settings.log_level!r}")
    return settings


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the root logger (entry points only)."""
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
