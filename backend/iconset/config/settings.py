"""Environment driven runtime settings."""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional, Tuple

from dotenv import load_dotenv

from iconset.utility.path_finder import Finder

PROVIDERS = ("replicate", "gemini", "openai", "mock")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}") from e


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the icon set service.

    Values come from the process environment, optionally seeded from
    backend/.env. Instances are immutable and safe to share across requests.
    """

    run_mode: str = "actual"
    provider: str = "replicate"

    replicate_api_token: str = ""
    replicate_model: str = "black-forest-labs/flux-schnell"
    gemini_api_key: str = ""
    gemini_image_model: str = "gemini-2.5-flash-image"
    openai_api_key: str = ""
    openai_image_model: str = "dall-e-2"

    max_retries: int = 2
    retry_base_delay_ms: int = 1000
    min_success: int = 2
    task_timeout_s: Optional[float] = None

    log_level: str = "INFO"
    log_to_file: bool = False
    cors_origins: Tuple[str, ...] = field(default_factory=lambda: ("*",))

    @property
    def effective_provider(self) -> str:
        """Provider actually used; mock run mode always wins."""
        return "mock" if self.run_mode == "mock" else self.provider

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        load_dotenv(Finder().get_file("env"))
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            run_mode=os.getenv("RUN_MODE", "actual").strip().lower(),
            provider=os.getenv("IMAGE_PROVIDER", "replicate").strip().lower(),
            replicate_api_token=os.getenv("REPLICATE_API_TOKEN", "").strip(),
            replicate_model=os.getenv(
                "REPLICATE_MODEL", "black-forest-labs/flux-schnell"
            ).strip(),
            gemini_api_key=os.getenv("GEMINI_API_KEY", "").strip(),
            gemini_image_model=os.getenv(
                "GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image"
            ).strip(),
            openai_api_key=os.getenv("OPENAI_API_KEY", "").strip(),
            openai_image_model=os.getenv("OPENAI_IMAGE_MODEL", "dall-e-2").strip(),
            max_retries=_env_int("ICON_MAX_RETRIES", 2),
            retry_base_delay_ms=_env_int("ICON_RETRY_BASE_DELAY_MS", 1000),
            min_success=_env_int("ICON_MIN_SUCCESS", 2),
            task_timeout_s=_env_float("ICON_TASK_TIMEOUT_S"),
            log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
            log_to_file=_env_bool("LOG_TO_FILE"),
            cors_origins=tuple(
                o.strip() for o in origins.split(",") if o.strip()
            )
            or ("*",),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return Settings.from_env()
