"""Copy/probe configuration via pydantic-settings (.env + FILEUTILS_* env vars)."""

import re
import sys
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import (
    DEFAULT_ATTEMPTS,
    DEFAULT_SETTLE_MS,
    ENV_PREFIX,
    MAX_ATTEMPTS,
    MAX_SETTLE_MS,
    MIN_ATTEMPTS,
    MIN_SETTLE_MS,
)

_INT_RE = re.compile(r"[+-]?\d+")


def bounded_int(value: Any, default: int, low: int, high: int) -> int:
    """Coerce value to an int within [low, high].

    Anything unset, unparsable or out of range yields default -- not the
    nearest bound.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        n = value
    elif isinstance(value, str) and _INT_RE.fullmatch(value):
        n = int(value)
    else:
        return default
    if n < low or n > high:
        return default
    return n


class CopyConfig(BaseSettings):
    """Tunable bounds for the guarded copy plus logging settings.

    Layered resolution: .env file < environment variables < constructor kwargs.
    Each CopyConfig() reads the environment afresh; nothing is cached.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        extra="ignore",
    )

    # -- Stability probe --
    stable_attempts: int = DEFAULT_ATTEMPTS
    stable_settle_ms: int = DEFAULT_SETTLE_MS

    # -- Logging --
    log_level: str = "INFO"
    log_dir: Path | None = None

    @field_validator("stable_attempts", mode="before")
    @classmethod
    def _check_attempts(cls, value: Any) -> int:
        return bounded_int(value, DEFAULT_ATTEMPTS, MIN_ATTEMPTS, MAX_ATTEMPTS)

    @field_validator("stable_settle_ms", mode="before")
    @classmethod
    def _check_settle(cls, value: Any) -> int:
        return bounded_int(value, DEFAULT_SETTLE_MS, MIN_SETTLE_MS, MAX_SETTLE_MS)

    @property
    def settle(self) -> float:
        """Settle interval in seconds."""
        return self.stable_settle_ms / 1000

    def setup_logging(self) -> None:
        """Configure loguru for stablefs (stderr, plus a file when log_dir is set)."""
        logger.remove()  # Remove default stderr handler

        log_format = (
            "{time:YYYY-MM-DDTHH:mm:ssZ} | {level:<8} | "
            "{extra[op]:<8} | {message}"
        )

        def _default_extra(record):
            record["extra"].setdefault("op", "")
            return True

        logger.add(
            sys.stderr,
            format=log_format,
            level=self.log_level.upper(),
            filter=_default_extra,
        )

        if self.log_dir is None:
            return

        self.log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(self.log_dir / "stablefs.log"),
            format=log_format,
            level="DEBUG",
            rotation="10 MB",
            retention="30 days",
            filter=_default_extra,
        )
