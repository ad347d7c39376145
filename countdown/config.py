"""Runtime settings, read from ``COUNTDOWN_*`` environment variables."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, Field, field_validator

_ENV_PREFIX = "COUNTDOWN_"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseModel):
    tick_interval: float = Field(default=1.0, gt=0)
    default_lead_minutes: int = Field(default=60, ge=0)
    notification_title: str = Field(default="Event Reminder", min_length=1)
    notifications_allowed: bool = True
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from the environment.

    Unset variables fall back to the model defaults; malformed values raise
    ``pydantic.ValidationError``.
    """
    env = os.environ if environ is None else environ
    values = {
        name: env[_ENV_PREFIX + name.upper()]
        for name in Settings.model_fields
        if _ENV_PREFIX + name.upper() in env
    }
    return Settings.model_validate(values)


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stream handler to the package logger (once)."""
    logger = logging.getLogger("countdown")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level.upper())
    return logger
