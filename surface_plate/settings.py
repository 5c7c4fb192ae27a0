"""Environment configuration and logging setup."""

import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

from .errors import ConfigurationError

load_dotenv()

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# DEBUG output adds timestamps and logger names.
_BENCH_FORMAT = "%(levelname)s: %(message)s"
_DEBUG_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"

_ENV_FIELDS = {
    "SURFACE_PLATE_LOG_LEVEL": "log_level",
    "SURFACE_PLATE_LOG_FORMAT": "log_format",
    "SURFACE_PLATE_Z_SCALE": "z_scale",
}


class Settings(BaseModel):
    log_level: str = "INFO"
    log_format: Optional[str] = None
    z_scale: float = 1.0  # vertical exaggeration applied to vertices

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return level

    @property
    def effective_log_format(self) -> str:
        if self.log_format:
            return self.log_format
        return _DEBUG_FORMAT if self.log_level == "DEBUG" else _BENCH_FORMAT

    @classmethod
    def from_env(cls) -> "Settings":
        """Read SURFACE_PLATE_* variables (a .env file is loaded on import)."""
        values = {
            field: os.getenv(variable)
            for variable, field in _ENV_FIELDS.items()
            if os.getenv(variable)
        }
        try:
            return cls(**values)
        except ValueError as e:
            raise ConfigurationError(f"Invalid SURFACE_PLATE_* setting: {e}") from e


def setup_logger(name: str, settings: Settings) -> logging.Logger:
    """Send the named logger's records to stdout at the configured level.

    Calling it again replaces the handler, so reloading settings never
    duplicates output.
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(settings.effective_log_format))
    logger.addHandler(handler)
    logger.setLevel(settings.log_level)
    logger.propagate = False
    return logger
