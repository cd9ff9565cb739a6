"""Runtime settings read from ``DJSIM_*`` environment variables."""

import os
from typing import Optional

from pydantic import BaseModel, field_validator

DEFAULT_TOLERANCE = 1e-10


class SimulatorSettings(BaseModel):
    seed: Optional[int] = None
    tolerance: float = DEFAULT_TOLERANCE
    log_level: str = "WARNING"

    @field_validator("tolerance")
    @classmethod
    def _positive_tolerance(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("tolerance must be positive")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {value}")
        return value

    @classmethod
    def from_env(cls) -> "SimulatorSettings":
        values = {}
        if os.getenv("DJSIM_SEED"):
            values["seed"] = os.environ["DJSIM_SEED"]
        if os.getenv("DJSIM_TOLERANCE"):
            values["tolerance"] = os.environ["DJSIM_TOLERANCE"]
        if os.getenv("DJSIM_LOG_LEVEL"):
            values["log_level"] = os.environ["DJSIM_LOG_LEVEL"]
        return cls(**values)


_settings: Optional[SimulatorSettings] = None


def get_settings() -> SimulatorSettings:
    global _settings
    if _settings is None:
        _settings = SimulatorSettings.from_env()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next call re-reads the environment.

    The logging setup derived from them is dropped as well.
    """
    global _settings
    _settings = None
    from .logging_utils import reset_logging

    reset_logging()
