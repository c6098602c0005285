"""Config module exports."""

from ccview.config.loader import CCViewSettings, load_config
from ccview.config.models import (
    CCViewConfig,
    ClearCaseConfig,
    LoggingConfig,
    LogOutputConfig,
    NoiseFilter,
)

__all__ = [
    "load_config",
    "CCViewConfig",
    "CCViewSettings",
    "ClearCaseConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "NoiseFilter",
]
