"""Config module exports."""

from lcovdelta.config.loader import CONFIG_FILENAME, load_config
from lcovdelta.config.models import (
    EmptyChangedPolicy,
    GitHubConfig,
    LcovDeltaConfig,
    LoggingConfig,
    LogOutputConfig,
    RenderConfig,
    ReportConfig,
)

__all__ = [
    "CONFIG_FILENAME",
    "load_config",
    "EmptyChangedPolicy",
    "GitHubConfig",
    "LcovDeltaConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "RenderConfig",
    "ReportConfig",
]
