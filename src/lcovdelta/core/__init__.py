"""Core module exports."""

from lcovdelta.core.errors import (
    ConfigError,
    ErrorCode,
    GitHubError,
    LcovDeltaError,
    MalformedRecordError,
    MalformedReportError,
    MissingBaselineError,
    MissingReportError,
)
from lcovdelta.core.logging import configure_logging, set_run_id

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "GitHubError",
    "LcovDeltaError",
    "MalformedRecordError",
    "MalformedReportError",
    "MissingBaselineError",
    "MissingReportError",
    # Logging
    "configure_logging",
    "set_run_id",
]
