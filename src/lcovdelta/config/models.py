"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config() (CLI options)
2. Environment variables (LCOVDELTA__SECTION__KEY)
3. Repo YAML (.lcovdelta.yaml in the working directory)
4. Built-in defaults (this file)

Environment Variable Format:
    LCOVDELTA__<SECTION>__<KEY>=<VALUE>

Examples:
    LCOVDELTA__LOGGING__LEVEL=DEBUG
    LCOVDELTA__REPORT__LCOV_BASE=coverage/base.info
    LCOVDELTA__RENDER__OMIT_UNCOVERED_LINES=true
    LCOVDELTA__GITHUB__TOKEN=ghp_...

All models are frozen: a loaded config is a single immutable value that is
passed explicitly to the pipeline.
"""

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_LCOV_FILE = "coverage/lcov.info"
DEFAULT_MAX_CHARS = 65000
DEFAULT_API_URL = "https://api.github.com"


class EmptyChangedPolicy(str, Enum):
    """What the change filter does when the changed-file set is empty."""

    PASS_THROUGH = "pass_through"
    FILTER_TO_EMPTY = "filter_to_empty"


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    model_config = ConfigDict(frozen=True)

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        LCOVDELTA__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    model_config = ConfigDict(frozen=True)

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG lists every skipped LCOV directive.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ReportConfig(BaseModel):
    """Report input configuration.

    Env vars:
        LCOVDELTA__REPORT__WORKING_DIRECTORY: Directory the lcov file is relative to
        LCOVDELTA__REPORT__LCOV_FILE: Current report (default: coverage/lcov.info)
        LCOVDELTA__REPORT__LCOV_BASE: Optional baseline report
        LCOVDELTA__REPORT__PREFIX: Absolute path prefix stripped from report paths
        LCOVDELTA__REPORT__FILTER_CHANGED_FILES: Restrict rows to changed files
        LCOVDELTA__REPORT__EMPTY_CHANGED_POLICY: pass_through or filter_to_empty
    """

    model_config = ConfigDict(frozen=True)

    working_directory: str = Field(
        default=".",
        description="Directory the current report path is resolved against.",
    )
    lcov_file: str = Field(
        default=DEFAULT_LCOV_FILE,
        description="Current LCOV report, relative to working_directory.",
    )
    lcov_base: str | None = Field(
        default=None,
        description="Baseline LCOV report. A missing file degrades to no-baseline mode.",
    )
    prefix: str | None = Field(
        default=None,
        description="Absolute path prefix stripped from report paths. "
        "Defaults to $GITHUB_WORKSPACE, then the resolved working directory.",
    )
    filter_changed_files: bool = Field(
        default=False,
        description="Only report files that changed in the pull request or push.",
    )
    empty_changed_policy: EmptyChangedPolicy = Field(
        default=EmptyChangedPolicy.PASS_THROUGH,
        description="When the changed-file set is empty: report everything "
        "(pass_through) or nothing (filter_to_empty).",
    )

    @field_validator("prefix")
    @classmethod
    def validate_prefix(cls, v: str | None) -> str | None:
        if v is None or v == "":
            return None
        if not Path(v).is_absolute():
            raise ValueError(f"Prefix must be an absolute path: {v}")
        return v


class RenderConfig(BaseModel):
    """Summary rendering configuration.

    Env vars:
        LCOVDELTA__RENDER__TITLE: Heading shown above the summary
        LCOVDELTA__RENDER__OMIT_*_PERCENTAGE: Hide a metric column
        LCOVDELTA__RENDER__OMIT_UNCOVERED_LINES: Hide the uncovered lines column
        LCOVDELTA__RENDER__MAX_CHARS: Truncate the summary to this many characters
    """

    model_config = ConfigDict(frozen=True)

    title: str | None = Field(default=None, description="Heading shown above the summary.")
    omit_statement_percentage: bool = False
    omit_branch_percentage: bool = False
    omit_function_percentage: bool = False
    omit_line_percentage: bool = False
    omit_uncovered_lines: bool = False
    max_chars: int = Field(
        default=DEFAULT_MAX_CHARS,
        description="Maximum summary length. GitHub rejects comments over 65536 "
        "characters; the default leaves room for the comment marker. 0 disables.",
    )

    @field_validator("max_chars")
    @classmethod
    def validate_max_chars(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"max_chars must be >= 0, got {v}")
        return v


class GitHubConfig(BaseModel):
    """GitHub publishing configuration.

    Env vars:
        LCOVDELTA__GITHUB__TOKEN: Token used for API calls
        LCOVDELTA__GITHUB__API_URL: API root (GitHub Enterprise)
        LCOVDELTA__GITHUB__DELETE_OLD_COMMENTS: Remove earlier summaries first
    """

    model_config = ConfigDict(frozen=True)

    token: str | None = Field(default=None, description="GitHub token with comment scope.")
    api_url: str = Field(default=DEFAULT_API_URL, description="GitHub REST API root.")
    delete_old_comments: bool = Field(
        default=False,
        description="Delete earlier lcovdelta comments on the pull request before posting.",
    )
    timeout_sec: float = Field(default=30.0, description="Per-request HTTP timeout.")

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"api_url must be an http(s) URL: {v}")
        return v.rstrip("/")


class LcovDeltaConfig(BaseModel):
    """Root configuration for lcovdelta.

    All settings can be configured via:
    1. Environment variables: LCOVDELTA__SECTION__KEY
    2. .lcovdelta.yaml in the working directory
    3. Direct kwargs to load_config()
    """

    model_config = ConfigDict(frozen=True)

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
